import json
from datetime import datetime, timezone

import pytest

from growth_garden.modules.analytics.report_export import (
    build_analytics_report,
    build_detailed_report,
    build_summary_report,
    export_report,
    export_to_csv,
)

UTC = timezone.utc
NOW = datetime(2024, 1, 10, 15, 0, tzinfo=UTC)

GOALS = [
    {"id": 1, "name": 'Write "the" novel, finally', "plantType": "flower", "currentLevel": 2,
     "currentXP": 30, "status": "active", "createdAt": "2024-01-01T00:00:00Z"},
    {"id": 2, "name": "Stretch", "plantType": "sprout", "currentLevel": 0, "currentXP": 0, "status": "active"},
]

ACTIONS = [
    {"id": 10, "goalId": 1, "title": "Outline", "status": "completed", "xpReward": 20,
     "createdAt": "2024-01-09T09:00:00Z", "completedAt": "2024-01-09T10:00:00Z"},
    {"id": 11, "goalId": 1, "title": "Chapter one", "status": "completed", "xpReward": 30,
     "createdAt": "2024-01-10T09:00:00Z", "completedAt": "2024-01-10T11:00:00Z"},
]


def test_summary_csv_layout():
    csv_text = export_to_csv(build_summary_report(GOALS, ACTIONS, now=NOW, tz=UTC), "summary", tz=UTC)
    assert csv_text.split("\n") == [
        "Growth Garden Summary Report",
        "Generated,2024-01-10",
        "",
        "Metric,Value",
        "Total Goals,2",
        "Active Goals,2",
        "Completed Goals,0",
        "Withered Goals,0",
        "Total Actions,2",
        "Completed Actions,2",
        "Total XP Earned,50",
        "Average Goal Level,1",
        "Completion Rate,100%",
        "Current Streak,2 days",
        "Longest Streak,2 days",
    ]


def test_detailed_csv_quotes_strings():
    csv_text = export_to_csv(build_detailed_report(GOALS, ACTIONS, now=NOW, tz=UTC), "detailed", tz=UTC)
    lines = csv_text.split("\n")
    assert lines[0] == "Growth Garden Detailed Report"
    assert lines[3].startswith("Goal Name,Plant Type,Level,XP,Status,")
    assert lines[4] == '"Write ""the"" novel, finally","flower",2,30,"active",2,2,50,100%,2,"2024-01-10"'
    assert lines[5] == '"Stretch","sprout",0,0,"active",0,0,0,0%,0,"Never"'


def test_analytics_csv_appends_trends():
    report = build_analytics_report(GOALS, ACTIONS, now=NOW, tz=UTC, days=3)
    csv_text = export_to_csv(report, "analytics", tz=UTC)
    summary, trends = csv_text.split("\n\nDaily Activity Trends\n")
    assert summary.startswith("Growth Garden Summary Report\n")
    assert trends.split("\n") == [
        "Date,Actions Count",
        '"2024-01-08",0',
        '"2024-01-09",1',
        '"2024-01-10",1',
    ]


def test_unknown_report_type_rejected():
    report = build_summary_report(GOALS, ACTIONS, now=NOW, tz=UTC)
    with pytest.raises(ValueError):
        export_to_csv(report, "pdf", tz=UTC)


def test_summary_json_payload():
    exported = export_report(GOALS, ACTIONS, "summary", "json", now=NOW, tz=UTC)
    payload = json.loads(exported.content)
    assert payload["reportType"] == "Growth Garden Summary Report"
    assert payload["generatedAt"].startswith("2024-01-10T15:00:00")
    assert payload["analytics"]["totalXP"] == 50
    assert payload["goals"][0] == {
        "name": 'Write "the" novel, finally', "type": "flower", "level": 2, "xp": 30,
        "status": "active", "createdAt": "2024-01-01T00:00:00Z", "lastWatered": None,
    }


def test_detailed_and_analytics_json_payloads():
    detailed = json.loads(export_report(GOALS, ACTIONS, "detailed", "json", now=NOW, tz=UTC).content)
    assert set(detailed) == {"reportType", "generatedAt", "detailedGoals", "summary"}
    assert detailed["detailedGoals"][0]["totalXPFromActions"] == 50
    assert detailed["detailedGoals"][0]["goal"]["plantType"] == "flower"

    analytics = json.loads(export_report(GOALS, ACTIONS, "analytics", "json", now=NOW, tz=UTC).content)
    assert set(analytics) == {"reportType", "generatedAt", "analytics", "trends", "insights"}
    assert analytics["insights"]["mostActiveGoal"] == 'Write "the" novel, finally'
    assert analytics["insights"]["xpByGoal"][0]["totalXP"] == 50


def test_export_filename_and_media_type():
    exported = export_report(GOALS, ACTIONS, "detailed", "csv", now=NOW, tz=UTC)
    assert exported.filename == "growth-garden-detailed-2024-01-10.csv"
    assert exported.media_type == "text/csv"
    exported = export_report(GOALS, ACTIONS, "analytics", "json", now=NOW, tz=UTC)
    assert exported.filename == "growth-garden-analytics-2024-01-10.json"
    assert exported.media_type == "application/json"


@pytest.mark.parametrize("report_type, export_format", [("summary", "pdf"), ("weekly", "csv")])
def test_export_rejects_unknown_options(report_type, export_format):
    with pytest.raises(ValueError):
        export_report(GOALS, ACTIONS, report_type, export_format, now=NOW, tz=UTC)
