# growth_garden/modules/analytics/report_export.py

"""
Report payloads and their CSV / JSON renderings.

Three report types are produced from the same goal and action snapshots:

- **summary**: overall analytics plus a compact list of goals.
- **detailed**: one row per goal with its action statistics.
- **analytics**: overall analytics, daily activity trends and goal insights.

CSV output starts with the report title, a ``Generated,<YYYY-MM-DD>`` line
and a blank line, followed by the fixed header for the report type. String
fields are wrapped in double quotes with embedded quotes doubled. JSON output
is the camelCase payload itself. Nothing here parses reports back.
"""

import logging
from datetime import date, datetime, tzinfo
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Union

from pydantic import Field

from growth_garden.config import constants
from growth_garden.config.settings import settings
from growth_garden.core.utils import local_date, parse_timestamp, resolve_timezone, utc_now
from growth_garden.garden.models import parse_actions, parse_goals
from growth_garden.modules.analytics.growth_analytics import (
    DetailedGoalReport,
    GoalInsights,
    GrowthAnalytics,
    ReportModel,
    calculate_goal_insights,
    calculate_growth_analytics,
    generate_activity_trends,
    generate_detailed_goal_report,
)

logger = logging.getLogger(__name__)


class GoalSummaryRow(ReportModel):
    name: str
    type: str
    level: int
    xp: int
    status: str
    created_at: Optional[datetime] = None
    last_watered: Optional[datetime] = None


class SummaryReport(ReportModel):
    report_type: str = constants.REPORT_TITLES["summary"]
    generated_at: datetime
    analytics: GrowthAnalytics
    goals: List[GoalSummaryRow] = Field(default_factory=list)


class DetailedReport(ReportModel):
    report_type: str = constants.REPORT_TITLES["detailed"]
    generated_at: datetime
    detailed_goals: List[DetailedGoalReport] = Field(default_factory=list)
    summary: GrowthAnalytics


class AnalyticsReport(ReportModel):
    report_type: str = constants.REPORT_TITLES["analytics"]
    generated_at: datetime
    analytics: GrowthAnalytics
    trends: Dict[str, int] = Field(default_factory=dict)
    insights: GoalInsights = Field(default_factory=GoalInsights)


GardenReport = Union[SummaryReport, DetailedReport, AnalyticsReport]


class ExportedReport(NamedTuple):
    content: str
    filename: str
    media_type: str


# --- Payload builders ---

def build_summary_report(goals, actions, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> SummaryReport:
    goals = parse_goals(goals)
    reference = parse_timestamp(now) or utc_now()
    return SummaryReport(
        generated_at=reference,
        analytics=calculate_growth_analytics(goals, actions, now=reference, tz=tz),
        goals=[
            GoalSummaryRow(
                name=goal.name,
                type=goal.plant_type,
                level=goal.current_level,
                xp=goal.current_xp,
                status=goal.status,
                created_at=goal.created_at,
                last_watered=goal.last_watered,
            )
            for goal in goals
        ],
    )


def build_detailed_report(goals, actions, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> DetailedReport:
    goals = parse_goals(goals)
    actions = parse_actions(actions)
    reference = parse_timestamp(now) or utc_now()
    return DetailedReport(
        generated_at=reference,
        detailed_goals=generate_detailed_goal_report(goals, actions),
        summary=calculate_growth_analytics(goals, actions, now=reference, tz=tz),
    )


def build_analytics_report(
    goals,
    actions,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    days: Optional[int] = None,
) -> AnalyticsReport:
    goals = parse_goals(goals)
    actions = parse_actions(actions)
    reference = parse_timestamp(now) or utc_now()
    return AnalyticsReport(
        generated_at=reference,
        analytics=calculate_growth_analytics(goals, actions, now=reference, tz=tz),
        trends=generate_activity_trends(actions, days=days, now=reference, tz=tz),
        insights=calculate_goal_insights(goals, actions),
    )


_BUILDERS = {
    "summary": build_summary_report,
    "detailed": build_detailed_report,
    "analytics": build_analytics_report,
}


def build_report(report_type: str, goals, actions, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> GardenReport:
    builder = _BUILDERS.get(report_type)
    if builder is None:
        raise ValueError(f"Unsupported report type '{report_type}'. Expected one of {constants.REPORT_TYPES}.")
    return builder(goals, actions, now=now, tz=tz)


# --- CSV rendering ---

def _quote(value: Any) -> str:
    return '"' + str(value).replace('"', '""') + '"'


def _number(value: Any) -> str:
    # 2.0 prints as "2", 2.5 as "2.5"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _preamble(title: str, generated_on: date) -> List[str]:
    return [title, f"Generated,{generated_on.isoformat()}", ""]


def _summary_csv(analytics: GrowthAnalytics, generated_on: date) -> str:
    lines = _preamble(constants.REPORT_TITLES["summary"], generated_on)
    lines += [
        constants.SUMMARY_CSV_HEADER,
        f"Total Goals,{analytics.total_goals}",
        f"Active Goals,{analytics.active_goals}",
        f"Completed Goals,{analytics.completed_goals}",
        f"Withered Goals,{analytics.withered_goals}",
        f"Total Actions,{analytics.total_actions}",
        f"Completed Actions,{analytics.completed_actions}",
        f"Total XP Earned,{analytics.total_xp}",
        f"Average Goal Level,{_number(analytics.average_goal_level)}",
        f"Completion Rate,{analytics.completion_rate}%",
        f"Current Streak,{analytics.activity_streaks.current} days",
        f"Longest Streak,{analytics.activity_streaks.longest} days",
    ]
    return "\n".join(lines)


def _detailed_csv(reports: Iterable[DetailedGoalReport], generated_on: date, tz: tzinfo) -> str:
    rows = []
    for item in reports:
        if item.last_activity_date is not None:
            last_activity = local_date(item.last_activity_date, tz).isoformat()
        else:
            last_activity = constants.NEVER_ACTIVE_LABEL
        rows.append(",".join([
            _quote(item.goal.name),
            _quote(item.goal.plant_type),
            str(item.goal.current_level),
            str(item.goal.current_xp),
            _quote(item.goal.status),
            str(item.action_count),
            str(item.completed_action_count),
            str(item.total_xp_from_actions),
            f"{item.completion_rate}%",
            str(item.days_active),
            _quote(last_activity),
        ]))
    lines = _preamble(constants.REPORT_TITLES["detailed"], generated_on)
    lines.append(constants.DETAILED_CSV_HEADER)
    lines.extend(rows)
    return "\n".join(lines)


def _analytics_csv(analytics: GrowthAnalytics, trends: Dict[str, int], generated_on: date) -> str:
    trend_rows = "\n".join(f"{_quote(day)},{count}" for day, count in sorted(trends.items()))
    return (
        f"{_summary_csv(analytics, generated_on)}"
        f"\n\n{constants.TRENDS_CSV_TITLE}\n{constants.TRENDS_CSV_HEADER}\n"
        f"{trend_rows}"
    )


def export_to_csv(payload: GardenReport, report_type: str, tz: Optional[tzinfo] = None) -> str:
    """Renders a report payload as CSV text for the given report type."""
    zone = tz if tz is not None else resolve_timezone(settings.GARDEN_TIMEZONE)
    generated_on = local_date(payload.generated_at, zone)

    if report_type == "summary":
        return _summary_csv(payload.analytics, generated_on)
    if report_type == "detailed":
        return _detailed_csv(payload.detailed_goals, generated_on, zone)
    if report_type == "analytics":
        return _analytics_csv(payload.analytics, payload.trends, generated_on)
    raise ValueError(f"Unsupported report type '{report_type}'. Expected one of {constants.REPORT_TYPES}.")


def export_to_json(payload: GardenReport) -> str:
    return payload.model_dump_json(by_alias=True, indent=2)


# --- Export entry point ---

def export_filename(report_type: str, export_format: str, on: date) -> str:
    return f"{constants.EXPORT_FILENAME_PREFIX}-{report_type}-{on.isoformat()}.{export_format}"


def export_report(
    goals,
    actions,
    report_type: str = "summary",
    export_format: str = "csv",
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> ExportedReport:
    """
    Builds a report and renders it for download.

    Returns:
        ExportedReport(content, filename, media_type).

    Raises:
        ValueError: On an unknown report type or export format.
    """
    if export_format not in constants.EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format '{export_format}'. Expected one of {constants.EXPORT_FORMATS}.")

    zone = tz if tz is not None else resolve_timezone(settings.GARDEN_TIMEZONE)
    payload = build_report(report_type, goals, actions, now=now, tz=zone)

    if export_format == "csv":
        content = export_to_csv(payload, report_type, tz=zone)
    else:
        content = export_to_json(payload)

    filename = export_filename(report_type, export_format, local_date(payload.generated_at, zone))
    logger.info("Exported %s report as %s (%d bytes)", report_type, export_format, len(content))
    return ExportedReport(content, filename, constants.EXPORT_MEDIA_TYPES[export_format])
