# growth_garden/routers/reports.py

import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response

from growth_garden.config.settings import settings
from growth_garden.core.dependencies import get_api_client, unwrap
from growth_garden.front_end.api_client import GardenApiClient
from growth_garden.modules.analytics.growth_analytics import (
    calculate_growth_analytics,
    generate_activity_trends,
    generate_detailed_goal_report,
)
from growth_garden.modules.analytics.report_export import export_report
from growth_garden.routers.garden import CamelResponse, load_garden

logger = logging.getLogger(__name__)
router = APIRouter()


class WeeklyReportResponse(CamelResponse):
    report: Optional[Dict[str, Any]] = None
    top_feeling: Optional[Dict[str, Any]] = None


@router.get("/analytics")
def get_analytics(client: GardenApiClient = Depends(get_api_client)) -> Dict[str, Any]:
    goals, actions = load_garden(client)
    return calculate_growth_analytics(goals, actions).model_dump(by_alias=True, mode="json")


@router.get("/detailed")
def get_detailed_report(client: GardenApiClient = Depends(get_api_client)) -> List[Dict[str, Any]]:
    goals, actions = load_garden(client)
    return [report.model_dump(by_alias=True, mode="json") for report in generate_detailed_goal_report(goals, actions)]


@router.get("/trends")
def get_activity_trends(
    days: int = Query(settings.ACTIVITY_TREND_DAYS, ge=1, le=366),
    client: GardenApiClient = Depends(get_api_client),
) -> Dict[str, int]:
    _, actions = load_garden(client)
    return generate_activity_trends(actions, days=days)


@router.get("/export")
def export_garden_report(
    report_type: Literal["summary", "detailed", "analytics"] = "summary",
    export_format: Literal["csv", "json"] = "csv",
    client: GardenApiClient = Depends(get_api_client),
):
    goals, actions = load_garden(client)
    exported = export_report(goals, actions, report_type=report_type, export_format=export_format)
    logger.info("Serving export %s", exported.filename)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )


@router.get("/weekly", response_model=WeeklyReportResponse)
def get_weekly_reflection(client: GardenApiClient = Depends(get_api_client)):
    report = unwrap(client.get_weekly_report())
    if report is None:
        return WeeklyReportResponse()
    top = report.top_feeling()
    return WeeklyReportResponse(
        report=report.to_payload(),
        top_feeling=top.to_payload() if top else None,
    )


@router.get("/historical", response_model=List[Dict[str, Any]])
def get_historical_reflections(
    weeks: int = Query(8, ge=1, le=52),
    client: GardenApiClient = Depends(get_api_client),
):
    reports = unwrap(client.get_historical_reports(weeks))
    return [report.to_payload() for report in reports]
