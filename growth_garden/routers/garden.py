# growth_garden/routers/garden.py

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from growth_garden.core.dependencies import get_api_client, get_translator, unwrap
from growth_garden.core.localization import Translator
from growth_garden.front_end.api_client import GardenApiClient
from growth_garden.garden.models import Action, Goal
from growth_garden.modules.analytics.dashboard_stats import calculate_dashboard_stats, get_action_display_status
from growth_garden.modules.analytics.growth_analytics import calculate_growth_analytics, generate_detailed_goal_report
from growth_garden.modules.growth.growth_stage import build_goal_card

logger = logging.getLogger(__name__)
router = APIRouter()


class CamelResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DashboardResponse(CamelResponse):
    labels: Dict[str, str]
    stats: Dict[str, Any]
    current_streak: int
    goals: List[Dict[str, Any]]
    upcoming_actions: List[Dict[str, Any]]


class GoalDetailResponse(CamelResponse):
    card: Dict[str, Any]
    report: Dict[str, Any]


class HabitResponse(CamelResponse):
    day: str
    habit: Optional[Dict[str, Any]] = None
    completed_count: int = 0
    all_completed: bool = False
    message: Optional[str] = None


def load_garden(client: GardenApiClient) -> Tuple[List[Goal], List[Action]]:
    """Current goals and actions for the caller, raising HTTPException on API failure."""
    goals = unwrap(client.list_goals())
    actions = unwrap(client.list_actions())
    logger.debug("Loaded garden: %d goals, %d actions", len(goals), len(actions))
    return goals, actions


def _action_row(action: Action) -> Dict[str, Any]:
    row = action.to_payload()
    row["displayStatus"] = get_action_display_status(action)
    return row


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    client: GardenApiClient = Depends(get_api_client),
    translator: Translator = Depends(get_translator),
):
    goals, actions = load_garden(client)
    stats = calculate_dashboard_stats(goals, actions)
    analytics = calculate_growth_analytics(goals, actions)

    return DashboardResponse(
        labels={
            "activeGoals": translator.t("stats.activeGoals"),
            "completedToday": translator.t("stats.completedToday"),
            "treesMature": translator.t("stats.treesMature"),
            "needAttention": translator.t("stats.needAttention"),
            "dailyStreak": translator.t("nav.dailyStreak"),
        },
        stats=stats.model_dump(by_alias=True, mode="json", exclude={"upcoming_actions", "recent_completions"}),
        current_streak=analytics.activity_streaks.current,
        goals=[build_goal_card(goal, translate=translator.t) for goal in goals],
        upcoming_actions=[_action_row(action) for action in stats.upcoming_actions],
    )


@router.get("/goals/{goal_id}", response_model=GoalDetailResponse)
def get_goal_detail(
    goal_id: str,
    client: GardenApiClient = Depends(get_api_client),
    translator: Translator = Depends(get_translator),
):
    goals, actions = load_garden(client)
    goal = next((g for g in goals if g.id == goal_id), None)
    if goal is None:
        raise HTTPException(status_code=404, detail=f"Goal '{goal_id}' not found.")

    report = generate_detailed_goal_report([goal], actions)[0]
    return GoalDetailResponse(
        card=build_goal_card(goal, translate=translator.t),
        report=report.model_dump(by_alias=True, mode="json"),
    )


@router.get("/habits/{day}", response_model=HabitResponse)
def get_habit_day(
    day: date,
    client: GardenApiClient = Depends(get_api_client),
    translator: Translator = Depends(get_translator),
):
    habit = unwrap(client.get_daily_habit(day))
    if habit is None:
        return HabitResponse(day=day.isoformat())
    return HabitResponse(
        day=day.isoformat(),
        habit=habit.to_payload(),
        completed_count=habit.completed_count,
        all_completed=habit.all_completed,
        message=translator.t("habits.perfectFoundation") if habit.all_completed else None,
    )
