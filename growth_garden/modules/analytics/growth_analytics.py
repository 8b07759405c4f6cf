# growth_garden/modules/analytics/growth_analytics.py

"""
Growth analytics over goal and action snapshots.

All functions here are pure: they read the collections they are given and
return fresh report models. Calendar dates (streaks, trends) are taken in
the configured garden timezone; every rate or average over an empty set is 0.
"""

import logging
import math
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from growth_garden.config import constants
from growth_garden.config.settings import settings
from growth_garden.core.utils import (
    local_date,
    parse_timestamp,
    percentage,
    resolve_timezone,
    round_half_up,
    utc_now,
)
from growth_garden.garden.models import Action, Goal, parse_actions, parse_goals

logger = logging.getLogger(__name__)


class ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActivityStreaks(ReportModel):
    current: int = 0
    longest: int = 0


class GrowthAnalytics(ReportModel):
    total_goals: int = 0
    active_goals: int = 0
    completed_goals: int = 0
    withered_goals: int = 0
    total_actions: int = 0
    completed_actions: int = 0
    total_xp: int = Field(default=0, alias="totalXP")
    average_goal_level: float = 0.0
    completion_rate: int = 0
    activity_streaks: ActivityStreaks = Field(default_factory=ActivityStreaks)


class DetailedGoalReport(ReportModel):
    goal: Goal
    actions: List[Action] = Field(default_factory=list)
    action_count: int = 0
    completed_action_count: int = 0
    total_xp_from_actions: int = Field(default=0, alias="totalXPFromActions")
    average_xp_per_action: float = Field(default=0.0, alias="averageXPPerAction")
    completion_rate: int = 0
    days_active: int = 0
    last_activity_date: Optional[datetime] = None


class GoalXP(ReportModel):
    goal_name: str
    total_xp: int = Field(default=0, alias="totalXP")
    action_count: int = 0


class GoalInsights(ReportModel):
    xp_by_goal: List[GoalXP] = Field(default_factory=list)
    most_active_goal: str = constants.NO_ACTIVE_GOAL_LABEL
    goal_distribution: Dict[str, int] = Field(default_factory=dict)


def _garden_tz(tz: Optional[tzinfo]) -> tzinfo:
    return tz if tz is not None else resolve_timezone(settings.GARDEN_TIMEZONE)


def _reference_time(now: Any) -> datetime:
    return parse_timestamp(now) or utc_now()


# --- Streaks ---

def calculate_streaks(dates: Iterable[date], today: date) -> ActivityStreaks:
    """
    Current and longest runs of consecutive activity days.

    Duplicate dates are collapsed. The current streak only counts when the
    most recent activity was today or yesterday.
    """
    ordered = sorted(set(dates))
    if not ordered:
        return ActivityStreaks(current=0, longest=0)

    longest = 0
    run = 1
    for previous, current in zip(ordered, ordered[1:]):
        if (current - previous).days == 1:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    longest = max(longest, run)

    current_streak = 0
    if ordered[-1] in (today, today - timedelta(days=1)):
        current_streak = 1
        for index in range(len(ordered) - 2, -1, -1):
            if (ordered[index + 1] - ordered[index]).days == 1:
                current_streak += 1
            else:
                break

    return ActivityStreaks(current=current_streak, longest=longest)


def collect_completion_dates(actions: Iterable[Action], tz: Optional[tzinfo] = None) -> List[date]:
    """Distinct calendar dates on which completed actions were finished, ascending."""
    zone = _garden_tz(tz)
    dates = {
        local_date(action.completed_at, zone)
        for action in actions
        if action.is_completed and action.completed_at is not None
    }
    return sorted(dates)


# --- Aggregates ---

def calculate_growth_analytics(
    goals: Iterable[Any],
    actions: Iterable[Any],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> GrowthAnalytics:
    goals = parse_goals(goals)
    actions = parse_actions(actions)
    zone = _garden_tz(tz)

    completed = [a for a in actions if a.is_completed]
    average_level = sum(g.current_level for g in goals) / len(goals) if goals else 0.0

    today = local_date(_reference_time(now), zone)
    streaks = calculate_streaks(collect_completion_dates(actions, zone), today)

    analytics = GrowthAnalytics(
        total_goals=len(goals),
        active_goals=sum(1 for g in goals if g.status == constants.GOAL_STATUS_ACTIVE),
        completed_goals=sum(1 for g in goals if g.status == constants.GOAL_STATUS_COMPLETED),
        withered_goals=sum(1 for g in goals if g.status == constants.GOAL_STATUS_WITHERED),
        total_actions=len(actions),
        completed_actions=len(completed),
        total_xp=sum(a.xp_reward for a in completed),
        average_goal_level=round_half_up(average_level, 1),
        completion_rate=percentage(len(completed), len(actions)),
        activity_streaks=streaks,
    )
    logger.debug(
        "Analytics computed: %d goals, %d/%d actions completed, streak %d (longest %d)",
        analytics.total_goals, analytics.completed_actions, analytics.total_actions,
        streaks.current, streaks.longest,
    )
    return analytics


def generate_detailed_goal_report(goals: Iterable[Any], actions: Iterable[Any]) -> List[DetailedGoalReport]:
    """One report per goal, in goal order. Activity dates come from action creation times."""
    goals = parse_goals(goals)
    actions = parse_actions(actions)

    reports = []
    for goal in goals:
        goal_actions = [a for a in actions if a.goal_id == goal.id]
        completed = [a for a in goal_actions if a.is_completed]
        total_xp = sum(a.xp_reward for a in completed)

        created = [a.created_at for a in goal_actions if a.created_at is not None]
        if created:
            first, last = min(created), max(created)
            days_active = math.ceil((last - first).total_seconds() / 86400) + 1
        else:
            last, days_active = None, 0

        average_xp = round_half_up(total_xp / len(goal_actions), 1) if goal_actions else 0.0
        reports.append(DetailedGoalReport(
            goal=goal,
            actions=goal_actions,
            action_count=len(goal_actions),
            completed_action_count=len(completed),
            total_xp_from_actions=total_xp,
            average_xp_per_action=average_xp,
            completion_rate=percentage(len(completed), len(goal_actions)),
            days_active=days_active,
            last_activity_date=last,
        ))
    return reports


def generate_activity_trends(
    actions: Iterable[Any],
    days: Optional[int] = None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> Dict[str, int]:
    """
    Actions created per calendar day over the `days` days ending today,
    keyed by ISO date in ascending order. Days without activity are 0.
    """
    if days is None:
        days = settings.ACTIVITY_TREND_DAYS
    if days <= 0:
        return {}

    zone = _garden_tz(tz)
    today = local_date(_reference_time(now), zone)
    start = today - timedelta(days=days - 1)

    trends = {(start + timedelta(days=offset)).isoformat(): 0 for offset in range(days)}
    for action in parse_actions(actions):
        if action.created_at is None:
            continue
        key = local_date(action.created_at, zone).isoformat()
        if key in trends:
            trends[key] += 1
    return trends


def calculate_goal_insights(goals: Iterable[Any], actions: Iterable[Any]) -> GoalInsights:
    """XP earned per goal (highest first), the most active goal and the plant type mix."""
    goals = parse_goals(goals)
    actions = parse_actions(actions)

    xp_by_goal = []
    for goal in goals:
        completed = [a for a in actions if a.goal_id == goal.id and a.is_completed]
        xp_by_goal.append(GoalXP(
            goal_name=goal.name,
            total_xp=sum(a.xp_reward for a in completed),
            action_count=len(completed),
        ))
    # Stable: goals with equal XP keep their original order
    xp_by_goal.sort(key=lambda item: item.total_xp, reverse=True)

    distribution = {plant_type: 0 for plant_type in constants.PLANT_TYPES}
    for goal in goals:
        if goal.plant_type in distribution:
            distribution[goal.plant_type] += 1

    return GoalInsights(
        xp_by_goal=xp_by_goal,
        most_active_goal=xp_by_goal[0].goal_name if xp_by_goal else constants.NO_ACTIVE_GOAL_LABEL,
        goal_distribution=distribution,
    )
