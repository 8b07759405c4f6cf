# growth_garden/modules/analytics/dashboard_stats.py

import logging
from datetime import datetime, timezone, tzinfo
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from growth_garden.config import constants
from growth_garden.config.settings import settings
from growth_garden.core.utils import local_date, parse_timestamp, resolve_timezone, utc_now
from growth_garden.garden.models import Action, parse_actions, parse_goals
from growth_garden.modules.health.tree_health import calculate_tree_health

logger = logging.getLogger(__name__)

RECENT_COMPLETIONS_LIMIT = 3

# Sort key for actions without a completion time
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class DashboardStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_goals: int = 0
    active_goals: int = 0
    mature_goals: int = 0
    needing_attention: int = 0
    completed_today: int = 0
    upcoming_actions: List[Action] = Field(default_factory=list)
    recent_completions: List[Action] = Field(default_factory=list)


def get_action_display_status(action: Action, now: Optional[datetime] = None) -> str:
    """completed, overdue (pending and past its due date) or pending."""
    if action.is_completed:
        return constants.ACTION_STATUS_COMPLETED
    if action.due_date is not None:
        reference = parse_timestamp(now) or utc_now()
        if reference > action.due_date:
            return constants.ACTION_DISPLAY_OVERDUE
    return constants.ACTION_STATUS_PENDING


def _upcoming(actions: List[Action]) -> List[Action]:
    pending = [a for a in actions if not a.is_completed]
    # Dated actions first, earliest due date first; undated keep their order at the end
    dated = sorted((a for a in pending if a.due_date is not None), key=lambda a: a.due_date)
    undated = [a for a in pending if a.due_date is None]
    return (dated + undated)[:constants.UPCOMING_ACTIONS_LIMIT]


def calculate_dashboard_stats(
    goals: Iterable[Any],
    actions: Iterable[Any],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> DashboardStats:
    goals = parse_goals(goals)
    actions = parse_actions(actions)
    reference = parse_timestamp(now) or utc_now()
    zone = tz if tz is not None else resolve_timezone(settings.GARDEN_TIMEZONE)
    today = local_date(reference, zone)

    needing_attention = sum(
        1 for goal in goals
        if calculate_tree_health(goal.last_watered, now=reference).status == constants.HEALTH_STATUS_WARNING
    )
    completed_today = sum(
        1 for action in actions
        if action.created_at is not None
        and local_date(action.created_at, zone) == today
        and action.is_completed
    )
    recent = sorted(
        (a for a in actions if a.is_completed),
        key=lambda a: a.completed_at or _EPOCH,
        reverse=True,
    )[:RECENT_COMPLETIONS_LIMIT]

    return DashboardStats(
        total_goals=len(goals),
        active_goals=sum(1 for g in goals if g.status == constants.GOAL_STATUS_ACTIVE),
        mature_goals=sum(1 for g in goals if g.current_level >= constants.MATURE_GOAL_LEVEL),
        needing_attention=needing_attention,
        completed_today=completed_today,
        upcoming_actions=_upcoming(actions),
        recent_completions=recent,
    )
