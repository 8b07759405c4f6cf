# growth_garden/garden/models.py

"""
Pydantic models for the resources served by the remote Growth Garden API.

The API speaks camelCase JSON; models accept either the camelCase aliases
or the snake_case field names, and dump back to camelCase for requests and
exports. Timestamps are parsed leniently: a value the API sends that cannot
be read becomes None instead of failing the whole payload.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from growth_garden.config import constants
from growth_garden.core.utils import parse_timestamp

logger = logging.getLogger(__name__)


class PlantType(str, Enum):
    SPROUT = "sprout"
    HERB = "herb"
    TREE = "tree"
    FLOWER = "flower"


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    WITHERED = "withered"


class ActionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class GardenModel(BaseModel):
    """Base for API resources: camelCase aliases, unknown keys ignored."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self) -> dict:
        """Request body form: camelCase keys, JSON-safe values, unset optionals dropped."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


def _lenient_timestamp(value: Any) -> Optional[datetime]:
    parsed = parse_timestamp(value)
    if parsed is None and value not in (None, ""):
        logger.warning("Discarding unreadable timestamp from API payload: %r", value)
    return parsed


def _stringify_id(value: Any) -> Any:
    # The API has used both numeric and string identifiers
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# --- Goals ---

class Goal(GardenModel):
    id: str
    name: str
    description: Optional[str] = None
    # Kept as a plain string: unknown plant types still render (as sprouts)
    plant_type: str = constants.DEFAULT_PLANT_TYPE
    current_level: int = Field(default=0, ge=0)
    current_xp: int = Field(default=0, ge=0, alias="currentXP")
    max_xp: int = Field(default=100, ge=0, alias="maxXP")
    status: str = constants.GOAL_STATUS_ACTIVE
    last_watered: Optional[datetime] = None
    timeline_months: Optional[int] = None
    created_at: Optional[datetime] = None

    coerce_id = field_validator("id", mode="before")(_stringify_id)
    coerce_timestamps = field_validator("last_watered", "created_at", mode="before")(_lenient_timestamp)

    @property
    def is_withered(self) -> bool:
        return self.status == constants.GOAL_STATUS_WITHERED


class GoalCreate(GardenModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    plant_type: PlantType = PlantType.SPROUT
    timeline_months: int = Field(default=3, ge=1)


# --- Actions ---

class ActionReflection(GardenModel):
    feeling: Optional[str] = None
    reflection: Optional[str] = None
    difficulty: int = Field(default=3, ge=constants.REFLECTION_SCALE_MIN, le=constants.REFLECTION_SCALE_MAX)
    satisfaction: int = Field(default=3, ge=constants.REFLECTION_SCALE_MIN, le=constants.REFLECTION_SCALE_MAX)


class Action(GardenModel):
    id: str
    goal_id: str
    title: str
    description: Optional[str] = None
    status: str = constants.ACTION_STATUS_PENDING
    completed_flag: Optional[bool] = Field(default=None, alias="isCompleted")
    xp_reward: int = Field(default=10, gt=0)
    priority: Optional[str] = None
    personal_reward: Optional[str] = None
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    # Reflection captured after completion
    feeling: Optional[str] = None
    reflection: Optional[str] = None
    difficulty: Optional[int] = Field(default=None, ge=constants.REFLECTION_SCALE_MIN, le=constants.REFLECTION_SCALE_MAX)
    satisfaction: Optional[int] = Field(default=None, ge=constants.REFLECTION_SCALE_MIN, le=constants.REFLECTION_SCALE_MAX)

    coerce_ids = field_validator("id", "goal_id", mode="before")(_stringify_id)
    coerce_timestamps = field_validator("due_date", "completed_at", "created_at", mode="before")(_lenient_timestamp)

    @property
    def is_completed(self) -> bool:
        return self.status == constants.ACTION_STATUS_COMPLETED or self.completed_flag is True


class ActionCreate(GardenModel):
    goal_id: str
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    xp_reward: int = Field(default=10, gt=0)
    priority: str = "medium"
    personal_reward: Optional[str] = None
    due_date: Optional[datetime] = None

    coerce_id = field_validator("goal_id", mode="before")(_stringify_id)


class ActionUpdate(GardenModel):
    goal_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    xp_reward: Optional[int] = Field(default=None, gt=0)
    personal_reward: Optional[str] = None
    due_date: Optional[datetime] = None

    coerce_id = field_validator("goal_id", mode="before")(_stringify_id)


# --- Daily habits ---

class DailyHabit(GardenModel):
    day: date = Field(alias="date")
    eat_healthy: bool = False
    exercise: bool = False
    sleep_before_11pm: bool = Field(default=False, alias="sleepBefore11pm")
    notes: Optional[str] = None

    @property
    def completed_count(self) -> int:
        return sum(1 for key in constants.DAILY_HABIT_KEYS if getattr(self, key))

    @property
    def all_completed(self) -> bool:
        return self.completed_count == len(constants.DAILY_HABIT_KEYS)


# --- Weekly reflection reports ---

class FeelingShare(GardenModel):
    feeling: str
    emoji: str = ""
    count: int = 0
    percentage: float = 0
    actions: List[str] = Field(default_factory=list)


class Accomplishments(GardenModel):
    total_actions: int = 0
    total_xp: int = Field(default=0, alias="totalXP")
    achievements: List[str] = Field(default_factory=list)
    streak: int = 0
    story: str = ""


class LearningSummary(GardenModel):
    insights: List[str] = Field(default_factory=list)
    patterns: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class AIAnalysis(GardenModel):
    positive_patterns: str = ""
    negative_patterns: str = ""
    growth_areas: str = ""


class WeeklyReport(GardenModel):
    week_start: str
    week_end: str
    feeling_distribution: List[FeelingShare] = Field(default_factory=list)
    accomplishments: Accomplishments = Field(default_factory=Accomplishments)
    learning_summary: LearningSummary = Field(default_factory=LearningSummary)
    ai_analysis: AIAnalysis = Field(default_factory=AIAnalysis)

    def top_feeling(self) -> Optional[FeelingShare]:
        """Feeling with the highest share; on a tie the later entry wins."""
        top: Optional[FeelingShare] = None
        for share in self.feeling_distribution:
            if top is None or not top.percentage > share.percentage:
                top = share
        return top


# --- Misc resources ---

class Achievement(GardenModel):
    id: str
    title: str
    description: str = ""
    unlocked: bool = False

    coerce_id = field_validator("id", mode="before")(_stringify_id)


class StorageStatus(GardenModel):
    type: str
    persistent: bool = False
    connected: bool = False
    warning: Optional[str] = None

    @property
    def needs_warning(self) -> bool:
        # Only a database-backed store survives between sessions
        return self.type != "database"


class User(GardenModel):
    id: str
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    provider: Optional[str] = None

    coerce_id = field_validator("id", mode="before")(_stringify_id)


def parse_goals(items: Optional[Iterable[Any]]) -> List[Goal]:
    """Accepts Goal models or raw API dicts."""
    return [item if isinstance(item, Goal) else Goal.model_validate(item) for item in items or []]


def parse_actions(items: Optional[Iterable[Any]]) -> List[Action]:
    """Accepts Action models or raw API dicts."""
    return [item if isinstance(item, Action) else Action.model_validate(item) for item in items or []]
