# growth_garden/modules/health/tree_health.py

"""
Tree health: how thirsty a goal's plant is, derived from the time since
its last completed action ("watering").

Rules
-----
- Under 72 hours since watering: **healthy**.
- From 72 hours up to (not including) 168 hours: **warning**.
- 168 hours or more: **withered**.
- No timestamp, or one that cannot be read: treated as watered 24 hours
  ago, which is always healthy. Evaluation never raises.

The record is computed on demand and never stored.
"""

import logging
import math
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from growth_garden.config import constants
from growth_garden.core.utils import parse_timestamp, utc_now

logger = logging.getLogger(__name__)


class TreeHealth(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    status: str
    hours_until_death: float
    hours_until_warning: float
    days_since_watered: int

    @property
    def needs_attention(self) -> bool:
        return self.status == constants.HEALTH_STATUS_WARNING


def _health_from_hours(hours_since_watered: float) -> TreeHealth:
    if hours_since_watered >= constants.HEALTH_WITHERED_HOURS:
        status = constants.HEALTH_STATUS_WITHERED
    elif hours_since_watered >= constants.HEALTH_WARNING_HOURS:
        status = constants.HEALTH_STATUS_WARNING
    else:
        status = constants.HEALTH_STATUS_HEALTHY

    return TreeHealth(
        status=status,
        hours_until_death=max(0.0, constants.HEALTH_WITHERED_HOURS - hours_since_watered),
        hours_until_warning=max(0.0, constants.HEALTH_WARNING_HOURS - hours_since_watered),
        days_since_watered=math.floor(hours_since_watered / constants.HOURS_PER_DAY),
    )


def calculate_tree_health(last_watered: Any, now: Optional[datetime] = None) -> TreeHealth:
    """
    Evaluates plant health from a last-watered timestamp.

    Args:
        last_watered: datetime, date, ISO-8601 string, or None.
        now: Reference time (defaults to the current UTC time).

    Returns:
        TreeHealth record for the elapsed time.
    """
    watered_at = parse_timestamp(last_watered)
    if watered_at is None:
        if last_watered not in (None, ""):
            logger.debug("Invalid last_watered value %r; treating as recently watered.", last_watered)
        return _health_from_hours(constants.HEALTH_FALLBACK_HOURS_SINCE_WATERED)

    reference = parse_timestamp(now) or utc_now()
    hours_since_watered = (reference - watered_at).total_seconds() / 3600
    return _health_from_hours(hours_since_watered)


def get_tree_health_message(health: TreeHealth, translate=None) -> str:
    """Short status line for a plant. `translate` is a Translator.t-style callable."""
    if health.status == constants.HEALTH_STATUS_WITHERED:
        key, params = "health.withered", {}
    elif health.status == constants.HEALTH_STATUS_WARNING:
        key, params = "health.needsWater", {"hours": math.ceil(health.hours_until_death)}
    else:
        key, params = "health.healthy", {}

    if translate is None:
        from growth_garden.core.localization import default_translate
        translate = default_translate
    return translate(key, **params)
