# growth_garden/core/utils.py

import logging
from datetime import date, datetime, time, timezone, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Lenient timestamp parsing for values coming back from the remote API.
    Accepts datetimes, dates and ISO-8601 strings (a trailing 'Z' is fine).
    Naive values are treated as UTC. Anything unreadable returns None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Unparseable timestamp value: %r", value)
            return None
    else:
        logger.debug("Unsupported timestamp type: %s", type(value).__name__)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Returns the named IANA zone, falling back to UTC when it is unknown."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone '%s'. Falling back to UTC.", name)
        return timezone.utc


def local_date(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar date of an aware datetime as seen from the given zone."""
    return moment.astimezone(tz or timezone.utc).date()


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Rounds halves away from zero (12.5 -> 13) rather than to even,
    so percentages match what users saw in the web client.
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage of part over whole; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return int(round_half_up(part / whole * 100))
