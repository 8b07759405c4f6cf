from datetime import datetime, timedelta, timezone

import pytest

from growth_garden.core.localization import Translator
from growth_garden.modules.health.tree_health import calculate_tree_health, get_tree_health_message

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def hours_ago(hours):
    return NOW - timedelta(hours=hours)


@pytest.mark.parametrize("value", [None, "", "not a date", 12345])
def test_missing_or_invalid_timestamp_is_healthy(value):
    health = calculate_tree_health(value, now=NOW)
    assert health.status == "healthy"
    assert health.hours_until_warning == 48
    assert health.hours_until_death == 144
    assert health.days_since_watered == 1


def test_just_under_warning_threshold_is_healthy():
    health = calculate_tree_health(hours_ago(71.9), now=NOW)
    assert health.status == "healthy"
    assert health.hours_until_warning == pytest.approx(0.1)


def test_72_hours_is_warning():
    health = calculate_tree_health(hours_ago(72), now=NOW)
    assert health.status == "warning"
    assert health.hours_until_warning == 0
    assert health.hours_until_death == 96
    assert health.days_since_watered == 3


def test_168_hours_is_withered():
    health = calculate_tree_health(hours_ago(168), now=NOW)
    assert health.status == "withered"
    assert health.hours_until_warning == 0
    assert health.hours_until_death == 0
    assert health.days_since_watered == 7


def test_countdowns_never_negative():
    health = calculate_tree_health(hours_ago(1000), now=NOW)
    assert health.hours_until_warning == 0
    assert health.hours_until_death == 0


def test_iso_string_with_z_suffix():
    health = calculate_tree_health("2024-06-12T00:00:00Z", now=NOW)
    # 84 hours before NOW
    assert health.status == "warning"
    assert health.hours_until_death == 84


def test_naive_timestamp_treated_as_utc():
    health = calculate_tree_health(datetime(2024, 6, 15, 0, 0), now=NOW)
    assert health.status == "healthy"
    assert health.hours_until_warning == 60
    assert health.days_since_watered == 0


def test_dump_uses_camel_case():
    dumped = calculate_tree_health(None, now=NOW).model_dump(by_alias=True)
    assert set(dumped) == {"status", "hoursUntilDeath", "hoursUntilWarning", "daysSinceWatered"}


def test_health_messages():
    assert get_tree_health_message(calculate_tree_health(hours_ago(10), now=NOW)) == "Tree is healthy"
    assert get_tree_health_message(calculate_tree_health(hours_ago(200), now=NOW)) == "Tree has withered"
    # 168 - 100.5 = 67.5, rounded up
    warning = calculate_tree_health(hours_ago(100.5), now=NOW)
    assert get_tree_health_message(warning) == "Needs water in 68 hours"


def test_health_message_translated():
    translator = Translator(language="zh")
    warning = calculate_tree_health(hours_ago(100), now=NOW)
    assert get_tree_health_message(warning, translator.t) == "68小时内需要浇水"


def test_unreadable_now_falls_back_to_wall_clock():
    watered = datetime.now(timezone.utc) - timedelta(hours=1)
    health = calculate_tree_health(watered, now="not a date")
    assert health.status == "healthy"
    assert health.days_since_watered == 0
