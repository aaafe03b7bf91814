"""
Tests for the cadence scheduler: cron parsing, firing rate, serialized ticks.

Firing tests use a per-second cadence on the background scheduler and real time.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime

import pytest
import pytz

from token_distributor.core.exceptions import ConfigError
from token_distributor.scheduler import CadenceScheduler, parse_cadence
from token_distributor.scheduler.engine import translate_day_of_week


def _next_fire(expression, after):
    return parse_cadence(expression, "UTC").get_next_fire_time(None, after)


# 2026-10-19 is a Monday
MONDAY_MIDNIGHT = datetime(2026, 10, 19, 0, 0, tzinfo=pytz.utc)


def test_parse_five_field_cadence():
    trigger = parse_cadence("30 9 * * *", "UTC")
    fields = {f.name: str(f) for f in trigger.fields}
    assert fields["minute"] == "30"
    assert fields["hour"] == "9"
    assert fields["second"] == "0"
    assert str(trigger.timezone) == "UTC"


def test_parse_six_field_cadence_with_seconds():
    trigger = parse_cadence("*/5 * * * * *")
    fields = {f.name: str(f) for f in trigger.fields}
    assert fields["second"] == "*/5"


@pytest.mark.parametrize("expression", ["", "* * *", "* * * * * * *", "61 * * * *", "* 25 * * *", "bogus * * * *"])
def test_malformed_cadence_is_fatal(expression):
    with pytest.raises(ConfigError):
        parse_cadence(expression)


def test_unknown_timezone_is_fatal():
    with pytest.raises(ConfigError, match="timezone"):
        parse_cadence("* * * * *", "Mars/Olympus_Mons")


def test_scheduler_rejects_bad_cadence_at_construction():
    with pytest.raises(ConfigError):
        CadenceScheduler("not a cron", lambda: None, blocking=False)


def test_every_second_fires_at_least_n_times():
    """Per-second cadence over a ~3.5s window fires the callback at least 3 times."""
    calls: list[float] = []
    scheduler = CadenceScheduler("* * * * * *", lambda: calls.append(time.monotonic()), blocking=False)
    scheduler.start()
    try:
        assert scheduler.running
        time.sleep(3.5)
    finally:
        scheduler.shutdown()
    assert len(calls) >= 3
    assert not scheduler.running


def test_overlapping_ticks_are_skipped_not_stacked():
    """A callback slower than the cadence never runs concurrently with itself."""
    lock = threading.Lock()
    state = {"active": 0, "max_active": 0, "runs": 0}

    def slow_tick():
        with lock:
            state["active"] += 1
            state["runs"] += 1
            state["max_active"] = max(state["max_active"], state["active"])
        time.sleep(1.6)
        with lock:
            state["active"] -= 1

    scheduler = CadenceScheduler("* * * * * *", slow_tick, blocking=False)
    scheduler.start()
    try:
        time.sleep(4.2)
    finally:
        scheduler.shutdown(wait=True)
    assert state["runs"] >= 1
    assert state["max_active"] == 1
    # 4 boundaries with 1.6s ticks: some must have been skipped
    assert state["runs"] < 4


def test_callback_error_does_not_stop_scheduler():
    calls: list[int] = []

    def flaky():
        calls.append(1)
        raise RuntimeError("tick blew up")

    scheduler = CadenceScheduler("* * * * * *", flaky, blocking=False)
    scheduler.start()
    try:
        time.sleep(2.5)
        assert scheduler.running
    finally:
        scheduler.shutdown()
    assert len(calls) >= 2


def test_weekday_one_is_monday():
    fire = _next_fire("30 9 * * 1", MONDAY_MIDNIGHT)
    assert fire == datetime(2026, 10, 19, 9, 30, tzinfo=pytz.utc)
    assert fire.strftime("%A") == "Monday"


@pytest.mark.parametrize("dow", ["0", "7", "sun"])
def test_weekday_zero_and_seven_are_sunday(dow):
    fire = _next_fire(f"30 9 * * {dow}", MONDAY_MIDNIGHT)
    assert fire == datetime(2026, 10, 25, 9, 30, tzinfo=pytz.utc)
    assert fire.strftime("%A") == "Sunday"


def test_weekday_range_is_weekdays():
    saturday = datetime(2026, 10, 24, 0, 0, tzinfo=pytz.utc)
    fire = _next_fire("0 9 * * 1-5", saturday)
    assert fire.strftime("%A") == "Monday"
    assert fire == datetime(2026, 10, 26, 9, 0, tzinfo=pytz.utc)


@pytest.mark.parametrize(
    "field, expected",
    [
        ("1", "mon"),
        ("7", "sun"),
        ("1-5", "mon,tue,wed,thu,fri"),
        ("5-7", "sun,fri,sat"),
        ("*/2", "sun,tue,thu,sat"),
        ("1-5/2", "mon,wed,fri"),
        ("0,3,sat", "sun,wed,sat"),
        ("MON-wed", "mon,tue,wed"),
        ("*", "*"),
    ],
)
def test_translate_day_of_week(field, expected):
    assert translate_day_of_week(field) == expected


@pytest.mark.parametrize("field", ["8", "5-1", "1,,2", "*/0", "funday", "1-"])
def test_bad_day_of_week_is_fatal(field):
    with pytest.raises(ConfigError):
        parse_cadence(f"0 9 * * {field}")


def test_day_and_weekday_both_restricted_fire_on_either():
    """0 9 1 * 1: every Monday and every 1st of the month."""
    after_monday_run = datetime(2026, 10, 19, 10, 0, tzinfo=pytz.utc)
    assert _next_fire("0 9 1 * 1", after_monday_run) == datetime(2026, 10, 26, 9, 0, tzinfo=pytz.utc)

    # 2026-11-01 is a Sunday: fires on the day-of-month match
    after_last_monday = datetime(2026, 10, 27, 0, 0, tzinfo=pytz.utc)
    assert _next_fire("0 9 1 * 1", after_last_monday) == datetime(2026, 11, 1, 9, 0, tzinfo=pytz.utc)


def test_unrestricted_day_keeps_single_cron_trigger():
    trigger = parse_cadence("0 9 * * 1-5")
    fields = {f.name: str(f) for f in trigger.fields}
    assert fields["day_of_week"] == "mon,tue,wed,thu,fri"
