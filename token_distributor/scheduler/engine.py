"""
Cadence scheduler: fire a zero-argument callback on a cron cadence via APScheduler.

Overlap policy: ticks are serialized. The job is registered with max_instances=1
and coalesce=True; a boundary reached while the previous callback is still
running is skipped and logged (distribution_tick_skipped), never queued.
Callbacks run on APScheduler's thread-pool executor, not on the scheduler's
timer thread, so a slow node call never delays dispatch of later ticks.

Cadence: standard five-field crontab (minute hour day month day_of_week), or six
fields with a leading seconds field for sub-minute cadences. Crontab rules apply:
day_of_week counts from Sunday (0 and 7 are both Sunday), and when day and
day_of_week are both restricted the job fires when either one matches.
"""

from __future__ import annotations

from typing import Any, Callable

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_MAX_INSTANCES, JobEvent
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.base import BaseTrigger
from apscheduler.triggers.combining import OrTrigger
from apscheduler.triggers.cron import CronTrigger
from pytz import UnknownTimeZoneError, timezone as pytz_timezone

from token_distributor.core.exceptions import ConfigError
from token_distributor.logging import get_logger

logger = get_logger(__name__)

DEFAULT_JOB_ID = "token_distributor_tick"
MISFIRE_GRACE_TIME_SEC = 30
_CRON_FIELDS = ("minute", "hour", "day", "month", "day_of_week")
# Crontab weekday order: index is the crontab number (7 folds onto 0).
_CRON_WEEKDAYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


def _resolve_timezone(name: str) -> Any:
    try:
        return pytz_timezone(name)
    except UnknownTimeZoneError as e:
        raise ConfigError(f"Unknown schedule timezone: {name!r}", variables=["SCHEDULE_TIMEZONE"]) from e


def _cadence_error(expression: str, detail: str) -> ConfigError:
    return ConfigError(f"Invalid cadence {expression!r}: {detail}", variables=["DISTRIBUTION_SCHEDULE"])


def _weekday_number(token: str, expression: str) -> int:
    t = token.strip().lower()
    if t.isdigit() and int(t) <= 7:
        return int(t)
    if t in _CRON_WEEKDAYS:
        return _CRON_WEEKDAYS.index(t)
    raise _cadence_error(expression, f"bad day_of_week value {token!r}")


def translate_day_of_week(field: str, expression: str = "") -> str:
    """
    Rewrite a crontab day_of_week field as APScheduler weekday names.

    Numbers, names, ranges, lists and steps are expanded to the matching set of
    days, e.g. "1-5" -> "mon,tue,wed,thu,fri", "*/2" -> "sun,tue,thu,sat", "7" -> "sun".
    """
    if field == "*":
        return field
    days: set[int] = set()
    for part in field.split(","):
        span, has_step, step_raw = part.partition("/")
        step = 1
        if has_step:
            if not step_raw.isdigit() or int(step_raw) < 1:
                raise _cadence_error(expression, f"bad day_of_week step {part!r}")
            step = int(step_raw)
        if span == "*":
            first, last = 0, 6
        elif "-" in span:
            start, _, end = span.partition("-")
            first, last = _weekday_number(start, expression), _weekday_number(end, expression)
            if first > last:
                raise _cadence_error(expression, f"day_of_week range runs backwards {part!r}")
        else:
            first = _weekday_number(span, expression)
            last = 7 if has_step else first
        days.update(d % 7 for d in range(first, last + 1, step))
    return ",".join(_CRON_WEEKDAYS[d] for d in sorted(days))


def parse_cadence(expression: str, timezone: str = "UTC") -> BaseTrigger:
    """
    Build a trigger from a 5-field (or 6-field, seconds first) cron expression.

    Returns a CronTrigger, or an OrTrigger of two CronTriggers when both day and
    day_of_week are restricted. Raises ConfigError on malformed expression or
    unknown timezone.
    """
    tz = _resolve_timezone(timezone)

    fields = (expression or "").split()
    if len(fields) == 5:
        values = dict(zip(_CRON_FIELDS, fields))
    elif len(fields) == 6:
        values = dict(zip(("second",) + _CRON_FIELDS, fields))
    else:
        raise ConfigError(
            f"Cadence must have 5 or 6 fields, got {len(fields)}: {expression!r}",
            variables=["DISTRIBUTION_SCHEDULE"],
        )
    values.setdefault("second", "0")
    values["day_of_week"] = translate_day_of_week(values["day_of_week"], expression)

    try:
        if values["day"].startswith("*") or values["day_of_week"] == "*":
            return CronTrigger(timezone=tz, **values)
        # Crontab: restricted day and day_of_week match on either.
        return OrTrigger(
            [
                CronTrigger(timezone=tz, **{**values, "day_of_week": "*"}),
                CronTrigger(timezone=tz, **{**values, "day": "*"}),
            ]
        )
    except ValueError as e:
        raise _cadence_error(expression, str(e)) from e


class CadenceScheduler:
    """Runs callback at every cadence boundary until shutdown()."""

    def __init__(
        self,
        expression: str,
        callback: Callable[[], Any],
        *,
        timezone: str = "UTC",
        blocking: bool = True,
        job_id: str = DEFAULT_JOB_ID,
    ) -> None:
        self.expression = expression
        self.timezone = timezone
        self._trigger = parse_cadence(expression, timezone)
        self._callback = callback
        self._job_id = job_id
        scheduler_cls = BlockingScheduler if blocking else BackgroundScheduler
        self._scheduler = scheduler_cls(timezone=_resolve_timezone(timezone))
        self._scheduler.add_job(
            callback,
            self._trigger,
            id=job_id,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=MISFIRE_GRACE_TIME_SEC,
        )
        self._scheduler.add_listener(self._on_job_event, EVENT_JOB_MAX_INSTANCES | EVENT_JOB_ERROR)

    def _on_job_event(self, event: JobEvent) -> None:
        if event.code == EVENT_JOB_MAX_INSTANCES:
            logger.warning(
                "distribution_tick_skipped",
                job_id=event.job_id,
                reason="previous_tick_still_running",
                scheduled_run_times=[str(t) for t in getattr(event, "scheduled_run_times", [])],
            )
        elif event.code == EVENT_JOB_ERROR:
            # Callback raised; the scheduler keeps running.
            logger.error("distribution_tick_error", job_id=event.job_id, error=str(getattr(event, "exception", "")))

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        """Start firing. Blocks until shutdown when blocking=True."""
        logger.info(
            "scheduler_started",
            cadence=self.expression,
            timezone=self.timezone,
            job_id=self._job_id,
        )
        self._scheduler.start()

    def shutdown(self, wait: bool = True) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
            logger.info("scheduler_stopped", job_id=self._job_id)
