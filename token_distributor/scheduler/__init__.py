# Cron cadence scheduling: one serialized job, overlapping ticks skipped.

from token_distributor.scheduler.engine import (
    CadenceScheduler,
    parse_cadence,
)

__all__ = [
    "CadenceScheduler",
    "parse_cadence",
]
