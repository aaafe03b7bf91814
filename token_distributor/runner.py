"""
Token Distributor runner — load config, build client + submitter, schedule ticks.

Usage:
  python -m token_distributor.runner            # start scheduler (DISTRIBUTION_SCHEDULE, default 09:30 UTC daily)
  python -m token_distributor.runner --run-now  # one attempt, then exit

Configuration errors are fatal: logged as distributor_config_error, exit code 1,
scheduler never started. Per-tick outcomes never change the exit code.
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from typing import Any, Callable

from token_distributor.config import DistributorConfig, load_config
from token_distributor.config.env import mask_rpc_url
from token_distributor.core.exceptions import ConfigError
from token_distributor.logging import get_logger
from token_distributor.scheduler import CadenceScheduler, parse_cadence
from token_distributor.submitter import TransactionAttempt, TransactionSubmitter

logger = get_logger(__name__)


def make_tick(submitter: TransactionSubmitter) -> Callable[[], TransactionAttempt]:
    """Scheduled job: log trigger time, run one attempt, log the outcome kind."""

    def tick() -> TransactionAttempt:
        logger.info(
            "distribution_triggered",
            triggered_at=datetime.now(timezone.utc).isoformat(),
        )
        attempt = submitter.attempt()
        logger.info("distribution_tick_done", outcome=attempt.outcome.kind.value)
        return attempt

    return tick


def build_submitter(config: DistributorConfig, client: Any | None = None) -> TransactionSubmitter:
    if client is None:
        from token_distributor.submitter.client import ChainClient

        client = ChainClient(config)
    return TransactionSubmitter(config, client)


def main(
    argv: list[str] | None = None,
    *,
    client: Any | None = None,
    scheduler_factory: Callable[..., CadenceScheduler] = CadenceScheduler,
) -> int:
    parser = argparse.ArgumentParser(
        description="Call the distribution contract on a cron cadence."
    )
    parser.add_argument(
        "--run-now",
        action="store_true",
        help="Run one distribution attempt immediately, then exit.",
    )
    args = parser.parse_args(argv)

    try:
        config = load_config()
        # Cadence errors are fatal before any network setup.
        parse_cadence(config.schedule, config.schedule_timezone)
    except ConfigError as e:
        logger.error("distributor_config_error", error=str(e), variables=list(e.variables))
        return 1

    logger.info(
        "distributor_config_loaded",
        rpc_url=mask_rpc_url(config.rpc_url),
        contract_address=config.contract_address,
        function_name=config.function_name,
        schedule=config.schedule,
        schedule_timezone=config.schedule_timezone,
    )

    try:
        submitter = build_submitter(config, client)
    except Exception as e:
        logger.exception("distributor_startup_failed", error=str(e))
        return 1
    tick = make_tick(submitter)

    if args.run_now:
        logger.info("distributor_manual_run_start")
        attempt = tick()
        logger.info("distributor_manual_run_end", outcome=attempt.outcome.kind.value)
        return 0

    scheduler = scheduler_factory(
        config.schedule,
        tick,
        timezone=config.schedule_timezone,
    )
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("distributor_stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
