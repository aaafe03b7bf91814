"""
TransactionSubmitter: one contract call per tick, outcome classified and logged.

attempt() runs estimate → build → sign → submit and always returns a
TransactionAttempt carrying exactly one Outcome. Exceptions from any step are
classified and logged here; nothing propagates to the scheduler and nothing is
retried. No receipt polling: the node's acceptance of the raw transaction is
the success signal.
"""

from __future__ import annotations

import traceback
from typing import Any

from token_distributor.config.settings import DistributorConfig
from token_distributor.logging import get_logger
from token_distributor.submitter.classifier import Classifier, make_classifier
from token_distributor.submitter.models import (
    ErrorCategory,
    Failed,
    RejectedExpected,
    Submitted,
    TransactionAttempt,
)

logger = get_logger(__name__)


class TransactionSubmitter:
    """Stateless across ticks; holds only the read-only config and the client."""

    def __init__(
        self,
        config: DistributorConfig,
        client: Any,
        classifier: Classifier | None = None,
    ) -> None:
        self._config = config
        self._client = client
        self._classify = classifier or make_classifier(config.expected_rejection_markers)

    def attempt(self) -> TransactionAttempt:
        attempt = TransactionAttempt()
        function_name = self._config.function_name
        try:
            attempt.estimated_gas = self._client.estimate_gas()
            logger.info(
                "distribution_gas_estimated",
                function_name=function_name,
                estimated_gas=attempt.estimated_gas,
            )
            tx = self._client.build_transaction(attempt.estimated_gas)
            attempt.encoded_call_data = tx.get("data")
            attempt.signed_payload = self._client.sign(tx)
            tx_hash = self._client.send_raw(attempt.signed_payload)
        except Exception as e:
            attempt.outcome = self._classify_failure(e)
            return attempt

        attempt.outcome = Submitted(tx_hash=tx_hash, estimated_gas=attempt.estimated_gas)
        logger.info(
            "distribution_submitted",
            function_name=function_name,
            tx_hash=tx_hash,
            estimated_gas=attempt.estimated_gas,
        )
        return attempt

    def _classify_failure(self, exc: Exception) -> RejectedExpected | Failed:
        try:
            category = self._classify(exc)
        except Exception:
            logger.exception("distribution_classifier_error", error=str(exc))
            category = ErrorCategory.UNEXPECTED_FAILURE

        if category == ErrorCategory.EXPECTED_BUSINESS_REJECTION:
            logger.info(
                "distribution_skipped_too_early",
                function_name=self._config.function_name,
                reason=str(exc),
            )
            return RejectedExpected(reason=str(exc))

        trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        logger.error(
            "distribution_failed",
            function_name=self._config.function_name,
            error=str(exc),
            error_type=type(exc).__name__,
            traceback=trace,
        )
        return Failed(error=str(exc), traceback=trace)
