# Single-call transaction submission: chain client, error classifier, per-tick attempt.

from token_distributor.submitter.classifier import classify_error, make_classifier, normalize_error
from token_distributor.submitter.models import (
    ErrorCategory,
    Failed,
    OutcomeKind,
    RejectedExpected,
    Submitted,
    TransactionAttempt,
)
from token_distributor.submitter.submitter import TransactionSubmitter

__all__ = [
    "ErrorCategory",
    "Failed",
    "OutcomeKind",
    "RejectedExpected",
    "Submitted",
    "TransactionAttempt",
    "TransactionSubmitter",
    "classify_error",
    "make_classifier",
    "normalize_error",
]
