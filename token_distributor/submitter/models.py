"""Per-tick attempt and outcome models. Created and discarded within one tick."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class OutcomeKind(str, Enum):
    SUBMITTED = "submitted"
    REJECTED_EXPECTED = "rejected_expected"
    FAILED = "failed"


class ErrorCategory(str, Enum):
    EXPECTED_BUSINESS_REJECTION = "expected_business_rejection"
    UNEXPECTED_FAILURE = "unexpected_failure"


@dataclass(frozen=True)
class Submitted:
    tx_hash: str
    estimated_gas: int

    @property
    def kind(self) -> OutcomeKind:
        return OutcomeKind.SUBMITTED


@dataclass(frozen=True)
class RejectedExpected:
    reason: str

    @property
    def kind(self) -> OutcomeKind:
        return OutcomeKind.REJECTED_EXPECTED


@dataclass(frozen=True)
class Failed:
    error: str
    traceback: str = ""

    @property
    def kind(self) -> OutcomeKind:
        return OutcomeKind.FAILED


Outcome = Submitted | RejectedExpected | Failed


@dataclass
class TransactionAttempt:
    """One tick's work. Fields stay None when the step that fills them did not complete."""

    estimated_gas: int | None = None
    encoded_call_data: str | None = None
    signed_payload: Any = None
    outcome: Outcome | None = None
