"""
Rule-based error classifier for contract-call failures.

The distribution contract enforces a minimum interval between mints and
reverts with a reason string ("Too early for next mint"). Nodes and web3
surface that reason in different shapes (revert message, JSON-RPC error
dict, plain ValueError), so errors are first normalized to lower-cased text,
then matched against a configurable marker set.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from token_distributor.config.env import DEFAULT_EXPECTED_REJECTION_MARKERS
from token_distributor.submitter.models import ErrorCategory

Classifier = Callable[[BaseException], ErrorCategory]


def _texts_from(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, dict):
        out: list[str] = []
        for key in ("message", "data", "reason"):
            out.extend(_texts_from(value.get(key)))
        return out
    if isinstance(value, (bytes, bytearray)):
        return []
    return [str(value)]


def normalize_error(exc: BaseException) -> str:
    """Collect human-readable text from exc (str, .message, .data, JSON-RPC dict args); lower-cased."""
    parts: list[str] = [str(exc)]
    for attr in ("message", "data"):
        parts.extend(_texts_from(getattr(exc, attr, None)))
    for arg in getattr(exc, "args", ()):
        parts.extend(_texts_from(arg))
    seen: list[str] = []
    for p in parts:
        p = p.strip()
        if p and p not in seen:
            seen.append(p)
    return " | ".join(seen).lower()


def classify_error(
    exc: BaseException,
    markers: Iterable[str] = DEFAULT_EXPECTED_REJECTION_MARKERS,
) -> ErrorCategory:
    """Return EXPECTED_BUSINESS_REJECTION if any marker appears in the normalized error text."""
    text = normalize_error(exc)
    for marker in markers:
        if marker and marker.lower() in text:
            return ErrorCategory.EXPECTED_BUSINESS_REJECTION
    return ErrorCategory.UNEXPECTED_FAILURE


def make_classifier(markers: Iterable[str]) -> Classifier:
    """Bind classify_error to a marker set (e.g. from config)."""
    bound = tuple(markers)

    def _classify(exc: BaseException) -> ErrorCategory:
        return classify_error(exc, bound)

    return _classify
