"""
Application-level exceptions.

Per-tick failures never surface as exceptions outside the submitter; only
startup problems do. ConfigError is fatal: the runner exits before scheduling.
"""

from __future__ import annotations

from typing import Iterable


class DistributorError(Exception):
    """Base class for Token Distributor errors."""


class ConfigError(DistributorError):
    """Missing or invalid configuration detected at startup."""

    def __init__(self, message: str, variables: Iterable[str] = ()) -> None:
        self.variables = tuple(variables)
        super().__init__(message)
