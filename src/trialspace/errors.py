"""Exception hierarchy shared across the trialspace package."""
from __future__ import annotations

from typing import Any


class TrialSpaceError(Exception):
    """Base class for errors raised by trialspace."""


class InvalidTrialError(TrialSpaceError, ValueError):
    """Raised when a trial record fails validation on insert."""


class MissingTrialFieldError(InvalidTrialError):
    """Raised when a trial record lacks one of the required fields."""

    def __init__(self, field: str) -> None:
        super().__init__(f"trial missing key {field}")
        self.field = field


class ExpKeyMismatchError(InvalidTrialError):
    """Raised when a trial record belongs to another experiment."""

    def __init__(self, actual: Any, expected: Any) -> None:
        super().__init__(f"wrong trial exp_key {actual!r}, expected {expected!r}")
        self.actual = actual
        self.expected = expected


class ResultContractError(TrialSpaceError, ValueError):
    """Raised when an objective function breaks the result contract."""


class InvalidReturnError(ResultContractError):
    """Raised when an objective function returns nothing usable."""


class InvalidStatusError(ResultContractError):
    """Raised when a result carries an unrecognized status."""

    def __init__(self, status: Any) -> None:
        super().__init__(f"invalid status {status!r}")
        self.status = status


class IncompleteResultError(ResultContractError):
    """Raised when an ``ok`` result has neither ``loss`` nor ``accuracy``."""


class ConfigError(TrialSpaceError, ValueError):
    """Raised when an experiment configuration cannot be loaded."""


class ReportingError(TrialSpaceError, RuntimeError):
    """Raised when a report or plot cannot be generated."""


__all__ = [
    "ConfigError",
    "ExpKeyMismatchError",
    "IncompleteResultError",
    "InvalidReturnError",
    "InvalidStatusError",
    "InvalidTrialError",
    "MissingTrialFieldError",
    "ReportingError",
    "ResultContractError",
    "TrialSpaceError",
]
