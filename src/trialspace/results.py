"""Status vocabularies, trial record keys and the canonical result schema."""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class ResultStatus(str, Enum):
    """Outcome labels carried by a result payload."""

    NEW = "new"  # computations have not started
    RUNNING = "running"  # computations are in progress
    SUSPENDED = "suspended"  # computations have been suspended, job is not finished
    OK = "ok"  # computations are finished, terminated normally
    FAIL = "fail"  # computations are finished, terminated with error


STATUS_NEW = ResultStatus.NEW.value
STATUS_RUNNING = ResultStatus.RUNNING.value
STATUS_SUSPENDED = ResultStatus.SUSPENDED.value
STATUS_OK = ResultStatus.OK.value
STATUS_FAIL = ResultStatus.FAIL.value

STATUS_STRINGS: Sequence[str] = tuple(status.value for status in ResultStatus)


class JobState(IntEnum):
    """Execution pipeline state of a trial record."""

    NEW = 0
    RUNNING = 1
    DONE = 2
    ERROR = 3


JOB_STATES: Sequence[JobState] = tuple(JobState)

#: Fields every trial record must carry, in the order missing ones are reported.
TRIAL_KEYS: Sequence[str] = (
    "id",
    "result",
    "args",
    "state",
    "book_time",
    "refresh_time",
)

#: Record field holding the experiment-grouping key.
EXP_KEY_FIELD = "exp_key"

ResultPayload = Dict[str, Any]
"""Canonical mapping type stored under a trial record's ``result`` field."""


class Result(BaseModel):
    """Validation schema applied to structured objective return values."""

    status: str
    loss: float | None = None
    accuracy: float | None = None

    model_config = ConfigDict(extra="allow")

    @field_validator("status")
    @classmethod
    def _validate_status(cls, value: str) -> str:
        if value not in STATUS_STRINGS:
            raise ValueError(f"Unsupported result status: {value!r}")
        return value

    @model_validator(mode="after")
    def _validate_signal(self) -> "Result":
        if self.status == STATUS_OK and self.loss is None and self.accuracy is None:
            raise ValueError("ok results must define loss or accuracy")
        return self

    def to_payload(self) -> ResultPayload:
        payload = self.model_dump()
        for key in ("loss", "accuracy"):
            if payload.get(key) is None:
                payload.pop(key, None)
        return payload


@dataclass(frozen=True)
class ObjectiveSignal:
    """Optimization signal extracted from a result with its polarity."""

    value: float
    better_is_smaller: bool

    @property
    def field(self) -> str:
        return "loss" if self.better_is_smaller else "accuracy"

    def beats(self, other: "ObjectiveSignal") -> bool:
        """Return whether this signal is strictly better than ``other``.

        Signals of different kinds (loss versus accuracy) are not comparable and
        never beat each other.
        """

        if self.better_is_smaller != other.better_is_smaller:
            return False
        if self.better_is_smaller:
            return self.value < other.value
        return self.value > other.value


def objective_signal(result: Mapping[str, Any] | None) -> ObjectiveSignal | None:
    """Normalize ``loss``/``accuracy`` into a single directional signal.

    ``loss`` takes precedence when both are numeric. Non-numeric values carry no
    signal; returns ``None`` when the result has no numeric loss or accuracy.
    """

    if not isinstance(result, Mapping):
        return None
    loss = result.get("loss")
    if _is_real(loss):
        return ObjectiveSignal(value=float(loss), better_is_smaller=True)
    accuracy = result.get("accuracy")
    if _is_real(accuracy):
        return ObjectiveSignal(value=float(accuracy), better_is_smaller=False)
    return None


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    """Return whether ``value`` is a real, finite, non-boolean number."""

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return not (math.isnan(value) or math.isinf(value))


__all__ = [
    "EXP_KEY_FIELD",
    "JOB_STATES",
    "JobState",
    "ObjectiveSignal",
    "Result",
    "ResultPayload",
    "ResultStatus",
    "STATUS_FAIL",
    "STATUS_NEW",
    "STATUS_OK",
    "STATUS_RUNNING",
    "STATUS_STRINGS",
    "STATUS_SUSPENDED",
    "TRIAL_KEYS",
    "is_finite_number",
    "objective_signal",
]
