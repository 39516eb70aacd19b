"""Objective-function adapter producing canonical results."""
from __future__ import annotations

import inspect
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, MutableMapping

from .errors import (
    IncompleteResultError,
    InvalidReturnError,
    InvalidStatusError,
)
from .results import (
    STATUS_FAIL,
    STATUS_NEW,
    STATUS_OK,
    STATUS_STRINGS,
    JobState,
    Result,
    ResultPayload,
    ResultStatus,
    is_finite_number,
)
from .space import RandomState, SampleSpace

LOGGER = logging.getLogger(__name__)

Objective = Callable[[Any, Any], Any]
"""Objective ``fn(args, params)`` returning a number, a mapping or an awaitable of either."""


class Domain:
    """Pair an objective function with its fixed parameters and search space.

    :meth:`evaluate` is a coroutine because the objective may itself be one
    (for example a remote training job); plain functions are called inline.
    No timeout is applied; wrap the call in :func:`asyncio.wait_for` when a
    deadline is needed.
    """

    def __init__(self, fn: Objective, expr: Any = None, params: Any = None) -> None:
        if not callable(fn):
            raise TypeError("fn must be callable")
        self.fn = fn
        self.expr = expr
        self.params = params

    async def evaluate(self, args: Any) -> ResultPayload:
        """Run the objective on ``args`` and return its canonical result."""

        rval = self.fn(args, self.params)
        if inspect.isawaitable(rval):
            rval = await rval
        return normalize_result(rval)

    def new_result(self) -> ResultPayload:
        """Return a pending placeholder result."""

        return {"status": STATUS_NEW}

    def sample(self, space: SampleSpace, rng: RandomState | None = None) -> Any:
        """Sample a configuration from this domain's expression."""

        return space.evaluate(self.expr, rng)


def normalize_result(rval: Any) -> ResultPayload:
    """Convert an objective return value into a result mapping.

    A finite number becomes ``{"loss": value, "status": "ok"}``. Anything else
    must be a mapping with a recognized ``status``; ``ok`` results must carry
    ``loss`` or ``accuracy``. Structured results are returned as a plain dict
    with every value unchanged.
    """

    if is_finite_number(rval):
        return Result(loss=float(rval), status=STATUS_OK).to_payload()

    if rval is None:
        raise InvalidReturnError("Optimization function should return a loss value")

    status = rval.get("status") if isinstance(rval, Mapping) else None
    if status not in STATUS_STRINGS:
        raise InvalidStatusError(status)
    status = ResultStatus(status).value

    if status == STATUS_OK and rval.get("loss") is None and rval.get("accuracy") is None:
        raise IncompleteResultError("ok results must define loss or accuracy")

    return {**rval, "status": status}


async def run_trial(domain: Domain, doc: MutableMapping[str, Any]) -> ResultPayload:
    """Evaluate one trial record in place, driving its state machine.

    The record moves to ``RUNNING`` before the objective runs and to ``DONE``
    with its result afterwards. Any exception leaves it in ``ERROR`` with a
    ``fail`` result and is re-raised unchanged.
    """

    trial_id = doc.get("id")
    doc["state"] = JobState.RUNNING
    doc["book_time"] = _utcnow()
    LOGGER.debug("Trial %s running", trial_id)

    try:
        result = await domain.evaluate(doc["args"])
    except Exception as exc:
        doc["state"] = JobState.ERROR
        doc["result"] = {
            "status": STATUS_FAIL,
            "reason": f"exception:{exc.__class__.__name__}",
        }
        doc["refresh_time"] = _utcnow()
        LOGGER.warning("Trial %s failed: %s", trial_id, exc)
        raise

    doc["result"] = result
    doc["state"] = JobState.DONE
    doc["refresh_time"] = _utcnow()
    LOGGER.debug("Trial %s done with status %s", trial_id, result.get("status"))
    return result


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


__all__ = ["Domain", "Objective", "normalize_result", "run_trial"]
