"""Append-only trial log with a filtered, explicitly refreshed view."""
from __future__ import annotations

import logging
from collections.abc import Mapping as MappingABC
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence

from .errors import ExpKeyMismatchError, InvalidTrialError, MissingTrialFieldError
from .results import (
    EXP_KEY_FIELD,
    STATUS_OK,
    TRIAL_KEYS,
    JobState,
    ResultPayload,
    objective_signal,
)

LOGGER = logging.getLogger(__name__)

TrialDoc = Dict[str, Any]
"""Trial record mapping; see :data:`trialspace.results.TRIAL_KEYS`."""

Comparator = Callable[[Mapping[str, Any], Mapping[str, Any]], bool]
"""``compare(a, b)`` returns whether result ``a`` is strictly better than ``b``."""


def minimizing_compare(a: Mapping[str, Any], b: Mapping[str, Any]) -> bool:
    """Smaller ``loss`` wins; when a result has no loss, larger ``accuracy`` wins."""

    sa, sb = objective_signal(a), objective_signal(b)
    if sa is None:
        return False
    if sb is None:
        return True
    return sa.beats(sb)


def maximizing_compare(a: Mapping[str, Any], b: Mapping[str, Any]) -> bool:
    """Larger signal wins, whether it is a ``loss`` or an ``accuracy``."""

    sa, sb = objective_signal(a), objective_signal(b)
    if sa is None:
        return False
    if sb is None:
        return True
    if sa.better_is_smaller != sb.better_is_smaller:
        return False
    return sa.value > sb.value


def build_trial_doc(
    trial_id: Any,
    *,
    result: Any,
    args: Any,
    exp_key: Any = None,
    state: JobState = JobState.NEW,
) -> TrialDoc:
    """Return a trial record with every required field stamped."""

    return {
        "id": trial_id,
        "state": state,
        "result": result,
        "args": args,
        EXP_KEY_FIELD: exp_key,
        "book_time": None,
        "refresh_time": None,
    }


class Trials:
    """Store of trial records for one experiment key.

    ``dynamic_trials`` is the authoritative, append-only list of inserted
    records. ``trials`` is a view derived from it by :meth:`refresh`: records in
    ``ERROR`` state are dropped and, when ``exp_key`` is not ``None``, only
    records of that experiment are kept. The view is not updated on insert;
    call :meth:`refresh` before querying.

    Neither id reservation nor insertion is atomic. Callers sharing a store
    must serialize access themselves.
    """

    def __init__(self, exp_key: Any = None, refresh: bool = True) -> None:
        self._ids: List[int] = []
        self._dynamic_trials: List[TrialDoc] = []
        self._trials: List[TrialDoc] = []
        self.exp_key = exp_key
        if refresh:
            self.refresh()

    def __len__(self) -> int:
        return len(self._trials)

    def __iter__(self):
        return iter(self._trials)

    @property
    def trials(self) -> List[TrialDoc]:
        return self._trials

    @property
    def dynamic_trials(self) -> List[TrialDoc]:
        return self._dynamic_trials

    @property
    def results(self) -> List[ResultPayload]:
        return [trial["result"] for trial in self._trials]

    @property
    def args(self) -> List[Any]:
        return [trial["args"] for trial in self._trials]

    def refresh(self) -> None:
        """Recompute the derived view from the authoritative list."""

        if self.exp_key is None:
            self._trials = [
                trial for trial in self._dynamic_trials if trial["state"] != JobState.ERROR
            ]
        else:
            self._trials = [
                trial
                for trial in self._dynamic_trials
                if trial["state"] != JobState.ERROR
                and trial[EXP_KEY_FIELD] == self.exp_key
            ]
            # NOTE: id reservation restarts at zero after a keyed refresh, so
            # ids may repeat across refreshes of a keyed store.
            if self._ids:
                LOGGER.debug(
                    "Clearing %d reserved ids on refresh of exp_key %r",
                    len(self._ids),
                    self.exp_key,
                )
            self._ids = []
        LOGGER.debug(
            "Refreshed view: %d of %d trials", len(self._trials), len(self._dynamic_trials)
        )

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------
    def reserve_ids(self, n: int) -> List[int]:
        """Return ``n`` new sequential ids continuing the internal counter."""

        if n < 0:
            raise ValueError("n must be non-negative")
        start = len(self._ids)
        ids = list(range(start, start + n))
        self._ids.extend(ids)
        return ids

    def build_docs(
        self,
        ids: Sequence[Any],
        results: Sequence[Any],
        args: Sequence[Any],
    ) -> List[TrialDoc]:
        """Build ``NEW`` records for this store without inserting them."""

        if not len(ids) == len(results) == len(args):
            raise ValueError("ids, results and args must have the same length")
        return [
            build_trial_doc(trial_id, result=result, args=arg, exp_key=self.exp_key)
            for trial_id, result, arg in zip(ids, results, args)
        ]

    def assert_valid_trial(self, trial: Any) -> TrialDoc:
        if not isinstance(trial, MappingABC) or not trial:
            raise InvalidTrialError("trial should be a non-empty mapping")
        for key in TRIAL_KEYS:
            if key not in trial:
                raise MissingTrialFieldError(key)
        if EXP_KEY_FIELD not in trial:
            raise MissingTrialFieldError(EXP_KEY_FIELD)
        actual = trial[EXP_KEY_FIELD]
        if actual != self.exp_key:
            raise ExpKeyMismatchError(actual, self.exp_key)
        return trial  # type: ignore[return-value]

    def insert_doc(self, doc: TrialDoc) -> Any:
        """Validate and append one record, returning its id."""

        return self._insert([self.assert_valid_trial(doc)])[0]

    def insert_docs(self, docs: Iterable[TrialDoc]) -> List[Any]:
        """Validate every record, then append them all, returning their ids."""

        validated = [self.assert_valid_trial(doc) for doc in docs]
        return self._insert(validated)

    def _insert(self, docs: List[TrialDoc]) -> List[Any]:
        self._dynamic_trials.extend(docs)
        LOGGER.debug("Inserted %d trial(s)", len(docs))
        return [doc["id"] for doc in docs]

    def delete_all(self) -> None:
        """Drop every record and refresh the view."""

        self._dynamic_trials = []
        self.refresh()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def count_by_state(
        self,
        states: JobState | int | Iterable[JobState | int],
        use_persisted_view: bool = True,
    ) -> int:
        """Count records whose state is in ``states``.

        With ``use_persisted_view`` the current view is counted; otherwise a fresh
        pass over the authoritative list filtered by ``exp_key`` only (records in
        ``ERROR`` are kept).
        """

        wanted = {states} if isinstance(states, int) else set(states)
        if use_persisted_view:
            pool: Iterable[TrialDoc] = self._trials
        elif self.exp_key is None:
            pool = self._dynamic_trials
        else:
            pool = (
                trial
                for trial in self._dynamic_trials
                if trial.get(EXP_KEY_FIELD) == self.exp_key
            )
        return sum(1 for trial in pool if trial["state"] in wanted)

    def losses(self) -> List[float | None]:
        """Per view record, its ``loss`` or else its ``accuracy``."""

        values: List[float | None] = []
        for result in self.results:
            signal = objective_signal(result)
            values.append(None if signal is None else signal.value)
        return values

    def statuses(self) -> List[str | None]:
        return [
            result.get("status") if isinstance(result, MappingABC) else None
            for result in self.results
        ]

    def best_trial(self, compare: Comparator | None = None) -> TrialDoc | None:
        """Return the best ``ok`` record of the view, or ``None``.

        Ties keep the earliest record.
        """

        compare = compare or minimizing_compare
        best: TrialDoc | None = None
        for trial in self._trials:
            result = trial["result"]
            if not isinstance(result, MappingABC) or result.get("status") != STATUS_OK:
                continue
            if best is None or compare(result, best["result"]):
                best = trial
        return best

    @property
    def argmin(self) -> Any:
        best = self.best_trial(minimizing_compare)
        return best["args"] if best is not None else None

    @property
    def argmax(self) -> Any:
        best = self.best_trial(maximizing_compare)
        return best["args"] if best is not None else None


__all__ = [
    "Comparator",
    "TrialDoc",
    "Trials",
    "build_trial_doc",
    "maximizing_compare",
    "minimizing_compare",
]
