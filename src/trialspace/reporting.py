"""Tabular export and static plots for a trial store."""
from __future__ import annotations

from collections.abc import Mapping as MappingABC
from pathlib import Path
from typing import Any, Dict, List

import matplotlib

# Force a non-interactive backend to support headless environments (tests/CI).
matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import pandas as pd

from .errors import ReportingError
from .results import EXP_KEY_FIELD, JOB_STATES, JobState, objective_signal
from .trials import Trials

_BASE_COLUMNS = [
    "id",
    "state",
    "status",
    "loss",
    "accuracy",
    "book_time",
    "refresh_time",
    EXP_KEY_FIELD,
]


def trials_dataframe(trials: Trials) -> pd.DataFrame:
    """Return one row per record of the store's current view.

    Mapping ``args`` are flattened into ``args_<key>`` columns; other ``args``
    values are stored as-is in a single ``args`` column.
    """

    rows: List[Dict[str, Any]] = []
    for trial in trials.trials:
        result = trial.get("result")
        result = result if isinstance(result, MappingABC) else {}
        state = trial.get("state")
        row: Dict[str, Any] = {
            "id": trial.get("id"),
            "state": JobState(state).name if state in JOB_STATES else state,
            "status": result.get("status"),
            "loss": result.get("loss"),
            "accuracy": result.get("accuracy"),
            "book_time": trial.get("book_time"),
            "refresh_time": trial.get("refresh_time"),
            EXP_KEY_FIELD: trial.get(EXP_KEY_FIELD),
        }
        args = trial.get("args")
        if isinstance(args, MappingABC):
            for key, value in args.items():
                row[f"args_{key}"] = value
        else:
            row["args"] = args
        rows.append(row)

    if not rows:
        return pd.DataFrame(columns=_BASE_COLUMNS)
    return pd.DataFrame(rows)


def plot_loss_history(
    trials: Trials,
    output_path: Path | str,
    *,
    title: str | None = None,
) -> Path:
    """Plot each trial's signal and its running best in view order."""

    signals = [objective_signal(result) for result in trials.results]
    points = [(idx, signal) for idx, signal in enumerate(signals) if signal is not None]
    if not points:
        raise ReportingError("Trial view does not contain any loss or accuracy values.")

    better_is_smaller = points[0][1].better_is_smaller
    x_values = [idx for idx, _ in points]
    y_values = [signal.value for _, signal in points]
    running_best = _running_best(y_values, better_is_smaller)
    label = "loss" if better_is_smaller else "accuracy"

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.scatter(x_values, y_values, alpha=0.5, label=label, color="#5DA5DA")
    ax.plot(x_values, running_best, label="best", color="#F15854")
    ax.set_xlabel("Trial")
    ax.set_ylabel(label)
    ax.set_title(title or "Loss history")
    ax.grid(True, linestyle=":", linewidth=0.5)
    ax.legend()
    fig.tight_layout()

    output = Path(output_path)
    fig.savefig(output)
    plt.close(fig)
    return output


def _running_best(values: List[float], better_is_smaller: bool) -> List[float]:
    best: List[float] = []
    current: float | None = None
    for value in values:
        if current is None:
            current = value
        else:
            current = min(current, value) if better_is_smaller else max(current, value)
        best.append(current)
    return best


__all__ = ["plot_loss_history", "trials_dataframe"]
