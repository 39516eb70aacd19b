"""Builders for capability-call nodes understood by :class:`StandardSpace`.

Each helper returns a plain mapping, so search spaces can be composed with
ordinary dicts and lists and round-trip through YAML unchanged::

    space = {
        "lr": hp.loguniform(-7, 0),
        "layers": hp.choice([1, 2, {"width": hp.randint(256, low=16)}]),
    }
"""
from __future__ import annotations

from typing import Any, Dict, Sequence

from .space import CAPABILITY_KEY


def call(name: str, /, **params: Any) -> Dict[str, Any]:
    """Return a capability call for ``name`` with the given parameters."""

    if CAPABILITY_KEY in params:
        raise ValueError(f"{CAPABILITY_KEY!r} is reserved for the capability name")
    return {CAPABILITY_KEY: name, **params}


def choice(options: Sequence[Any]) -> Dict[str, Any]:
    return call("choice", options=list(options))


def pchoice(options: Sequence[Any], p: Sequence[float]) -> Dict[str, Any]:
    return call("pchoice", options=list(options), p=list(p))


def randint(high: Any, low: Any = 0) -> Dict[str, Any]:
    """Integers in ``[low, high)``."""

    return call("randint", low=low, high=high)


def uniform(low: Any, high: Any) -> Dict[str, Any]:
    return call("uniform", low=low, high=high)


def quniform(low: Any, high: Any, q: Any) -> Dict[str, Any]:
    return call("quniform", low=low, high=high, q=q)


def loguniform(low: Any, high: Any) -> Dict[str, Any]:
    """``exp(uniform(low, high))``; bounds are given in log space."""

    return call("loguniform", low=low, high=high)


def qloguniform(low: Any, high: Any, q: Any) -> Dict[str, Any]:
    return call("qloguniform", low=low, high=high, q=q)


def normal(mu: Any, sigma: Any) -> Dict[str, Any]:
    return call("normal", mu=mu, sigma=sigma)


def qnormal(mu: Any, sigma: Any, q: Any) -> Dict[str, Any]:
    return call("qnormal", mu=mu, sigma=sigma, q=q)


def lognormal(mu: Any, sigma: Any) -> Dict[str, Any]:
    return call("lognormal", mu=mu, sigma=sigma)


def qlognormal(mu: Any, sigma: Any, q: Any) -> Dict[str, Any]:
    return call("qlognormal", mu=mu, sigma=sigma, q=q)


__all__ = [
    "call",
    "choice",
    "loguniform",
    "lognormal",
    "normal",
    "pchoice",
    "qloguniform",
    "qlognormal",
    "qnormal",
    "quniform",
    "randint",
    "uniform",
]
