"""Standard sampling capabilities for search-space expressions."""
from __future__ import annotations

from typing import Any, Mapping, Sequence

import numpy as np

from .space import RandomState, SampleSpace, capability

_MISSING = object()


class StandardSpace(SampleSpace):
    """Sample space with the usual hyperparameter distributions registered.

    Every capability evaluates its own parameters through :meth:`evaluate`
    with the shared generator before drawing, so parameters may themselves be
    expressions. ``choice`` and ``pchoice`` only evaluate the selected branch.
    """

    def _param(
        self,
        params: Mapping[str, Any],
        key: str,
        rng: RandomState,
        default: Any = _MISSING,
    ) -> Any:
        if key not in params:
            if default is _MISSING:
                raise KeyError(f"missing capability parameter {key!r}")
            return default
        return self.evaluate(params[key], rng)

    def _options(self, params: Mapping[str, Any]) -> Sequence[Any]:
        options = params["options"]
        if not isinstance(options, (list, tuple)) or not options:
            raise ValueError("options must be a non-empty list")
        return options

    @capability("choice")
    def choice(self, params: Mapping[str, Any], rng: RandomState) -> Any:
        options = self._options(params)
        index = int(rng.integers(len(options)))
        return self.evaluate(options[index], rng)

    @capability("pchoice")
    def pchoice(self, params: Mapping[str, Any], rng: RandomState) -> Any:
        options = self._options(params)
        weights = np.asarray(self._param(params, "p", rng), dtype=float)
        if weights.shape != (len(options),):
            raise ValueError("p must provide one probability per option")
        index = int(rng.choice(len(options), p=weights))
        return self.evaluate(options[index], rng)

    @capability("randint")
    def randint(self, params: Mapping[str, Any], rng: RandomState) -> int:
        low = self._param(params, "low", rng, default=0)
        high = self._param(params, "high", rng)
        return int(rng.integers(low, high))

    @capability("uniform")
    def uniform(self, params: Mapping[str, Any], rng: RandomState) -> float:
        return float(self._uniform(params, rng))

    @capability("quniform")
    def quniform(self, params: Mapping[str, Any], rng: RandomState) -> float:
        return _quantize(self._uniform(params, rng), self._param(params, "q", rng))

    @capability("loguniform")
    def loguniform(self, params: Mapping[str, Any], rng: RandomState) -> float:
        return float(np.exp(self._uniform(params, rng)))

    @capability("qloguniform")
    def qloguniform(self, params: Mapping[str, Any], rng: RandomState) -> float:
        q = self._param(params, "q", rng)
        return _quantize(np.exp(self._uniform(params, rng)), q)

    @capability("normal")
    def normal(self, params: Mapping[str, Any], rng: RandomState) -> float:
        return float(self._normal(params, rng))

    @capability("qnormal")
    def qnormal(self, params: Mapping[str, Any], rng: RandomState) -> float:
        return _quantize(self._normal(params, rng), self._param(params, "q", rng))

    @capability("lognormal")
    def lognormal(self, params: Mapping[str, Any], rng: RandomState) -> float:
        return float(np.exp(self._normal(params, rng)))

    @capability("qlognormal")
    def qlognormal(self, params: Mapping[str, Any], rng: RandomState) -> float:
        q = self._param(params, "q", rng)
        return _quantize(np.exp(self._normal(params, rng)), q)

    def _uniform(self, params: Mapping[str, Any], rng: RandomState) -> float:
        low = float(self._param(params, "low", rng))
        high = float(self._param(params, "high", rng))
        if high < low:
            raise ValueError(f"uniform bounds are inverted: low={low}, high={high}")
        return rng.uniform(low, high)

    def _normal(self, params: Mapping[str, Any], rng: RandomState) -> float:
        mu = float(self._param(params, "mu", rng))
        sigma = float(self._param(params, "sigma", rng))
        return rng.normal(mu, sigma)


def _quantize(value: float, q: Any) -> float:
    step = float(q)
    if step <= 0:
        raise ValueError("q must be positive")
    return float(np.round(value / step) * step)


__all__ = ["StandardSpace"]
