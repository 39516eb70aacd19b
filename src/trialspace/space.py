"""Recursive evaluation of search-space expressions.

An expression is one of four node shapes:

* a *capability call*: a mapping whose reserved ``name`` key names a
  registered sampling capability, every other key being a parameter,
* a mapping of keys to expressions,
* a list or tuple of expressions,
* any other value, returned as-is.

A single random generator is threaded through the whole walk so that one
evaluation consumes it in a single reproducible sequence. Because dispatch keys
on the literal ``name`` field, a plain mapping must not use ``name`` for a
value that happens to match a registered capability.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping as MappingABC
from typing import Any, Callable, Dict, Iterator, List, Mapping, TypeVar

import numpy as np

LOGGER = logging.getLogger(__name__)

RandomState = np.random.Generator
"""Random generator type consumed by capabilities."""

Capability = Callable[[Mapping[str, Any], RandomState], Any]
"""Sampling function ``(params, rng) -> value`` plugged into a space."""

RngFactory = Callable[[], RandomState]

#: Reserved key identifying a capability call.
CAPABILITY_KEY = "name"

_CAPABILITY_ATTR = "__trialspace_capability__"

F = TypeVar("F", bound=Callable[..., Any])


def capability(name: str) -> Callable[[F], F]:
    """Mark a :class:`SampleSpace` method as the capability called ``name``."""

    def decorator(func: F) -> F:
        setattr(func, _CAPABILITY_ATTR, name)
        return func

    return decorator


class CapabilityRegistry(MappingABC):
    """Explicit name to capability lookup table."""

    def __init__(self, capabilities: Mapping[str, Capability] | None = None) -> None:
        self._capabilities: Dict[str, Capability] = {}
        for name, func in (capabilities or {}).items():
            self.register(name, func)

    def register(self, name: str, func: Capability | None = None):
        """Register ``func`` under ``name``; usable as a decorator."""

        if not isinstance(name, str) or not name.strip():
            raise ValueError("capability names must be non-empty strings")

        def decorator(target: Capability) -> Capability:
            if not callable(target):
                raise TypeError(f"capability {name!r} must be callable")
            if name in self._capabilities:
                LOGGER.debug("Overriding capability %r", name)
            self._capabilities[name] = target
            return target

        if func is None:
            return decorator
        return decorator(func)

    def __getitem__(self, name: str) -> Capability:
        return self._capabilities[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._capabilities)

    def __len__(self) -> int:
        return len(self._capabilities)


class SampleSpace:
    """Evaluate expression trees against a registry of capabilities.

    ``SampleSpace`` itself only knows how to walk trees. Capabilities come from
    methods decorated with :func:`capability` on subclasses and from the
    ``capabilities`` mapping given at construction, the latter taking
    precedence.
    """

    def __init__(
        self,
        capabilities: Mapping[str, Capability] | None = None,
        *,
        rng_factory: RngFactory = np.random.default_rng,
    ) -> None:
        self.rng_factory = rng_factory
        self.capabilities = CapabilityRegistry(self._declared_capabilities())
        for name, func in (capabilities or {}).items():
            self.capabilities.register(name, func)

    def register(self, name: str, func: Capability | None = None):
        return self.capabilities.register(name, func)

    def evaluate(self, expr: Any, rng: RandomState | None = None) -> Any:
        """Sample a concrete value from ``expr``.

        Parameters
        ----------
        expr:
            Expression tree. ``None`` is returned unchanged.
        rng:
            Generator shared by every node of the walk. A fresh one is built
            from ``rng_factory`` when omitted.
        """

        if expr is None:
            return expr
        if rng is None:
            rng = self.rng_factory()

        match expr:
            case {"name": str() as name, **params} if name in self.capabilities:
                return self.capabilities[name](params, rng)
            case MappingABC():
                return {key: self.evaluate(value, rng) for key, value in expr.items()}
            case list():
                return [self.evaluate(item, rng) for item in expr]
            case tuple():
                return tuple(self.evaluate(item, rng) for item in expr)
            case _:
                return expr

    def sample(self, expr: Any, n: int, rng: RandomState | None = None) -> List[Any]:
        """Draw ``n`` configurations from ``expr`` with one shared generator."""

        if n < 0:
            raise ValueError("n must be non-negative")
        if rng is None:
            rng = self.rng_factory()
        return [self.evaluate(expr, rng) for _ in range(n)]

    def _declared_capabilities(self) -> Dict[str, Capability]:
        declared: Dict[str, Capability] = {}
        for cls in reversed(type(self).__mro__):
            for attr, member in vars(cls).items():
                name = getattr(member, _CAPABILITY_ATTR, None)
                if isinstance(name, str):
                    declared[name] = getattr(self, attr)
        return declared


__all__ = [
    "CAPABILITY_KEY",
    "Capability",
    "CapabilityRegistry",
    "RandomState",
    "RngFactory",
    "SampleSpace",
    "capability",
]
