"""Strategy combinators: constants, tuples, map, filter and flat_map.

Components:
    Just / JustValueTree - Constant value, never shrinks
    TupleStrategy / TupleValueTree - Fixed-size tuples, shrunk element-wise
    Map / MapValueTree - Transformed values
    Filter / FilterValueTree - Values satisfying a predicate
    FlatMap / FlatMapValueTree - Values from a strategy derived per value

FlatMap is the one combinator that regenerates values while shrinking. It
draws from a partial clone of the runner so regeneration consumes the
test-wide regeneration budget (TestRunner.flat_map_regen) without touching
the per-case counters of the original runner.

Python 3.13+.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from propengine.errors import TestAborted, ValueRejected
from propengine.strategy.tree import Strategy, ValueTree

if TYPE_CHECKING:
    from collections.abc import Callable

    from propengine.runtime.runner import TestRunner

__all__ = [
    "Filter",
    "FilterValueTree",
    "FlatMap",
    "FlatMapValueTree",
    "Just",
    "JustValueTree",
    "Map",
    "MapValueTree",
    "TupleStrategy",
    "TupleValueTree",
    "just",
    "tuples",
]

logger = logging.getLogger(__name__)


# ============================================================================
# Just
# ============================================================================


class JustValueTree[T](ValueTree[T]):
    """Tree over a single fixed value."""

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        self._value = value

    def current(self) -> T:
        return self._value

    def simplify(self) -> bool:
        return False

    def complicate(self) -> bool:
        return False


class Just[T](Strategy[T]):
    """Always produces the same value."""

    def __init__(self, value: T) -> None:
        self.value = value

    def new_value(self, runner: TestRunner) -> JustValueTree[T]:
        return JustValueTree(self.value)

    def __repr__(self) -> str:
        return f"just({self.value!r})"


def just[T](value: T) -> Just[T]:
    """Strategy that always produces value."""
    return Just(value)


# ============================================================================
# Tuples
# ============================================================================


class TupleValueTree(ValueTree[tuple[Any, ...]]):
    """Shrinks one element at a time, left to right.

    ``_shrinker`` is the element currently being simplified; once it can no
    longer simplify, the next element is tried. ``_prev_shrinker`` remembers
    which element the last successful simplify touched so complicate() can
    undo it.
    """

    def __init__(self, trees: list[ValueTree[Any]]) -> None:
        self._trees = trees
        self._shrinker = 0
        self._prev_shrinker: int | None = None

    def current(self) -> tuple[Any, ...]:
        return tuple(tree.current() for tree in self._trees)

    def simplify(self) -> bool:
        while self._shrinker < len(self._trees):
            if self._trees[self._shrinker].simplify():
                self._prev_shrinker = self._shrinker
                return True
            self._shrinker += 1
        return False

    def complicate(self) -> bool:
        if self._prev_shrinker is None:
            return False
        if self._trees[self._prev_shrinker].complicate():
            return True
        self._prev_shrinker = None
        return False


class TupleStrategy(Strategy[tuple[Any, ...]]):
    """Tuples whose elements come from the given strategies, in order."""

    def __init__(self, strategies: tuple[Strategy[Any], ...]) -> None:
        self.strategies = strategies

    def new_value(self, runner: TestRunner) -> TupleValueTree:
        return TupleValueTree([strategy.new_value(runner) for strategy in self.strategies])

    def __repr__(self) -> str:
        return f"tuples({', '.join(map(repr, self.strategies))})"


def tuples(*strategies: Strategy[Any]) -> TupleStrategy:
    """Strategy for tuples with one element drawn from each strategy."""
    return TupleStrategy(strategies)


# ============================================================================
# Map
# ============================================================================


class MapValueTree[T, U](ValueTree[U]):
    """Applies fn to the source tree's current value."""

    def __init__(self, source: ValueTree[T], fn: Callable[[T], U]) -> None:
        self._source = source
        self._fn = fn

    def current(self) -> U:
        return self._fn(self._source.current())

    def simplify(self) -> bool:
        return self._source.simplify()

    def complicate(self) -> bool:
        return self._source.complicate()


class Map[T, U](Strategy[U]):
    """Strategy produced by Strategy.map()."""

    def __init__(self, source: Strategy[T], fn: Callable[[T], U]) -> None:
        self.source = source
        self.fn = fn

    def new_value(self, runner: TestRunner) -> MapValueTree[T, U]:
        return MapValueTree(self.source.new_value(runner), self.fn)

    def __repr__(self) -> str:
        return f"{self.source!r}.map({getattr(self.fn, '__name__', self.fn)!r})"


# ============================================================================
# Filter
# ============================================================================


class FilterValueTree[T](ValueTree[T]):
    """Source tree restricted to values accepted by a predicate.

    After every move of the source tree, keeps complicating until the
    predicate accepts the current value again.
    """

    def __init__(self, source: ValueTree[T], whence: str, predicate: Callable[[T], bool]) -> None:
        self._source = source
        self._whence = whence
        self._predicate = predicate

    def _ensure_acceptable(self) -> None:
        while not self._predicate(self._source.current()):
            if not self._source.complicate():
                msg = (
                    "Unable to complicate filtered strategy back into "
                    f"acceptable value ({self._whence})"
                )
                raise RuntimeError(msg)

    def current(self) -> T:
        return self._source.current()

    def simplify(self) -> bool:
        if self._source.simplify():
            self._ensure_acceptable()
            return True
        return False

    def complicate(self) -> bool:
        if self._source.complicate():
            self._ensure_acceptable()
            return True
        return False


class Filter[T](Strategy[T]):
    """Strategy produced by Strategy.filter().

    A drawn value the predicate rejects raises ValueRejected, which the
    runner charges to the local rejection budget before moving on to the
    next case.
    """

    def __init__(self, source: Strategy[T], whence: str, predicate: Callable[[T], bool]) -> None:
        self.source = source
        self.whence = whence
        self.predicate = predicate

    def new_value(self, runner: TestRunner) -> FilterValueTree[T]:
        tree = self.source.new_value(runner)
        if not self.predicate(tree.current()):
            raise ValueRejected(self.whence)
        return FilterValueTree(tree, self.whence, self.predicate)

    def __repr__(self) -> str:
        return f"{self.source!r}.filter({self.whence!r})"


# ============================================================================
# FlatMap
# ============================================================================


class FlatMapValueTree[T, U](ValueTree[U]):
    """Tree over a value drawn from a strategy derived from an outer value.

    Shrinks the inner value first. When the inner value is exhausted, the
    outer ("meta") value is simplified and a new inner value regenerated from
    it; the old inner tree is kept as ``_final_complication`` so complicate()
    can restore it if the regenerated value turns out not to fail. Right after
    such a switch, complicate() first tries up to ``config.cases`` fresh
    regenerations, each charged to the runner's regeneration budget.
    """

    def __init__(
        self,
        runner: TestRunner,
        meta: ValueTree[T],
        fn: Callable[[T], Strategy[U]],
    ) -> None:
        self._runner = runner
        self._meta = meta
        self._fn = fn
        self._current: ValueTree[U] = fn(meta.current()).new_value(runner)
        self._final_complication: ValueTree[U] | None = None
        self._complicate_regen_remaining = 0

    def _regenerate(self) -> ValueTree[U] | None:
        try:
            return self._fn(self._meta.current()).new_value(self._runner)
        except ValueRejected as rejection:
            logger.debug("flat_map regeneration rejected at %s", rejection.whence)
            try:
                self._runner.reject_local(rejection.whence)
            except TestAborted as e:
                # Exhausting the clone's budget only ends this regeneration
                logger.debug("flat_map regeneration abandoned: %s", e)
            return None

    def current(self) -> U:
        return self._current.current()

    def simplify(self) -> bool:
        self._complicate_regen_remaining = 0

        if self._current.simplify():
            # The meta value can no longer be rolled back past this point
            self._final_complication = None
            return True
        if not self._meta.simplify():
            return False

        regenerated = self._regenerate()
        if regenerated is None:
            return False
        self._final_complication = self._current
        self._current = regenerated
        self._complicate_regen_remaining = self._runner.config.cases
        return True

    def complicate(self) -> bool:
        if self._complicate_regen_remaining > 0:
            if self._runner.flat_map_regen():
                self._complicate_regen_remaining -= 1
                regenerated = self._regenerate()
                if regenerated is not None:
                    self._current = regenerated
                    return True
            else:
                self._complicate_regen_remaining = 0

        if self._current.complicate():
            return True
        if self._meta.complicate() and self._final_complication is not None:
            self._current = self._final_complication
            self._final_complication = None
            return True
        return False


class FlatMap[T, U](Strategy[U]):
    """Strategy produced by Strategy.flat_map()."""

    def __init__(self, source: Strategy[T], fn: Callable[[T], Strategy[U]]) -> None:
        self.source = source
        self.fn = fn

    def new_value(self, runner: TestRunner) -> FlatMapValueTree[T, U]:
        meta = self.source.new_value(runner)
        return FlatMapValueTree(runner.partial_clone(), meta, self.fn)

    def __repr__(self) -> str:
        return f"{self.source!r}.flat_map({getattr(self.fn, '__name__', self.fn)!r})"
