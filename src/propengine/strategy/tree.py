"""Value tree and strategy interfaces.

A Strategy produces a ValueTree from a runner's random stream. The tree holds
one generated candidate and can move toward simpler candidates (simplify) or
back toward more complex ones (complicate). The engine drives trees through
exactly these three operations; it never constructs them itself.

Contract for ValueTree implementations:
    current()     Current candidate value. Must not mutate the tree.
    simplify()    Move to a simpler candidate. Returns False when no further
                  simplification is possible (the tree is left unchanged).
    complicate()  Undo part of the last simplification after it turned out
                  to be too aggressive. Returns False when there is nothing
                  left to undo.
Repeated simplify/complicate calls must eventually return False; the shrink
engine enforces no iteration bound of its own.

Python 3.13+.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from propengine.runtime.runner import TestRunner

__all__ = ["Strategy", "ValueTree"]


class ValueTree[T](ABC):
    """Stateful handle over one generated candidate value."""

    @abstractmethod
    def current(self) -> T:
        """Return the current candidate value."""

    @abstractmethod
    def simplify(self) -> bool:
        """Attempt to move to a simpler candidate; return whether it moved."""

    @abstractmethod
    def complicate(self) -> bool:
        """Attempt to move back toward a more complex candidate; return whether it moved."""


class Strategy[T](ABC):
    """Policy for generating value trees of type T."""

    @abstractmethod
    def new_value(self, runner: TestRunner) -> ValueTree[T]:
        """Generate a new value tree using runner's random stream.

        Raises:
            ValueRejected: If no usable value could be produced this attempt.
                The runner charges this to the local rejection budget.
        """

    def map[U](self, fn: Callable[[T], U]) -> Strategy[U]:
        """Strategy whose values are fn applied to this strategy's values."""
        from propengine.strategy.combinators import Map  # noqa: PLC0415 - circular

        return Map(self, fn)

    def filter(self, whence: str, predicate: Callable[[T], bool]) -> Strategy[T]:
        """Strategy producing only values for which predicate holds.

        Args:
            whence: Label identifying this filter in rejection histograms
            predicate: Acceptance test for generated values
        """
        from propengine.strategy.combinators import Filter  # noqa: PLC0415 - circular

        return Filter(self, whence, predicate)

    def flat_map[U](self, fn: Callable[[T], Strategy[U]]) -> Strategy[U]:
        """Strategy deriving a second strategy from each generated value."""
        from propengine.strategy.combinators import FlatMap  # noqa: PLC0415 - circular

        return FlatMap(self, fn)
