"""Integer strategy with binary-search shrinking.

Python 3.13+.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from propengine.strategy.tree import Strategy, ValueTree

if TYPE_CHECKING:
    from propengine.runtime.runner import TestRunner

__all__ = ["BinarySearch", "IntegerRange", "integers"]


class BinarySearch(ValueTree[int]):
    """Shrinks an integer toward a target by bisection.

    Works on the distance from the target, so values on either side of it
    shrink symmetrically. ``hi`` is the smallest distance known to be
    reachable by simplification (the last accepted candidate), ``lo`` the
    smallest distance not yet ruled out.

    Example:
        >>> tree = BinarySearch(start=100)
        >>> tree.simplify(), tree.current()
        (True, 50)
        >>> tree.complicate(), tree.current()
        (True, 75)
    """

    __slots__ = ("_curr", "_hi", "_lo", "_sign", "_target")

    def __init__(self, start: int, target: int = 0) -> None:
        self._target = target
        self._sign = 1 if start >= target else -1
        self._lo = 0
        self._curr = abs(start - target)
        self._hi = self._curr

    def _reposition(self) -> bool:
        mid = self._lo + (self._hi - self._lo) // 2
        if mid == self._curr:
            return False
        self._curr = mid
        return True

    def current(self) -> int:
        return self._target + self._sign * self._curr

    def simplify(self) -> bool:
        if self._hi <= self._lo:
            return False
        self._hi = self._curr
        return self._reposition()

    def complicate(self) -> bool:
        if self._hi <= self._lo:
            return False
        self._lo = self._curr + 1
        return self._reposition()

    def __repr__(self) -> str:
        return f"BinarySearch(current={self.current()})"


class IntegerRange(Strategy[int]):
    """Uniform integers in [min_value, max_value], shrinking toward zero.

    When zero is outside the range, values shrink toward the bound closest
    to zero instead.
    """

    __slots__ = ("max_value", "min_value")

    def __init__(self, min_value: int, max_value: int) -> None:
        if min_value > max_value:
            msg = f"min_value ({min_value}) must not exceed max_value ({max_value})"
            raise ValueError(msg)
        self.min_value = min_value
        self.max_value = max_value

    def new_value(self, runner: TestRunner) -> BinarySearch:
        start = runner.rng.randint(self.min_value, self.max_value)
        target = min(max(0, self.min_value), self.max_value)
        return BinarySearch(start, target)

    def __repr__(self) -> str:
        return f"integers({self.min_value}, {self.max_value})"


def integers(min_value: int, max_value: int) -> IntegerRange:
    """Integers in the inclusive range [min_value, max_value]."""
    return IntegerRange(min_value, max_value)
