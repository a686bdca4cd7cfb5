"""Minimization of a failing value tree.

Greedy hill-climbing over the tree's simplify/complicate operations:

1. The initial failure is the best-known failing case.
2. Simplify. If the tree cannot simplify, the initial failure is minimal.
3. Evaluate the simplified value:
   - passes or is rejected: the step went too far, complicate. Stop when
     the tree cannot complicate.
   - fails: record it as the best-known case and simplify further. Stop
     when the tree cannot simplify.

A rejection while shrinking counts as a pass: it says the simpler input is
not a valid counterexample either way. Rejections here are not charged to
any budget.

The result is the value of the last failing observation, which is not
necessarily where the tree ends up pointing.

Python 3.13+.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from propengine.enums import CaseStatus
from propengine.runtime.case import run_case

if TYPE_CHECKING:
    from collections.abc import Callable

    from propengine.strategy.tree import ValueTree

__all__ = ["shrink"]

logger = logging.getLogger(__name__)


def shrink[T](
    tree: ValueTree[T],
    reason: str,
    test: Callable[[T], object],
) -> tuple[str, T]:
    """Search for a locally-minimal failing value.

    Args:
        tree: Value tree whose current value just failed
        reason: Failure reason of that observation
        test: Code under test

    Returns:
        (reason, value) of the last failing observation
    """
    best_reason, best_value = reason, tree.current()
    if not tree.simplify():
        return best_reason, best_value

    steps = 0
    while True:
        steps += 1
        value = tree.current()
        result = run_case(test, value)

        if result.status is CaseStatus.FAILED:
            best_reason, best_value = result.message, value
            if not tree.simplify():
                break
        elif not tree.complicate():
            break

    logger.debug("Shrinking finished after %d step(s): %r", steps, best_value)
    return best_reason, best_value
