"""Decorator wiring a test function and a strategy into a TestRunner.

Example:
    >>> from propengine import property_test
    >>> from propengine.strategy import integers
    >>>
    >>> @property_test(integers(0, 1000))
    ... def test_square_is_non_negative(v: int) -> None:
    ...     assert v * v >= 0

The decorated function takes no arguments, so test collectors such as pytest
call it like any other test. A failing property raises TestFailed, whose
message carries the failure reason and the minimal failing input.

Python 3.13+.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import TYPE_CHECKING

from propengine.runtime.runner import TestRunner

if TYPE_CHECKING:
    from collections.abc import Callable

    from propengine.config import Config
    from propengine.strategy.tree import Strategy

__all__ = ["property_test"]

logger = logging.getLogger(__name__)


def property_test[T](
    strategy: Strategy[T],
    *,
    config: Config | None = None,
) -> Callable[[Callable[[T], object]], Callable[[], None]]:
    """Turn a one-argument test function into a property test.

    Args:
        strategy: Source of generated inputs
        config: Run configuration (default: default_config())

    Returns:
        Decorator producing a zero-argument test function

    Raises (from the decorated function):
        TestAborted: If a rejection budget was exhausted
        TestFailed: If a failing input was found
    """

    def decorator(func: Callable[[T], object]) -> Callable[[], None]:
        try:
            source = inspect.getsourcefile(func)
        except TypeError:
            source = None

        @functools.wraps(func)
        def wrapper() -> None:
            runner = TestRunner(config)
            if source is not None:
                runner.set_source_file(source)
            try:
                runner.run(strategy, func)
            finally:
                logger.debug("%s finished:\n%s", func.__qualname__, runner)

        # Hide the generated argument from signature-based introspection
        # (pytest would otherwise look for a fixture named after it).
        wrapper.__signature__ = inspect.Signature()  # type: ignore[attr-defined]
        return wrapper

    return decorator
