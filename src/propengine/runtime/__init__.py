"""Test execution runtime.

Provides the case runner (one invocation, exception capture), the shrink
engine, and TestRunner, which ties generation, execution, shrinking and
persistence together.

Python 3.13+.
"""

from .case import CaseResult, panic_message, run_case
from .runner import TestRunner
from .shrink import shrink

__all__ = [
    "CaseResult",
    "TestRunner",
    "panic_message",
    "run_case",
    "shrink",
]
