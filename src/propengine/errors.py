"""Exception hierarchy for propengine.

Two families of outcomes flow through the engine:

- TestCaseError describes one invocation of the code under test. Tests may
  either raise or return an instance; the case runner treats both the same.
- TestError describes the whole test. TestRunner.run() raises it when a
  rejection budget is exhausted or a minimized counterexample is found.

ValueRejected is raised by strategies while constructing a value tree and is
accounted against the local rejection budget.

Hierarchy:
    PropEngineError (base)
    ├─ TestCaseError (per-invocation outcome)
    │  ├─ CaseRejected (input unsuitable, carries whence)
    │  └─ CaseFailed (code under test failed, carries reason)
    ├─ ValueRejected (value construction declined, carries whence)
    └─ TestError (whole-test outcome)
       ├─ TestAborted (budget exhausted, carries reason)
       └─ TestFailed (carries reason and minimal failing value)

Classes whose names start with "Test" set ``__test__ = False`` so pytest does
not try to collect them when they are imported into test modules.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import final

__all__ = [
    "CaseFailed",
    "CaseRejected",
    "PropEngineError",
    "TestAborted",
    "TestCaseError",
    "TestError",
    "TestFailed",
    "ValueRejected",
]


class PropEngineError(Exception):
    """Base exception for all propengine errors."""


class TestCaseError(PropEngineError):
    """Non-successful completion of a single test case.

    Not raised by the engine itself. Code under test raises (or returns) one
    of the concrete subclasses to report its verdict explicitly.
    """

    __test__ = False


@final
class CaseRejected(TestCaseError):
    """The input was not valid for the test case.

    This does not count as a failure (nor a success); the runner charges it
    to the global rejection budget and generates a new input.

    Attributes:
        whence: Location and context of the rejection, suitable for
            formatting like ``"Foo did X at {whence}"``.
    """

    def __init__(self, whence: str) -> None:
        """Initialize CaseRejected.

        Args:
            whence: Provenance label used as the rejection histogram key
        """
        super().__init__(f"Input rejected at {whence}")
        self.whence = whence


@final
class CaseFailed(TestCaseError):
    """The code under test failed the test.

    Attributes:
        reason: Human-readable description of where and/or why it failed
    """

    def __init__(self, reason: str) -> None:
        """Initialize CaseFailed.

        Args:
            reason: Failure description carried through to TestFailed
        """
        super().__init__(f"Case failed: {reason}")
        self.reason = reason


@final
class ValueRejected(PropEngineError):
    """A strategy declined to produce a usable value for this attempt.

    Attributes:
        whence: Provenance label used as the local rejection histogram key
    """

    def __init__(self, whence: str) -> None:
        """Initialize ValueRejected.

        Args:
            whence: Provenance label, typically the filter description
        """
        super().__init__(f"Value rejected at {whence}")
        self.whence = whence


class TestError(PropEngineError):
    """A failure state from running the test cases of a single test."""

    __test__ = False


@final
class TestAborted(TestError):
    """The test was aborted, e.g. because too many inputs were rejected.

    Attributes:
        reason: Why the test was aborted
    """

    def __init__(self, reason: str) -> None:
        """Initialize TestAborted.

        Args:
            reason: Abort reason, e.g. "Too many global rejects"
        """
        super().__init__(f"Test aborted: {reason}")
        self.reason = reason

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TestAborted):
            return NotImplemented
        return self.reason == other.reason

    def __hash__(self) -> int:
        return hash((TestAborted, self.reason))


@final
class TestFailed(TestError):
    """A failing test case was found.

    Attributes:
        reason: Where and/or why the test failed
        value: Minimal input found to reproduce the failure
    """

    def __init__(self, reason: str, value: object) -> None:
        """Initialize TestFailed.

        Args:
            reason: Failure reason from the last failing observation
            value: Minimized failing input
        """
        super().__init__(f"Test failed: {reason}; minimal failing input: {value!r}")
        self.reason = reason
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TestFailed):
            return NotImplemented
        return self.reason == other.reason and self.value == other.value

    def __hash__(self) -> int:
        return hash((TestFailed, self.reason))
