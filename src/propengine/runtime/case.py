"""Single test-case execution and outcome classification.

run_case() is the one catch boundary of the engine: whatever the code under
test raises during this call is turned into a CaseResult instead of
propagating. An explicit verdict (CaseRejected / CaseFailed, raised or
returned) is taken as-is; any other Exception is treated as an abnormal
termination and becomes a failure carrying the exception's message, exactly
as if the test had reported CaseFailed with that message.

BaseExceptions that are not Exceptions (KeyboardInterrupt, SystemExit,
GeneratorExit) are never intercepted.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from propengine.constants import UNKNOWN_PANIC_MESSAGE
from propengine.enums import CaseStatus
from propengine.errors import CaseFailed, CaseRejected

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ["CaseResult", "panic_message", "run_case"]


@dataclass(frozen=True, slots=True)
class CaseResult:
    """Outcome of one invocation of the code under test.

    Attributes:
        status: PASSED, REJECTED or FAILED
        message: Rejection whence for REJECTED, failure reason for FAILED,
            empty for PASSED
    """

    status: CaseStatus
    message: str = ""

    @property
    def passed(self) -> bool:
        """True when the test accepted the input."""
        return self.status is CaseStatus.PASSED


_PASSED = CaseResult(CaseStatus.PASSED)


def panic_message(exc: BaseException) -> str:
    """Extract the text of an exception raised by a test.

    The message is the exception's own rendering, ``str(exc)``, so
    multi-argument exceptions such as UnicodeDecodeError or OSError report
    their full text. A single bytes argument is decoded as UTF-8 instead of
    being shown as a bytes literal. Exceptions that render as empty text,
    such as a bare ``assert`` failure, yield a fixed placeholder.

    Example:
        >>> panic_message(AssertionError("not less than 5"))
        'not less than 5'
        >>> panic_message(AssertionError())
        '<unknown panic value>'
    """
    match exc.args:
        case (bytes() as payload,):
            text = payload.decode("utf-8", errors="replace")
        case _:
            text = str(exc)
    return text or UNKNOWN_PANIC_MESSAGE


def _classify(outcome: object) -> CaseResult:
    match outcome:
        case CaseRejected(whence=whence):
            return CaseResult(CaseStatus.REJECTED, whence)
        case CaseFailed(reason=reason):
            return CaseResult(CaseStatus.FAILED, reason)
        case _:
            return _PASSED


def run_case[T](test: Callable[[T], object], value: T) -> CaseResult:
    """Invoke test on value and classify the outcome.

    Args:
        test: Code under test. Signals rejection or failure by raising or
            returning CaseRejected / CaseFailed; any other return value
            means success.
        value: Generated input

    Returns:
        Classified outcome; never raises for Exceptions from test
    """
    try:
        outcome = test(value)
    except (CaseRejected, CaseFailed) as verdict:
        return _classify(verdict)
    except Exception as e:  # noqa: BLE001 - every test exception is a failure verdict
        return CaseResult(CaseStatus.FAILED, panic_message(e))
    return _classify(outcome)
