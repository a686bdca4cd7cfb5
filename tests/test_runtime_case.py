"""Tests for runtime/case.py: run_case() outcome classification.

Python 3.13+.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from propengine.enums import CaseStatus
from propengine.errors import CaseFailed, CaseRejected
from propengine.runtime import CaseResult, panic_message, run_case


class TestRunCase:
    """Test run_case() for every kind of outcome."""

    def test_none_is_pass(self) -> None:
        """Returning None passes."""
        result = run_case(lambda v: None, 1)

        assert result == CaseResult(CaseStatus.PASSED)
        assert result.passed

    def test_other_return_values_pass(self) -> None:
        """Any return value other than a verdict passes, even False."""
        assert run_case(lambda v: False, 1).passed
        assert run_case(lambda v: "fail", 1).passed

    def test_raised_rejection(self) -> None:
        """Raised CaseRejected -> REJECTED with its whence."""

        def test(v: int) -> None:
            raise CaseRejected("odd input")

        assert run_case(test, 1) == CaseResult(CaseStatus.REJECTED, "odd input")

    def test_returned_rejection(self) -> None:
        """Returned CaseRejected is treated like a raised one."""
        assert run_case(lambda v: CaseRejected("here"), 1) == CaseResult(
            CaseStatus.REJECTED, "here"
        )

    def test_raised_failure(self) -> None:
        """Raised CaseFailed -> FAILED with its reason."""

        def test(v: int) -> None:
            raise CaseFailed("too big")

        assert run_case(test, 1) == CaseResult(CaseStatus.FAILED, "too big")

    def test_returned_failure(self) -> None:
        """Returned CaseFailed is treated like a raised one."""
        assert run_case(lambda v: CaseFailed("bad"), 1) == CaseResult(CaseStatus.FAILED, "bad")

    def test_assertion_becomes_failure(self) -> None:
        """An AssertionError's message becomes the failure reason."""

        def test(v: int) -> None:
            assert v < 5, "not less than 5"

        assert run_case(test, 3).passed
        assert run_case(test, 7) == CaseResult(CaseStatus.FAILED, "not less than 5")

    def test_arbitrary_exception_becomes_failure(self) -> None:
        """Unexpected exceptions are failures, not crashes."""

        def test(v: int) -> None:
            _ = 1 // v

        result = run_case(test, 0)

        assert result.status is CaseStatus.FAILED
        assert "division" in result.message

    def test_payloadless_exception(self) -> None:
        """Exceptions without a text payload use the placeholder message."""

        def test(v: int) -> None:
            assert v < 0

        assert run_case(test, 1) == CaseResult(CaseStatus.FAILED, "<unknown panic value>")

    def test_decode_error_reason(self) -> None:
        """A UnicodeDecodeError fails with its full message, not its encoding name."""

        def test(v: bytes) -> None:
            v.decode("utf-8")

        result = run_case(test, b"\xff")

        assert result.status is CaseStatus.FAILED
        assert result.message != "utf-8"
        assert "invalid start byte" in result.message

    def test_keyboard_interrupt_propagates(self) -> None:
        """BaseExceptions outside Exception are not intercepted."""

        def test(v: int) -> None:
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            run_case(test, 1)

    @given(st.integers())
    def test_value_passed_through(self, value: int) -> None:
        """Property: the test receives exactly the given value."""
        seen: list[int] = []
        run_case(seen.append, value)

        assert seen == [value]


class TestPanicMessage:
    """Test panic_message() text extraction."""

    def test_string_payload(self) -> None:
        """A single string argument is the message."""
        assert panic_message(ValueError("boom")) == "boom"

    def test_bytes_payload(self) -> None:
        """A lone bytes argument is decoded rather than shown as a literal."""
        assert panic_message(RuntimeError(b"caf\xc3\xa9")) == "café"

    def test_multiple_arguments_use_full_text(self) -> None:
        """Exceptions built from several arguments report their own rendering."""
        with pytest.raises(UnicodeDecodeError) as exc_info:
            b"\xff".decode("utf-8")

        message = panic_message(exc_info.value)

        assert message == str(exc_info.value)
        assert "invalid start byte" in message

    def test_os_error_text(self, tmp_path: Path) -> None:
        """OSError's errno and strerror arguments render as one message."""
        missing = tmp_path / "missing.txt"
        with pytest.raises(FileNotFoundError) as exc_info:
            missing.read_text(encoding="utf-8")

        message = panic_message(exc_info.value)

        assert message.startswith("[Errno 2]")
        assert "missing.txt" in message

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [(ValueError(42), "42"), (KeyError("k"), "'k'"), (ValueError(None), "None")],
    )
    def test_non_text_argument(self, exc: Exception, expected: str) -> None:
        """Non-text arguments are rendered the way str() renders them."""
        assert panic_message(exc) == expected

    @pytest.mark.parametrize("exc", [ValueError(), AssertionError(), ValueError("")])
    def test_empty_text(self, exc: Exception) -> None:
        """Exceptions that render as empty text yield the placeholder."""
        assert panic_message(exc) == "<unknown panic value>"
