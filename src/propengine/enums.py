"""Enumerations for propengine type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class PersistenceMode(StrEnum):
    """How the failure persistence file location is determined.

    StrEnum provides automatic string conversion: str(PersistenceMode.OFF) == "off"
    """

    OFF = "off"
    """Persistence disabled; no file I/O is ever performed."""

    WITH_ROOT = "with_root"
    """Resolved against the nearest ancestor holding a project-root marker."""

    WITH_SOURCE = "with_source"
    """Resolved against the directory of the test's source file."""

    DIRECT = "direct"
    """Configured path used verbatim."""


class CaseStatus(StrEnum):
    """Classification of a single test invocation.

    StrEnum provides automatic string conversion: str(CaseStatus.PASSED) == "passed"
    """

    PASSED = "passed"
    """Test returned normally."""

    REJECTED = "rejected"
    """Test declined the input (neither success nor failure)."""

    FAILED = "failed"
    """Test reported failure or raised."""


__all__ = [
    "CaseStatus",
    "PersistenceMode",
]
