"""Failure persistence file location policy.

FailurePersistence decides where (if anywhere) the seeds of failing cases are
stored. The decision depends on the configured mode and on the source file of
the test, which the harness records via TestRunner.set_source_file().

Resolution rules:
    OFF          No file; no I/O is ever performed.
    DIRECT       The configured path, used verbatim.
    WITH_SOURCE  Resolved against the source file's directory.
    WITH_ROOT    Resolved against the nearest ancestor of the source file
                 that contains one of the configured marker files.

Absolute configured paths stay absolute in every mode (pathlib join
semantics).

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from propengine.constants import DEFAULT_PERSISTENCE_FILE, DEFAULT_ROOT_MARKERS
from propengine.enums import PersistenceMode

__all__ = ["FailurePersistence"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FailurePersistence:
    """Immutable description of how failing cases are persisted.

    Prefer the named constructors over calling the class directly.

    Attributes:
        mode: Resolution policy
        path: File name or path fragment; ignored when mode is OFF
        markers: File names identifying a project root (WITH_ROOT only)

    Example:
        >>> FailurePersistence.direct("failures.txt").resolve(None)
        PosixPath('failures.txt')
        >>> FailurePersistence.off().resolve(Path("tests/test_x.py")) is None
        True
    """

    mode: PersistenceMode = PersistenceMode.WITH_ROOT
    path: str = DEFAULT_PERSISTENCE_FILE
    markers: tuple[str, ...] = DEFAULT_ROOT_MARKERS

    def __post_init__(self) -> None:
        """Validate the mode and marker list.

        Raises:
            ValueError: If mode is not a PersistenceMode value, or WITH_ROOT
                is configured without any marker file names.
        """
        object.__setattr__(self, "mode", PersistenceMode(self.mode))
        if self.mode is PersistenceMode.WITH_ROOT and not self.markers:
            msg = "WITH_ROOT persistence requires at least one marker file name"
            raise ValueError(msg)

    @classmethod
    def off(cls) -> FailurePersistence:
        """Completely disable persistence of failing test cases."""
        return cls(mode=PersistenceMode.OFF, path="")

    @classmethod
    def with_root(
        cls,
        path: str = DEFAULT_PERSISTENCE_FILE,
        markers: tuple[str, ...] = DEFAULT_ROOT_MARKERS,
    ) -> FailurePersistence:
        """Store next to the nearest project root above the source file."""
        return cls(mode=PersistenceMode.WITH_ROOT, path=path, markers=tuple(markers))

    @classmethod
    def with_source(cls, path: str) -> FailurePersistence:
        """Store in the directory of the test's source file."""
        return cls(mode=PersistenceMode.WITH_SOURCE, path=path)

    @classmethod
    def direct(cls, path: str) -> FailurePersistence:
        """Use the path as given, independent of the source file."""
        return cls(mode=PersistenceMode.DIRECT, path=path)

    def resolve(self, source: Path | None) -> Path | None:
        """Determine the persistence file location for a source file.

        Args:
            source: Source file of the test, if known

        Returns:
            Path of the persistence file, or None if persistence is off
        """
        match self.mode:
            case PersistenceMode.OFF:
                return None
            case PersistenceMode.DIRECT:
                return Path(self.path)
            case PersistenceMode.WITH_SOURCE:
                return self._resolve_with_source(source)
            case PersistenceMode.WITH_ROOT:
                return self._resolve_with_root(source)

    def _resolve_with_source(self, source: Path | None) -> Path:
        if source is None:
            logger.warning(
                "FailurePersistence WITH_SOURCE set, but no source file known; using %s",
                self.path,
            )
            return Path(self.path)
        return Path(source).parent / self.path

    def _resolve_with_root(self, source: Path | None) -> Path:
        if source is None:
            logger.warning(
                "FailurePersistence WITH_ROOT set, but no source file known; using %s",
                self.path,
            )
            return Path(self.path)

        for directory in Path(source).parents:
            if any((directory / marker).is_file() for marker in self.markers):
                return directory / self.path

        logger.warning(
            "FailurePersistence WITH_ROOT set, but failed to find any of %s above %s",
            ", ".join(self.markers),
            source,
        )
        return self._resolve_with_source(source)
