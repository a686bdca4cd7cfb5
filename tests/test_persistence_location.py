"""Tests for persistence/location.py: FailurePersistence.resolve().

Python 3.13+.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pytest

from propengine.enums import PersistenceMode
from propengine.persistence import FailurePersistence


@dataclass(frozen=True)
class ProjectPaths:
    """Directory layout used by the resolution tests."""

    project_root: Path
    package_dir: Path
    sub_dir: Path
    package_file: Path
    sub_file: Path
    misplaced_file: Path


@pytest.fixture
def paths(tmp_path: Path) -> ProjectPaths:
    """Layout: outside/ holds a misplaced file, project/ has a pyproject.toml."""
    project_root = tmp_path / "project"
    package_dir = project_root / "pkg"
    sub_dir = package_dir / "sub"
    sub_dir.mkdir(parents=True)
    (project_root / "pyproject.toml").write_text("[project]\n", encoding="utf-8")
    outside = tmp_path / "outside"
    outside.mkdir()
    return ProjectPaths(
        project_root=project_root,
        package_dir=package_dir,
        sub_dir=sub_dir,
        package_file=package_dir / "test_a.py",
        sub_file=sub_dir / "test_b.py",
        misplaced_file=outside / "test_c.py",
    )


class TestConstructors:
    """Test named constructors and validation."""

    def test_default_is_with_root(self) -> None:
        """The default policy resolves against the project root."""
        persistence = FailurePersistence()

        assert persistence.mode is PersistenceMode.WITH_ROOT
        assert persistence.markers == ("pyproject.toml", "setup.py", "setup.cfg")

    def test_modes(self) -> None:
        """Each constructor sets its mode."""
        assert FailurePersistence.off().mode is PersistenceMode.OFF
        assert FailurePersistence.direct("x").mode is PersistenceMode.DIRECT
        assert FailurePersistence.with_source("x").mode is PersistenceMode.WITH_SOURCE
        assert FailurePersistence.with_root("x").mode is PersistenceMode.WITH_ROOT

    def test_mode_from_string(self) -> None:
        """A mode given as its string value is normalized to the enum."""
        persistence = FailurePersistence(mode="direct", path="x")  # type: ignore[arg-type]

        assert persistence.mode is PersistenceMode.DIRECT

    def test_unknown_mode_rejected(self) -> None:
        """Modes outside the enumeration raise ValueError."""
        with pytest.raises(ValueError, match="bogus"):
            FailurePersistence(mode="bogus", path="x")  # type: ignore[arg-type]

    def test_with_root_requires_markers(self) -> None:
        """WITH_ROOT without marker names is rejected."""
        with pytest.raises(ValueError, match="marker"):
            FailurePersistence.with_root("x", markers=())


class TestResolve:
    """Test file location resolution for every mode."""

    def test_off_never_resolves(self, paths: ProjectPaths) -> None:
        """OFF has no file, with or without a source."""
        assert FailurePersistence.off().resolve(None) is None
        assert FailurePersistence.off().resolve(paths.sub_file) is None

    def test_direct_ignores_source(self, paths: ProjectPaths) -> None:
        """DIRECT always uses the configured path."""
        persistence = FailurePersistence.direct("bar.txt")

        assert persistence.resolve(None) == Path("bar.txt")
        assert persistence.resolve(paths.sub_file) == Path("bar.txt")

    def test_with_source_next_to_source(self, paths: ProjectPaths) -> None:
        """WITH_SOURCE resolves in the source file's directory."""
        persistence = FailurePersistence.with_source("bar.txt")

        assert persistence.resolve(paths.sub_file) == paths.sub_dir / "bar.txt"

    def test_with_source_absolute_path(self, paths: ProjectPaths) -> None:
        """An absolute configured path stays absolute."""
        persistence = FailurePersistence.with_source("/foo/bar.txt")

        assert persistence.resolve(paths.sub_file) == Path("/foo/bar.txt")

    def test_with_source_without_source(self, caplog: pytest.LogCaptureFixture) -> None:
        """Without a source file the raw path is used, with a warning."""
        with caplog.at_level(logging.WARNING):
            resolved = FailurePersistence.with_source("bar.txt").resolve(None)

        assert resolved == Path("bar.txt")
        assert "no source file known" in caplog.text

    def test_with_root_from_subdirectory(self, paths: ProjectPaths) -> None:
        """A file deep below the root resolves at the root."""
        persistence = FailurePersistence.with_root("bar.txt")

        assert persistence.resolve(paths.sub_file) == paths.project_root / "bar.txt"
        assert persistence.resolve(paths.package_file) == paths.project_root / "bar.txt"

    def test_with_root_nearest_marker_wins(self, paths: ProjectPaths) -> None:
        """The closest ancestor holding a marker is chosen."""
        (paths.package_dir / "setup.cfg").write_text("", encoding="utf-8")
        persistence = FailurePersistence.with_root("bar.txt")

        assert persistence.resolve(paths.sub_file) == paths.package_dir / "bar.txt"

    def test_with_root_custom_markers(self, paths: ProjectPaths) -> None:
        """Marker file names are configurable."""
        (paths.sub_dir / "ROOT").write_text("", encoding="utf-8")
        persistence = FailurePersistence.with_root("bar.txt", markers=("ROOT",))

        assert persistence.resolve(paths.sub_file) == paths.sub_dir / "bar.txt"

    def test_with_root_marker_must_be_file(self, paths: ProjectPaths) -> None:
        """A directory named like a marker does not count."""
        (paths.sub_dir / "ROOT").mkdir()
        persistence = FailurePersistence.with_root("bar.txt", markers=("ROOT", "pyproject.toml"))

        assert persistence.resolve(paths.sub_file) == paths.project_root / "bar.txt"

    def test_with_root_falls_back_to_source(
        self, paths: ProjectPaths, caplog: pytest.LogCaptureFixture
    ) -> None:
        """No marker anywhere above -> behaves like WITH_SOURCE, with a warning."""
        persistence = FailurePersistence.with_root("bar.txt", markers=("no-such-marker.toml",))

        with caplog.at_level(logging.WARNING):
            resolved = persistence.resolve(paths.misplaced_file)

        assert resolved == paths.misplaced_file.parent / "bar.txt"
        assert "failed to find" in caplog.text

    def test_with_root_absolute_path(self, paths: ProjectPaths) -> None:
        """Absolute paths stay absolute whether or not a root is found."""
        persistence = FailurePersistence.with_root("/foo/bar.txt")

        assert persistence.resolve(paths.package_file) == Path("/foo/bar.txt")
        assert persistence.resolve(paths.misplaced_file) == Path("/foo/bar.txt")

    def test_with_root_without_source(self, caplog: pytest.LogCaptureFixture) -> None:
        """Without a source file the raw path is used, with a warning."""
        with caplog.at_level(logging.WARNING):
            resolved = FailurePersistence.with_root("bar.txt").resolve(None)

        assert resolved == Path("bar.txt")
        assert "no source file known" in caplog.text
