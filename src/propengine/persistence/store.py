"""Line-oriented store of previously failing seeds.

File format (UTF-8 text):

    # comment lines and trailing comments are ignored
    xs 1234 5678 9012 3456 # shrinks to <repr of minimal value>

Each data line holds the tag ``xs`` followed by the four seed words. The
trailing comment documents the value the seed shrinks to and is never parsed.

Loading is tolerant: a missing file means "no persisted failures", malformed
lines are skipped with a warning, and any other read error is logged and
treated as an empty file. Saving appends one record (writing the explanatory
header first when the file is new) and logs rather than raises on failure.

All file access goes through PERSISTENCE_LOCK: loads take the shared side,
appends the exclusive side. If the lock cannot be acquired within
PERSISTENCE_LOCK_TIMEOUT seconds the operation proceeds unlocked.

Python 3.13+.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack, contextmanager
from typing import TYPE_CHECKING

from propengine.constants import (
    PERSISTENCE_HEADER,
    PERSISTENCE_LOCK_TIMEOUT,
    SEED_RECORD_TAG,
    U32_LIMIT,
)
from propengine.core.rwlock import RWLock

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from propengine.core.rng import Seed

__all__ = [
    "PERSISTENCE_LOCK",
    "format_record",
    "load_persisted_failures",
    "parse_record",
    "save_persisted_failure",
]

logger = logging.getLogger(__name__)

# Process-wide: keeps one process's concurrent runs from interleaving appends
# or reading a half-written line. Separate processes rely on append-mode
# atomicity of the platform.
PERSISTENCE_LOCK = RWLock()


class _MalformedRecordError(ValueError):
    """Seed record with the right shape but unparsable words."""


class _UnknownRecordError(ValueError):
    """Line whose token count or tag is not a seed record."""

    def __init__(self, tag: str) -> None:
        super().__init__(tag)
        self.tag = tag


@contextmanager
def _locked(*, exclusive: bool) -> Generator[None]:
    """Hold PERSISTENCE_LOCK, or nothing if it is unavailable in time."""
    timeout = PERSISTENCE_LOCK_TIMEOUT
    with ExitStack() as stack:
        try:
            stack.enter_context(
                PERSISTENCE_LOCK.write(timeout) if exclusive else PERSISTENCE_LOCK.read(timeout)
            )
        except (RuntimeError, TimeoutError) as e:
            logger.debug("Persistence lock unavailable, proceeding without it: %s", e)
        yield


def _parse_word(token: str) -> int:
    if not (token.isascii() and token.isdigit()):
        raise _MalformedRecordError(token)
    word = int(token)
    if word >= U32_LIMIT:
        raise _MalformedRecordError(token)
    return word


def parse_record(line: str) -> Seed | None:
    """Parse one line of a persistence file.

    Args:
        line: Raw line, possibly with a trailing comment and newline

    Returns:
        The seed, or None for blank and comment-only lines

    Raises:
        ValueError: If the line is a malformed or unknown record. The
            message is suitable for a diagnostic.
    """
    data = line.split("#", 1)[0].strip()
    parts = data.split(" ")
    if len(parts) == 5 and parts[0] == SEED_RECORD_TAG:
        a, b, c, d = (_parse_word(token) for token in parts[1:])
        return (a, b, c, d)
    if len(parts) > 1:
        raise _UnknownRecordError(parts[0])
    return None


def format_record(seed: Seed, value: object) -> str:
    """Render the data line for seed, without trailing newline.

    Newlines and carriage returns in the value's repr become spaces so the
    file stays strictly line-oriented.
    """
    a, b, c, d = seed
    line = f"{SEED_RECORD_TAG} {a} {b} {c} {d} # shrinks to {value!r}"
    return line.replace("\n", " ").replace("\r", " ")


def load_persisted_failures(path: Path | None) -> list[Seed]:
    """Load the seeds recorded in the persistence file.

    Args:
        path: Persistence file, or None when persistence is off

    Returns:
        Seeds in file order; empty when the file is missing or unreadable
    """
    if path is None:
        return []

    seeds: list[Seed] = []
    try:
        with _locked(exclusive=False), path.open(encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, start=1):
                try:
                    seed = parse_record(line)
                except _UnknownRecordError as e:
                    logger.warning(
                        "%s:%d: unknown case type `%s` (corrupt file or newer propengine version?)",
                        path,
                        lineno,
                        e.tag,
                    )
                    continue
                except _MalformedRecordError:
                    logger.warning("%s:%d: unparsable line, ignoring", path, lineno)
                    continue
                if seed is not None:
                    seeds.append(seed)
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to open %s: %s", path, e)
        return []

    logger.debug("Loaded %d persisted seed(s) from %s", len(seeds), path)
    return seeds


def save_persisted_failure(path: Path | None, seed: Seed, value: object) -> None:
    """Append a failing seed to the persistence file.

    Args:
        path: Persistence file, or None when persistence is off
        seed: Seed that generated the failing case
        value: Minimized failing value, rendered with repr() as a comment
    """
    if path is None:
        return

    with _locked(exclusive=True):
        is_new = not path.is_file()
        payload = format_record(seed, value) + "\n"
        if is_new:
            payload = PERSISTENCE_HEADER + payload

        try:
            with path.open("a", encoding="utf-8") as out:
                out.write(payload)
        except OSError as e:
            logger.error("Failed to append to %s: %s", path, e)
            return

    if is_new:
        logger.warning("Saving this and future failures in %s", path)
