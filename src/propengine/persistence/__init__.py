"""Failure persistence: where seeds are stored and how they are read back.

Exports:
    FailurePersistence: Location policy (off / with_root / with_source / direct)
    load_persisted_failures: Read seeds from a persistence file
    save_persisted_failure: Append a seed and the value it shrinks to
    PERSISTENCE_LOCK: Process-wide lock guarding persistence file access

Python 3.13+.
"""

from .location import FailurePersistence
from .store import (
    PERSISTENCE_LOCK,
    format_record,
    load_persisted_failures,
    parse_record,
    save_persisted_failure,
)

__all__ = [
    "PERSISTENCE_LOCK",
    "FailurePersistence",
    "format_record",
    "load_persisted_failures",
    "parse_record",
    "save_persisted_failure",
]
