"""Run configuration for TestRunner.

Provides a single frozen dataclass holding every knob of a test run, plus the
environment-override resolution that produces the process default.

Resolution:
    load_config_from_env(environ) is a pure function of the mapping it is
    given. default_config() applies it to os.environ exactly once per process
    and caches the result; TestRunner() calls it only when no explicit Config
    is passed, so nothing deeper in the engine reads process state.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import dataclasses
import functools
import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from propengine.constants import (
    DEFAULT_CASES,
    DEFAULT_MAX_FLAT_MAP_REGENS,
    DEFAULT_MAX_GLOBAL_REJECTS,
    DEFAULT_MAX_LOCAL_REJECTS,
    ENV_CASES,
    ENV_MAX_FLAT_MAP_REGENS,
    ENV_MAX_GLOBAL_REJECTS,
    ENV_MAX_LOCAL_REJECTS,
    ENV_PREFIX,
    U32_LIMIT,
)
from propengine.persistence.location import FailurePersistence

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["Config", "default_config", "load_config_from_env"]

logger = logging.getLogger(__name__)

# Environment variable -> Config field
_ENV_FIELDS: dict[str, str] = {
    ENV_CASES: "cases",
    ENV_MAX_LOCAL_REJECTS: "max_local_rejects",
    ENV_MAX_GLOBAL_REJECTS: "max_global_rejects",
    ENV_MAX_FLAT_MAP_REGENS: "max_flat_map_regens",
}


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable configuration for how a test should be run.

    Constructing ``Config()`` uses the built-in defaults and ignores the
    environment; use default_config() for the environment-aware default.
    Derive variants with ``dataclasses.replace(config, ...)``.

    Attributes:
        cases: Successful cases required for the test to pass (default: 256).
            Replayed persisted cases that pass count toward this.
        max_local_rejects: Value-construction rejections tolerated before the
            test aborts (default: 65536).
        max_global_rejects: Test-level rejections (CaseRejected) tolerated
            before the test aborts (default: 1024).
        max_flat_map_regens: Regeneration attempts shared by all FlatMap trees
            of one test (default: 1_000_000).
        failure_persistence: Where failing seeds are stored (default:
            next to the nearest project root, in "propengine-failures.txt").

    Example:
        >>> config = Config.with_cases(42)
        >>> config.cases
        42
        >>> quiet = dataclasses.replace(config, failure_persistence=FailurePersistence.off())
        >>> quiet.failure_persistence.resolve(None) is None
        True
    """

    cases: int = DEFAULT_CASES
    max_local_rejects: int = DEFAULT_MAX_LOCAL_REJECTS
    max_global_rejects: int = DEFAULT_MAX_GLOBAL_REJECTS
    max_flat_map_regens: int = DEFAULT_MAX_FLAT_MAP_REGENS
    failure_persistence: FailurePersistence = field(default_factory=FailurePersistence)

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If any counter is not an unsigned 32-bit integer, or
                failure_persistence is not a FailurePersistence.
        """
        for name in _ENV_FIELDS.values():
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                msg = f"{name} must be an integer, got {value!r}"
                raise ValueError(msg)
            if not 0 <= value < U32_LIMIT:
                msg = f"{name} must be in [0, 2**32), got {value}"
                raise ValueError(msg)
        if not isinstance(self.failure_persistence, FailurePersistence):
            msg = (
                "failure_persistence must be a FailurePersistence, "
                f"got {type(self.failure_persistence).__name__}"
            )
            raise ValueError(msg)

    @classmethod
    def with_cases(cls, cases: int) -> Config:
        """Default configuration differing only in the number of cases."""
        return dataclasses.replace(default_config(), cases=cases)


def _parse_u32(value: str) -> int | None:
    if not (value.isascii() and value.isdigit()):
        return None
    parsed = int(value)
    return parsed if parsed < U32_LIMIT else None


def load_config_from_env(environ: Mapping[str, str]) -> Config:
    """Build a Config from defaults overridden by environment variables.

    Recognized variables: PROPENGINE_CASES, PROPENGINE_MAX_LOCAL_REJECTS,
    PROPENGINE_MAX_GLOBAL_REJECTS, PROPENGINE_MAX_FLAT_MAP_REGENS.
    Values that are not unsigned 32-bit integers are ignored with a warning.
    Other variables under the PROPENGINE_ prefix are reported and ignored.

    Args:
        environ: Environment mapping (usually os.environ)

    Returns:
        Resolved configuration
    """
    base = Config()
    overrides: dict[str, int] = {}

    for var, value in environ.items():
        name = _ENV_FIELDS.get(var)
        if name is None:
            if var.startswith(ENV_PREFIX):
                logger.warning("Ignoring unknown env-var %s.", var)
            continue

        parsed = _parse_u32(value)
        if parsed is None:
            logger.warning(
                "The env-var %s=%s can't be parsed as u32, using default of %d.",
                var,
                value,
                getattr(base, name),
            )
            continue
        overrides[name] = parsed

    return dataclasses.replace(base, **overrides) if overrides else base


@functools.cache
def default_config() -> Config:
    """Process-wide default configuration, resolved once from os.environ."""
    config = load_config_from_env(os.environ)
    logger.debug("Resolved default config: %r", config)
    return config
