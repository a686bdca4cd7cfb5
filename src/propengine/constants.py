"""Shared constants for propengine.

Centralizes run-budget defaults, the environment override namespace, and the
fixed strings used in diagnostics and the persistence file. Placing them here
avoids circular imports between the config, persistence and runtime packages.

Constants are grouped by domain:
- Run budgets: Defaults for the four numeric Config knobs
- Environment: Override variable names
- Persistence: Default file name, project-root markers, file header
- Messages: Abort reasons and placeholder text

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Run budgets
    "DEFAULT_CASES",
    "DEFAULT_MAX_LOCAL_REJECTS",
    "DEFAULT_MAX_GLOBAL_REJECTS",
    "DEFAULT_MAX_FLAT_MAP_REGENS",
    "U32_LIMIT",
    # Environment
    "ENV_PREFIX",
    "ENV_CASES",
    "ENV_MAX_LOCAL_REJECTS",
    "ENV_MAX_GLOBAL_REJECTS",
    "ENV_MAX_FLAT_MAP_REGENS",
    # Persistence
    "DEFAULT_PERSISTENCE_FILE",
    "DEFAULT_ROOT_MARKERS",
    "PERSISTENCE_HEADER",
    "SEED_RECORD_TAG",
    "PERSISTENCE_LOCK_TIMEOUT",
    # Messages
    "TOO_MANY_LOCAL_REJECTS",
    "TOO_MANY_GLOBAL_REJECTS",
    "UNKNOWN_PANIC_MESSAGE",
]

# ============================================================================
# RUN BUDGETS
# ============================================================================

# Successful cases required for a test to pass. Replayed persisted cases that
# pass also count toward this quota.
DEFAULT_CASES: int = 256

# Value-construction rejections (e.g. Filter declining a draw) tolerated
# across the whole test before it aborts.
DEFAULT_MAX_LOCAL_REJECTS: int = 65536

# Predicate rejections (CaseRejected) tolerated across the whole test.
DEFAULT_MAX_GLOBAL_REJECTS: int = 1024

# Regeneration attempts shared by every FlatMap tree spawned from one root
# runner. Bounds the exponential blow-up of nested regenerating combinators.
DEFAULT_MAX_FLAT_MAP_REGENS: int = 1_000_000

# Exclusive upper bound for every counter and seed word (unsigned 32-bit).
U32_LIMIT: int = 2**32

# ============================================================================
# ENVIRONMENT
# ============================================================================

ENV_PREFIX: str = "PROPENGINE_"
ENV_CASES: str = "PROPENGINE_CASES"
ENV_MAX_LOCAL_REJECTS: str = "PROPENGINE_MAX_LOCAL_REJECTS"
ENV_MAX_GLOBAL_REJECTS: str = "PROPENGINE_MAX_GLOBAL_REJECTS"
ENV_MAX_FLAT_MAP_REGENS: str = "PROPENGINE_MAX_FLAT_MAP_REGENS"

# ============================================================================
# PERSISTENCE
# ============================================================================

DEFAULT_PERSISTENCE_FILE: str = "propengine-failures.txt"

# Files whose presence marks a directory as the project root for
# PersistenceMode.WITH_ROOT. Overridable per FailurePersistence.
DEFAULT_ROOT_MARKERS: tuple[str, ...] = ("pyproject.toml", "setup.py", "setup.cfg")

SEED_RECORD_TAG: str = "xs"

# Seconds to wait for the in-process persistence lock before falling back to
# unlocked file access. A run stuck behind another thread never hangs.
PERSISTENCE_LOCK_TIMEOUT: float = 5.0

PERSISTENCE_HEADER: str = (
    "# Seeds for failure cases propengine has generated in the past. It is\n"
    "# automatically read and these particular cases re-run before any\n"
    "# novel cases are generated.\n"
    "#\n"
    "# It is recommended to check this file in to source control so that\n"
    "# everyone who runs the test benefits from these saved cases.\n"
)

# ============================================================================
# MESSAGES
# ============================================================================

TOO_MANY_LOCAL_REJECTS: str = "Too many local rejects"
TOO_MANY_GLOBAL_REJECTS: str = "Too many global rejects"

# Failure reason used when a test raises an exception whose text is empty.
UNKNOWN_PANIC_MESSAGE: str = "<unknown panic value>"
