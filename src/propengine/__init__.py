"""propengine - property-based test execution engine.

Generates inputs from a strategy, runs a test function against them, shrinks
any failing input to a locally-minimal counterexample, and persists the seeds
of failing cases so they are replayed before new cases on the next run.

Public API:
    TestRunner - Runs a strategy against a test function
    Config - Immutable run configuration
    FailurePersistence - Where failing seeds are stored
    property_test - Decorator turning a one-argument function into a test
    default_config - Environment-aware default configuration

Exceptions:
    CaseRejected / CaseFailed - Verdicts a test may raise or return
    TestAborted / TestFailed - Outcomes raised by TestRunner.run()

Submodules:
    propengine.strategy - Strategy/ValueTree interfaces and basic strategies
    propengine.persistence - Persistence file location and format
    propengine.runtime - Case runner, shrink engine, TestRunner
    propengine.core - RWLock, SharedCounter, TestRng
"""

from .config import Config, default_config, load_config_from_env
from .core import Seed, TestRng
from .enums import CaseStatus, PersistenceMode
from .errors import (
    CaseFailed,
    CaseRejected,
    PropEngineError,
    TestAborted,
    TestCaseError,
    TestError,
    TestFailed,
    ValueRejected,
)
from .harness import property_test
from .persistence import FailurePersistence
from .runtime import TestRunner

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("propengine")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CaseFailed",
    "CaseRejected",
    "CaseStatus",
    "Config",
    "FailurePersistence",
    "PersistenceMode",
    "PropEngineError",
    "Seed",
    "TestAborted",
    "TestCaseError",
    "TestError",
    "TestFailed",
    "TestRng",
    "TestRunner",
    "ValueRejected",
    "__version__",
    "default_config",
    "load_config_from_env",
    "property_test",
]
