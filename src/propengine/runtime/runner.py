"""TestRunner: orchestrates generation, execution, shrinking and persistence.

A run proceeds through three phases:

    REPLAY    Each seed from the persistence file (in file order) drives one
              case. A failure here is a known regression and is raised
              immediately without being persisted again.
    GENERATE  Fresh seeds are drawn from the runner's stream until the
              required number of cases have passed. The first failure is
              shrunk, persisted, and raised.
    DONE      run() returns None.

Rejections never fail a test directly. A value-construction rejection
(ValueRejected) is charged to the local budget, a test-level rejection
(CaseRejected) to the global budget; exhausting either raises TestAborted.

Thread Safety:
    A TestRunner is not thread-safe; each test run owns one. The only state
    shared between a runner and its partial clones is the regeneration
    counter, which is an atomic SharedCounter.

Python 3.13+.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from propengine.config import Config, default_config
from propengine.constants import TOO_MANY_GLOBAL_REJECTS, TOO_MANY_LOCAL_REJECTS
from propengine.core.counter import SharedCounter
from propengine.core.rng import TestRng
from propengine.enums import CaseStatus
from propengine.errors import TestAborted, TestFailed, ValueRejected
from propengine.persistence.store import load_persisted_failures, save_persisted_failure
from propengine.runtime.case import run_case
from propengine.runtime.shrink import shrink

if TYPE_CHECKING:
    from collections.abc import Callable

    from propengine.strategy.tree import Strategy, ValueTree

__all__ = ["TestRunner"]

logger = logging.getLogger(__name__)


class TestRunner:
    """State used when running a property test.

    Args:
        config: Run configuration. Defaults to default_config(), which is
            resolved from the environment once per process.
        rng: Random stream for seed generation. Defaults to a stream seeded
            from OS entropy; pass TestRng.from_seed(...) for a fully
            reproducible run.

    Example:
        >>> from propengine.persistence import FailurePersistence
        >>> from propengine.strategy import integers
        >>> runner = TestRunner(Config(failure_persistence=FailurePersistence.off()))
        >>> def positive(v: int) -> None:
        ...     assert v > 0, "not positive"
        >>> runner.run(integers(1, 100), positive)
        >>> runner.successes
        256
    """

    __test__ = False

    def __init__(self, config: Config | None = None, rng: TestRng | None = None) -> None:
        self._config = config if config is not None else default_config()
        self._rng = rng if rng is not None else TestRng.from_entropy()
        self._successes = 0
        self._local_rejects = 0
        self._global_rejects = 0
        self._local_reject_detail: dict[str, int] = {}
        self._global_reject_detail: dict[str, int] = {}
        self._flat_map_regens = SharedCounter()
        self._source_file: Path | None = None

    def partial_clone(self) -> TestRunner:
        """Fresh runner sharing this runner's config, source file and regeneration budget.

        Per-run counters start from zero. The clone's stream is seeded from
        this runner's stream, so clones created while generating a case are
        as reproducible as the case itself.
        """
        clone = TestRunner(self._config, TestRng.from_seed(self._rng.gen_seed()))
        clone._flat_map_regens = self._flat_map_regens
        clone._source_file = self._source_file
        return clone

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> Config:
        """Configuration of this runner."""
        return self._config

    @property
    def rng(self) -> TestRng:
        """Random stream strategies draw from."""
        return self._rng

    @property
    def successes(self) -> int:
        """Number of cases that have passed so far."""
        return self._successes

    @property
    def local_rejects(self) -> int:
        """Number of value-construction rejections so far."""
        return self._local_rejects

    @property
    def global_rejects(self) -> int:
        """Number of test-level rejections so far."""
        return self._global_rejects

    @property
    def local_reject_detail(self) -> dict[str, int]:
        """Copy of the local rejection histogram (whence -> count)."""
        return dict(self._local_reject_detail)

    @property
    def global_reject_detail(self) -> dict[str, int]:
        """Copy of the global rejection histogram (whence -> count)."""
        return dict(self._global_reject_detail)

    @property
    def flat_map_regens(self) -> int:
        """Regeneration attempts made so far by this runner and its clones."""
        return self._flat_map_regens.value

    @property
    def source_file(self) -> Path | None:
        """Source file used to resolve the persistence file, if set."""
        return self._source_file

    def set_source_file(self, source: str | Path) -> None:
        """Set the source file used to locate the failure persistence file.

        See FailurePersistence for how this value is used. The
        property_test decorator calls this with the test function's file.
        """
        self._source_file = Path(source)

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    def run[T](self, strategy: Strategy[T], test: Callable[[T], object]) -> None:
        """Run test cases against test, choosing inputs via strategy.

        Persisted failing cases are replayed first. If a freshly generated
        case fails, the minimal failing case is found, its seed persisted,
        and the failure raised.

        Raises:
            TestAborted: If a rejection budget was exhausted.
            TestFailed: With the failure reason and minimal failing value.
        """
        persist_path = self._config.failure_persistence.resolve(self._source_file)

        persisted = load_persisted_failures(persist_path)
        if persisted:
            logger.debug("Replaying %d persisted seed(s) from %s", len(persisted), persist_path)
        saved_rng = self._rng
        try:
            for seed in persisted:
                logger.debug("Replaying persisted seed %s", seed)
                self._rng = TestRng.from_seed(seed)
                self._gen_and_run_case(strategy, test)
        finally:
            self._rng = saved_rng

        while self._successes < self._config.cases:
            # Reseed from a drawn seed so the seed alone reproduces this case
            seed = self._rng.gen_seed()
            self._rng = TestRng.from_seed(seed)
            try:
                self._gen_and_run_case(strategy, test)
            except TestFailed as failure:
                logger.debug("Case with seed %s failed: %s", seed, failure.reason)
                save_persisted_failure(persist_path, seed, failure.value)
                raise

    def _gen_and_run_case[T](self, strategy: Strategy[T], test: Callable[[T], object]) -> None:
        try:
            case = strategy.new_value(self)
        except ValueRejected as rejection:
            self.reject_local(rejection.whence)
            return
        if self.run_one(case, test):
            self._successes += 1

    def run_one[T](self, case: ValueTree[T], test: Callable[[T], object]) -> bool:
        """Run one specific test case against this runner.

        Returns:
            True if the case passed, False if test rejected the input

        Raises:
            TestAborted: If the rejection pushed the global budget over.
            TestFailed: With the minimized failing case, if it failed.
        """
        result = run_case(test, case.current())
        match result.status:
            case CaseStatus.PASSED:
                return True
            case CaseStatus.REJECTED:
                self._reject_global(result.message)
                return False
            case CaseStatus.FAILED:
                reason, value = shrink(case, result.message, test)
                raise TestFailed(reason, value)

    # ------------------------------------------------------------------
    # Budgets
    # ------------------------------------------------------------------

    def reject_local(self, whence: str) -> None:
        """Account for a local rejection from whence.

        Raises:
            TestAborted: If the local rejection budget is already exhausted.
        """
        if self._local_rejects >= self._config.max_local_rejects:
            raise TestAborted(TOO_MANY_LOCAL_REJECTS)
        self._local_rejects += 1
        self._local_reject_detail[whence] = self._local_reject_detail.get(whence, 0) + 1

    def _reject_global(self, whence: str) -> None:
        if self._global_rejects >= self._config.max_global_rejects:
            raise TestAborted(TOO_MANY_GLOBAL_REJECTS)
        self._global_rejects += 1
        self._global_reject_detail[whence] = self._global_reject_detail.get(whence, 0) + 1

    def flat_map_regen(self) -> bool:
        """Count one regeneration attempt; return whether it is within budget."""
        return self._flat_map_regens.fetch_add(1) < self._config.max_flat_map_regens

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        lines = [
            f"\tsuccesses: {self._successes}",
            f"\tlocal rejects: {self._local_rejects}",
        ]
        lines.extend(
            f"\t\t{count} times at {whence}"
            for whence, count in sorted(self._local_reject_detail.items())
        )
        lines.append(f"\tglobal rejects: {self._global_rejects}")
        lines.extend(
            f"\t\t{count} times at {whence}"
            for whence, count in sorted(self._global_reject_detail.items())
        )
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return (
            f"TestRunner(config={self._config!r}, successes={self._successes}, "
            f"local_rejects={self._local_rejects}, global_rejects={self._global_rejects}, "
            f"rng={self._rng!r}, flat_map_regens={self._flat_map_regens!r}, "
            f"local_reject_detail={self._local_reject_detail!r}, "
            f"global_reject_detail={self._global_reject_detail!r}, "
            f"source_file={self._source_file!r})"
        )
