"""
Installation Orchestrator - runs the installation plan for a transition

Execution rules:
- NOOP runs nothing and leaves the version store untouched
- Actions run strictly in catalog order, one at a time
- A failed FATAL action aborts the plan; the version is not recorded, so the
  whole plan runs again on the next startup
- A failed SOFT action is recorded and the plan continues
- Without a fatal failure the running version is recorded; a failed write is
  itself a fatal failure
"""

import logging
from datetime import datetime
from typing import List, Optional

from extsetup.core.setup.catalog import ActionCatalog
from extsetup.core.setup.executor import ActionExecutor
from extsetup.core.setup.models import (
    ActionError,
    ActionErrorCode,
    FailurePolicy,
    OrchestrationResult,
    Transition,
)
from extsetup.core.setup.resolver import normalize_version
from extsetup.core.setup.version_store import VersionStore

logger = logging.getLogger(__name__)

RECORD_VERSION_STEP = "record-installed-version"


class InstallationOrchestrator:
    """Drives the action catalog for a resolved transition"""

    def __init__(
        self,
        catalog: ActionCatalog,
        version_store: VersionStore,
        current_version: str,
        executor: Optional[ActionExecutor] = None,
        previous_version: Optional[str] = None,
    ):
        """
        Initialize orchestrator

        Args:
            catalog: Declared actions
            version_store: Store receiving the version after a successful run
            current_version: Version of the running extension
            executor: Action executor (default: ActionExecutor())
            previous_version: Recorded version the transition was resolved from

        Raises:
            ValueError: If current_version is blank
        """
        current = normalize_version(current_version)
        if current is None:
            raise ValueError("Current version must not be blank")

        self.catalog = catalog
        self.version_store = version_store
        self.current_version = current
        self.executor = executor or ActionExecutor()
        self.previous_version = previous_version

    def run(self, transition: Transition) -> OrchestrationResult:
        """
        Execute the installation plan

        Args:
            transition: Resolved transition

        Returns:
            OrchestrationResult describing what ran and what failed
        """
        start_time = datetime.now()

        if transition == Transition.NOOP:
            logger.debug(f"Version {self.current_version} already installed, nothing to do")
            return self._result(transition, start_time)

        plan = self.catalog.actions_for(transition)
        logger.info(
            f"Starting {transition.value} to {self.current_version}: "
            f"{len(plan)} action(s) [{', '.join(a.name for a in plan)}]"
        )

        ran_actions: List[str] = []
        soft_failures: List[ActionError] = []

        for action in plan:
            outcome = self.executor.execute(action)
            ran_actions.append(action.name)

            if outcome.error is None:
                continue

            if outcome.error.is_fatal:
                skipped = len(plan) - len(ran_actions)
                logger.error(
                    f"Fatal action failure: {action.name} - {outcome.error.cause}. "
                    f"Skipping {skipped} remaining action(s); version {self.current_version} not recorded"
                )
                return self._result(
                    transition,
                    start_time,
                    ran_actions=ran_actions,
                    soft_failures=soft_failures,
                    fatal_failure=outcome.error,
                )

            logger.warning(f"Soft action failure: {action.name} - {outcome.error.cause}. Continuing")
            soft_failures.append(outcome.error)

        try:
            self.version_store.write(self.current_version)
        except Exception as e:
            logger.error(f"Failed to record installed version {self.current_version}: {e}", exc_info=True)
            return self._result(
                transition,
                start_time,
                ran_actions=ran_actions,
                soft_failures=soft_failures,
                fatal_failure=ActionError(
                    action_name=RECORD_VERSION_STEP,
                    failure_policy=FailurePolicy.FATAL,
                    error_code=ActionErrorCode.STORE_WRITE_FAILED,
                    cause=str(e) or type(e).__name__,
                    exception_type=type(e).__name__,
                ),
            )

        if soft_failures:
            logger.warning(
                f"Completed {transition.value} to {self.current_version} "
                f"with {len(soft_failures)} soft failure(s)"
            )
        else:
            logger.info(f"Completed {transition.value} to {self.current_version}")

        return self._result(
            transition,
            start_time,
            ran_actions=ran_actions,
            soft_failures=soft_failures,
            version_written=True,
        )

    def _result(
        self,
        transition: Transition,
        start_time: datetime,
        ran_actions: Optional[List[str]] = None,
        soft_failures: Optional[List[ActionError]] = None,
        fatal_failure: Optional[ActionError] = None,
        version_written: bool = False,
    ) -> OrchestrationResult:
        duration_ms = max(0, int((datetime.now() - start_time).total_seconds() * 1000))
        return OrchestrationResult(
            transition=transition,
            current_version=self.current_version,
            previous_version=self.previous_version,
            ran_actions=ran_actions or [],
            soft_failures=soft_failures or [],
            fatal_failure=fatal_failure,
            version_written=version_written,
            duration_ms=duration_ms,
        )
