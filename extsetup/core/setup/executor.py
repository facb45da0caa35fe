"""Runs a single setup action and captures its outcome"""

import logging
from datetime import datetime

from extsetup.core.setup.catalog import SetupAction
from extsetup.core.setup.models import ActionError, ActionErrorCode, ActionOutcome, ActionResult

logger = logging.getLogger(__name__)


class ActionExecutor:
    """Executes actions without letting an action exception escape.

    A failure value returned by the action and an exception raised by it end
    up in the same shape: an ActionError tagged with the action's declared
    failure policy.
    """

    def execute(self, action: SetupAction) -> ActionOutcome:
        """
        Execute an action

        Args:
            action: Action to run

        Returns:
            ActionOutcome, with ``error`` set when the action failed
        """
        start_time = datetime.now()
        logger.info(f"Running action: {action.name}")

        try:
            result = action.run()
            if not isinstance(result, ActionResult):
                raise TypeError(
                    f"Action {action.name} returned {type(result).__name__}, expected ActionResult"
                )
        except Exception as e:
            logger.error(f"Action raised an unexpected error: {action.name} - {e}", exc_info=True)
            return ActionOutcome(
                action_name=action.name,
                success=False,
                duration_ms=self._elapsed_ms(start_time),
                error=ActionError(
                    action_name=action.name,
                    failure_policy=action.failure_policy,
                    error_code=ActionErrorCode.UNEXPECTED_EXCEPTION,
                    cause=str(e) or type(e).__name__,
                    exception_type=type(e).__name__,
                ),
            )

        duration_ms = self._elapsed_ms(start_time)

        if not result.success:
            cause = result.error or f"Action {action.name} failed"
            logger.warning(f"Action failed: {action.name} ({action.failure_policy.value}) - {cause}")
            return ActionOutcome(
                action_name=action.name,
                success=False,
                duration_ms=duration_ms,
                message=result.message,
                error=ActionError(
                    action_name=action.name,
                    failure_policy=action.failure_policy,
                    error_code=ActionErrorCode.ACTION_FAILED,
                    cause=cause,
                ),
            )

        if result.message:
            logger.info(f"Action completed: {action.name} - {result.message}")
        else:
            logger.info(f"Action completed: {action.name}")

        return ActionOutcome(
            action_name=action.name,
            success=True,
            duration_ms=duration_ms,
            message=result.message,
        )

    @staticmethod
    def _elapsed_ms(start_time: datetime) -> int:
        return max(0, int((datetime.now() - start_time).total_seconds() * 1000))
