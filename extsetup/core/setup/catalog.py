"""
Action catalog - the ordered declaration of install and upgrade actions

Actions are declared once, in order. Order is significant: an action may
depend on host state established by an earlier one (a dashboard cannot be
registered in a section that does not exist yet). The catalog never runs
anything; it only answers which actions apply to a transition.
"""

from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

from extsetup.core.setup.exceptions import CatalogError
from extsetup.core.setup.models import ActionResult, AppliesOn, FailurePolicy, Transition


class SetupAction:
    """Base class for setup actions

    Subclasses set ``name``, ``applies_on`` and ``failure_policy`` and
    implement ``run``. Every action must be idempotent: running it against
    a host where it already took effect changes nothing.
    """

    name: str = ""
    applies_on: AppliesOn = AppliesOn.ALWAYS
    failure_policy: FailurePolicy = FailurePolicy.FATAL

    def run(self) -> ActionResult:
        """Apply the action and report the outcome as a value"""
        raise NotImplementedError

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, "
            f"applies_on={self.applies_on.value}, failure_policy={self.failure_policy.value})"
        )


ActionFunc = Callable[[], Union[ActionResult, bool, None]]


class FunctionAction(SetupAction):
    """Adapts a plain callable to the action contract

    The callable may return an ActionResult, a bool, or None (success).
    """

    def __init__(
        self,
        name: str,
        func: ActionFunc,
        applies_on: AppliesOn = AppliesOn.ALWAYS,
        failure_policy: FailurePolicy = FailurePolicy.FATAL,
    ):
        self.name = name
        self.applies_on = applies_on
        self.failure_policy = failure_policy
        self._func = func

    def run(self) -> ActionResult:
        value = self._func()
        if isinstance(value, ActionResult):
            return value
        if value is None or value is True:
            return ActionResult.ok()
        if value is False:
            return ActionResult.fail(f"Action {self.name} reported failure")
        raise TypeError(
            f"Action {self.name} returned unsupported value of type {type(value).__name__}"
        )


def _applies(action: SetupAction, transition: Transition) -> bool:
    if transition == Transition.FRESH_INSTALL:
        return action.applies_on in (AppliesOn.FRESH_INSTALL_ONLY, AppliesOn.ALWAYS)
    if transition == Transition.UPGRADE:
        return action.applies_on == AppliesOn.ALWAYS
    return False


class ActionCatalog:
    """Immutable, ordered collection of setup actions"""

    def __init__(self, actions: Sequence[SetupAction]):
        """
        Initialize catalog

        Args:
            actions: Actions in declaration order

        Raises:
            CatalogError: If an action has no name or a name is declared twice
        """
        seen = set()
        for action in actions:
            if not action.name or not action.name.strip():
                raise CatalogError(f"Action without a name: {action!r}")
            if action.name in seen:
                raise CatalogError(f"Action declared twice: {action.name}")
            seen.add(action.name)
        self._actions: Tuple[SetupAction, ...] = tuple(actions)

    def actions_for(self, transition: Transition) -> List[SetupAction]:
        """
        Build the installation plan for a transition

        Args:
            transition: Resolved transition

        Returns:
            Applicable actions in declaration order (empty for NOOP)
        """
        return [action for action in self._actions if _applies(action, transition)]

    def get(self, name: str) -> Optional[SetupAction]:
        for action in self._actions:
            if action.name == name:
                return action
        return None

    @property
    def names(self) -> List[str]:
        return [action.name for action in self._actions]

    def __iter__(self) -> Iterator[SetupAction]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)
