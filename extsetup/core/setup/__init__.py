"""Extension Setup System

Decides on every host startup whether the extension must be installed,
upgraded, or left alone, and runs the matching ordered set of idempotent
actions exactly once per version transition.

Components:
- resolver: Transition resolution (fresh install / upgrade / no-op)
- catalog: Ordered action declarations filtered per transition
- executor: Single-action runner that turns failures into values
- orchestrator: Plan execution with fatal/soft failure policy
- version_store: Persistence of the installed version
- startup: Startup entry point
"""

from extsetup.core.setup.exceptions import (
    ExtSetupError,
    CatalogError,
    StoreError,
    HostError,
)
from extsetup.core.setup.models import (
    Transition,
    AppliesOn,
    FailurePolicy,
    ActionResult,
    ActionError,
    ActionErrorCode,
    ActionOutcome,
    OrchestrationResult,
)
from extsetup.core.setup.resolver import TransitionResolver, resolve
from extsetup.core.setup.catalog import ActionCatalog, FunctionAction, SetupAction
from extsetup.core.setup.executor import ActionExecutor
from extsetup.core.setup.orchestrator import InstallationOrchestrator
from extsetup.core.setup.version_store import (
    AppSettingVersionStore,
    InMemoryVersionStore,
    VersionStore,
    read_installed_version,
)
from extsetup.core.setup.startup import handle_install_and_upgrade, on_startup

__all__ = [
    # Exceptions
    "ExtSetupError",
    "CatalogError",
    "StoreError",
    "HostError",
    # Models
    "Transition",
    "AppliesOn",
    "FailurePolicy",
    "ActionResult",
    "ActionError",
    "ActionErrorCode",
    "ActionOutcome",
    "OrchestrationResult",
    # Engine
    "TransitionResolver",
    "resolve",
    "ActionCatalog",
    "FunctionAction",
    "SetupAction",
    "ActionExecutor",
    "InstallationOrchestrator",
    # Version store
    "AppSettingVersionStore",
    "InMemoryVersionStore",
    "VersionStore",
    "read_installed_version",
    # Entry points
    "handle_install_and_upgrade",
    "on_startup",
]
