"""
Startup entry point - install or upgrade the extension on host start

Called once per host process start. It never raises: a failed setup is
logged and reported in the returned result, and the host keeps starting with
the extension integration incomplete until a later run succeeds.
"""

import logging
from typing import Optional

from extsetup.core.config import ExtSetupSettings, get_settings
from extsetup.core.setup.catalog import ActionCatalog
from extsetup.core.setup.models import (
    ActionError,
    ActionErrorCode,
    FailurePolicy,
    OrchestrationResult,
    Transition,
)
from extsetup.core.setup.orchestrator import InstallationOrchestrator
from extsetup.core.setup.resolver import TransitionResolver, normalize_version
from extsetup.core.setup.version_store import VersionStore, read_installed_version

logger = logging.getLogger(__name__)

STARTUP_STEP = "startup"


def _startup_failure(
    current_version: Optional[str],
    error_code: ActionErrorCode,
    cause: str,
    transition: Transition = Transition.NOOP,
    previous_version: Optional[str] = None,
    exception_type: Optional[str] = None,
) -> OrchestrationResult:
    """Fatal result for a run that failed outside of any action"""
    return OrchestrationResult(
        transition=transition,
        current_version=current_version or "",
        previous_version=previous_version,
        fatal_failure=ActionError(
            action_name=STARTUP_STEP,
            failure_policy=FailurePolicy.FATAL,
            error_code=error_code,
            cause=cause,
            exception_type=exception_type,
        ),
    )


def handle_install_and_upgrade(
    current_version: str,
    version_store: VersionStore,
    catalog: ActionCatalog,
) -> OrchestrationResult:
    """
    Resolve the transition for this startup and run its plan

    Args:
        current_version: Version of the running extension
        version_store: Store holding the recorded version
        catalog: Declared setup actions

    Returns:
        OrchestrationResult of the run; a blank current_version is a fatal
        failure and nothing runs
    """
    current = normalize_version(current_version)
    if current is None:
        logger.error(f"Extension setup skipped: running version is blank ({current_version!r})")
        return _startup_failure(
            current_version,
            ActionErrorCode.INVALID_VERSION,
            "Running extension version is blank",
        )

    installed_version = read_installed_version(version_store)
    transition = TransitionResolver.resolve(installed_version, current)

    if transition == Transition.FRESH_INSTALL:
        logger.info(f"Installing extension version {current}")
    elif transition == Transition.UPGRADE:
        logger.info(f"Upgrading extension from {installed_version} to {current}")
    else:
        logger.info(f"Extension version {current} is up to date")

    try:
        orchestrator = InstallationOrchestrator(
            catalog=catalog,
            version_store=version_store,
            current_version=current,
            previous_version=installed_version,
        )
        result = orchestrator.run(transition)
    except Exception as e:
        logger.error(f"Unexpected error during extension setup: {e}", exc_info=True)
        return _startup_failure(
            current,
            ActionErrorCode.UNEXPECTED_EXCEPTION,
            str(e) or type(e).__name__,
            transition=transition,
            previous_version=installed_version,
            exception_type=type(e).__name__,
        )

    if result.fatal_failure is not None:
        logger.error(
            f"Extension setup incomplete: {result.fatal_failure.action_name} failed "
            f"({result.fatal_failure.cause}). It will be retried on the next startup"
        )
    for failure in result.soft_failures:
        logger.warning(f"Extension setup step did not complete: {failure.action_name} - {failure.cause}")

    return result


def on_startup(
    current_version: Optional[str] = None,
    settings: Optional[ExtSetupSettings] = None,
) -> OrchestrationResult:
    """
    Run extension setup against the configured host

    Args:
        current_version: Running extension version (default: package version)
        settings: Settings (default: global settings)

    Returns:
        OrchestrationResult of the run; invalid settings are a fatal failure
    """
    from extsetup import __version__
    from extsetup.core.host.actions import build_default_catalog
    from extsetup.core.host.file_host import FileHost
    from extsetup.core.setup.version_store import AppSettingVersionStore

    if current_version is None:
        current_version = __version__

    try:
        settings = settings or get_settings()
        host = FileHost(settings.host_config_path)
        version_store = AppSettingVersionStore(host, settings.version_key)
        catalog = build_default_catalog(host, settings)
    except Exception as e:
        logger.error(f"Extension setup could not start: {e}", exc_info=True)
        return _startup_failure(
            normalize_version(current_version),
            ActionErrorCode.UNEXPECTED_EXCEPTION,
            str(e) or type(e).__name__,
            exception_type=type(e).__name__,
        )

    return handle_install_and_upgrade(
        current_version=current_version,
        version_store=version_store,
        catalog=catalog,
    )
