from typing import List, Optional

import pytest

from extsetup.core.setup.catalog import ActionCatalog, FunctionAction
from extsetup.core.setup.exceptions import StoreError
from extsetup.core.setup.models import (
    ActionErrorCode,
    ActionResult,
    AppliesOn,
    FailurePolicy,
    Transition,
)
from extsetup.core.setup.orchestrator import RECORD_VERSION_STEP, InstallationOrchestrator
from extsetup.core.setup.resolver import resolve
from extsetup.core.setup.version_store import InMemoryVersionStore

CURRENT = "5.0.0"


class _FailingWriteStore(InMemoryVersionStore):
    def write(self, version: str) -> None:
        raise StoreError("disk full")


def _build_catalog(calls: List[str], failures: Optional[dict] = None) -> ActionCatalog:
    """Six actions in the default order; ``failures`` maps name -> 'value' | 'raise'"""
    failures = failures or {}

    def make(name):
        def run():
            calls.append(name)
            mode = failures.get(name)
            if mode == "raise":
                raise RuntimeError(f"{name} exploded")
            if mode == "value":
                return ActionResult.fail(f"{name} failed")
            return ActionResult.ok()
        return run

    declared = [
        ("register-extension-section", AppliesOn.ALWAYS, FailurePolicy.FATAL),
        ("register-primary-dashboard", AppliesOn.ALWAYS, FailurePolicy.FATAL),
        ("register-secondary-dashboard-in-host-developer-area", AppliesOn.FRESH_INSTALL_ONLY, FailurePolicy.SOFT),
        ("grant-default-access", AppliesOn.FRESH_INSTALL_ONLY, FailurePolicy.SOFT),
        ("apply-configuration-group", AppliesOn.ALWAYS, FailurePolicy.FATAL),
        ("ensure-application-settings", AppliesOn.ALWAYS, FailurePolicy.SOFT),
    ]
    return ActionCatalog(
        [
            FunctionAction(name, make(name), applies_on=applies_on, failure_policy=policy)
            for name, applies_on, policy in declared
        ]
    )


def _run(installed, calls, failures=None, store=None):
    store = store if store is not None else InMemoryVersionStore(installed)
    orchestrator = InstallationOrchestrator(
        catalog=_build_catalog(calls, failures),
        version_store=store,
        current_version=CURRENT,
        previous_version=installed,
    )
    return orchestrator.run(resolve(installed, CURRENT)), store


def test_fresh_install_runs_all_actions_and_records_version():
    calls = []
    result, store = _run(None, calls)

    assert result.transition == Transition.FRESH_INSTALL
    assert calls == [
        "register-extension-section",
        "register-primary-dashboard",
        "register-secondary-dashboard-in-host-developer-area",
        "grant-default-access",
        "apply-configuration-group",
        "ensure-application-settings",
    ]
    assert result.ran_actions == calls
    assert result.success
    assert result.version_written
    assert store.read() == "5.0.0"


def test_upgrade_skips_fresh_install_only_actions():
    calls = []
    result, store = _run("4.9.0", calls)

    assert result.transition == Transition.UPGRADE
    assert calls == [
        "register-extension-section",
        "register-primary-dashboard",
        "apply-configuration-group",
        "ensure-application-settings",
    ]
    assert result.previous_version == "4.9.0"
    assert store.read() == "5.0.0"


def test_noop_runs_nothing_and_does_not_write():
    calls = []
    result, store = _run("5.0.0", calls)

    assert result.transition == Transition.NOOP
    assert calls == []
    assert result.ran_actions == []
    assert result.fatal_failure is None
    assert not result.version_written
    assert store.writes == []


def test_repeated_noop_is_a_true_noop():
    calls = []
    store = InMemoryVersionStore("5.0.0")
    orchestrator = InstallationOrchestrator(_build_catalog(calls), store, CURRENT)
    for _ in range(3):
        orchestrator.run(Transition.NOOP)
    assert calls == []
    assert store.writes == []


def test_fatal_failure_in_upgrade_stops_plan_and_keeps_version():
    calls = []
    result, store = _run("4.9.0", calls, failures={"apply-configuration-group": "value"})

    # action 3 of 4 fails; action 4 never runs
    assert calls == [
        "register-extension-section",
        "register-primary-dashboard",
        "apply-configuration-group",
    ]
    assert not result.success
    assert result.fatal_failure.action_name == "apply-configuration-group"
    assert result.fatal_failure.error_code == ActionErrorCode.ACTION_FAILED
    assert not result.version_written
    assert store.writes == []
    assert store.read() == "4.9.0"


def test_fatal_exception_is_handled_like_a_fatal_value():
    calls = []
    result, store = _run(None, calls, failures={"register-extension-section": "raise"})

    assert calls == ["register-extension-section"]
    assert result.fatal_failure.error_code == ActionErrorCode.UNEXPECTED_EXCEPTION
    assert result.fatal_failure.exception_type == "RuntimeError"
    assert store.read() is None


def test_soft_failures_do_not_block_remaining_actions_or_version_write():
    calls = []
    result, store = _run(
        None,
        calls,
        failures={"register-secondary-dashboard-in-host-developer-area": "value", "grant-default-access": "raise"},
    )

    assert len(calls) == 6
    assert result.success
    assert [f.action_name for f in result.soft_failures] == [
        "register-secondary-dashboard-in-host-developer-area",
        "grant-default-access",
    ]
    assert all(f.failure_policy == FailurePolicy.SOFT for f in result.soft_failures)
    assert store.read() == "5.0.0"


def test_fatal_after_soft_failure_keeps_soft_failures_in_result():
    calls = []
    result, store = _run(
        None,
        calls,
        failures={"grant-default-access": "value", "apply-configuration-group": "value"},
    )

    assert calls[-1] == "apply-configuration-group"
    assert "ensure-application-settings" not in calls
    assert [f.action_name for f in result.soft_failures] == ["grant-default-access"]
    assert result.fatal_failure.action_name == "apply-configuration-group"
    assert store.writes == []


def test_store_write_failure_is_fatal():
    calls = []
    result, _ = _run(None, calls, store=_FailingWriteStore())

    assert len(calls) == 6
    assert not result.success
    assert not result.version_written
    assert result.fatal_failure.action_name == RECORD_VERSION_STEP
    assert result.fatal_failure.error_code == ActionErrorCode.STORE_WRITE_FAILED
    assert result.fatal_failure.failure_policy == FailurePolicy.FATAL
    assert "disk full" in result.fatal_failure.cause


def test_second_run_after_failure_reruns_full_plan():
    calls = []
    store = InMemoryVersionStore(None)
    failures = {"apply-configuration-group": "value"}
    _run(None, calls, failures=failures, store=store)
    assert store.read() is None

    failures.clear()
    calls.clear()
    result, _ = _run(None, calls, failures=failures, store=store)
    assert len(calls) == 6
    assert result.success
    assert store.read() == "5.0.0"


def test_padded_current_version_is_recorded_stripped():
    store = InMemoryVersionStore(None)
    orchestrator = InstallationOrchestrator(_build_catalog([]), store, " 5.0.0 ")
    result = orchestrator.run(Transition.FRESH_INSTALL)

    assert result.current_version == "5.0.0"
    assert store.writes == ["5.0.0"]


def test_blank_current_version_is_rejected():
    with pytest.raises(ValueError):
        InstallationOrchestrator(_build_catalog([]), InMemoryVersionStore(None), "  ")
