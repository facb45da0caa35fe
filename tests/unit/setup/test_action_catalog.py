import pytest

from extsetup.core.setup.catalog import ActionCatalog, FunctionAction
from extsetup.core.setup.exceptions import CatalogError
from extsetup.core.setup.models import ActionResult, AppliesOn, FailurePolicy, Transition


def _catalog() -> ActionCatalog:
    return ActionCatalog(
        [
            FunctionAction("register-extension-section", lambda: None),
            FunctionAction("register-primary-dashboard", lambda: None),
            FunctionAction(
                "register-secondary-dashboard-in-host-developer-area",
                lambda: None,
                applies_on=AppliesOn.FRESH_INSTALL_ONLY,
                failure_policy=FailurePolicy.SOFT,
            ),
            FunctionAction(
                "grant-default-access",
                lambda: None,
                applies_on=AppliesOn.FRESH_INSTALL_ONLY,
                failure_policy=FailurePolicy.SOFT,
            ),
            FunctionAction("apply-configuration-group", lambda: None),
            FunctionAction("ensure-application-settings", lambda: None, failure_policy=FailurePolicy.SOFT),
        ]
    )


def test_fresh_install_plan_keeps_declared_order_and_includes_everything():
    catalog = _catalog()
    names = [a.name for a in catalog.actions_for(Transition.FRESH_INSTALL)]
    assert names == catalog.names
    assert len(names) == 6


def test_upgrade_plan_excludes_fresh_install_only_actions():
    plan = _catalog().actions_for(Transition.UPGRADE)
    assert [a.name for a in plan] == [
        "register-extension-section",
        "register-primary-dashboard",
        "apply-configuration-group",
        "ensure-application-settings",
    ]
    assert all(a.applies_on == AppliesOn.ALWAYS for a in plan)


def test_noop_plan_is_empty():
    assert _catalog().actions_for(Transition.NOOP) == []


def test_duplicate_names_are_rejected():
    with pytest.raises(CatalogError):
        ActionCatalog([FunctionAction("a", lambda: None), FunctionAction("a", lambda: None)])


def test_blank_names_are_rejected():
    with pytest.raises(CatalogError):
        ActionCatalog([FunctionAction(" ", lambda: None)])


def test_get_and_len():
    catalog = _catalog()
    assert len(catalog) == 6
    assert catalog.get("grant-default-access").failure_policy == FailurePolicy.SOFT
    assert catalog.get("missing") is None


def test_function_action_return_values():
    assert FunctionAction("a", lambda: None).run().success
    assert FunctionAction("a", lambda: True).run().success
    assert not FunctionAction("a", lambda: False).run().success
    result = FunctionAction("a", lambda: ActionResult.fail("boom")).run()
    assert result.error == "boom"
    with pytest.raises(TypeError):
        FunctionAction("a", lambda: 42).run()
