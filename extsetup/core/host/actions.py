"""
Concrete setup actions against the file-backed host

Declared order of the default catalog:
1. register-extension-section                           always              fatal
2. register-primary-dashboard                           always              fatal
3. register-secondary-dashboard-in-host-developer-area  fresh install only  soft
4. grant-default-access                                 fresh install only  soft
5. apply-configuration-group                            always              fatal
6. ensure-application-settings                          always              soft
"""

import logging
from typing import Dict, List

from extsetup.core.config import ExtSetupSettings
from extsetup.core.host.file_host import FileHost
from extsetup.core.setup.catalog import ActionCatalog, SetupAction
from extsetup.core.setup.models import ActionResult, AppliesOn, FailurePolicy

logger = logging.getLogger(__name__)

EXPECTED_CONFIG_SECTIONS = [
    "buttons",
    "emailWhitelist",
    "email",
    "fieldCategories",
    "persistence",
    "submissions",
    "templates",
]

RECAPTCHA_SITE_KEY = "Formulate:RecaptchaSiteKey"
RECAPTCHA_SECRET_KEY = "Formulate:RecaptchaSecretKey"
ENABLE_JSON_FORM_LOGGING = "Formulate:EnableJSONFormLogging"

DEFAULT_APP_SETTINGS: Dict[str, str] = {
    RECAPTCHA_SITE_KEY: "",
    RECAPTCHA_SECRET_KEY: "",
    ENABLE_JSON_FORM_LOGGING: "false",
}


class HostAction(SetupAction):
    """Action operating on a FileHost"""

    def __init__(self, host: FileHost, settings: ExtSetupSettings):
        self.host = host
        self.settings = settings


class RegisterSectionAction(HostAction):
    """Adds the extension section to the host"""

    name = "register-extension-section"
    applies_on = AppliesOn.ALWAYS
    failure_policy = FailurePolicy.FATAL

    def run(self) -> ActionResult:
        alias = self.settings.section_alias
        if self.host.register_section(alias):
            return ActionResult.ok(f"section {alias} added")
        return ActionResult.ok(f"section {alias} already registered")


class RegisterDashboardAction(HostAction):
    """Adds the extension dashboard to the extension section"""

    name = "register-primary-dashboard"
    applies_on = AppliesOn.ALWAYS
    failure_policy = FailurePolicy.FATAL

    def run(self) -> ActionResult:
        section = self.settings.section_alias
        alias = self.settings.dashboard_alias
        if not self.host.has_section(section):
            return ActionResult.fail(
                f"Cannot add dashboard {alias}: section {section} is not registered"
            )
        if self.host.register_dashboard(alias, section):
            return ActionResult.ok(f"dashboard {alias} added to {section}")
        return ActionResult.ok(f"dashboard {alias} already in {section}")


class RegisterDeveloperDashboardAction(HostAction):
    """Adds the extension tab to the host developer section"""

    name = "register-secondary-dashboard-in-host-developer-area"
    applies_on = AppliesOn.FRESH_INSTALL_ONLY
    failure_policy = FailurePolicy.SOFT

    def run(self) -> ActionResult:
        section = self.settings.developer_section_alias
        alias = self.settings.developer_dashboard_alias
        if not self.host.has_section(section):
            return ActionResult.fail(
                f"Unable to locate the {section} section; "
                f"the {self.settings.extension_alias} tab will not be added to it"
            )
        if self.host.register_dashboard(alias, section):
            return ActionResult.ok(f"dashboard {alias} added to {section}")
        return ActionResult.ok(f"dashboard {alias} already in {section}")


class GrantDefaultAccessAction(HostAction):
    """Gives every user group access to the extension section, when enabled"""

    name = "grant-default-access"
    applies_on = AppliesOn.FRESH_INSTALL_ONLY
    failure_policy = FailurePolicy.SOFT

    def run(self) -> ActionResult:
        flag = self.host.get_app_setting(self.settings.ensure_users_can_access_key)
        if flag is None or not flag.strip():
            return ActionResult.ok("default access not requested")

        section = self.settings.section_alias
        groups = self.host.list_user_groups()
        if not groups:
            return ActionResult.fail("No user groups defined in the host configuration")

        granted = self.host.grant_section_access(section, groups)
        if granted:
            return ActionResult.ok(f"granted {section} to {', '.join(granted)}")
        return ActionResult.ok(f"all user groups already have access to {section}")


class ApplyConfigurationGroupAction(HostAction):
    """Ensures the extension configuration group holds every expected section"""

    name = "apply-configuration-group"
    applies_on = AppliesOn.ALWAYS
    failure_policy = FailurePolicy.FATAL

    def run(self) -> ActionResult:
        group = self.settings.config_group_name
        added = self.host.ensure_config_group(group, EXPECTED_CONFIG_SECTIONS)
        if added:
            return ActionResult.ok(f"{group}: added {', '.join(added)}")
        return ActionResult.ok(f"{group} already complete")


class EnsureAppSettingsAction(HostAction):
    """Adds missing extension application settings"""

    name = "ensure-application-settings"
    applies_on = AppliesOn.ALWAYS
    failure_policy = FailurePolicy.SOFT

    def run(self) -> ActionResult:
        written = self.host.ensure_app_settings(DEFAULT_APP_SETTINGS)
        if written:
            return ActionResult.ok(f"added {', '.join(written)}")
        return ActionResult.ok("application settings already present")


def build_default_actions(host: FileHost, settings: ExtSetupSettings) -> List[SetupAction]:
    return [
        RegisterSectionAction(host, settings),
        RegisterDashboardAction(host, settings),
        RegisterDeveloperDashboardAction(host, settings),
        GrantDefaultAccessAction(host, settings),
        ApplyConfigurationGroupAction(host, settings),
        EnsureAppSettingsAction(host, settings),
    ]


def build_default_catalog(host: FileHost, settings: ExtSetupSettings) -> ActionCatalog:
    """Build the catalog of install and upgrade actions in declared order"""
    return ActionCatalog(build_default_actions(host, settings))
