"""File-backed host collaborator and the default setup actions"""

from extsetup.core.host.actions import (
    DEFAULT_APP_SETTINGS,
    EXPECTED_CONFIG_SECTIONS,
    build_default_catalog,
)
from extsetup.core.host.config_file import HostConfigFile
from extsetup.core.host.file_host import FileHost
from extsetup.core.host.models import DashboardRegistration, HostConfiguration

__all__ = [
    "DEFAULT_APP_SETTINGS",
    "EXPECTED_CONFIG_SECTIONS",
    "build_default_catalog",
    "HostConfigFile",
    "FileHost",
    "DashboardRegistration",
    "HostConfiguration",
]
