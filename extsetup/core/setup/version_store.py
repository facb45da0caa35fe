"""Persistence of the installed extension version"""

import logging
from typing import TYPE_CHECKING, List, Optional, Protocol

from extsetup.core.setup.exceptions import ExtSetupError, StoreError
from extsetup.core.setup.resolver import normalize_version

if TYPE_CHECKING:
    from extsetup.core.host.file_host import FileHost

logger = logging.getLogger(__name__)


class VersionStore(Protocol):
    """Holds at most one recorded version"""

    def read(self) -> Optional[str]:
        ...

    def write(self, version: str) -> None:
        ...


class InMemoryVersionStore:
    """Version store kept in process memory"""

    def __init__(self, version: Optional[str] = None):
        self._version = version
        self.writes: List[str] = []

    def read(self) -> Optional[str]:
        return self._version

    def write(self, version: str) -> None:
        self._version = version
        self.writes.append(version)


class AppSettingVersionStore:
    """Version store backed by a host application setting"""

    def __init__(self, host: "FileHost", key: str):
        """
        Initialize store

        Args:
            host: Host whose application settings hold the version
            key: Application setting key
        """
        self.host = host
        self.key = key

    def read(self) -> Optional[str]:
        try:
            return self.host.get_app_setting(self.key)
        except ExtSetupError as e:
            raise StoreError(f"Failed to read installed version ({self.key}): {e}") from e

    def write(self, version: str) -> None:
        try:
            self.host.set_app_setting(self.key, version)
        except ExtSetupError as e:
            raise StoreError(f"Failed to write installed version ({self.key}): {e}") from e


def read_installed_version(store: VersionStore) -> Optional[str]:
    """
    Read the recorded version

    A failed read is logged and treated as "nothing recorded", which leads to
    a fresh install. Fresh install actions are idempotent, so this is safe.

    Returns:
        The recorded version, or None when absent, blank or unreadable
    """
    try:
        return normalize_version(store.read())
    except Exception as e:
        logger.warning(f"Failed to read installed version, treating as not installed: {e}")
        return None
