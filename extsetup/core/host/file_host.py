"""
File-backed host collaborator

Every mutator is a load-modify-save against the host configuration document
and is idempotent: it returns True when it changed the document and False
when the requested state was already present.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

from extsetup.core.host.config_file import HostConfigFile
from extsetup.core.host.models import DashboardRegistration, HostConfiguration

logger = logging.getLogger(__name__)


class FileHost:
    """Host application state kept in a configuration document"""

    def __init__(self, config_file: Union[HostConfigFile, Path, str]):
        if not isinstance(config_file, HostConfigFile):
            config_file = HostConfigFile(Path(config_file))
        self.config_file = config_file

    def load(self) -> HostConfiguration:
        return self.config_file.load()

    # ============================================
    # Readers
    # ============================================

    def has_section(self, alias: str) -> bool:
        return alias in self.load().sections

    def get_app_setting(self, key: str) -> Optional[str]:
        return self.load().app_settings.get(key)

    def list_user_groups(self) -> List[str]:
        return list(self.load().user_groups)

    # ============================================
    # Mutators
    # ============================================

    def register_section(self, alias: str) -> bool:
        config = self.load()
        if alias in config.sections:
            return False
        config.sections.append(alias)
        self.config_file.save(config)
        logger.info(f"Registered section: {alias}")
        return True

    def register_dashboard(self, alias: str, section: str) -> bool:
        config = self.load()
        if config.has_dashboard(alias, section):
            return False
        config.dashboards.append(DashboardRegistration(alias=alias, section=section))
        self.config_file.save(config)
        logger.info(f"Registered dashboard {alias} in section {section}")
        return True

    def grant_section_access(self, section: str, groups: Iterable[str]) -> List[str]:
        """
        Allow user groups into a section

        Returns:
            Groups that were newly granted access
        """
        config = self.load()
        allowed = config.section_access.setdefault(section, [])
        granted = [g for g in groups if g not in allowed]
        if not granted:
            return []
        allowed.extend(granted)
        self.config_file.save(config)
        logger.info(f"Granted access to section {section}: {', '.join(granted)}")
        return granted

    def ensure_config_group(self, name: str, sections: Iterable[str]) -> List[str]:
        """
        Ensure a configuration group exists and contains the given sections

        Sections already in the group are kept as they are.

        Returns:
            Sections that were added
        """
        config = self.load()
        group_exists = name in config.config_groups
        existing = config.config_groups.setdefault(name, [])
        added = [s for s in sections if s not in existing]
        if group_exists and not added:
            return []
        existing.extend(added)
        self.config_file.save(config)
        logger.info(f"Configuration group {name} updated: added {', '.join(added) or 'none'}")
        return added

    def ensure_app_settings(self, defaults: Mapping[str, str]) -> List[str]:
        """
        Add application settings that are missing or blank

        Non-blank values already present are never overwritten.

        Returns:
            Keys that were written
        """
        config = self.load()
        written = []
        for key, value in defaults.items():
            current = config.app_settings.get(key)
            if current is None or (not current.strip() and current != value):
                config.app_settings[key] = value
                written.append(key)
        if written:
            self.config_file.save(config)
            logger.info(f"Application settings added: {', '.join(written)}")
        return written

    def set_app_setting(self, key: str, value: str) -> None:
        """Add or replace an application setting"""
        config = self.load()
        if config.app_settings.get(key) == value:
            return
        config.app_settings[key] = value
        self.config_file.save(config)
