"""Transition resolution between the recorded and the running version"""

from typing import Optional

from extsetup.core.setup.models import Transition


def normalize_version(version: Optional[str]) -> Optional[str]:
    """Return None for an absent or blank version, the stripped version otherwise"""
    if version is None or not version.strip():
        return None
    return version.strip()


def versions_equal(left: str, right: str) -> bool:
    """Case-insensitive equality of two normalized versions"""
    return left.casefold() == right.casefold()


class TransitionResolver:
    """Compares the recorded version to the running version.

    Versions are opaque: only equality is checked (ignoring surrounding
    whitespace and case), so "5.0.0" and "5.0" are different versions and a
    downgrade resolves to an upgrade.
    """

    @staticmethod
    def resolve(installed_version: Optional[str], current_version: str) -> Transition:
        """
        Resolve the transition for this startup

        Args:
            installed_version: Version recorded by the last successful run, or None
            current_version: Version of the running extension

        Returns:
            FRESH_INSTALL when nothing is recorded, NOOP when the versions are
            equal, UPGRADE otherwise

        Raises:
            ValueError: If current_version is blank
        """
        current = normalize_version(current_version)
        if current is None:
            raise ValueError("Current version must not be blank")

        installed = normalize_version(installed_version)
        if installed is None:
            return Transition.FRESH_INSTALL
        if versions_equal(installed, current):
            return Transition.NOOP
        return Transition.UPGRADE


def resolve(installed_version: Optional[str], current_version: str) -> Transition:
    return TransitionResolver.resolve(installed_version, current_version)
