"""Exception classes for the setup system"""


class ExtSetupError(Exception):
    """Base exception for all setup-related errors"""
    pass


class CatalogError(ExtSetupError):
    """Raised when an action catalog is declared incorrectly"""
    pass


class StoreError(ExtSetupError):
    """Raised when the installed version cannot be read or written"""
    pass


class HostError(ExtSetupError):
    """Raised when the host configuration cannot be loaded or saved"""
    pass
