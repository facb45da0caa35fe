"""
Centralized configuration for extension setup

Settings are read from environment variables with the EXTSETUP_ prefix
(and from a .env file when present).

Usage:
    from extsetup.core.config import get_settings

    settings = get_settings()
    print(settings.host_config_path)
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_HOST_CONFIG_PATH = Path.home() / ".extsetup" / "host.yaml"


class ExtSetupSettings(BaseSettings):
    """Configuration for extension setup"""

    model_config = SettingsConfigDict(
        env_prefix="EXTSETUP_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================
    # Host
    # ============================================

    host_config_path: Path = Field(
        default=DEFAULT_HOST_CONFIG_PATH,
        description="Host configuration document (.yaml/.yml or .json)"
    )

    # ============================================
    # Extension identity
    # ============================================

    extension_alias: str = Field(
        default="formulate",
        description="Extension alias; also the alias of its section"
    )

    dashboard_alias: str = Field(
        default="formulateDashboard",
        description="Dashboard registered in the extension section"
    )

    developer_section_alias: str = Field(
        default="developer",
        description="Host section receiving the developer dashboard"
    )

    developer_dashboard_alias: str = Field(
        default="formulateDeveloperDashboard",
        description="Dashboard registered in the developer section on fresh install"
    )

    config_group_name: str = Field(
        default="formulateConfiguration",
        description="Configuration group owned by the extension"
    )

    # ============================================
    # Application setting keys
    # ============================================

    version_key: str = Field(
        default="Formulate:Version",
        description="Application setting holding the installed version"
    )

    ensure_users_can_access_key: str = Field(
        default="Formulate:EnsureUsersCanAccess",
        description="When non-blank, all user groups get access on fresh install"
    )

    # ============================================
    # Logging
    # ============================================

    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(
                f"log_level must be one of: {', '.join(valid_levels)}"
            )
        return v.upper()

    @property
    def section_alias(self) -> str:
        return self.extension_alias


# Global settings instance
_settings: Optional[ExtSetupSettings] = None


def get_settings(force_reload: bool = False) -> ExtSetupSettings:
    """
    Get the global settings instance

    Args:
        force_reload: Force reload settings from environment

    Returns:
        ExtSetupSettings instance
    """
    global _settings

    if _settings is None or force_reload:
        _settings = ExtSetupSettings()

    return _settings
