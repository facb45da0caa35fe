"""Data models for the host configuration document"""

from typing import Dict, List

from pydantic import BaseModel, Field


class DashboardRegistration(BaseModel):
    """A dashboard shown inside a host section"""
    alias: str = Field(description="Dashboard alias")
    section: str = Field(description="Alias of the section hosting the dashboard")


class HostConfiguration(BaseModel):
    """Persistent host configuration touched by setup actions"""
    app_settings: Dict[str, str] = Field(default_factory=dict, description="Application settings")
    sections: List[str] = Field(default_factory=list, description="Registered section aliases, in order")
    dashboards: List[DashboardRegistration] = Field(default_factory=list, description="Registered dashboards")
    user_groups: List[str] = Field(default_factory=list, description="Known user groups")
    section_access: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="User groups allowed into each section",
    )
    config_groups: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Configuration groups and the sections they contain",
    )

    def has_dashboard(self, alias: str, section: str) -> bool:
        return any(d.alias == alias and d.section == section for d in self.dashboards)
