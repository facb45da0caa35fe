"""Data models for the setup system"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Transition(str, Enum):
    """Relationship between the recorded version and the running version"""
    NOOP = "noop"
    FRESH_INSTALL = "fresh_install"
    UPGRADE = "upgrade"


class AppliesOn(str, Enum):
    """Transitions an action takes part in"""
    FRESH_INSTALL_ONLY = "fresh_install_only"
    ALWAYS = "always"


class FailurePolicy(str, Enum):
    """How the orchestrator reacts when an action fails"""
    FATAL = "fatal"
    SOFT = "soft"


class ActionErrorCode(str, Enum):
    """Standardized error codes for action failures"""
    ACTION_FAILED = "ACTION_FAILED"
    UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
    STORE_WRITE_FAILED = "STORE_WRITE_FAILED"
    INVALID_VERSION = "INVALID_VERSION"


class ActionResult(BaseModel):
    """Value returned by an action's run()"""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: Optional[str] = None) -> "ActionResult":
        return cls(success=True, message=message)

    @classmethod
    def fail(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)


class ActionError(BaseModel):
    """A failed action, tagged with the policy the orchestrator must apply"""
    action_name: str
    failure_policy: FailurePolicy
    error_code: ActionErrorCode
    cause: str
    exception_type: Optional[str] = None

    @property
    def is_fatal(self) -> bool:
        return self.failure_policy == FailurePolicy.FATAL


class ActionOutcome(BaseModel):
    """Result of executing a single action"""
    action_name: str
    success: bool
    duration_ms: int = Field(default=0, ge=0)
    message: Optional[str] = None
    error: Optional[ActionError] = None


class OrchestrationResult(BaseModel):
    """Result of an orchestration run"""
    transition: Transition
    current_version: str
    previous_version: Optional[str] = None
    ran_actions: List[str] = Field(default_factory=list)
    soft_failures: List[ActionError] = Field(default_factory=list)
    fatal_failure: Optional[ActionError] = None
    version_written: bool = False
    duration_ms: int = Field(default=0, ge=0)

    @property
    def success(self) -> bool:
        return self.fatal_failure is None
