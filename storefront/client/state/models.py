"""Immutable UI state snapshots for the account screens."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Dict, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class UiState(BaseModel):
    """Base snapshot. Every change builds a new, fully validated instance."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    # Never published outside the owning machine
    SECRET_FIELDS: ClassVar[frozenset[str]] = frozenset()

    def evolve(self, **changes: Any) -> "UiState":
        return type(self).model_validate({**self.model_dump(), **changes})

    def public_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude=set(self.SECRET_FIELDS))


class SignInPhase(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    AUTHENTICATING = "authenticating"
    CHECKING_AUTHORIZATION = "checking_authorization"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SessionState(UiState):
    """Sign-in screen state.

    ``is_loading`` and ``is_success`` are never both true, and
    ``error_message`` is empty unless the last operation failed.
    """

    SECRET_FIELDS: ClassVar[frozenset[str]] = frozenset({"password"})

    email: str = ""
    password: str = ""
    error_message: str = ""
    is_loading: bool = False
    is_success: bool = False
    has_user: bool = False
    phase: SignInPhase = SignInPhase.IDLE

    @model_validator(mode="after")
    def _loading_excludes_success(self) -> "SessionState":
        if self.is_loading and self.is_success:
            raise ValueError("is_loading and is_success cannot both be true")
        return self


class SignUpState(UiState):
    SECRET_FIELDS: ClassVar[frozenset[str]] = frozenset({"password", "confirm_password"})

    email: str = ""
    name: str = ""
    password: str = ""
    confirm_password: str = ""
    error_message: str = ""
    is_loading: bool = False
    is_success: bool = False

    @model_validator(mode="after")
    def _loading_excludes_success(self) -> "SignUpState":
        if self.is_loading and self.is_success:
            raise ValueError("is_loading and is_success cannot both be true")
        return self


class ResetPasswordState(UiState):
    email: str = ""
    is_loading: bool = False
    is_success: bool = False
    error_message: Optional[str] = None


class ChangePasswordState(UiState):
    SECRET_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"old_password", "new_password", "confirm_new_password"}
    )

    old_password: str = ""
    new_password: str = ""
    confirm_new_password: str = ""
    error_message: Optional[str] = None
    success_message: Optional[str] = None
    is_loading: bool = False
