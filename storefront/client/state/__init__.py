"""Account screen state management.

This module implements the state layer of the storefront account screens.
Each screen owns one state machine; the machine is the single writer of an
immutable snapshot that any number of observers read.

Architecture:
- StateStore: single-writer snapshot container bound to a lifecycle scope
- SignInStateMachine: sign-in, ban check, password reset, session flags
- SignUpStateMachine / ResetPasswordStateMachine / ChangePasswordStateMachine
"""

from .models import (
    ChangePasswordState,
    ResetPasswordState,
    SessionState,
    SignInPhase,
    SignUpState,
)
from .store import StateStore
from .sign_in import SignInStateMachine
from .sign_up import SignUpStateMachine
from .reset_password import ResetPasswordStateMachine
from .change_password import ChangePasswordStateMachine

__all__ = [
    "ChangePasswordState",
    "ResetPasswordState",
    "SessionState",
    "SignInPhase",
    "SignUpState",
    "StateStore",
    "SignInStateMachine",
    "SignUpStateMachine",
    "ResetPasswordStateMachine",
    "ChangePasswordStateMachine",
]
