import pytest

from storefront.client.state import ChangePasswordStateMachine
from storefront.client.state.change_password import (
    INCORRECT_PASSWORD_MESSAGE,
    NOT_SIGNED_IN_MESSAGE,
    PASSWORD_CHANGED_MESSAGE,
    SESSION_EXPIRED_MESSAGE,
)
from storefront.shared.core.errors import AuthenticationError
from storefront.shared.core.results import Err
from storefront.shared.infrastructure.identity.memory_identity import InMemoryIdentityProvider

from .conftest import EMAIL, PASSWORD, USER_ID

NEW_PASSWORD = "N3w-Passw0rd"


class ExpiredSessionIdentityProvider(InMemoryIdentityProvider):
    async def reauthenticate(self, password: str):
        self.call_counts["reauthenticate"] += 1
        return Err(AuthenticationError("expired", code="TOKEN_EXPIRED"))


@pytest.fixture
def signed_in(identity):
    identity.restore_session(USER_ID, EMAIL)
    return identity


@pytest.fixture
def machine(signed_in, scope):
    return ChangePasswordStateMachine(signed_in, scope=scope)


def fill(machine, old, new, confirm):
    machine.set_old_password(old)
    machine.set_new_password(new)
    machine.set_confirm_new_password(confirm)


@pytest.mark.parametrize(
    "old, new, confirm, message",
    [
        ("", NEW_PASSWORD, NEW_PASSWORD, "Current password must not be empty"),
        (PASSWORD, "", "", "New password must not be empty"),
        (PASSWORD, "Ab1!", "Ab1!", "Password must be at least 8 characters long"),
        (
            PASSWORD,
            "alllowercase1!",
            "alllowercase1!",
            "Password must include uppercase, lowercase, number, and special character",
        ),
        (
            PASSWORD,
            NEW_PASSWORD,
            "N3w-Passw0rD",
            "Confirm new password must not be empty and must match the new password",
        ),
    ],
)
def test_validation_errors(machine, signed_in, old, new, confirm, message):
    fill(machine, old, new, confirm)

    assert machine.change_password() is None
    assert machine.state.error_message == message
    assert signed_in.call_counts["reauthenticate"] == 0


def test_requires_signed_in_user(identity, scope):
    machine = ChangePasswordStateMachine(identity, scope=scope)
    fill(machine, PASSWORD, NEW_PASSWORD, NEW_PASSWORD)

    assert machine.change_password() is None
    assert machine.state.error_message == NOT_SIGNED_IN_MESSAGE


async def test_password_changed(machine, signed_in):
    fill(machine, PASSWORD, NEW_PASSWORD, NEW_PASSWORD)

    final = await machine.change_password()

    assert final.success_message == PASSWORD_CHANGED_MESSAGE
    assert final.error_message is None
    assert final.is_loading is False
    assert (final.old_password, final.new_password, final.confirm_new_password) == ("", "", "")
    assert (await signed_in.verify_credentials(EMAIL, NEW_PASSWORD)).is_ok


async def test_wrong_current_password(machine, signed_in):
    fill(machine, "not-my-password", NEW_PASSWORD, NEW_PASSWORD)

    final = await machine.change_password()

    assert final.error_message == INCORRECT_PASSWORD_MESSAGE
    assert final.success_message is None
    assert signed_in.call_counts["update_password"] == 0


async def test_expired_session(scope):
    identity = ExpiredSessionIdentityProvider()
    identity.add_account(EMAIL, PASSWORD, user_id=USER_ID)
    identity.restore_session(USER_ID, EMAIL)
    machine = ChangePasswordStateMachine(identity, scope=scope)
    fill(machine, PASSWORD, NEW_PASSWORD, NEW_PASSWORD)

    final = await machine.change_password()

    assert final.error_message == SESSION_EXPIRED_MESSAGE
    assert final.is_loading is False


async def test_clear_messages(machine):
    fill(machine, "", NEW_PASSWORD, NEW_PASSWORD)
    machine.change_password()

    state = machine.clear_messages()

    assert state.error_message is None
    assert state.success_message is None
