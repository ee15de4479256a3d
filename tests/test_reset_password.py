import pytest

from storefront.client.state import ResetPasswordStateMachine
from storefront.client.state.base import GENERIC_ERROR_MESSAGE
from storefront.shared.infrastructure.identity.messages import ERROR_MESSAGES

from .conftest import EMAIL, ExplodingIdentityProvider


@pytest.fixture
def machine(identity, scope):
    return ResetPasswordStateMachine(identity, scope=scope)


@pytest.mark.parametrize(
    "email, message",
    [
        ("", "Email cannot be empty"),
        ("not-an-email", "Please enter a valid email"),
        ("someone@Example.com", "Please enter a valid email"),
    ],
)
def test_invalid_email_is_rejected_locally(machine, identity, email, message):
    machine.set_email(email)

    task = machine.reset_password()

    assert task is None
    assert machine.state.error_message == message
    assert identity.call_counts["send_password_reset"] == 0


async def test_reset_email_sent(machine, identity):
    machine.set_email(EMAIL)

    final = await machine.reset_password()

    assert final.is_success is True
    assert final.is_loading is False
    assert final.error_message is None
    assert identity.sent_resets == [EMAIL]


async def test_unknown_email_reports_provider_message(machine):
    machine.set_email("ghost@shop.com")

    final = await machine.reset_password()

    assert final.is_success is False
    assert final.is_loading is False
    assert final.error_message == ERROR_MESSAGES["EMAIL_NOT_FOUND"]


async def test_unexpected_error_reports_generic_message(scope):
    machine = ResetPasswordStateMachine(ExplodingIdentityProvider(), scope=scope)
    machine.set_email(EMAIL)

    final = await machine.reset_password()

    assert final.error_message == GENERIC_ERROR_MESSAGE
    assert final.is_loading is False


async def test_retry_clears_previous_error(machine):
    machine.set_email("ghost@shop.com")
    await machine.reset_password()

    machine.set_email(EMAIL)
    task = machine.reset_password()

    assert machine.state.error_message is None
    assert machine.state.is_loading is True
    final = await task
    assert final.is_success is True
