import pytest

from storefront.client.state import SignUpStateMachine
from storefront.shared.core import events
from storefront.shared.domain.accounts.models import AccountRecord
from storefront.shared.infrastructure.identity.messages import ERROR_MESSAGES

from .conftest import EMAIL, PASSWORD, FailingRecordStore, settle

NEW_EMAIL = "new@shop.com"


@pytest.fixture
def machine(identity, records, scope):
    return SignUpStateMachine(identity, records, scope=scope)


@pytest.mark.parametrize(
    "email, name, password, confirm, message",
    [
        ("", "Bob", PASSWORD, PASSWORD, "Email must not be empty"),
        (NEW_EMAIL, "", PASSWORD, PASSWORD, "Name must not be empty"),
        (NEW_EMAIL, "Bob", "123", "123", "Password must be at least 6 characters"),
        (NEW_EMAIL, "Bob", PASSWORD, "different", "Password does not match"),
    ],
)
def test_validation_errors_in_order(machine, identity, email, name, password, confirm, message):
    task = machine.sign_up(email, name, password, confirm)

    assert task is None
    assert machine.state.error_message == message
    assert machine.state.is_loading is False
    assert identity.call_counts["create_account"] == 0


async def test_sign_up_creates_account_and_record(machine, identity, records):
    final = await machine.sign_up(NEW_EMAIL, "Bob", PASSWORD, PASSWORD)

    assert final.is_success is True
    assert final.is_loading is False
    assert final.error_message == ""

    user_id = identity.current_session().user_id
    stored = (await records.get_record(user_id)).value
    assert stored["email"] == NEW_EMAIL
    assert stored["name"] == "Bob"
    assert stored["banned"] is False
    assert "password" not in stored
    assert AccountRecord.from_store(user_id, stored).id == user_id


async def test_existing_email_surfaces_provider_message(machine, records):
    final = await machine.sign_up(EMAIL, "Alice", PASSWORD, PASSWORD)

    assert final.is_success is False
    assert final.is_loading is False
    assert final.error_message == ERROR_MESSAGES["EMAIL_EXISTS"]
    assert records.call_counts["put_record"] == 0


async def test_profile_write_failure_still_succeeds(identity, scope):
    records = FailingRecordStore()
    machine = SignUpStateMachine(identity, records, scope=scope)

    final = await machine.sign_up(NEW_EMAIL, "Bob", PASSWORD, PASSWORD)

    assert final.is_success is True
    assert records.call_counts["put_record"] == 1


async def test_account_created_event(identity, records, scope, event_bus):
    received = []

    async def on_created(payload):
        received.append(payload)

    await event_bus.subscribe(events.TOPIC_ACCOUNT_CREATED, on_created)
    machine = SignUpStateMachine(identity, records, scope=scope, event_bus=event_bus)

    await machine.sign_up(NEW_EMAIL, "Bob", PASSWORD, PASSWORD)
    await settle(event_bus)

    assert len(received) == 1
    assert received[0]["email"] == NEW_EMAIL
    assert received[0]["name"] == "Bob"


async def test_reset_sign_up_state_clears_success(machine):
    await machine.sign_up(NEW_EMAIL, "Bob", PASSWORD, PASSWORD)

    state = machine.reset_sign_up_state()

    assert state.is_success is False


def test_published_snapshot_hides_passwords(machine):
    machine.set_password(PASSWORD)
    machine.set_confirm_password(PASSWORD)
    machine.set_name("Bob")

    public = machine.state.public_dict()

    assert "password" not in public
    assert "confirm_password" not in public
    assert public["name"] == "Bob"
