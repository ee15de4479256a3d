from storefront.client.state import SignInStateMachine
from storefront.client.state.sign_in import BANNED_MESSAGE
from storefront.shared.core import events
from storefront.shared.domain.accounts import AccountModerationService

from .conftest import EMAIL, PASSWORD, USER_ID, FailingRecordStore, settle


async def test_list_accounts_parses_records(records):
    await records.put_record("u2", {"email": "c@d.com", "name": "Carol", "profileImageUrl": "http://img/c.png"})
    service = AccountModerationService(records)

    result = await service.list_accounts()

    assert result.is_ok
    accounts = {account.id: account for account in result.value}
    assert accounts[USER_ID].name == "Alice"
    assert accounts[USER_ID].banned is False
    assert accounts["u2"].photo_url == "http://img/c.png"
    assert accounts["u2"].banned is False


async def test_banned_account_is_refused_at_next_sign_in(identity, records, scope):
    service = AccountModerationService(records)

    assert (await service.set_banned(USER_ID, True)).is_ok

    machine = SignInStateMachine(identity, records, scope=scope)
    final = await machine.sign_in(EMAIL, PASSWORD)
    assert final.error_message == BANNED_MESSAGE


async def test_toggle_ban_returns_updated_copy(records):
    service = AccountModerationService(records)
    account = (await service.list_accounts()).value[0]

    toggled = await service.toggle_ban(account)

    assert toggled.value.banned is True
    assert account.banned is False
    assert (await records.get_field(USER_ID, "banned")).value is True


async def test_ban_change_is_published(records, event_bus):
    received = []

    async def on_ban(payload):
        received.append(payload)

    await event_bus.subscribe(events.TOPIC_BAN_CHANGED, on_ban)
    service = AccountModerationService(records, event_bus)

    await service.set_banned(USER_ID, True)
    await settle(event_bus)

    assert received == [{"user_id": USER_ID, "banned": True}]


async def test_store_failure_is_returned():
    service = AccountModerationService(FailingRecordStore())

    result = await service.set_banned(USER_ID, True)

    assert not result.is_ok
    assert result.error.code == "401"
