import json

import httpx
import pytest

from storefront.shared.core.errors import AuthenticationError, TransportError
from storefront.shared.infrastructure.identity.firebase_identity import FirebaseIdentityProvider
from storefront.shared.infrastructure.identity.messages import ERROR_MESSAGES
from storefront.shared.infrastructure.records.firebase_records import FirebaseRealtimeRecordStore

DB_URL = "https://shop-default-rtdb.firebaseio.com"


def make_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def sign_in_ok(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={
        "localId": "uid-1",
        "email": body["email"],
        "idToken": "id-token-1",
        "refreshToken": "refresh-1",
    })


# --- Identity ---

async def test_sign_in_stores_session_and_sends_api_key():
    seen = []

    def handler(request):
        seen.append(request)
        return sign_in_ok(request)

    async with make_client(handler) as client:
        provider = FirebaseIdentityProvider("api-key", client=client)
        result = await provider.verify_credentials("a@b.com", "secret1")

    assert result.is_ok
    assert result.value == "uid-1"
    session = provider.current_session()
    assert session.user_id == "uid-1"
    assert session.email == "a@b.com"
    assert provider.current_id_token() == "id-token-1"

    request = seen[0]
    assert request.url.path.endswith("accounts:signInWithPassword")
    assert request.url.params["key"] == "api-key"
    assert json.loads(request.content) == {
        "email": "a@b.com",
        "password": "secret1",
        "returnSecureToken": True,
    }


@pytest.mark.parametrize(
    "raw, code",
    [
        ("INVALID_PASSWORD", "INVALID_PASSWORD"),
        ("WEAK_PASSWORD : Password should be at least 6 characters", "WEAK_PASSWORD"),
        ("TOO_MANY_ATTEMPTS_TRY_LATER", "TOO_MANY_ATTEMPTS_TRY_LATER"),
    ],
)
async def test_provider_rejection_maps_error_code(raw, code):
    def handler(request):
        return httpx.Response(400, json={"error": {"code": 400, "message": raw}})

    async with make_client(handler) as client:
        provider = FirebaseIdentityProvider("api-key", client=client)
        result = await provider.verify_credentials("a@b.com", "secret1")

    assert not result.is_ok
    assert isinstance(result.error, AuthenticationError)
    assert result.error.code == code
    assert result.message == ERROR_MESSAGES[code]
    assert provider.current_session() is None


async def test_unknown_code_uses_fallback_message():
    def handler(request):
        return httpx.Response(400, json={"error": {"message": "SOMETHING_NEW"}})

    async with make_client(handler) as client:
        result = await FirebaseIdentityProvider("api-key", client=client).send_password_reset("a@b.com")

    assert result.error.code == "SOMETHING_NEW"
    assert result.message == "An internal error has occurred."


async def test_network_failure_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        result = await FirebaseIdentityProvider("api-key", client=client).verify_credentials("a@b.com", "x")

    assert isinstance(result.error, TransportError)
    assert result.message.startswith("Network error")


async def test_malformed_response_is_transport_error():
    def handler(request):
        return httpx.Response(200, text="<html>oops</html>")

    async with make_client(handler) as client:
        result = await FirebaseIdentityProvider("api-key", client=client).verify_credentials("a@b.com", "x")

    assert isinstance(result.error, TransportError)


async def test_password_reset_request_body():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"email": "a@b.com"})

    async with make_client(handler) as client:
        result = await FirebaseIdentityProvider("api-key", client=client).send_password_reset("a@b.com")

    assert result.is_ok
    assert seen == [{"requestType": "PASSWORD_RESET", "email": "a@b.com"}]


async def test_sign_out_drops_tokens():
    async with make_client(sign_in_ok) as client:
        provider = FirebaseIdentityProvider("api-key", client=client)
        await provider.verify_credentials("a@b.com", "secret1")
        provider.sign_out()

    assert provider.current_session() is None
    assert provider.current_id_token() is None


async def test_update_password_uses_session_token():
    bodies = []

    def handler(request):
        if request.url.path.endswith("accounts:update"):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"localId": "uid-1", "idToken": "id-token-2"})
        return sign_in_ok(request)

    async with make_client(handler) as client:
        provider = FirebaseIdentityProvider("api-key", client=client)
        await provider.verify_credentials("a@b.com", "secret1")
        assert (await provider.reauthenticate("secret1")).is_ok
        result = await provider.update_password("N3w-Passw0rd")

    assert result.is_ok
    assert bodies[0]["idToken"] == "id-token-1"
    assert bodies[0]["password"] == "N3w-Passw0rd"
    assert provider.current_id_token() == "id-token-2"


async def test_update_password_without_session():
    def handler(request):
        raise AssertionError("no request expected")

    async with make_client(handler) as client:
        result = await FirebaseIdentityProvider("api-key", client=client).update_password("N3w-Passw0rd")

    assert result.error.code == "INVALID_ID_TOKEN"


def test_api_key_is_required():
    with pytest.raises(ValueError):
        FirebaseIdentityProvider("")


# --- Realtime Database ---

async def test_get_field_url_and_auth_param():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=True)

    async with make_client(handler) as client:
        store = FirebaseRealtimeRecordStore(DB_URL + "/", token_provider=lambda: "id-token-1", client=client)
        result = await store.get_field("uid-1", "banned")

    assert result.value is True
    request = seen[0]
    assert request.method == "GET"
    assert request.url.host == "shop-default-rtdb.firebaseio.com"
    assert request.url.path == "/users/uid-1/banned.json"
    assert request.url.params["auth"] == "id-token-1"


async def test_missing_field_is_none():
    def handler(request):
        return httpx.Response(200, content=b"null")

    async with make_client(handler) as client:
        result = await FirebaseRealtimeRecordStore(DB_URL, client=client).get_field("uid-1", "banned")

    assert result.is_ok
    assert result.value is None


async def test_denied_read_is_transport_error():
    def handler(request):
        return httpx.Response(401, json={"error": "Permission denied"})

    async with make_client(handler) as client:
        result = await FirebaseRealtimeRecordStore(DB_URL, client=client).get_field("uid-1", "banned")

    assert isinstance(result.error, TransportError)
    assert result.error.code == "401"
    assert "Permission denied" in result.message


async def test_set_field_puts_json_value():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=True)

    async with make_client(handler) as client:
        result = await FirebaseRealtimeRecordStore(DB_URL, client=client).set_field("uid-1", "banned", True)

    assert result.is_ok
    assert seen[0].method == "PUT"
    assert json.loads(seen[0].content) is True
    assert "auth" not in seen[0].url.params


async def test_list_records_skips_non_object_nodes():
    def handler(request):
        return httpx.Response(200, json={"u1": {"email": "a@b.com"}, "junk": 3})

    async with make_client(handler) as client:
        result = await FirebaseRealtimeRecordStore(DB_URL, client=client).list_records()

    assert result.value == {"u1": {"email": "a@b.com"}}
