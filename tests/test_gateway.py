import pytest
from aiohttp import web

from conftest import fake_backend, respond, run
from core.errors import NetworkUnavailable, RequestFailed, SessionExpired
from core.gateway import ApiGateway, extract_error_message


def _login(session_store):
    run(session_store.set_session("tok-123", 60_000, "ops@example.com"))


def test_attaches_bearer_token_and_returns_json(session_store):
    _login(session_store)

    async def scenario():
        async with fake_backend({"/warehouses": respond({"warehouses": []})}) as (url, calls):
            gateway = ApiGateway(session_store, url)
            data = await gateway.call("/warehouses", {"mail": "ops@example.com"})
            return data, calls

    data, calls = run(scenario())
    assert data == {"warehouses": []}
    assert calls[0]["headers"]["Authorization"] == "Bearer tok-123"
    assert calls[0]["body"] == {"mail": "ops@example.com"}


def test_401_clears_session_and_raises_session_expired(session_store):
    _login(session_store)

    async def scenario():
        async with fake_backend({"/alerts": respond({"error": "expired"}, status=401)}) as (url, _):
            await ApiGateway(session_store, url).call("/alerts", {"mail": "ops@example.com"})

    with pytest.raises(SessionExpired):
        run(scenario())
    assert session_store.get_session() is None
    assert not session_store.is_valid()


def test_json_error_field_becomes_request_failed(session_store):
    _login(session_store)

    async def scenario():
        async with fake_backend({"/create-batch": respond({"error": "Sensor busy"}, status=409)}) as (url, _):
            await ApiGateway(session_store, url).call("/create-batch", {})

    with pytest.raises(RequestFailed) as excinfo:
        run(scenario())
    assert excinfo.value.status == 409
    assert excinfo.value.message == "Sensor busy"
    # Non-401 failures leave the session alone
    assert session_store.is_valid()


def test_plain_text_error_body_is_used_verbatim(session_store):
    _login(session_store)

    async def scenario():
        routes = {"/getproducts": lambda body: web.Response(status=500, text="database down")}
        async with fake_backend(routes) as (url, _):
            await ApiGateway(session_store, url).call("/getproducts", {})

    with pytest.raises(RequestFailed) as excinfo:
        run(scenario())
    assert excinfo.value.message == "database down"


def test_extract_error_message_fallbacks():
    assert extract_error_message('{"message": "nope"}', 400) == "nope"
    assert extract_error_message('{"detail": "x"}', 400) == '{"detail": "x"}'
    assert extract_error_message("", 502) == "Server error: 502"


def test_unreachable_backend_is_network_unavailable(session_store):
    _login(session_store)
    gateway = ApiGateway(session_store, "http://127.0.0.1:1")

    with pytest.raises(NetworkUnavailable):
        run(gateway.call("/warehouses", {}))
    assert session_store.is_valid()


def test_protected_call_without_session_never_hits_network(session_store):
    async def scenario():
        async with fake_backend({"/warehouses": respond({})}) as (url, calls):
            with pytest.raises(SessionExpired):
                await ApiGateway(session_store, url).call("/warehouses", {})
            return calls

    assert run(scenario()) == []


def test_unauthenticated_401_is_a_request_failure(session_store):
    async def scenario():
        routes = {"/login": respond({"error": "Invalid credentials"}, status=401)}
        async with fake_backend(routes) as (url, calls):
            await ApiGateway(session_store, url).call("/login", {"mail": "a@b.co", "pass": "x"}, authenticated=False)

    with pytest.raises(RequestFailed) as excinfo:
        run(scenario())
    assert excinfo.value.message == "Invalid credentials"


def test_empty_success_body_is_empty_dict(session_store):
    _login(session_store)

    async def scenario():
        routes = {"/alerts/resolve-all": lambda body: web.Response(status=200, text="")}
        async with fake_backend(routes) as (url, _):
            return await ApiGateway(session_store, url).call("/alerts/resolve-all", {})

    assert run(scenario()) == {}
