import asyncio

import pytest

from conftest import run
from core.errors import NetworkUnavailable, SessionExpired
from core.page_state import PageLoader, PageState, StaleResult
from core.local_storage import LocalStorage
from core.route_guard import LOGIN_VIEW, GuardState, RouteGuard
from core.session_store import SessionStore


def test_guard_starts_unauthorized_without_session(session_store):
    guard = RouteGuard(session_store)
    assert guard.state is GuardState.UNAUTHORIZED


def test_guard_authorizes_valid_session(session_store):
    run(session_store.set_session("tok", 1_000, "ops@example.com"))
    guard = RouteGuard(session_store)

    assert guard.state is GuardState.AUTHORIZED
    assert run(guard.enter("home")) is GuardState.AUTHORIZED
    assert guard.redirect_to is None


def test_guard_clears_expired_session_on_entry(session_store, clock):
    run(session_store.set_session("tok", 1_000, "ops@example.com"))
    guard = RouteGuard(session_store)
    clock.advance(5_000)

    assert run(guard.enter("warehouse")) is GuardState.UNAUTHORIZED
    assert guard.redirect_to == LOGIN_VIEW
    assert session_store.get_session() is None


def test_guard_reacts_to_gateway_expiry(session_store):
    run(session_store.set_session("tok", 1_000, "ops@example.com"))
    guard = RouteGuard(session_store)

    run(guard.on_session_expired())
    assert guard.state is GuardState.UNAUTHORIZED
    assert session_store.get_session() is None


def test_page_loads_then_keeps_data_on_failure():
    page = PageLoader("home")
    assert page.state is PageState.IDLE

    async def ok():
        return ["w1"]

    async def broken():
        raise NetworkUnavailable()

    assert run(page.load(ok)) == ["w1"]
    assert page.state is PageState.LOADED

    with pytest.raises(NetworkUnavailable):
        run(page.load(broken))
    assert page.state is PageState.FAILED
    assert page.data == ["w1"]
    assert isinstance(page.error, NetworkUnavailable)


def test_session_expiry_is_not_recorded_as_page_failure():
    page = PageLoader("alerts")

    async def expired():
        raise SessionExpired()

    with pytest.raises(SessionExpired):
        run(page.load(expired))
    assert page.state is PageState.IDLE
    assert page.error is None


def test_result_arriving_after_navigation_is_discarded():
    page = PageLoader("warehouse")

    async def scenario():
        release = asyncio.Event()

        async def slow():
            await release.wait()
            return "stale"

        task = asyncio.create_task(page.load(slow))
        await asyncio.sleep(0)
        page.cancel()
        release.set()
        with pytest.raises(StaleResult):
            await task

    run(scenario())
    assert page.data is None
    assert page.state is PageState.IDLE


def test_stale_token_cannot_overwrite_newer_result():
    page = PageLoader("home")
    first = page.start()
    second = page.start()

    assert page.resolve(second, "new")
    assert not page.resolve(first, "old")
    assert page.data == "new"


def test_navigating_away_cancels_previous_page(make_app_ctx):
    ctx = make_app_ctx()
    home = ctx.navigate("home")
    token = home.start()

    alerts = ctx.navigate("alerts")
    assert ctx.active_page == "alerts"
    assert not home.is_current(token)
    assert home.state is PageState.IDLE
    # Returning to a page reuses its loader and its data
    assert ctx.navigate("home") is home
    assert ctx.pages["alerts"] is alerts


def test_guard_built_before_storage_load_reflects_loaded_session(storage_path, clock):
    on_disk = SessionStore(LocalStorage(storage_path), clock=clock)
    run(on_disk.set_session("tok", 60_000, "ops@example.com"))

    storage = LocalStorage(storage_path)
    guard = RouteGuard(SessionStore(storage, clock=clock))
    assert guard.state is GuardState.UNAUTHORIZED

    run(storage.load())
    assert guard.state is GuardState.AUTHORIZED
    assert guard.redirect_to is None
