import asyncio
import inspect
from contextlib import asynccontextmanager

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from context import build_app_context
from core.local_storage import LocalStorage
from core.session_store import SessionStore

START_MS = 1_700_000_000_000


class FakeClock:
    def __init__(self, now_ms=START_MS):
        self.now_ms = now_ms

    def __call__(self):
        return self.now_ms

    def advance(self, ms):
        self.now_ms += ms


def run(coro):
    return asyncio.run(coro)


@asynccontextmanager
async def fake_backend(routes):
    """
    Real aiohttp server standing in for the dashboard backend.
    `routes` maps a path to handler(body) returning a web.Response.
    Yields (base_url, calls) where calls records every request.
    """
    calls = []

    async def handler(request):
        try:
            body = await request.json()
        except ValueError:
            body = None
        calls.append({"path": request.path, "body": body, "headers": dict(request.headers)})
        route = routes.get(request.path)
        if route is None:
            return web.Response(status=404, text="Not Found")
        result = route(body)
        if inspect.isawaitable(result):
            result = await result
        return result

    app = web.Application()
    app.router.add_post("/{tail:.*}", handler)
    server = TestServer(app)
    await server.start_server()
    try:
        yield f"http://{server.host}:{server.port}", calls
    finally:
        await server.close()


def respond(data, status=200):
    return lambda body: web.json_response(data, status=status)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage_path(tmp_path):
    return str(tmp_path / "local_storage.json")


@pytest.fixture
def storage(storage_path):
    return LocalStorage(storage_path)


@pytest.fixture
def session_store(storage, clock):
    return SessionStore(storage, clock=clock)


@pytest.fixture
def make_app_ctx(storage_path, clock):
    def factory(base_url="http://127.0.0.1:1"):
        return build_app_context(storage_path=storage_path, base_url=base_url, clock=clock)

    return factory
