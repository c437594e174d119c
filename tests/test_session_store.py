import json

import pytest

from conftest import START_MS, run
from core.cleanup import clear_expired_session
from core.local_storage import LocalStorage
from core.session_store import SessionStore


def test_set_session_computes_expiry_from_ttl(session_store):
    run(session_store.set_session("tok-1", 60_000, "ops@example.com"))

    session = session_store.get_session()
    assert session.token == "tok-1"
    assert session.user_identifier == "ops@example.com"
    assert session.expires_at_epoch_ms == START_MS + 60_000


def test_session_is_valid_until_expiry(session_store, clock):
    run(session_store.set_session("tok-1", 1_000, "ops@example.com"))
    assert session_store.is_valid()

    clock.advance(999)
    assert session_store.is_valid()

    clock.advance(1)
    assert not session_store.is_valid()
    # Expired, but still stored until something clears it
    assert session_store.get_session() is not None


def test_get_session_requires_all_three_fields(session_store, storage):
    run(session_store.set_session("tok-1", 1_000, "ops@example.com"))
    run(storage.remove_items("token_expiry"))

    assert session_store.get_session() is None
    assert not session_store.is_valid()


def test_non_numeric_expiry_counts_as_missing(session_store, storage):
    run(storage.set_item("token", "tok"))
    run(storage.set_item("mail", "ops@example.com"))
    run(storage.set_item("token_expiry", "tomorrow"))

    assert session_store.get_session() is None


@pytest.mark.parametrize("expiry", ["inf", "1e400", "nan"])
def test_unrepresentable_expiry_counts_as_missing(session_store, storage, expiry):
    run(storage.set_items({"token": "tok", "mail": "ops@example.com", "token_expiry": expiry}))

    assert session_store.get_session() is None
    assert session_store.is_valid() is False
    assert run(clear_expired_session(session_store)) is False


def test_set_session_writes_the_file_once(session_store, monkeypatch):
    writes = []

    async def record_write(file_path, entries):
        writes.append(dict(entries))

    monkeypatch.setattr("core.local_storage.write_storage_file", record_write)
    run(session_store.set_session("tok-1", 1_000, "ops@example.com"))

    assert writes == [{"token": "tok-1", "token_expiry": str(START_MS + 1_000), "mail": "ops@example.com"}]


def test_clear_session_is_idempotent(session_store):
    run(session_store.set_session("tok-1", 1_000, "ops@example.com"))
    run(session_store.clear_session())
    assert not session_store.is_valid()
    assert session_store.get_session() is None

    run(session_store.clear_session())
    assert session_store.get_session() is None


def test_session_survives_reload_from_disk(session_store, storage_path, clock):
    run(session_store.set_session("tok-1", 5_000, "ops@example.com"))

    with open(storage_path, encoding="utf-8") as f:
        on_disk = json.load(f)
    assert on_disk["token"] == "tok-1"
    assert on_disk["token_expiry"] == str(START_MS + 5_000)
    assert on_disk["mail"] == "ops@example.com"

    reopened = SessionStore(LocalStorage(storage_path), clock=clock)
    run(reopened.storage.load())
    assert reopened.is_valid()


def test_corrupt_storage_file_loads_empty(storage_path):
    with open(storage_path, "w", encoding="utf-8") as f:
        f.write("{not json")

    storage = LocalStorage(storage_path)
    run(storage.load())
    assert storage.get_item("token") is None


def test_expiry_sweep_clears_only_expired_sessions(session_store, clock):
    run(session_store.set_session("tok-1", 1_000, "ops@example.com"))
    assert run(clear_expired_session(session_store)) is False

    clock.advance(1_000)
    assert run(clear_expired_session(session_store)) is True
    assert session_store.get_session() is None
