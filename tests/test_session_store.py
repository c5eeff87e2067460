import asyncio
import json
from datetime import datetime, timezone

import pytest

from dataflow_ui.state import (
    STORAGE_KEY,
    LocalStorage,
    MemoryStorage,
    Session,
    SessionScopeError,
    SessionStore,
    browser_origin,
    session_provider,
    use_session,
)

FIXED_NOW = datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc)


def make_store(storage=None, **kwargs):
    kwargs.setdefault("login_delay", 0)
    kwargs.setdefault("clock", lambda: FIXED_NOW)
    return SessionStore(storage if storage is not None else MemoryStorage(), **kwargs)


def test_initial_state():
    store = make_store()
    assert store.is_initializing
    assert not store.is_authenticating
    assert store.session is None

    assert store.restore_on_startup() is None
    assert not store.is_initializing


def test_login_success_persists_session():
    storage = MemoryStorage()
    store = make_store(storage)
    store.restore_on_startup()

    assert asyncio.run(store.login("demo@dataflow.com", "password123")) is True

    assert store.session == Session(
        email="demo@dataflow.com", name="Demo User", role="Analyst", login_time=FIXED_NOW
    )
    saved = json.loads(storage.get_item(STORAGE_KEY))
    assert saved["email"] == "demo@dataflow.com"
    assert saved["role"] == "Analyst"


@pytest.mark.parametrize("email,password", [
    ("demo@dataflow.com", "wrong"),
    ("nobody@dataflow.com", "password123"),
    ("", ""),
])
def test_invalid_credentials(email, password):
    storage = MemoryStorage()
    store = make_store(storage)

    assert asyncio.run(store.login(email, password)) is False
    assert store.session is None
    assert storage.get_item(STORAGE_KEY) is None


def test_failed_login_keeps_existing_session():
    store = make_store()

    async def scenario():
        assert await store.login("admin@dataflow.com", "admin123")
        assert not await store.login("admin@dataflow.com", "nope")

    asyncio.run(scenario())
    assert store.session.email == "admin@dataflow.com"


def test_every_demo_account_can_log_in():
    accounts = {
        "admin@dataflow.com": ("admin123", "Administrator"),
        "demo@dataflow.com": ("password123", "Analyst"),
        "manager@dataflow.com": ("manager123", "Manager"),
        "user@dataflow.com": ("user123", "User"),
    }
    for email, (password, role) in accounts.items():
        store = make_store()
        assert asyncio.run(store.login(email, password))
        assert store.session.role == role


def test_is_authenticating_while_pending():
    store = make_store(login_delay=0.05)

    async def scenario():
        task = asyncio.create_task(store.login("demo@dataflow.com", "password123"))
        await asyncio.sleep(0.01)
        assert store.is_authenticating
        assert await task
        assert not store.is_authenticating

    asyncio.run(scenario())


def test_logout_clears_memory_and_storage():
    storage = MemoryStorage()
    store = make_store(storage)
    asyncio.run(store.login("demo@dataflow.com", "password123"))

    store.logout()

    assert store.session is None
    assert storage.get_item(STORAGE_KEY) is None


def test_logout_is_idempotent():
    store = make_store()
    store.logout()
    store.logout()
    assert store.session is None


def test_logout_during_pending_login_wins():
    storage = MemoryStorage()
    store = make_store(storage, login_delay=0.05)

    async def scenario():
        task = asyncio.create_task(store.login("demo@dataflow.com", "password123"))
        await asyncio.sleep(0.01)
        store.logout()
        return await task

    assert asyncio.run(scenario()) is False
    assert store.session is None
    assert storage.get_item(STORAGE_KEY) is None


def test_session_survives_restart(tmp_path):
    path = str(tmp_path / "local.db")
    first = make_store(LocalStorage(path))
    first.restore_on_startup()
    asyncio.run(first.login("manager@dataflow.com", "manager123"))

    second = make_store(LocalStorage(path))
    restored = second.restore_on_startup()

    assert restored == first.session
    assert second.is_authenticated


@pytest.mark.parametrize("raw", [
    "{not json",
    "[]",
    json.dumps({"email": "demo@dataflow.com"}),
    json.dumps({"email": "a", "name": "b", "role": "c", "login_time": "yesterday"}),
])
def test_corrupt_saved_session_is_discarded(raw):
    storage = MemoryStorage({STORAGE_KEY: raw})
    store = make_store(storage)

    assert store.restore_on_startup() is None
    assert not store.is_initializing
    assert storage.get_item(STORAGE_KEY) is None


def test_restore_runs_once():
    storage = MemoryStorage()
    store = make_store(storage)
    store.restore_on_startup()

    storage.set_item(STORAGE_KEY, json.dumps(
        Session("demo@dataflow.com", "Demo User", "Analyst", FIXED_NOW).to_dict()
    ))
    assert store.restore_on_startup() is None


def test_use_session_outside_provider():
    with pytest.raises(SessionScopeError):
        use_session()


def test_session_provider_exposes_store():
    store = make_store()
    with session_provider(store) as provided:
        assert provided is store
        assert use_session() is store
        assert not store.is_initializing

    with pytest.raises(SessionScopeError):
        use_session()


def test_login_time_within_call_window():
    store = SessionStore(MemoryStorage(), login_delay=0)

    before = datetime.now(timezone.utc)
    asyncio.run(store.login("user@dataflow.com", "user123"))
    after = datetime.now(timezone.utc)

    assert before <= store.session.login_time <= after


def test_browsers_sharing_a_storage_file_keep_separate_sessions(tmp_path):
    path = str(tmp_path / "local.db")
    base = "http://localhost:8501"

    first = make_store(LocalStorage(path, browser_origin(base, "browser-a")))
    first.restore_on_startup()
    asyncio.run(first.login("admin@dataflow.com", "admin123"))

    visitor = make_store(LocalStorage(path, browser_origin(base, "browser-b")))
    assert visitor.restore_on_startup() is None
    assert not visitor.is_authenticated

    reloaded = make_store(LocalStorage(path, browser_origin(base, "browser-a")))
    assert reloaded.restore_on_startup() == first.session


def test_browser_origin_needs_an_id():
    assert browser_origin("http://x.test", "abc") == "http://x.test#abc"
    with pytest.raises(ValueError):
        browser_origin("http://x.test", "")
