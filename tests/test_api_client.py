import asyncio
import time

import pytest
import requests

from dataflow_ui.hooks import BackgroundLoop, DataFetchHook
from dataflow_ui.utils import APIClient, APIError


class FakeResponse:
    def __init__(self, status_code=200, payload=None, body_error=None):
        self.status_code = status_code
        self._payload = payload
        self._body_error = body_error

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._body_error:
            raise self._body_error
        return self._payload


def patch_get(monkeypatch, client, result):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append((url, timeout))
        if isinstance(result, BaseException):
            raise result
        return result

    monkeypatch.setattr(client.session, "get", fake_get)
    return calls


def test_fetch_decodes_json(monkeypatch):
    client = APIClient("http://api.test/", timeout=3)
    calls = patch_get(monkeypatch, client, FakeResponse(200, [{"id": 1}]))

    assert client.fetch("/api/sales") == [{"id": 1}]
    assert calls == [("http://api.test/api/sales", 3)]


def test_http_error_carries_status(monkeypatch):
    client = APIClient("http://api.test")
    patch_get(monkeypatch, client, FakeResponse(500))

    with pytest.raises(APIError) as exc:
        client.fetch("/api/sales")

    assert exc.value.status_code == 500
    assert str(exc.value) == "HTTP error! status: 500"


def test_timeout_message(monkeypatch):
    client = APIClient("http://api.test", timeout=15)
    patch_get(monkeypatch, client, requests.exceptions.ReadTimeout())

    with pytest.raises(APIError, match="Request timed out after 15s"):
        client.fetch("/api/sales")


def test_connection_error(monkeypatch):
    client = APIClient("http://api.test")
    patch_get(monkeypatch, client, requests.exceptions.ConnectionError())

    with pytest.raises(APIError, match="Backend not connected"):
        client.fetch("/api/sales")


def test_invalid_json(monkeypatch):
    client = APIClient("http://api.test")
    patch_get(monkeypatch, client, FakeResponse(200, body_error=ValueError("bad")))

    with pytest.raises(APIError) as exc:
        client.fetch("/api/sales")
    assert exc.value.status_code is None


def test_is_connected_folds_errors(monkeypatch):
    client = APIClient("http://api.test")
    patch_get(monkeypatch, client, requests.exceptions.ConnectionError())

    assert "Backend not connected" in client.health()["error"]
    assert client.is_connected() is False


def test_fetch_async_feeds_hook(monkeypatch):
    client = APIClient("http://api.test")
    patch_get(monkeypatch, client, FakeResponse(404))
    hook = DataFetchHook(client.fetch_async, endpoint="/api/missing")

    async def scenario():
        hook.use()
        return await hook.wait()

    state = asyncio.run(scenario())
    assert state.error == "HTTP error! status: 404"
    assert state.data is None


def test_background_loop_runs_hooks():
    runtime = BackgroundLoop().start()
    try:
        async def fetcher(endpoint):
            return endpoint.upper()

        hook = DataFetchHook(fetcher, endpoint="/api/x")
        runtime.call(hook.use)
        state = runtime.run(hook.wait(), timeout=5)
        assert state.data == "/API/X"
    finally:
        runtime.stop()
    assert not runtime.is_running


def test_background_loop_not_started():
    async def noop():
        return None

    coro = noop()
    with pytest.raises(RuntimeError):
        BackgroundLoop().run(coro)
    coro.close()


def test_concurrent_fetches_share_session_one_at_a_time(monkeypatch):
    client = APIClient("http://api.test")
    active = []
    overlap = []

    def fake_get(url, params=None, timeout=None):
        active.append(url)
        overlap.append(len(active))
        time.sleep(0.02)
        active.remove(url)
        return FakeResponse(200, {"url": url})

    monkeypatch.setattr(client.session, "get", fake_get)

    async def scenario():
        return await asyncio.gather(*(client.fetch_async(f"/api/{i}") for i in range(4)))

    results = asyncio.run(scenario())
    assert [r["url"] for r in results] == [f"http://api.test/api/{i}" for i in range(4)]
    assert max(overlap) == 1
