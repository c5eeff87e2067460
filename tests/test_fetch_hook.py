import asyncio

import pytest

from dataflow_ui.hooks import DataFetchHook, FetchState, same_dependencies, sales_data_hook
from dataflow_ui.utils import APIError


class ScriptedFetcher:
    """Async fetcher whose responses are queued per call"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def __call__(self, endpoint):
        self.calls.append(endpoint)
        delay, payload = self.responses.pop(0)
        await asyncio.sleep(delay)
        if isinstance(payload, BaseException):
            raise payload
        return payload


SALES_PAYLOAD = [
    {"id": 1, "month": "Jan", "revenue": 45000.0, "orders": 450, "customers": 320,
     "created_at": "2024-01-01 00:00:00", "updated_at": "2024-01-01 00:00:00"},
]


def test_same_dependencies():
    marker = object()
    assert same_dependencies((), ())
    assert same_dependencies((1, "a", marker), (1, "a", marker))
    assert not same_dependencies(None, ())
    assert not same_dependencies((1,), (1, 2))
    assert not same_dependencies((1,), (2,))


def test_initial_state_is_loading():
    assert FetchState() == FetchState(data=None, loading=True, error=None)


def test_mount_fetches_and_parses():
    fetcher = ScriptedFetcher((0, SALES_PAYLOAD))
    hook = sales_data_hook(fetcher)

    async def scenario():
        first = hook.use()
        assert first.loading and first.data is None
        return await hook.wait()

    state = asyncio.run(scenario())

    assert fetcher.calls == ["/api/sales"]
    assert not state.loading
    assert state.error is None
    assert state.data[0].month == "Jan"
    assert state.data[0].revenue == 45000.0


def test_unchanged_dependencies_do_not_refetch():
    fetcher = ScriptedFetcher((0, "one"), (0, "two"))
    hook = DataFetchHook(fetcher, endpoint="/api/x")

    async def scenario():
        hook.use(dependencies=["7d"])
        await hook.wait()
        hook.use(dependencies=["7d"])
        return await hook.wait()

    state = asyncio.run(scenario())
    assert len(fetcher.calls) == 1
    assert state.data == "one"


def test_dependency_change_refetches_and_keeps_previous_data_while_loading():
    fetcher = ScriptedFetcher((0, "first"), (0.01, "second"))
    hook = DataFetchHook(fetcher, endpoint="/api/x")

    async def scenario():
        hook.use(dependencies=[1])
        await hook.wait()
        pending = hook.use(dependencies=[2])
        assert pending.loading
        assert pending.data == "first"
        assert pending.error is None
        return await hook.wait()

    state = asyncio.run(scenario())
    assert len(fetcher.calls) == 2
    assert state == FetchState(data="second", loading=False, error=None)


def test_endpoint_passed_to_use_overrides_default():
    fetcher = ScriptedFetcher((0, {}))
    hook = DataFetchHook(fetcher)

    async def scenario():
        hook.use("/api/other")
        await hook.wait()

    asyncio.run(scenario())
    assert fetcher.calls == ["/api/other"]


def test_use_without_endpoint_raises():
    hook = DataFetchHook(ScriptedFetcher())

    async def scenario():
        hook.use()

    with pytest.raises(ValueError):
        asyncio.run(scenario())


def test_stale_response_is_discarded():
    async def fetcher(endpoint):
        if endpoint == "/slow":
            try:
                await asyncio.sleep(0.05)
            except asyncio.CancelledError:
                # Ignore cancellation and answer late anyway
                await asyncio.sleep(0.05)
            return "stale"
        return "fresh"

    hook = DataFetchHook(fetcher)

    async def scenario():
        hook.use("/slow", dependencies=["a"])
        await asyncio.sleep(0.01)
        hook.use("/fast", dependencies=["b"])
        state = await hook.wait()
        # Give the slow request time to finish
        await asyncio.sleep(0.15)
        return state, hook.state

    after_fast, after_slow = asyncio.run(scenario())
    assert after_fast.data == "fresh"
    assert after_slow == FetchState(data="fresh", loading=False, error=None)


def test_out_of_order_completion_keeps_latest():
    fetcher = ScriptedFetcher((0.05, "old"), (0.01, "new"))
    hook = DataFetchHook(fetcher, endpoint="/api/x")

    async def scenario():
        hook.use(dependencies=[1])
        await asyncio.sleep(0)
        hook.use(dependencies=[2])
        await hook.wait()
        await asyncio.sleep(0.1)
        return hook.state

    assert asyncio.run(scenario()).data == "new"


def test_unmount_drops_in_flight_response():
    fetcher = ScriptedFetcher((0.02, "late"))
    hook = DataFetchHook(fetcher, endpoint="/api/x")

    async def scenario():
        hook.use()
        await asyncio.sleep(0)
        hook.unmount()
        await asyncio.sleep(0.05)
        return hook.state

    state = asyncio.run(scenario())
    assert state.data is None
    assert not hook.mounted


def test_http_error_surfaces_message_and_clears_data():
    fetcher = ScriptedFetcher((0, "ok"), (0, APIError("HTTP error! status: 500", status_code=500)))
    hook = DataFetchHook(fetcher, endpoint="/api/x")

    async def scenario():
        hook.use(dependencies=[1])
        await hook.wait()
        hook.use(dependencies=[2])
        return await hook.wait()

    state = asyncio.run(scenario())
    assert state == FetchState(data=None, loading=False, error="HTTP error! status: 500")


def test_error_without_message_uses_fallback():
    fetcher = ScriptedFetcher((0, RuntimeError()))
    hook = DataFetchHook(fetcher, endpoint="/api/x")

    async def scenario():
        hook.use()
        return await hook.wait()

    assert asyncio.run(scenario()).error == "An error occurred"


def test_parse_failure_is_an_error():
    fetcher = ScriptedFetcher((0, [{"id": 1, "month": "Jan"}]))
    hook = sales_data_hook(fetcher)

    async def scenario():
        hook.use()
        return await hook.wait()

    state = asyncio.run(scenario())
    assert state.data is None
    assert not state.loading
    assert state.error


def test_timeout():
    fetcher = ScriptedFetcher((1.0, "never"))
    hook = DataFetchHook(fetcher, endpoint="/api/x", timeout=0.01)

    async def scenario():
        hook.use()
        return await hook.wait()

    state = asyncio.run(scenario())
    assert state.error == "Request timed out after 0.01s"
    assert state.data is None
    assert not state.loading
