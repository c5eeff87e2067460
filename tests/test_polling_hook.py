import asyncio

from dataflow_ui.hooks import PollingHook, realtime_metrics_hook
from dataflow_ui.hooks.polling import REALTIME_ENDPOINT


class CountingFetcher:
    def __init__(self, fail_after=None):
        self.calls = 0
        self.fail_after = fail_after

    async def __call__(self, endpoint):
        self.calls += 1
        if self.fail_after is not None and self.calls > self.fail_after:
            raise ConnectionError("backend down")
        return {"n": self.calls}


SNAPSHOT = {
    "timestamp": "2024-03-05T09:30:00.000Z",
    "metrics": [
        {"name": "Active Users", "value": 16000.0, "change": 2.5, "color": "#3B82F6"},
        {"name": "Revenue", "value": 225000.0, "change": -1.0, "color": "#10B981"},
    ],
}


def test_mount_fetches_immediately():
    fetcher = CountingFetcher()
    hook = PollingHook("/api/x", fetcher, interval=10)

    async def scenario():
        hook.mount()
        await asyncio.sleep(0.01)
        state = hook.state
        hook.unmount()
        return state

    state = asyncio.run(scenario())
    assert fetcher.calls == 1
    assert state.data == {"n": 1}
    assert not state.loading
    assert state.error is None


def test_polls_on_interval():
    fetcher = CountingFetcher()
    hook = PollingHook("/api/x", fetcher, interval=0.02)

    async def scenario():
        hook.mount()
        await asyncio.sleep(0.09)
        hook.unmount()

    asyncio.run(scenario())
    assert 3 <= fetcher.calls <= 6


def test_mount_twice_keeps_one_schedule():
    fetcher = CountingFetcher()
    hook = PollingHook("/api/x", fetcher, interval=10)

    async def scenario():
        first = hook.mount()
        second = hook.mount()
        await asyncio.sleep(0.01)
        hook.unmount()
        return first is second

    assert asyncio.run(scenario())
    assert fetcher.calls == 1


def test_no_fetch_after_unmount():
    fetcher = CountingFetcher()
    hook = PollingHook("/api/x", fetcher, interval=0.01)

    async def scenario():
        hook.mount()
        await asyncio.sleep(0.03)
        hook.unmount()
        calls = fetcher.calls
        await asyncio.sleep(0.05)
        return calls

    calls_at_unmount = asyncio.run(scenario())
    assert fetcher.calls == calls_at_unmount
    assert not hook.mounted


def test_failures_keep_last_snapshot_and_never_surface():
    fetcher = CountingFetcher(fail_after=1)
    hook = PollingHook("/api/x", fetcher, interval=0.01)

    async def scenario():
        hook.mount()
        await asyncio.sleep(0.05)
        hook.unmount()

    asyncio.run(scenario())
    assert fetcher.calls > 1
    assert hook.state.data == {"n": 1}
    assert hook.state.error is None
    assert not hook.state.loading


def test_first_failure_clears_loading():
    fetcher = CountingFetcher(fail_after=0)
    hook = PollingHook("/api/x", fetcher, interval=10)

    state = asyncio.run(hook.poll_once())
    assert state.data is None
    assert state.error is None
    assert not state.loading


def test_realtime_hook_parses_snapshot():
    async def fetcher(endpoint):
        assert endpoint == REALTIME_ENDPOINT
        return SNAPSHOT

    hook = realtime_metrics_hook(fetcher, interval=10)
    state = asyncio.run(hook.poll_once())

    assert state.data.timestamp.tzinfo is not None
    assert [m.name for m in state.data.metrics] == ["Active Users", "Revenue"]
