"""
Polling Hook
Fetches one endpoint immediately on mount, then on a fixed schedule until
unmounted. Failures are logged and otherwise ignored: the last good
snapshot stays in place and no error is ever exposed.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Generic, Optional, TypeVar

from ..models import RealtimeSnapshot, parse_realtime
from .fetch import DEFAULT_TIMEOUT, FetchState, Fetcher, Parser, _identity

logger = logging.getLogger(__name__)

T = TypeVar("T")

REALTIME_ENDPOINT = "/api/realtime"
DEFAULT_INTERVAL = 5.0


class PollingHook(Generic[T]):
    def __init__(
        self,
        endpoint: str,
        fetcher: Fetcher,
        parser: Optional[Parser] = None,
        interval: float = DEFAULT_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.endpoint = endpoint
        self.interval = interval
        self._fetcher = fetcher
        self._parser = parser or _identity
        self._timeout = timeout
        self._state: FetchState[T] = FetchState()
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> FetchState[T]:
        return self._state

    @property
    def mounted(self) -> bool:
        return self._task is not None and not self._task.done()

    def mount(self) -> asyncio.Task:
        """Start polling; mounting twice keeps the existing schedule"""
        if not self.mounted:
            self._task = asyncio.get_running_loop().create_task(self._poll_forever())
        return self._task

    def unmount(self) -> None:
        """Cancel the schedule; no fetch is issued after this returns"""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def poll_once(self) -> FetchState[T]:
        try:
            payload = await asyncio.wait_for(self._fetcher(self.endpoint), self._timeout)
            self._state = FetchState(data=self._parser(payload), loading=False, error=None)
        except asyncio.TimeoutError:
            logger.warning("Polling %s timed out after %gs", self.endpoint, self._timeout)
        except Exception as e:
            logger.warning("Error polling %s: %s", self.endpoint, e)
        finally:
            if self._state.loading:
                self._state = replace(self._state, loading=False)
        return self._state

    async def _poll_forever(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while True:
            await self.poll_once()
            next_tick += self.interval
            # A fetch slower than the interval skips the ticks it overran
            while next_tick <= loop.time():
                next_tick += self.interval
            await asyncio.sleep(next_tick - loop.time())


def realtime_metrics_hook(
    fetcher: Fetcher,
    interval: float = DEFAULT_INTERVAL,
    timeout: float = DEFAULT_TIMEOUT,
) -> "PollingHook[RealtimeSnapshot]":
    return PollingHook(REALTIME_ENDPOINT, fetcher, parse_realtime, interval, timeout)
