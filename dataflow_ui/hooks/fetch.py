"""
Data-Fetch Hook
Request/response wrapper producing {data, loading, error} for one endpoint.

A hook is driven by calling use() once per render with the current
dependencies. It starts a new fetch cycle on the first call and whenever
the dependencies change (shallow, element by element). Each cycle gets a
generation number; only the latest generation may write state, so a slow
response to a superseded request is dropped instead of overwriting newer
data.

Must be used from inside a running asyncio event loop.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

from ..models import (
    SalesRecord,
    AnalyticsRecord,
    PerformanceMetric,
    parse_sales,
    parse_user_analytics,
    parse_performance_metrics,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetcher = Callable[[str], Awaitable[Any]]
Parser = Callable[[Any], T]

DEFAULT_TIMEOUT = 15.0

SALES_ENDPOINT = "/api/sales"
ANALYTICS_ENDPOINT = "/api/analytics"
METRICS_ENDPOINT = "/api/metrics"


@dataclass(frozen=True)
class FetchState(Generic[T]):
    """Snapshot of one hook's request; replaced wholesale on every change"""
    data: Optional[T] = None
    loading: bool = True
    error: Optional[str] = None


def same_dependencies(previous: Optional[Sequence], current: Sequence) -> bool:
    """Shallow comparison: same length and each element identical or equal"""
    if previous is None or len(previous) != len(current):
        return False
    return all(a is b or a == b for a, b in zip(previous, current))


def _identity(payload: Any) -> Any:
    return payload


class DataFetchHook(Generic[T]):
    """
    Usage:
        hook = DataFetchHook(client.fetch_async, parse_sales, endpoint="/api/sales")

        state = hook.use()                        # mount, first fetch
        state = hook.use(dependencies=[range])    # refetch only if range changed
        await hook.wait()
        hook.state.data

        hook.unmount()
    """

    def __init__(
        self,
        fetcher: Fetcher,
        parser: Optional[Parser] = None,
        endpoint: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._fetcher = fetcher
        self._parser = parser or _identity
        self._timeout = timeout
        self.endpoint = endpoint
        self._state: FetchState[T] = FetchState()
        self._dependencies: Optional[tuple] = None
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._mounted = False

    @property
    def state(self) -> FetchState[T]:
        return self._state

    @property
    def mounted(self) -> bool:
        return self._mounted

    def use(self, endpoint: Optional[str] = None, dependencies: Sequence = ()) -> FetchState[T]:
        """Per-render call; starts a fetch cycle on mount or dependency change"""
        if endpoint is not None:
            self.endpoint = endpoint
        if self.endpoint is None:
            raise ValueError("DataFetchHook.use() needs an endpoint")

        dependencies = tuple(dependencies)
        if self._mounted and same_dependencies(self._dependencies, dependencies):
            return self._state

        self._mounted = True
        self._dependencies = dependencies
        self._start(self.endpoint)
        return self._state

    def unmount(self) -> None:
        """Drop the in-flight request; nothing it returns will be applied"""
        self._mounted = False
        self._dependencies = None
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> FetchState[T]:
        """Wait for the current cycle to finish and return the resulting state"""
        task = self._task
        if task is not None:
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
        return self._state

    def _start(self, endpoint: str) -> None:
        self._generation += 1
        generation = self._generation

        if self._task is not None and not self._task.done():
            self._task.cancel()

        self._state = replace(self._state, loading=True, error=None)
        self._task = asyncio.get_running_loop().create_task(self._run(endpoint, generation))

    async def _run(self, endpoint: str, generation: int) -> None:
        result: Optional[FetchState[T]] = None
        try:
            payload = await asyncio.wait_for(self._fetcher(endpoint), self._timeout)
            result = FetchState(data=self._parser(payload), loading=False, error=None)
        except asyncio.TimeoutError:
            result = FetchState(data=None, loading=False, error=f"Request timed out after {self._timeout:g}s")
        except Exception as e:
            # Transport, HTTP status and parse failures all end up here
            logger.debug("Fetch of %s failed: %s", endpoint, e)
            result = FetchState(data=None, loading=False, error=str(e) or "An error occurred")
        finally:
            if generation != self._generation:
                logger.debug("Discarding stale response for %s (generation %d)", endpoint, generation)
            elif result is not None:
                self._state = result
            else:
                self._state = replace(self._state, loading=False)


# =============================================================================
# Resource Hooks
# =============================================================================

def sales_data_hook(fetcher: Fetcher, timeout: float = DEFAULT_TIMEOUT) -> "DataFetchHook[List[SalesRecord]]":
    return DataFetchHook(fetcher, parse_sales, SALES_ENDPOINT, timeout)


def user_analytics_hook(fetcher: Fetcher, timeout: float = DEFAULT_TIMEOUT) -> "DataFetchHook[List[AnalyticsRecord]]":
    return DataFetchHook(fetcher, parse_user_analytics, ANALYTICS_ENDPOINT, timeout)


def performance_metrics_hook(fetcher: Fetcher, timeout: float = DEFAULT_TIMEOUT) -> "DataFetchHook[List[PerformanceMetric]]":
    return DataFetchHook(fetcher, parse_performance_metrics, METRICS_ENDPOINT, timeout)
