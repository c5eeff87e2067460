"""
Hooks
Data-fetching view state between the API and the pages.

    fetch.py    -> DataFetchHook (dependency-keyed, stale-response safe)
    polling.py  -> PollingHook (fixed-interval realtime snapshot)
    runtime.py  -> BackgroundLoop (event loop the hooks run on)
"""

from .fetch import (
    DEFAULT_TIMEOUT,
    DataFetchHook,
    FetchState,
    same_dependencies,
    sales_data_hook,
    user_analytics_hook,
    performance_metrics_hook,
)
from .polling import PollingHook, realtime_metrics_hook
from .runtime import BackgroundLoop

__all__ = [
    "DEFAULT_TIMEOUT",
    "DataFetchHook",
    "FetchState",
    "same_dependencies",
    "sales_data_hook",
    "user_analytics_hook",
    "performance_metrics_hook",
    "PollingHook",
    "realtime_metrics_hook",
    "BackgroundLoop",
]
