"""
Typed Models for Frontend
"""

from .records import (
    SalesRecord,
    AnalyticsRecord,
    PerformanceMetric,
    RealtimeMetric,
    RealtimeSnapshot,
    parse_sales,
    parse_user_analytics,
    parse_performance_metrics,
    parse_realtime,
    to_rows,
)
from .freshness import DataFreshness, FreshnessLevel

__all__ = [
    "SalesRecord",
    "AnalyticsRecord",
    "PerformanceMetric",
    "RealtimeMetric",
    "RealtimeSnapshot",
    "parse_sales",
    "parse_user_analytics",
    "parse_performance_metrics",
    "parse_realtime",
    "to_rows",
    "DataFreshness",
    "FreshnessLevel",
]
