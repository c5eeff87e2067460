"""
Core Module
Domain models shared by the routers, storage and services.
"""

from .models import (
    SalesRecord,
    UserAnalytics,
    PerformanceMetric,
    RealtimeMetric,
    RealtimeSnapshot,
    SessionRequest,
    SuccessResponse,
    RedirectUrlResponse,
)

__all__ = [
    "SalesRecord",
    "UserAnalytics",
    "PerformanceMetric",
    "RealtimeMetric",
    "RealtimeSnapshot",
    "SessionRequest",
    "SuccessResponse",
    "RedirectUrlResponse",
]
