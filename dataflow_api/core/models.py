"""
Domain Models
The response contracts of the API.

Rows come out of SQLite as plain mappings; everything the routers return
goes through these types first.
"""

from pydantic import BaseModel, Field
from typing import Optional, List


# =============================================================================
# Persisted Collections
# =============================================================================

class SalesRecord(BaseModel):
    """One month of sales"""
    id: int
    month: str
    revenue: float
    orders: int
    customers: int
    created_at: str
    updated_at: str


class UserAnalytics(BaseModel):
    """
    One day of user engagement.

    Fields:
        session_duration: Average session length in seconds
        bounce_rate: Percentage (0-100)
    """
    id: int
    date: str
    active_users: int
    new_users: int
    session_duration: float
    bounce_rate: float
    created_at: str
    updated_at: str


class PerformanceMetric(BaseModel):
    """A single named measurement within a category"""
    id: int
    metric_name: str
    metric_value: float
    timestamp: str
    category: str
    created_at: str
    updated_at: str


# =============================================================================
# Realtime (synthetic, never persisted)
# =============================================================================

class RealtimeMetric(BaseModel):
    name: str
    value: float
    change: float
    color: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")


class RealtimeSnapshot(BaseModel):
    timestamp: str
    metrics: List[RealtimeMetric]


# =============================================================================
# Auth
# =============================================================================

class SessionRequest(BaseModel):
    """Authorization code handed back by the OAuth redirect"""
    code: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True


class RedirectUrlResponse(BaseModel):
    redirectUrl: str
