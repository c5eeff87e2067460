"""
Typed Record Models
Lightweight dataclasses for everything the frontend fetches.

`from_dict` is strict: a payload missing a field, or carrying the wrong
type, raises instead of producing a half-filled record. The fetch hooks
rely on that to turn a malformed body into an error state.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping


def _number(data: Mapping[str, Any], key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Field '{key}' must be a number, got {type(value).__name__}")
    return value


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


def _expect_list(payload: Any) -> list:
    if not isinstance(payload, list):
        raise TypeError(f"Expected a list of records, got {type(payload).__name__}")
    return payload


# =============================================================================
# Persisted Collections
# =============================================================================

@dataclass(frozen=True)
class SalesRecord:
    id: int
    month: str
    revenue: float
    orders: int
    customers: int
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SalesRecord":
        return cls(
            id=int(_number(data, "id")),
            month=_text(data, "month"),
            revenue=float(_number(data, "revenue")),
            orders=int(_number(data, "orders")),
            customers=int(_number(data, "customers")),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass(frozen=True)
class AnalyticsRecord:
    """One day of engagement; session_duration is in seconds"""
    id: int
    date: str
    active_users: int
    new_users: int
    session_duration: float
    bounce_rate: float
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalyticsRecord":
        return cls(
            id=int(_number(data, "id")),
            date=_text(data, "date"),
            active_users=int(_number(data, "active_users")),
            new_users=int(_number(data, "new_users")),
            session_duration=float(_number(data, "session_duration")),
            bounce_rate=float(_number(data, "bounce_rate")),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass(frozen=True)
class PerformanceMetric:
    id: int
    metric_name: str
    metric_value: float
    timestamp: str
    category: str
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PerformanceMetric":
        return cls(
            id=int(_number(data, "id")),
            metric_name=_text(data, "metric_name"),
            metric_value=float(_number(data, "metric_value")),
            timestamp=_text(data, "timestamp"),
            category=_text(data, "category"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


# =============================================================================
# Realtime
# =============================================================================

@dataclass(frozen=True)
class RealtimeMetric:
    name: str
    value: float
    change: float
    color: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RealtimeMetric":
        return cls(
            name=_text(data, "name"),
            value=float(_number(data, "value")),
            change=float(_number(data, "change")),
            color=_text(data, "color"),
        )


@dataclass(frozen=True)
class RealtimeSnapshot:
    timestamp: datetime
    metrics: List[RealtimeMetric] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RealtimeSnapshot":
        if not isinstance(data, Mapping):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        return cls(
            timestamp=datetime.fromisoformat(_text(data, "timestamp").replace("Z", "+00:00")),
            metrics=[RealtimeMetric.from_dict(m) for m in _expect_list(data["metrics"])],
        )


# =============================================================================
# Collection Parsers (used by the fetch hooks)
# =============================================================================

def parse_sales(payload: Any) -> List[SalesRecord]:
    return [SalesRecord.from_dict(row) for row in _expect_list(payload)]


def parse_user_analytics(payload: Any) -> List[AnalyticsRecord]:
    return [AnalyticsRecord.from_dict(row) for row in _expect_list(payload)]


def parse_performance_metrics(payload: Any) -> List[PerformanceMetric]:
    return [PerformanceMetric.from_dict(row) for row in _expect_list(payload)]


def parse_realtime(payload: Any) -> RealtimeSnapshot:
    return RealtimeSnapshot.from_dict(payload)


def to_rows(records: List[Any]) -> List[Dict[str, Any]]:
    """Plain dict rows, e.g. for DataFrames or CSV export"""
    return [asdict(r) for r in records]
