"""
Derived-View Transforms
Reshape fetched records into the flat points each chart and card expects.

Every function here is pure: inputs are never mutated and each call
returns new lists/dicts.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Sequence, TypeVar

from ..models import AnalyticsRecord, PerformanceMetric, RealtimeMetric, SalesRecord

R = TypeVar("R")

Point = Dict[str, Any]


# =============================================================================
# Labels & Units
# =============================================================================

def _parse_date(value: str) -> date:
    return date.fromisoformat(value[:10])


def short_date_label(value: str) -> str:
    """'2024-03-05' -> 'Mar 5'"""
    d = _parse_date(value)
    return f"{d:%b} {d.day}"


def numeric_date_label(value: str) -> str:
    """'2024-03-05' -> '3/5/2024'"""
    d = _parse_date(value)
    return f"{d.month}/{d.day}/{d.year}"


def round_half_up(value: float) -> int:
    """Nearest integer, exact halves round up (2.5 -> 3, -2.5 -> -2)"""
    return math.floor(value + 0.5)


def seconds_to_minutes(seconds: float) -> int:
    return round_half_up(seconds / 60)


# =============================================================================
# Windowing
# =============================================================================

def window_recent(records: Sequence[R], n: int) -> List[R]:
    """
    Most recent `n` records in chronological order.

    `records` must be newest-first (as /api/analytics returns them).
    """
    if n <= 0:
        return []
    return list(reversed(records[:n]))


def engagement_points(analytics: Sequence[AnalyticsRecord], window: int = 14) -> List[Point]:
    """Session length (minutes) and bounce rate for the engagement chart"""
    return [
        {
            "date": short_date_label(r.date),
            "session_duration": seconds_to_minutes(r.session_duration),
            "bounce_rate": r.bounce_rate,
        }
        for r in window_recent(analytics, window)
    ]


def analytics_chart_points(analytics: Sequence[AnalyticsRecord], window: int = 10) -> List[Point]:
    return [
        {
            "date": numeric_date_label(r.date),
            "active_users": r.active_users,
            "new_users": r.new_users,
            "session_duration": r.session_duration,
        }
        for r in window_recent(analytics, window)
    ]


def analytics_report_rows(analytics: Sequence[AnalyticsRecord], window: int = 12) -> List[Point]:
    return [
        {
            "period": short_date_label(r.date),
            "active_users": r.active_users,
            "new_users": r.new_users,
            "session_duration": seconds_to_minutes(r.session_duration),
            "bounce_rate": r.bounce_rate,
        }
        for r in window_recent(analytics, window)
    ]


# =============================================================================
# Sales
# =============================================================================

def sales_chart_points(sales: Sequence[SalesRecord]) -> List[Point]:
    """Revenue in thousands, per month"""
    return [
        {
            "month": r.month,
            "revenue": r.revenue / 1000,
            "orders": r.orders,
            "customers": r.customers,
        }
        for r in sales
    ]


def sales_report_rows(sales: Sequence[SalesRecord]) -> List[Point]:
    return [
        {
            "period": r.month,
            "revenue": r.revenue / 1000,
            "orders": r.orders,
            "customers": r.customers,
            "avg_order_value": round_half_up(r.revenue / r.orders) if r.orders else 0,
        }
        for r in sales
    ]


# =============================================================================
# Grouping
# =============================================================================

def group_metrics_by_category(metrics: Sequence[PerformanceMetric]) -> List[Point]:
    """
    One record per category, metric values keyed by metric name.

    Categories keep first-seen order. When a metric name repeats within a
    category the later value overwrites the earlier one.
    """
    grouped: Dict[str, Point] = {}
    for m in metrics:
        record = grouped.get(m.category)
        if record is None:
            record = grouped[m.category] = {"category": m.category}
        record[m.metric_name] = m.metric_value
    return list(grouped.values())


def category_breakdown(grouped: Sequence[Point]) -> List[Point]:
    """Pie slices: number of distinct metrics per category"""
    return [
        {"name": g["category"], "value": len([k for k in g if k != "category"])}
        for g in grouped
    ]


def performance_report_rows(metrics: Sequence[PerformanceMetric]) -> List[Point]:
    """Count and mean value per category"""
    sums: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    for m in metrics:
        sums[m.category] = sums.get(m.category, 0.0) + m.metric_value
        counts[m.category] = counts.get(m.category, 0) + 1
    return [
        {"category": c, "count": counts[c], "avg_value": sums[c] / counts[c]}
        for c in sums
    ]


# =============================================================================
# Aggregates
# =============================================================================

def _values(records: Sequence[Any], field: str) -> List[float]:
    return [getattr(r, field) for r in records]


def total(records: Sequence[Any], field: str) -> float:
    return sum(_values(records, field))


def average(records: Sequence[Any], field: str, fallback: float = 0) -> float:
    values = _values(records, field)
    if not values:
        return fallback
    return sum(values) / len(values)


def maximum(records: Sequence[Any], field: str, fallback: float = 0) -> float:
    values = _values(records, field)
    return max(values) if values else fallback


def minimum(records: Sequence[Any], field: str, fallback: float = 0) -> float:
    values = _values(records, field)
    return min(values) if values else fallback


@dataclass(frozen=True)
class SalesSummary:
    records: int = 0
    total_revenue: float = 0
    total_orders: int = 0
    total_customers: int = 0


@dataclass(frozen=True)
class EngagementSummary:
    data_points: int = 0
    peak_active_users: int = 0
    avg_session_minutes: float = 0
    best_bounce_rate: float = 0


@dataclass(frozen=True)
class MetricsSummary:
    total_metrics: int = 0
    categories: int = 0
    avg_performance: float = 0


def summarize_sales(sales: Sequence[SalesRecord]) -> SalesSummary:
    return SalesSummary(
        records=len(sales),
        total_revenue=total(sales, "revenue"),
        total_orders=int(total(sales, "orders")),
        total_customers=int(total(sales, "customers")),
    )


def summarize_engagement(analytics: Sequence[AnalyticsRecord]) -> EngagementSummary:
    return EngagementSummary(
        data_points=len(analytics),
        peak_active_users=int(maximum(analytics, "active_users")),
        avg_session_minutes=round(average(analytics, "session_duration") / 60, 1),
        best_bounce_rate=minimum(analytics, "bounce_rate"),
    )


def summarize_metrics(metrics: Sequence[PerformanceMetric], performance_category: str = "Performance") -> MetricsSummary:
    performance = [m for m in metrics if m.category == performance_category]
    return MetricsSummary(
        total_metrics=len(metrics),
        categories=len({m.category for m in metrics}),
        avg_performance=average(performance, "metric_value"),
    )


# =============================================================================
# Realtime
# =============================================================================

def format_realtime_value(metric: RealtimeMetric) -> str:
    if metric.name == "Revenue":
        return f"${metric.value / 1000:.0f}k"
    if "Rate" in metric.name:
        return f"{metric.value:.1f}%"
    return f"{metric.value:,.0f}"
