"""
Realtime freshness.

The realtime cards never show an error; a failed poll just leaves the
previous snapshot in place. Its age is what tells the user it went stale.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class FreshnessLevel(Enum):
    """Data freshness classification"""
    FRESH = "fresh"        # < 10s
    STALE = "stale"        # 10-30s
    OLD = "old"            # > 30s
    DISCONNECTED = "disconnected"

    @property
    def color(self) -> str:
        colors = {
            "fresh": "#10b981",
            "stale": "#f59e0b",
            "old": "#ef4444",
            "disconnected": "#64748b",
        }
        return colors.get(self.value, "#64748b")

    @property
    def label(self) -> str:
        labels = {
            "fresh": "LIVE",
            "stale": "DELAYED",
            "old": "STALE",
            "disconnected": "OFFLINE",
        }
        return labels.get(self.value, "UNKNOWN")


@dataclass
class DataFreshness:
    """Tracks snapshot age"""
    last_update: Optional[datetime] = None
    age_seconds: float = 0.0
    level: FreshnessLevel = FreshnessLevel.DISCONNECTED

    @classmethod
    def from_timestamp(cls, ts: Optional[datetime], now: Optional[datetime] = None) -> "DataFreshness":
        if ts is None:
            return cls(level=FreshnessLevel.DISCONNECTED)

        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        now = now or datetime.now(timezone.utc)
        age = max(0.0, (now - ts).total_seconds())

        if age < 10:
            level = FreshnessLevel.FRESH
        elif age < 30:
            level = FreshnessLevel.STALE
        else:
            level = FreshnessLevel.OLD

        return cls(last_update=ts, age_seconds=age, level=level)

    @property
    def display(self) -> str:
        if self.level == FreshnessLevel.DISCONNECTED:
            return "Disconnected"
        return f"{self.age_seconds:.1f}s ago"
