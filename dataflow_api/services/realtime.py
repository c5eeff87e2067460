"""
Realtime Metrics Service
Synthesizes the snapshot behind /api/realtime.

Usage:
    from services import get_realtime_generator

    generate = get_realtime_generator()
    metrics = generate()          # List[RealtimeMetric]

Any zero-argument callable returning RealtimeMetrics can stand in for the
default generator; the router only depends on the response shape.
"""

import random
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..core.models import RealtimeMetric, RealtimeSnapshot

MetricGenerator = Callable[[], List[RealtimeMetric]]


class RandomMetricsGenerator:
    """
    Default snapshot generator.

    Every call draws fresh values. Only the metric names and colors are
    stable across calls.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def __call__(self) -> List[RealtimeMetric]:
        r = self._rng.random
        return [
            RealtimeMetric(
                name="Active Users",
                value=float(self._rng.randint(0, 4999) + 15000),
                change=(r() - 0.5) * 10,
                color="#3B82F6",
            ),
            RealtimeMetric(
                name="Revenue",
                value=float(self._rng.randint(0, 49999) + 200000),
                change=(r() - 0.3) * 15,
                color="#10B981",
            ),
            RealtimeMetric(
                name="Conversion Rate",
                value=r() * 5 + 2.5,
                change=(r() - 0.5) * 2,
                color="#8B5CF6",
            ),
            RealtimeMetric(
                name="Bounce Rate",
                value=r() * 20 + 25,
                change=(r() - 0.7) * 5,
                color="#EF4444",
            ),
        ]


def build_snapshot(generate: MetricGenerator) -> RealtimeSnapshot:
    """Stamp a freshly generated metric list with the current UTC time"""
    return RealtimeSnapshot(
        timestamp=datetime.now(timezone.utc).isoformat(),
        metrics=generate(),
    )


# Singleton
_generator: Optional[MetricGenerator] = None


def get_realtime_generator() -> MetricGenerator:
    """Get or create the realtime generator singleton"""
    global _generator
    if _generator is None:
        _generator = RandomMetricsGenerator()
    return _generator
