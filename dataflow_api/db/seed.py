"""
Demo Data Seeder
Fills an empty store with realistic-looking dashboard data.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

import numpy as np

from .sqlite import SQLiteStorage

logger = logging.getLogger(__name__)

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# (metric_name, category, baseline, jitter)
METRIC_CATALOG = [
    ("Page Load Time", "Performance", 1.2, 0.3),
    ("API Response Time", "Performance", 180.0, 40.0),
    ("Server Uptime", "Infrastructure", 99.9, 0.05),
    ("CPU Usage", "Infrastructure", 45.0, 10.0),
    ("Memory Usage", "Infrastructure", 62.0, 8.0),
    ("Error Rate", "Reliability", 0.4, 0.2),
    ("Conversion Rate", "Business", 3.8, 0.6),
    ("Customer Satisfaction", "Business", 4.5, 0.2),
]


class DemoDataGenerator:
    """Generate the three dashboard collections"""

    def __init__(self, seed: int = 42):
        self._rng = np.random.default_rng(seed)

    def sales(self, n_months: int = 12) -> List[Dict]:
        """Monthly sales with a gentle upward trend"""
        trend = np.linspace(1.0, 1.6, n_months)
        noise = self._rng.normal(1.0, 0.06, n_months)
        revenue = np.round(45000 * trend * noise, 2)
        orders = np.round(revenue / self._rng.uniform(85, 115, n_months)).astype(int)
        customers = np.round(orders * self._rng.uniform(0.6, 0.8, n_months)).astype(int)

        return [
            {
                "month": MONTHS[i % 12],
                "revenue": float(revenue[i]),
                "orders": int(orders[i]),
                "customers": int(customers[i]),
            }
            for i in range(n_months)
        ]

    def user_analytics(self, n_days: int = 60, end: Optional[date] = None) -> List[Dict]:
        """Daily engagement rows ending at `end` (today by default)"""
        end = end or date.today()
        days = [end - timedelta(days=n_days - 1 - i) for i in range(n_days)]

        # Weekday peak, weekend dip
        weekday = np.array([d.weekday() for d in days])
        pattern = np.where(weekday < 5, 1.0, 0.75)
        active = np.round(12000 * pattern * self._rng.normal(1.0, 0.08, n_days)).astype(int)
        new = np.round(active * self._rng.uniform(0.08, 0.15, n_days)).astype(int)
        duration = np.round(self._rng.normal(270, 45, n_days).clip(60, None), 1)
        bounce = np.round(self._rng.normal(38, 5, n_days).clip(10, 90), 1)

        return [
            {
                "date": days[i].isoformat(),
                "active_users": int(active[i]),
                "new_users": int(new[i]),
                "session_duration": float(duration[i]),
                "bounce_rate": float(bounce[i]),
            }
            for i in range(n_days)
        ]

    def performance_metrics(self, samples: int = 3, end: Optional[datetime] = None) -> List[Dict]:
        """`samples` readings of every catalog metric, an hour apart"""
        end = end or datetime.now().replace(microsecond=0)
        rows = []
        for step in range(samples):
            ts = (end - timedelta(hours=samples - 1 - step)).isoformat()
            for name, category, baseline, jitter in METRIC_CATALOG:
                value = round(float(self._rng.normal(baseline, jitter)), 2)
                rows.append({
                    "metric_name": name,
                    "metric_value": value,
                    "timestamp": ts,
                    "category": category,
                })
        return rows


def seed_demo_data(storage: SQLiteStorage, seed: int = 42) -> bool:
    """Seed the store if it holds no rows. Returns True when data was written."""
    if not storage.is_empty():
        return False

    generator = DemoDataGenerator(seed)
    sales = storage.save_sales(generator.sales())
    analytics = storage.save_user_analytics(generator.user_analytics())
    metrics = storage.save_performance_metrics(generator.performance_metrics())
    logger.info(
        "Seeded demo data: %d sales, %d analytics, %d metrics", sales, analytics, metrics
    )
    return True
