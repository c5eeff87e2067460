"""
SQLite Storage
Persistent storage layer.

Responsibilities:
- Create the three dashboard tables
- Read each collection in the order the API promises
- Bulk inserts for the demo seeder

NOT responsible for:
- Response shaping (routers do this)
- Data generation (seed.py)
"""

import sqlite3
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..config import get_config


class SQLiteStorage:
    """
    SQLite persistence for dashboard data.

    Tables:
        - sales_data: Monthly sales
        - user_analytics: Daily engagement
        - performance_metrics: Named measurements by category
    """

    def __init__(self, db_path: str = "data/dataflow.db"):
        self.db_path = db_path
        self._ensure_directory()
        self._init_schema()

    def _ensure_directory(self):
        """Create data directory"""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self):
        """Initialize database schema"""
        with sqlite3.connect(self.db_path) as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS sales_data (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    month TEXT NOT NULL,
                    revenue REAL NOT NULL,
                    orders INTEGER NOT NULL,
                    customers INTEGER NOT NULL,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS user_analytics (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    date TEXT NOT NULL,
                    active_users INTEGER NOT NULL,
                    new_users INTEGER NOT NULL,
                    session_duration REAL NOT NULL,
                    bounce_rate REAL NOT NULL,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                );

                CREATE INDEX IF NOT EXISTS idx_user_analytics_date
                ON user_analytics(date);

                CREATE TABLE IF NOT EXISTS performance_metrics (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    metric_name TEXT NOT NULL,
                    metric_value REAL NOT NULL,
                    timestamp TEXT NOT NULL,
                    category TEXT NOT NULL,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                );

                CREATE INDEX IF NOT EXISTS idx_performance_metrics_ts
                ON performance_metrics(timestamp);
            """)

    # =========================================================================
    # Write Operations
    # =========================================================================

    def save_sales(self, rows: Iterable[Dict[str, Any]]) -> int:
        """Insert sales rows (month, revenue, orders, customers)"""
        rows = list(rows)
        if not rows:
            return 0

        with sqlite3.connect(self.db_path) as conn:
            conn.executemany(
                """INSERT INTO sales_data (month, revenue, orders, customers)
                   VALUES (?, ?, ?, ?)""",
                [(r["month"], r["revenue"], r["orders"], r["customers"]) for r in rows]
            )
        return len(rows)

    def save_user_analytics(self, rows: Iterable[Dict[str, Any]]) -> int:
        """Insert daily analytics rows"""
        rows = list(rows)
        if not rows:
            return 0

        with sqlite3.connect(self.db_path) as conn:
            conn.executemany(
                """INSERT INTO user_analytics
                   (date, active_users, new_users, session_duration, bounce_rate)
                   VALUES (?, ?, ?, ?, ?)""",
                [
                    (r["date"], r["active_users"], r["new_users"],
                     r["session_duration"], r["bounce_rate"])
                    for r in rows
                ]
            )
        return len(rows)

    def save_performance_metrics(self, rows: Iterable[Dict[str, Any]]) -> int:
        """Insert performance metric rows"""
        rows = list(rows)
        if not rows:
            return 0

        with sqlite3.connect(self.db_path) as conn:
            conn.executemany(
                """INSERT INTO performance_metrics
                   (metric_name, metric_value, timestamp, category)
                   VALUES (?, ?, ?, ?)""",
                [
                    (r["metric_name"], r["metric_value"], r["timestamp"], r["category"])
                    for r in rows
                ]
            )
        return len(rows)

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_sales(self) -> List[Dict[str, Any]]:
        """All sales rows, id ascending"""
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM sales_data ORDER BY id").fetchall()
        return [dict(row) for row in rows]

    def get_user_analytics(self, limit: int = 30) -> List[Dict[str, Any]]:
        """Most recent analytics rows, date descending"""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM user_analytics ORDER BY date DESC LIMIT ?",
                [limit]
            ).fetchall()
        return [dict(row) for row in rows]

    def get_performance_metrics(self) -> List[Dict[str, Any]]:
        """All metrics, timestamp descending"""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM performance_metrics ORDER BY timestamp DESC"
            ).fetchall()
        return [dict(row) for row in rows]

    def get_stats(self) -> dict:
        """Get storage statistics"""
        with sqlite3.connect(self.db_path) as conn:
            sales_count = conn.execute("SELECT COUNT(*) FROM sales_data").fetchone()[0]
            analytics_count = conn.execute("SELECT COUNT(*) FROM user_analytics").fetchone()[0]
            metrics_count = conn.execute("SELECT COUNT(*) FROM performance_metrics").fetchone()[0]

        return {
            "sales_data": sales_count,
            "user_analytics": analytics_count,
            "performance_metrics": metrics_count,
            "db_path": self.db_path
        }

    def is_empty(self) -> bool:
        stats = self.get_stats()
        return not (stats["sales_data"] or stats["user_analytics"] or stats["performance_metrics"])


# =============================================================================
# Singleton
# =============================================================================

_storage: Optional[SQLiteStorage] = None


def get_storage() -> SQLiteStorage:
    """Get singleton storage instance"""
    global _storage
    if _storage is None:
        _storage = SQLiteStorage(get_config().db_path)
    return _storage
