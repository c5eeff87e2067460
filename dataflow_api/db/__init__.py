"""
Database Layer
Persistence and storage operations.
"""

from .sqlite import SQLiteStorage, get_storage
from .seed import DemoDataGenerator, seed_demo_data

__all__ = ["SQLiteStorage", "get_storage", "DemoDataGenerator", "seed_demo_data"]
