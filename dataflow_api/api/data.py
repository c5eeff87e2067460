import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException
from typing import List

from ..core import SalesRecord, UserAnalytics, PerformanceMetric
from ..db import SQLiteStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Data"])

ANALYTICS_LIMIT = 30


@router.get("/sales", response_model=List[SalesRecord])
def get_sales(storage: SQLiteStorage = Depends(get_storage)):
    try:
        return storage.get_sales()
    except sqlite3.Error as e:
        logger.error("Failed to read sales_data: %s", e)
        raise HTTPException(500, "Failed to load sales data")


@router.get("/analytics", response_model=List[UserAnalytics])
def get_user_analytics(storage: SQLiteStorage = Depends(get_storage)):
    try:
        return storage.get_user_analytics(limit=ANALYTICS_LIMIT)
    except sqlite3.Error as e:
        logger.error("Failed to read user_analytics: %s", e)
        raise HTTPException(500, "Failed to load user analytics")


@router.get("/metrics", response_model=List[PerformanceMetric])
def get_performance_metrics(storage: SQLiteStorage = Depends(get_storage)):
    try:
        return storage.get_performance_metrics()
    except sqlite3.Error as e:
        logger.error("Failed to read performance_metrics: %s", e)
        raise HTTPException(500, "Failed to load performance metrics")
