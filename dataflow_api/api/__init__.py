"""
API Routers
"""
from .data import router as data_router
from .realtime import router as realtime_router
from .auth import router as auth_router

__all__ = ["data_router", "realtime_router", "auth_router"]
