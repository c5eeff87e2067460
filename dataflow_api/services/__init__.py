from .realtime import (
    MetricGenerator,
    RandomMetricsGenerator,
    build_snapshot,
    get_realtime_generator,
)
from .users import UsersService, UsersServiceError, get_users_service

__all__ = [
    "MetricGenerator",
    "RandomMetricsGenerator",
    "build_snapshot",
    "get_realtime_generator",
    "UsersService",
    "UsersServiceError",
    "get_users_service",
]
