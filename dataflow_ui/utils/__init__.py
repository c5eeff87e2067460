from .api_client import APIClient, APIError
from .log_config import setup_logging
from . import transforms

__all__ = ["APIClient", "APIError", "setup_logging", "transforms"]
