"""
Frontend Configuration
Centralized config: the only place the UI reads environment variables.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class UIConfig:
    backend_url: str = "http://localhost:8000"
    request_timeout: float = 15.0
    poll_interval: float = 5.0
    login_delay: float = 1.0

    # Durable client storage (stand-in for browser localStorage)
    storage_path: str = "data/local_storage.db"
    origin: str = "http://localhost:8501"

    log_level: str = "INFO"


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _getfloat(name: str, default: float) -> float:
    v = _getenv(name)
    return float(v) if v is not None else default


def get_config() -> UIConfig:
    """Load `.env` (if present) and build the frontend config."""
    load_dotenv(override=False)

    return UIConfig(
        backend_url=_getenv("DATAFLOW_BACKEND_URL", "http://localhost:8000"),
        request_timeout=_getfloat("DATAFLOW_REQUEST_TIMEOUT", 15.0),
        poll_interval=_getfloat("DATAFLOW_POLL_INTERVAL", 5.0),
        login_delay=_getfloat("DATAFLOW_LOGIN_DELAY", 1.0),
        storage_path=_getenv("DATAFLOW_STORAGE_PATH", "data/local_storage.db"),
        origin=_getenv("DATAFLOW_ORIGIN", "http://localhost:8501"),
        log_level=(_getenv("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
