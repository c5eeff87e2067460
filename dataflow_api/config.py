"""
Backend Configuration
This is the ONLY place the API reads environment variables.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


SESSION_MAX_AGE_SECONDS = 60 * 24 * 60 * 60  # 60 days


@dataclass(frozen=True)
class AppConfig:
    db_path: str = "data/dataflow.db"
    seed_demo_data: bool = True

    # External users service (OAuth + session tokens)
    users_service_api_url: Optional[str] = None
    users_service_api_key: Optional[str] = None

    session_cookie_name: str = "dataflow_session_token"
    session_max_age: int = SESSION_MAX_AGE_SECONDS
    log_level: str = "INFO"


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _getbool(name: str, default: bool) -> bool:
    v = _getenv(name)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")


def get_config() -> AppConfig:
    """Load `.env` (if present) and build the backend config."""
    load_dotenv(override=False)

    return AppConfig(
        db_path=_getenv("DATAFLOW_DB_PATH", "data/dataflow.db"),
        seed_demo_data=_getbool("DATAFLOW_SEED_DEMO_DATA", True),
        users_service_api_url=_getenv("USERS_SERVICE_API_URL"),
        users_service_api_key=_getenv("USERS_SERVICE_API_KEY"),
        session_cookie_name=_getenv("SESSION_COOKIE_NAME", "dataflow_session_token"),
        log_level=(_getenv("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
