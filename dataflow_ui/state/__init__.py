"""
State Management
Who is logged in, and where that survives a restart.
"""

from .session import (
    DEMO_ACCOUNTS,
    DEMO_DIRECTORY,
    STORAGE_KEY,
    DirectoryEntry,
    Session,
    SessionScopeError,
    SessionStore,
    hash_password,
    session_provider,
    use_session,
)
from .storage import (
    BROWSER_ID_PARAM,
    KeyValueStorage,
    LocalStorage,
    MemoryStorage,
    browser_origin,
    new_browser_id,
)

__all__ = [
    "DEMO_ACCOUNTS",
    "DEMO_DIRECTORY",
    "STORAGE_KEY",
    "DirectoryEntry",
    "Session",
    "SessionScopeError",
    "SessionStore",
    "hash_password",
    "session_provider",
    "use_session",
    "BROWSER_ID_PARAM",
    "KeyValueStorage",
    "LocalStorage",
    "MemoryStorage",
    "browser_origin",
    "new_browser_id",
]
