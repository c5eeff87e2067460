"""
Session Store
Single source of truth for "who is logged in".

The current session lives in memory and is mirrored to durable local
storage under one fixed key, so a restart restores it. Credentials are
checked against an injected directory; the default directory holds the
four demo accounts.

Structure:
    SessionStore
    ├── session            -> Session | None
    ├── is_initializing    -> True until restore_on_startup() has run
    ├── is_authenticating  -> True while a login() is pending
    ├── login()            -> async, bool
    ├── logout()
    └── restore_on_startup()

Views get the store handed to them explicitly. Deeper components can read
it with use_session() inside a session_provider() block.
"""

import asyncio
import hashlib
import hmac
import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "dataflow_user"


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode()).hexdigest()


# =============================================================================
# Schemas
# =============================================================================

@dataclass(frozen=True)
class Session:
    """The authenticated demo user"""
    email: str
    name: str
    role: str
    login_time: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "login_time": self.login_time.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Session":
        if not isinstance(data, Mapping):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        for key in ("email", "name", "role", "login_time"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"Session field '{key}' missing or not a string")
        return cls(
            email=data["email"],
            name=data["name"],
            role=data["role"],
            login_time=datetime.fromisoformat(data["login_time"]),
        )


@dataclass(frozen=True)
class DirectoryEntry:
    password_hash: str
    name: str
    role: str


Directory = Mapping[str, DirectoryEntry]


# Shown on the login page; the passwords are public demo credentials
DEMO_ACCOUNTS = [
    {"email": "admin@dataflow.com", "password": "admin123", "role": "Administrator", "name": "Admin User"},
    {"email": "demo@dataflow.com", "password": "password123", "role": "Analyst", "name": "Demo User"},
    {"email": "manager@dataflow.com", "password": "manager123", "role": "Manager", "name": "Manager User"},
    {"email": "user@dataflow.com", "password": "user123", "role": "User", "name": "Standard User"},
]

DEMO_DIRECTORY: Dict[str, DirectoryEntry] = {
    account["email"]: DirectoryEntry(
        hash_password(account["password"]), account["name"], account["role"]
    )
    for account in DEMO_ACCOUNTS
}


# =============================================================================
# Session Store
# =============================================================================

class SessionStore:
    """
    Owns the zero-or-one Session.

    Usage:
        store = SessionStore(LocalStorage(path, origin))
        store.restore_on_startup()

        ok = await store.login("demo@dataflow.com", "password123")
        store.session.name     # "Demo User"
        store.logout()
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        directory: Optional[Directory] = None,
        login_delay: float = 1.0,
        clock: Callable[[], datetime] = None,
    ):
        self._storage = storage
        self._directory = DEMO_DIRECTORY if directory is None else directory
        self._login_delay = login_delay
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._session: Optional[Session] = None
        self._initializing = True
        self._pending_logins = 0
        # Bumped by logout(); a login that started under an older epoch is void
        self._epoch = 0

    # =========================================================================
    # Property Accessors
    # =========================================================================

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def is_initializing(self) -> bool:
        return self._initializing

    @property
    def is_authenticating(self) -> bool:
        return self._pending_logins > 0

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    # =========================================================================
    # Operations
    # =========================================================================

    def restore_on_startup(self) -> Optional[Session]:
        """Load the persisted session; a corrupt entry is discarded"""
        if not self._initializing:
            return self._session

        try:
            raw = self._storage.get_item(STORAGE_KEY)
            if raw is not None:
                try:
                    self._session = Session.from_dict(json.loads(raw))
                except (ValueError, TypeError) as e:
                    logger.warning("Discarding unreadable saved session: %s", e)
                    self._storage.remove_item(STORAGE_KEY)
                    self._session = None
        finally:
            self._initializing = False

        return self._session

    async def login(self, email: str, password: str) -> bool:
        """
        Check credentials against the directory.

        Resolves after `login_delay` seconds. On success the new session is
        persisted and becomes current. On failure any existing session is
        left as it was.
        """
        epoch = self._epoch
        self._pending_logins += 1
        try:
            await asyncio.sleep(self._login_delay)

            entry = self._directory.get(email)
            if entry is None or not hmac.compare_digest(entry.password_hash, hash_password(password)):
                logger.info("Login rejected for %s", email)
                return False

            if epoch != self._epoch:
                logger.info("Login for %s superseded by logout", email)
                return False

            session = Session(
                email=email,
                name=entry.name,
                role=entry.role,
                login_time=self._clock(),
            )
            self._storage.set_item(STORAGE_KEY, json.dumps(session.to_dict()))
            self._session = session
            logger.info("Logged in %s (%s)", email, entry.role)
            return True
        finally:
            self._pending_logins -= 1

    def logout(self) -> None:
        self._epoch += 1
        self._session = None
        self._storage.remove_item(STORAGE_KEY)


# =============================================================================
# Provider Scope
# =============================================================================

class SessionScopeError(RuntimeError):
    """use_session() was called outside a session_provider() block"""


_current_store: ContextVar[Optional[SessionStore]] = ContextVar("dataflow_session_store", default=None)


@contextmanager
def session_provider(store: SessionStore) -> Iterator[SessionStore]:
    """Restore `store` and make it readable through use_session()"""
    store.restore_on_startup()
    token = _current_store.set(store)
    try:
        yield store
    finally:
        _current_store.reset(token)


def use_session() -> SessionStore:
    store = _current_store.get()
    if store is None:
        raise SessionScopeError("use_session must be used within a session_provider")
    return store
