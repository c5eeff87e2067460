"""
Users Service Client
Thin client for the external user/OAuth service.

The dashboard never stores credentials or user profiles itself; it trades
an OAuth authorization code for an opaque session token and asks the
service who a token belongs to.
"""

import logging
from typing import Any, Dict, Optional

import requests

from ..config import get_config

logger = logging.getLogger(__name__)


class UsersServiceError(Exception):
    """The users service could not be reached or answered unexpectedly"""


class UsersService:
    """Client for the users service REST API"""

    def __init__(self, api_url: Optional[str], api_key: Optional[str], timeout: float = 10):
        self.api_url = (api_url or "").rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.session = requests.Session()
        if api_key:
            self.session.headers["x-api-key"] = api_key

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        if not self.api_url:
            raise UsersServiceError("Users service URL is not configured")
        try:
            return self.session.request(
                method, f"{self.api_url}{path}", timeout=self.timeout, **kwargs
            )
        except requests.exceptions.RequestException as e:
            raise UsersServiceError(f"Users service request failed: {e}") from e

    def _json(self, resp: requests.Response) -> Dict[str, Any]:
        if not resp.ok:
            raise UsersServiceError(f"Users service returned {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise UsersServiceError("Users service returned invalid JSON") from e

    # =========================================================================
    # OAuth
    # =========================================================================

    def get_oauth_redirect_url(self, provider: str) -> str:
        """URL the browser should visit to start the provider's OAuth flow"""
        data = self._json(self._request("GET", f"/oauth/{provider}/redirect_url"))
        try:
            return data["redirect_url"]
        except KeyError as e:
            raise UsersServiceError("Missing redirect_url in users service response") from e

    def exchange_code_for_session_token(self, code: str) -> str:
        """Trade an authorization code for a session token"""
        data = self._json(self._request("POST", "/sessions", json={"code": code}))
        try:
            return data["session_token"]
        except KeyError as e:
            raise UsersServiceError("Missing session_token in users service response") from e

    # =========================================================================
    # Sessions
    # =========================================================================

    def get_current_user(self, session_token: str) -> Optional[Dict[str, Any]]:
        """User behind a session token, or None if the token is unknown/expired"""
        resp = self._request(
            "GET", "/users/me",
            headers={"Authorization": f"Bearer {session_token}"}
        )
        if resp.status_code == 401:
            return None
        return self._json(resp)

    def delete_session(self, session_token: str) -> None:
        """Invalidate a session token"""
        resp = self._request(
            "DELETE", "/sessions",
            headers={"Authorization": f"Bearer {session_token}"}
        )
        if not resp.ok and resp.status_code != 404:
            raise UsersServiceError(f"Users service returned {resp.status_code}")


# Singleton
_users_service: Optional[UsersService] = None


def get_users_service() -> UsersService:
    """Get or create users service client singleton"""
    global _users_service
    if _users_service is None:
        config = get_config()
        _users_service = UsersService(config.users_service_api_url, config.users_service_api_key)
    return _users_service
