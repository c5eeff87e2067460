"""
Backend API Client
Connects the Streamlit frontend to the FastAPI backend.
"""

import asyncio
import threading
import requests
from typing import Any, Dict, Optional


class APIError(Exception):
    """A request failed; `status_code` is set for HTTP error responses"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class APIClient:
    """Client for backend API communication"""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 15.0):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        # requests.Session is not thread-safe and fetch_async runs on worker threads
        self._lock = threading.Lock()

    def _url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}{endpoint}"

    def fetch(self, endpoint: str, params: dict = None) -> Any:
        """
        GET an endpoint and decode its JSON body.

        Raises:
            APIError: on timeout, connection failure, non-2xx status or a
                body that is not JSON.
        """
        try:
            with self._lock:
                resp = self.session.get(self._url(endpoint), params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise APIError(f"Request timed out after {self.timeout:g}s") from e
        except requests.exceptions.ConnectionError as e:
            raise APIError(
                "Backend not connected. Start backend with: uvicorn dataflow_api.main:app --reload"
            ) from e
        except requests.exceptions.RequestException as e:
            raise APIError(str(e) or "Request failed") from e

        if not resp.ok:
            raise APIError(f"HTTP error! status: {resp.status_code}", status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON response: {e}") from e

    async def fetch_async(self, endpoint: str) -> Any:
        """`fetch` on a worker thread, so the event loop keeps running"""
        return await asyncio.to_thread(self.fetch, endpoint)

    def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make GET request, folding failures into an {"error": ...} dict"""
        try:
            return self.fetch(endpoint, params)
        except APIError as e:
            return {"error": str(e)}

    # =========================================================================
    # Health & Status
    # =========================================================================

    def health(self) -> Dict[str, Any]:
        """Check backend health"""
        return self._get("/health")

    def is_connected(self) -> bool:
        """Check if backend is reachable"""
        result = self.health()
        return "error" not in result
