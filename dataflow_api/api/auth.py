"""
Auth API
OAuth handshake and cookie-backed sessions, delegated to the users service.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ..config import AppConfig, get_config
from ..core import SessionRequest, SuccessResponse, RedirectUrlResponse
from ..services import UsersService, UsersServiceError, get_users_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _set_session_cookie(response: Response, config: AppConfig, value: str, max_age: int) -> None:
    response.set_cookie(
        key=config.session_cookie_name,
        value=value,
        max_age=max_age,
        path="/",
        secure=True,
        httponly=True,
        samesite="none",
    )


def require_user(
    request: Request,
    config: AppConfig = Depends(get_config),
    users: UsersService = Depends(get_users_service),
) -> Dict[str, Any]:
    """Resolve the session cookie to a user or reject with 401"""
    token = request.cookies.get(config.session_cookie_name)
    if not token:
        raise HTTPException(401, "Not authenticated")

    try:
        user = users.get_current_user(token)
    except UsersServiceError as e:
        logger.error("Could not resolve session: %s", e)
        raise HTTPException(502, "Users service unavailable")

    if user is None:
        raise HTTPException(401, "Invalid or expired session")
    return user


@router.get("/oauth/{provider}/redirect_url", response_model=RedirectUrlResponse)
def get_oauth_redirect_url(provider: str, users: UsersService = Depends(get_users_service)):
    if provider != "google":
        raise HTTPException(404, f"Unsupported OAuth provider: {provider}")
    try:
        return {"redirectUrl": users.get_oauth_redirect_url(provider)}
    except UsersServiceError as e:
        logger.error("OAuth redirect lookup failed: %s", e)
        raise HTTPException(502, "Users service unavailable")


@router.post("/sessions", response_model=SuccessResponse)
def create_session(
    response: Response,
    payload: Optional[SessionRequest] = None,
    config: AppConfig = Depends(get_config),
    users: UsersService = Depends(get_users_service),
):
    """Exchange an authorization code for a session cookie"""
    if payload is None or not payload.code:
        raise HTTPException(400, "No authorization code provided")

    try:
        token = users.exchange_code_for_session_token(payload.code)
    except UsersServiceError as e:
        logger.error("Code exchange failed: %s", e)
        raise HTTPException(502, "Users service unavailable")

    _set_session_cookie(response, config, token, config.session_max_age)
    return {"success": True}


@router.get("/users/me")
def get_me(user: Dict[str, Any] = Depends(require_user)):
    return user


@router.get("/logout", response_model=SuccessResponse)
def logout(
    request: Request,
    response: Response,
    config: AppConfig = Depends(get_config),
    users: UsersService = Depends(get_users_service),
):
    token = request.cookies.get(config.session_cookie_name)
    if token:
        try:
            users.delete_session(token)
        except UsersServiceError as e:
            # Cookie is cleared regardless; the remote session expires on its own
            logger.warning("Remote session delete failed: %s", e)

    _set_session_cookie(response, config, "", 0)
    return {"success": True}
