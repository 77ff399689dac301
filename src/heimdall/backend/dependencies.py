"""
Request dependencies shared by the routers.

The detector, audit store and settings are attached to app.state by
create_app(); routes pull them from the request so tests can build an app
with fakes.
"""
import hmac
from typing import Optional

from fastapi import Header, HTTPException, Request

from ..detection import PPEDetector
from .audit_store import AuditLogStore
from .config import Settings
from .utils_backend import parse_bearer_token


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_detector(request: Request) -> PPEDetector:
    return request.app.state.detector


def get_audit_store(request: Request) -> AuditLogStore:
    return request.app.state.audit_store


def require_token(request: Request, authorization: Optional[str] = Header(None)) -> None:
    """
    Token check for the admin endpoints.

    Tokens are issued by the external identity provider; here we only compare
    against the configured one. Disabled unless settings.require_auth is set.
    """
    settings = get_app_settings(request)
    if not settings.require_auth:
        return

    token = parse_bearer_token(authorization)
    if not token or not settings.api_token or not hmac.compare_digest(token.encode(), settings.api_token.encode()):
        raise HTTPException(
            status_code=401,
            detail="Invalid or missing token",
            headers={"WWW-Authenticate": "Bearer"},
        )
