"""
Back office sessions.

A session is a signed, timestamped token in an HttpOnly cookie. Nothing is kept
server side; the signature and the max age are all that is checked.
"""

import logging
import secrets
from datetime import timedelta

from fastapi import Request, Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from bistro.config import settings
from bistro.errors import Unauthorized
from bistro.schemas.admin import AdminSessionRead

logger = logging.getLogger(__name__)

_serializer = URLSafeTimedSerializer(settings.admin_session_secret, salt="admin-session")


def credentials_match(username: str, password: str) -> bool:
    username_ok = secrets.compare_digest(username.encode(), settings.admin_username.encode())
    password_ok = secrets.compare_digest(password.encode(), settings.admin_password.encode())
    return username_ok and password_ok


def issue_session(response: Response, username: str) -> None:
    token = _serializer.dumps({"username": username})
    response.set_cookie(
        settings.admin_cookie_name,
        token,
        max_age=settings.admin_session_ttl_seconds,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.admin_cookie_secure,
    )


def clear_session(response: Response) -> None:
    response.delete_cookie(
        settings.admin_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.admin_cookie_secure,
    )


def read_session(request: Request) -> AdminSessionRead | None:
    token = request.cookies.get(settings.admin_cookie_name)
    if not token:
        return None
    try:
        payload, signed_at = _serializer.loads(
            token, max_age=settings.admin_session_ttl_seconds, return_timestamp=True
        )
    except SignatureExpired:
        logger.info("Expired admin session presented")
        return None
    except BadSignature:
        logger.warning("Admin session with a bad signature presented")
        return None

    username = payload.get("username") if isinstance(payload, dict) else None
    if not isinstance(username, str) or not username:
        return None
    expires_at = signed_at.replace(tzinfo=None) + timedelta(seconds=settings.admin_session_ttl_seconds)
    return AdminSessionRead(username=username, expires_at=expires_at)


def require_admin(request: Request) -> AdminSessionRead:
    """FastAPI dependency guarding back office routes."""
    session = read_session(request)
    if session is None:
        raise Unauthorized()
    return session
