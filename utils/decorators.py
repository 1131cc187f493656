from __future__ import annotations
from functools import wraps
from flask import request, g, current_app

from utils.exceptions import AuthenticationError, TokenError
from utils.security import ACCESS, decode_token

ACCESS_COOKIE = "accessToken"


def _presented_access_token() -> str | None:
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth.split(" ", 1)[1].strip() or None
    return None


def jwt_required():
    """Verify the access token (cookie or Bearer header) and load g.current_user."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = _presented_access_token()
            if not token:
                raise AuthenticationError("unauthorized")
            try:
                decoded = decode_token(
                    token,
                    current_app.config["ACCESS_TOKEN_SECRET"],
                    expected_type=ACCESS,
                    algorithm=current_app.config["JWT_ALGORITHM"],
                )
            except TokenError:
                raise AuthenticationError("invalid or expired access token") from None

            user = current_app.extensions["profile_store"].find_by_id(decoded.get("sub"))
            if not user:
                raise AuthenticationError("invalid or expired access token")
            g.current_user = user
            return fn(*args, **kwargs)

        return wrapper

    return decorator
