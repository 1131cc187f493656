"""
Auth session manager: login, logout, refresh and password change.

State per identity lives in exactly one place, the session store's refresh
token slot. Access tokens are stateless and stay valid until they expire, even
after logout; refresh tokens are accepted only while they equal the stored
value.
"""
from __future__ import annotations

import hmac
import logging
from datetime import timedelta
from typing import NamedTuple, Optional, Tuple

from utils.exceptions import (
    AuthenticationError,
    NotFoundError,
    TokenError,
    ValidationError,
)
from utils.security import (
    REFRESH,
    Clock,
    decode_token,
    issue_access_token,
    issue_refresh_token,
    utcnow,
    verify_password,
)

logger = logging.getLogger(__name__)


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


class TokenSettings(NamedTuple):
    access_secret: str
    access_expires: timedelta
    refresh_secret: str
    refresh_expires: timedelta
    algorithm: str = "HS256"

    @classmethod
    def from_config(cls, config) -> "TokenSettings":
        return cls(
            access_secret=config.get("ACCESS_TOKEN_SECRET"),
            access_expires=config["ACCESS_TOKEN_EXPIRES"],
            refresh_secret=config.get("REFRESH_TOKEN_SECRET"),
            refresh_expires=config["REFRESH_TOKEN_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )


class AuthSessionManager:
    def __init__(self, profiles, sessions, hasher, settings: TokenSettings, clock: Clock = utcnow):
        self.profiles = profiles
        self.sessions = sessions
        self.hasher = hasher
        self.settings = settings
        self.clock = clock

    def issue_tokens(self, user) -> TokenPair:
        """Mint a fresh pair and make its refresh token the only one accepted."""
        now = self.clock()
        s = self.settings
        pair = TokenPair(
            access_token=issue_access_token(user, s.access_secret, s.access_expires, s.algorithm, now),
            refresh_token=issue_refresh_token(user, s.refresh_secret, s.refresh_expires, s.algorithm, now),
        )
        self.sessions.set_current_refresh_token(user.id, pair.refresh_token)
        return pair

    def login(self, password: Optional[str], username: Optional[str] = None, email: Optional[str] = None) -> Tuple[object, TokenPair]:
        if not (username or email):
            raise ValidationError("Username or email is required")

        user = self.profiles.find_by_username_or_email(username=username, email=email)
        if user is None:
            raise NotFoundError("User does not exist")

        if not verify_password(password, user.password_hash, self.hasher):
            logger.info("Rejected login for user %s", user.id)
            raise AuthenticationError("Invalid user credentials")

        tokens = self.issue_tokens(user)
        logger.info("User %s logged in", user.id)
        # the in-memory user is returned; output schemas never carry the hash
        return user, tokens

    def logout(self, user_id: str) -> None:
        self.sessions.set_current_refresh_token(user_id, None)
        logger.info("User %s logged out", user_id)

    def refresh(self, presented: Optional[str]) -> TokenPair:
        if not presented:
            raise AuthenticationError("unauthorized")

        try:
            return self._rotate(presented)
        except AuthenticationError:
            raise
        except Exception:
            logger.exception("Unexpected failure while refreshing tokens")
            raise AuthenticationError("invalid refresh token") from None

    def _rotate(self, presented: str) -> TokenPair:
        s = self.settings
        try:
            claims = decode_token(presented, s.refresh_secret, REFRESH, s.algorithm, self.clock())
        except TokenError:
            raise AuthenticationError("invalid or expired refresh token") from None

        user = self.profiles.find_by_id(claims["sub"])
        if user is None:
            raise AuthenticationError("invalid refresh token")

        current = self.sessions.get_current_refresh_token(user.id)
        if not current or not hmac.compare_digest(current.encode(), presented.encode()):
            logger.warning("Stale or reused refresh token presented for user %s", user.id)
            raise AuthenticationError("expired or reused refresh token")

        return self.issue_tokens(user)

    def change_password(self, user_id: str, old_password: Optional[str], new_password: str):
        user = self.profiles.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User does not exist")
        if not verify_password(old_password, user.password_hash, self.hasher):
            raise AuthenticationError("invalid old password")

        self.profiles.update_password_hash(user, new_password, self.hasher)
        logger.info("User %s changed password", user.id)
        return user
