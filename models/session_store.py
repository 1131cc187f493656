"""
Session store: the one-slot-per-identity table of current refresh tokens.

Reads and writes share the request's scoped session and every write commits
before returning, so the next read for the same identity sees it.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from models.user_session import UserSession
from utils.exceptions import DependencyError

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, storage):
        self.storage = storage

    def _row(self, user_id: str) -> Optional[UserSession]:
        return (
            self.storage.get_session()
            .query(UserSession)
            .filter(UserSession.user_id == str(user_id))
            .first()
        )

    def get_current_refresh_token(self, user_id: str) -> Optional[str]:
        try:
            row = self._row(user_id)
        except SQLAlchemyError as exc:
            self._fail("read", exc)
        return row.refresh_token if row else None

    def set_current_refresh_token(self, user_id: str, token: Optional[str]) -> None:
        """Overwrite (or clear, with None) the slot. Last write wins."""
        try:
            row = self._row(user_id)
            if row is None:
                if token is None:
                    return
                row = UserSession(user_id=str(user_id))
            row.refresh_token = token
            row.save()
        except SQLAlchemyError as exc:
            self._fail("write", exc)

    def _fail(self, action: str, exc: Exception):
        self.storage.rollback()
        logger.error("Session store %s failed: %s", action, exc)
        raise DependencyError() from exc
