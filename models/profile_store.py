"""
Profile store: CRUD on user records over DBStorage.

Storage failures are rolled back, logged and re-raised as DependencyError so
callers never see driver messages.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.user import User
from utils.exceptions import ConflictError, DependencyError

logger = logging.getLogger(__name__)


def _norm(value: Optional[str]) -> Optional[str]:
    if isinstance(value, str):
        value = value.strip().lower()
    return value or None


class ProfileStore:
    def __init__(self, storage):
        self.storage = storage

    def _query(self):
        return self.storage.get_session().query(User)

    def find_by_username_or_email(self, username: Optional[str] = None, email: Optional[str] = None) -> Optional[User]:
        """Match on whichever identifiers were supplied (case-insensitive)."""
        filters = []
        username, email = _norm(username), _norm(email)
        if username:
            filters.append(User.username == username)
        if email:
            filters.append(User.email == email)
        if not filters:
            return None
        try:
            return self._query().filter(or_(*filters)).first()
        except SQLAlchemyError as exc:
            self._fail("lookup by username/email", exc)

    def find_by_id(self, user_id: str) -> Optional[User]:
        try:
            return self.storage.get(User, user_id)
        except SQLAlchemyError as exc:
            self._fail("lookup by id", exc)

    def exists(self, username: Optional[str] = None, email: Optional[str] = None) -> bool:
        return self.find_by_username_or_email(username, email) is not None

    def create(self, password: str, hasher, **fields) -> User:
        """Insert a user; the plaintext password is hashed exactly once here."""
        user = User(**fields)
        user.set_password(password, hasher)
        try:
            self.storage.new(user)
            self.storage.save()
        except IntegrityError as exc:
            logger.info("Duplicate registration rejected: %s", exc.__class__.__name__)
            raise ConflictError("User already exists") from exc
        except SQLAlchemyError as exc:
            self._fail("create", exc)
        return user

    def update_password_hash(self, user: User, password: str, hasher) -> User:
        user.set_password(password, hasher)
        try:
            user.save()
        except SQLAlchemyError as exc:
            self._fail("password update", exc)
        return user

    def _fail(self, action: str, exc: Exception):
        self.storage.rollback()
        logger.error("Profile store %s failed: %s", action, exc)
        raise DependencyError() from exc
