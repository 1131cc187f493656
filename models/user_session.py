"""
UserSession model: the single refresh-token slot of an identity.
Fields:
- user_id (String(36)) - FK to users.id, one row per user
- refresh_token (Text) - the only refresh token currently accepted, or NULL
- created_at, updated_at
"""
from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class UserSession(BaseModel, Base):
    __tablename__ = "user_sessions"

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    refresh_token = Column(Text, nullable=True)

    user = relationship("User", back_populates="session")

    def __repr__(self):
        return f"<UserSession user_id={self.user_id}>"
