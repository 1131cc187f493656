from models.base_model import Base, BaseModel
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from utils.security import hash_password


class User(BaseModel, Base):
    __tablename__ = "users"
    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=False, index=True)
    avatar = Column(String(1024), nullable=False)  # media host URL
    cover_image = Column(String(1024), nullable=True, default="")
    password_hash = Column(String(255), nullable=False)

    session = relationship(
        "UserSession",
        back_populates="user",
        uselist=False,
        passive_deletes=True,
    )

    def __init__(self, *args, **kwargs):
        for key in ("username", "email"):
            if isinstance(kwargs.get(key), str):
                kwargs[key] = kwargs[key].strip().lower()
        super().__init__(*args, **kwargs)

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    def set_password(self, password: str, hasher) -> None:
        """Always hashes; the only way a password reaches password_hash."""
        self.password_hash = hash_password(password, hasher)
