"""ORM model for user profiles (display name and active flag)."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, func, true

from app.models.base import Base


class Profile(Base):
    """
    One profile per authenticated identity.

    is_active: when False the account must never pass authentication gating,
    whatever role it holds.
    """

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
