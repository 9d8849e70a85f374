"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.profile import Profile
from app.models.user_role import AppRole, UserRole

__all__ = ["AppRole", "Base", "Profile", "UserRole"]
