"""ORM model and enumeration for role assignments (RBAC)."""

import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, String, func

from app.models.base import Base


class AppRole(str, enum.Enum):
    """Closed set of roles the organization assigns. Values are the persisted strings."""

    ADMIN = "admin"
    PLANT_MANAGER = "plantManager"
    PRODUCTION_MANAGER = "productionManager"
    ACCOUNTANT = "accountant"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value: object) -> "AppRole | None":
        """Return the role for an exact persisted value, or None for anything else."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class UserRole(Base):
    """
    Role assignment: at most one row per user (unique user_id).

    Created on first assignment, updated in place afterwards.
    """

    __tablename__ = "user_roles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, unique=True, index=True)
    role = Column(
        Enum(
            AppRole,
            name="app_role",
            values_callable=lambda enum_cls: [m.value for m in enum_cls],
            create_constraint=True,
            validate_strings=True,
        ),
        nullable=False,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
