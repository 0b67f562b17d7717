# db_models/user.py
"""
User model with role-based access control for APAR inspections.

Roles:
- ADMIN: Full access, including user management and the admin dashboard
- PETUGAS: Field officer; manages APARs and records inspections
"""
from datetime import datetime
from enum import Enum

from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db_base import Base


class UserRole(str, Enum):
    """User roles for authorization."""
    ADMIN = "admin"
    PETUGAS = "petugas"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Login credentials
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.PETUGAS.value,
        server_default=UserRole.PETUGAS.value,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=func.now(),
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    inspections: Mapped[list["Inspection"]] = relationship(
        "Inspection",
        back_populates="inspector",
        passive_deletes=True,
    )

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
