# db_models/apar.py
"""
APAR (Alat Pemadam Api Ringan): a portable fire extinguisher unit.
"""
from datetime import date, datetime
from enum import Enum

from sqlalchemy import String, Date, DateTime, Text, CheckConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db_base import Base


class AparType(str, Enum):
    """Extinguishing agent."""
    POWDER = "powder"
    CO2 = "co2"
    FOAM = "foam"
    LIQUID = "liquid"


class AparStatus(str, Enum):
    """Operational status. Set by users, never derived from expiry."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    MAINTENANCE = "maintenance"


class Apar(Base):
    __tablename__ = "apars"
    __table_args__ = (
        CheckConstraint("expiry_date > fill_date", name="expiry_after_fill"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    number: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )

    location: Mapped[str] = mapped_column(String(255), nullable=False)

    # powder / co2 / foam / liquid
    type: Mapped[str] = mapped_column(String(20), nullable=False)

    # Free text, e.g. "6 kg" or "9 liter"
    capacity: Mapped[str] = mapped_column(String(255), nullable=False)

    fill_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiry_date: Mapped[date] = mapped_column(Date, nullable=False)

    # active / inactive / expired / maintenance
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AparStatus.ACTIVE.value,
        server_default=AparStatus.ACTIVE.value,
    )

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

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

    # Children are deleted explicitly before the APAR row, see api/apars/db_manager.py
    inspections: Mapped[list["Inspection"]] = relationship(
        "Inspection",
        back_populates="apar",
        passive_deletes=True,
        order_by="Inspection.inspection_date.desc()",
    )
