# db_models/inspection.py
from datetime import date, datetime
from enum import Enum

from sqlalchemy import (
    String,
    Date,
    DateTime,
    Text,
    ForeignKey,
    Index,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db_base import Base
from db_models.apar import Apar
from db_models.user import User


class OverallStatus(str, Enum):
    """Aggregate health of one inspection, derived from its checklist items."""
    GOOD = "good"
    NEEDS_ATTENTION = "needs_attention"
    CRITICAL = "critical"


class Inspection(Base):
    __tablename__ = "inspections"
    __table_args__ = (
        # Dashboards filter and sort on the date column
        Index("ix_inspections_apar_date", "apar_id", "inspection_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    apar_id: Mapped[int] = mapped_column(
        ForeignKey("apars.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    inspector_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    inspection_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # Opaque payload from the signing pad (usually a data URL)
    digital_signature: Mapped[str | None] = mapped_column(Text, nullable=True)

    # good / needs_attention / critical, always derived from items on write
    overall_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=OverallStatus.GOOD.value,
        server_default=OverallStatus.GOOD.value,
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

    # Relationships
    apar: Mapped[Apar] = relationship(
        "Apar",
        back_populates="inspections",
    )
    inspector: Mapped[User] = relationship(
        "User",
        back_populates="inspections",
    )
    items: Mapped[list["InspectionItem"]] = relationship(
        "InspectionItem",
        back_populates="inspection",
        passive_deletes=True,
        order_by="InspectionItem.id",
    )
