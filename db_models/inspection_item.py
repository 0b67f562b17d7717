# db_models/inspection_item.py
from enum import Enum

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db_base import Base
from db_models.inspection import Inspection


class ItemType(str, Enum):
    """The fixed checklist every inspection covers, in form order."""
    HOSE = "hose"
    SAFETY_PIN = "safety_pin"
    CONTENT = "content"
    HANDLE = "handle"
    PRESSURE = "pressure"
    FUNNEL = "funnel"
    CLEANLINESS = "cleanliness"


class ItemStatus(str, Enum):
    GOOD = "good"
    DAMAGED = "damaged"
    NEEDS_REPAIR = "needs_repair"


class InspectionItem(Base):
    __tablename__ = "inspection_items"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    inspection_id: Mapped[int] = mapped_column(
        ForeignKey("inspections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    item_type: Mapped[str] = mapped_column(String(20), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ItemStatus.GOOD.value,
        server_default=ItemStatus.GOOD.value,
    )

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    inspection: Mapped[Inspection] = relationship(
        "Inspection",
        back_populates="items",
    )
