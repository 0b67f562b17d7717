# api/inspections/models.py
"""
Pydantic models for inspection requests and responses.
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from core import labels
from core import inspection_rules as rules


# --- Requests ---
class InspectionItemIn(BaseModel):
    item_type: str
    status: str = "good"  # good | damaged | needs_repair
    notes: Optional[str] = None


class InspectionCreate(BaseModel):
    apar_id: int
    inspection_date: date
    digital_signature: Optional[str] = None
    # Accepted for form compatibility; the stored value is always derived from items
    overall_status: Optional[str] = None
    notes: Optional[str] = None
    items: list[InspectionItemIn] = Field(default_factory=list)


class InspectionUpdate(InspectionCreate):
    pass


# --- Responses ---
class InspectionItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_type: str
    status: str
    notes: str | None = None

    @computed_field
    @property
    def item_type_label(self) -> str:
        return labels.item_type_label(self.item_type)

    @computed_field
    @property
    def status_label(self) -> str:
        return labels.item_status_label(self.status)

    @computed_field
    @property
    def status_icon(self) -> str:
        return labels.item_status_icon(self.status)


class AparBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    number: str
    location: str
    type: str
    status: str


class InspectorBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str

    @computed_field
    @property
    def role_label(self) -> str:
        return labels.role_label(self.role)


class InspectionBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    apar_id: int
    inspector_id: int
    inspection_date: date
    digital_signature: str | None = None
    overall_status: str
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    @computed_field
    @property
    def overall_status_label(self) -> str:
        return labels.overall_status_label(self.overall_status)


class _ChecklistMixin(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    items: list[InspectionItemRead] = Field(default_factory=list)

    @computed_field
    @property
    def items_count(self) -> int:
        return len(self.items)

    @computed_field
    @property
    def passed_items(self) -> int:
        return rules.count_passed(i.status for i in self.items)

    @computed_field
    @property
    def pass_rate(self) -> int:
        return rules.pass_rate(self.passed_items, self.items_count)

    @computed_field
    @property
    def pass_rate_band(self) -> str:
        return rules.pass_rate_band(self.pass_rate)


class InspectionRead(_ChecklistMixin, InspectionBase):
    """Full inspection with its APAR, inspector and checklist."""
    apar: AparBrief | None = None
    inspector: InspectorBrief | None = None


class AparInspectionRead(_ChecklistMixin, InspectionBase):
    """Inspection as listed on an APAR's detail page."""
    inspector: InspectorBrief | None = None


class InspectionListResponse(BaseModel):
    inspections: list[InspectionRead]
    total: int


class InspectionOptions(BaseModel):
    item_types: dict[str, str]
    item_statuses: dict[str, str]
    overall_statuses: dict[str, str]
