# api/apars/models.py
"""
Pydantic models for APAR requests and responses.
"""
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from core import labels
from core import inspection_rules as rules
from api.inspections.models import AparInspectionRead


class AparCreate(BaseModel):
    number: str = Field(..., max_length=255, description="Unit number, e.g. 'APAR-001'")
    location: str = Field(..., max_length=255)
    type: str = Field(..., description="powder | co2 | foam | liquid")
    capacity: str = Field(..., max_length=255, description="Free text, e.g. '6 kg'")
    fill_date: date
    expiry_date: date
    status: str = Field("active", description="active | inactive | expired | maintenance")
    notes: str | None = None


class AparUpdate(AparCreate):
    pass


class AparRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    number: str
    location: str
    type: str
    capacity: str
    fill_date: date
    expiry_date: date
    status: str
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    @computed_field
    @property
    def type_label(self) -> str:
        return labels.apar_type_label(self.type)

    @computed_field
    @property
    def status_label(self) -> str:
        return labels.apar_status_label(self.status)

    @computed_field
    @property
    def days_until_expiry(self) -> int:
        return rules.days_until_expiry(self.expiry_date)

    @computed_field
    @property
    def is_expired(self) -> bool:
        return self.days_until_expiry < 0

    @computed_field
    @property
    def expiry_flag(self) -> str | None:
        """'expired', 'expiring_soon' or null."""
        return rules.expiry_flag(self.expiry_date)


class AparDetail(AparRead):
    inspections: list[AparInspectionRead] = Field(default_factory=list)


class AparListResponse(BaseModel):
    apars: list[AparRead]
    total: int


class AparOptions(BaseModel):
    types: dict[str, str]
    statuses: dict[str, str]
