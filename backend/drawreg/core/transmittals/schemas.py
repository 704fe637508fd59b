import uuid
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field


class TransmittalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    recipient_company: str = Field(..., min_length=1, max_length=255)
    recipient_name: str = Field(..., min_length=1, max_length=255)
    recipient_email: EmailStr | None = None
    sender_name: str = Field(..., min_length=1, max_length=255)
    purpose: str | None = None
    remarks: str | None = None
    acknowledgement_required: bool = False
    drawings: list[uuid.UUID] = Field(..., min_length=1)


class TransmittalItemRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    drawing_id: uuid.UUID
    revision: str | None
    copies: int
    format: str
    remarks: str | None


class TransmittalRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    transmittal_number: str
    project_id: uuid.UUID
    title: str
    recipient_company: str
    recipient_name: str
    recipient_email: str | None
    sender_name: str
    transmitted_date: datetime
    purpose: str | None
    remarks: str | None
    acknowledgement_required: bool
    acknowledged: bool
    acknowledged_date: datetime | None
    acknowledged_by: str | None
    drawings: list[uuid.UUID]
    items: list[TransmittalItemRead]
    created_at: datetime
