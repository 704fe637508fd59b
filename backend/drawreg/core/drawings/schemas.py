import uuid
from datetime import date, datetime
from typing import Any
from pydantic import BaseModel, Field

from drawreg.core.drawings.enums import DrawingDiscipline, DrawingStatus, DrawingType


class DrawingCreate(BaseModel):
    drawing_number: str | None = Field(None, max_length=100)
    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    type: DrawingType
    discipline: DrawingDiscipline
    status: DrawingStatus = DrawingStatus.DRAFT
    revision: str = Field("A", min_length=1, max_length=10)
    revision_date: date | None = None
    scale: str | None = Field(None, max_length=50)
    paper_size: str | None = Field(None, max_length=10)
    file_path: str = Field(..., min_length=1)
    file_size: int | None = Field(None, ge=0)
    file_type: str | None = Field(None, max_length=50)
    cad_file_path: str | None = None
    pdf_file_path: str | None = None
    drawn_by: str = Field(..., min_length=1, max_length=255)
    checked_by: str | None = Field(None, max_length=255)
    approved_by: str | None = Field(None, max_length=255)
    issued_for: str | None = Field(None, max_length=255)
    issue_date: datetime | None = None
    sheet_number: str | None = Field(None, max_length=20)
    total_sheets: int | None = Field(None, ge=1)
    grid_reference: str | None = Field(None, max_length=50)
    north_point: bool = False
    key_plan: bool = False
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class DrawingRead(BaseModel):
    model_config = {"from_attributes": True, "populate_by_name": True}
    id: uuid.UUID
    drawing_number: str
    project_id: uuid.UUID
    title: str
    description: str | None
    type: DrawingType
    discipline: DrawingDiscipline
    status: DrawingStatus
    revision: str
    revision_date: date
    scale: str | None
    paper_size: str | None
    file_path: str
    file_size: int | None
    file_type: str | None
    cad_file_path: str | None
    pdf_file_path: str | None
    drawn_by: str
    checked_by: str | None
    approved_by: str | None
    issued_for: str | None
    issue_date: datetime | None
    current_version: bool
    superseded_by: uuid.UUID | None
    supersedes: uuid.UUID | None
    sheet_number: str | None
    total_sheets: int | None
    grid_reference: str | None
    north_point: bool
    key_plan: bool
    tags: list[str]
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="extra")
    created_at: datetime
    updated_at: datetime


class RevisionCreate(BaseModel):
    revision: str = Field(..., min_length=1, max_length=10)
    description: str = Field(..., min_length=1)
    revised_by: str = Field(..., min_length=1, max_length=255)
    file_path: str = Field(..., min_length=1)
    changes_summary: str | None = None
    approved_by: str | None = Field(None, max_length=255)
    cloud_marks: dict[str, Any] | None = None


class RevisionRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    drawing_id: uuid.UUID
    revision: str
    revision_date: date
    description: str
    revised_by: str
    approved_by: str | None
    file_path: str
    changes_summary: str | None
    cloud_marks: dict[str, Any] | None
    created_at: datetime


class StatusUpdate(BaseModel):
    status: DrawingStatus


class DrawingRegisterRow(DrawingRead):
    revision_count: int
    open_comments: int
    transmittal_count: int


class DrawingStatistics(BaseModel):
    total_drawings: int
    current_drawings: int
    draft_count: int
    for_review_count: int
    for_approval_count: int
    approved_count: int
    for_construction_count: int
    as_built_count: int
    superseded_count: int
    obsolete_count: int
    disciplines_count: int
    total_revisions: int
    total_transmittals: int
    open_comments: int
