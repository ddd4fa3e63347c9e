from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ExamRecord(BaseModel):
    """In-memory exam. `id` stays None until the exam is persisted."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = Field(default=None, description="Exam identifier (store-assigned).")
    description: str | None = Field(default=None, description="What was examined.")
    performed_at: datetime | None = Field(
        default=None,
        description="When the exam was recorded; defaults to the creation moment.",
    )
    patient_id: int | None = Field(default=None, description="Owning patient identifier.")
