from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from prontuario.patients.exams.schemas import ExamRecord


class PatientRecord(BaseModel):
    """
    In-memory patient.

    `exams` is only used on create: exams attached here are persisted right after
    the patient row. Reads never populate it; list exams through the exam repository.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int | None = Field(default=None, description="Patient identifier (store-assigned).")
    name: str | None = Field(default=None, description="Patient's full name.")
    national_id: str | None = Field(
        default=None,
        description="National identification number (CPF), unique across patients.",
        examples=["111.111.111-11"],
    )
    exams: list[ExamRecord] = Field(
        default_factory=list,
        description="Exams to create together with the patient.",
    )
