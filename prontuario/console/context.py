from __future__ import annotations

from dataclasses import dataclass

from prontuario.patients.exams.repository import ExamRepository
from prontuario.patients.repository import PatientRepository


@dataclass(frozen=True)
class ConsoleContext:
    """Repositories shared by every menu handler."""

    patients: PatientRepository
    exams: ExamRepository
