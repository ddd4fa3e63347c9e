from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from prontuario.core.db import Base


class Exam(Base):
    """
    An exam performed on a patient.

    Deleting the owning patient removes its exams at the storage layer
    (`ON DELETE CASCADE`); the application never deletes them one by one.
    """

    __tablename__ = "exams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)

    # Naive local time. Reset to "now" on every update.
    performed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    patient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
