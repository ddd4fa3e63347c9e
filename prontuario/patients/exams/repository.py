from __future__ import annotations

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from prontuario.core.db import ConnectionProvider, is_storable_id
from prontuario.core.time_utils import now_local
from prontuario.domain.exceptions import BusinessValidationError
from prontuario.patients.exams.models import Exam
from prontuario.patients.exams.schemas import ExamRecord

logger = logging.getLogger("prontuario.exams")


def _validate_exam(*, record: ExamRecord) -> None:
    if record.description is None or not record.description.strip():
        raise BusinessValidationError("Exam description is required.")
    if record.patient_id is None:
        raise BusinessValidationError("Exam patient id is required.")
    if not is_storable_id(record.patient_id):
        raise BusinessValidationError("Exam patient id is out of range.")


def _log_absent(*, operation: str, outcome: str, record_id: int | None) -> None:
    logger.info(
        "No exam %s (exam_id=%s)",
        outcome,
        record_id,
        extra={"operation": f"exam.{operation}", "record_id": record_id},
    )


def _log_store_failure(*, operation: str, exc: SQLAlchemyError, record_id: int | None) -> None:
    # Exception messages may echo row values; log the class only.
    logger.error(
        "Exam %s failed (exam_id=%s, error=%s)",
        operation,
        record_id,
        exc.__class__.__name__,
        extra={
            "operation": f"exam.{operation}",
            "record_id": record_id,
            "error": exc.__class__.__name__,
        },
    )


class ExamRepository:
    """CRUD access to the `exams` table. Every call uses its own session."""

    def __init__(self, *, connection: ConnectionProvider):
        self._connection = connection

    def create(self, record: ExamRecord) -> ExamRecord | None:
        try:
            _validate_exam(record=record)
        except BusinessValidationError as exc:
            logger.warning(
                "Exam not created: %s",
                exc.message,
                extra={"operation": "exam.create", "error": "business_validation"},
            )
            return None

        if record.performed_at is None:
            record.performed_at = now_local()

        try:
            with self._connection.session() as session:
                exam = Exam(
                    description=record.description,
                    performed_at=record.performed_at,
                    patient_id=record.patient_id,
                )
                session.add(exam)
                session.commit()
                record.id = exam.id
        except SQLAlchemyError as exc:
            _log_store_failure(operation="create", exc=exc, record_id=None)
            return None

        logger.info(
            "Exam created (exam_id=%s, patient_id=%s)",
            record.id,
            record.patient_id,
            extra={"operation": "exam.create", "record_id": record.id},
        )
        return record

    def find_by_id(self, exam_id: int) -> ExamRecord | None:
        if not is_storable_id(exam_id):
            _log_absent(operation="find_by_id", outcome="found", record_id=exam_id)
            return None

        try:
            with self._connection.session() as session:
                exam = session.get(Exam, exam_id)
                if exam is None:
                    _log_absent(operation="find_by_id", outcome="found", record_id=exam_id)
                    return None
                return ExamRecord.model_validate(exam)
        except SQLAlchemyError as exc:
            _log_store_failure(operation="find_by_id", exc=exc, record_id=exam_id)
            return None

    def find_all(self) -> list[ExamRecord]:
        try:
            with self._connection.session() as session:
                exams = session.execute(select(Exam).order_by(Exam.id)).scalars().all()
                return [ExamRecord.model_validate(e) for e in exams]
        except SQLAlchemyError as exc:
            _log_store_failure(operation="find_all", exc=exc, record_id=None)
            return []

    def update(self, record: ExamRecord) -> bool:
        """Overwrite the exam row; `performed_at` always moves to the current moment."""
        try:
            _validate_exam(record=record)
        except BusinessValidationError as exc:
            logger.warning(
                "Exam not updated: %s",
                exc.message,
                extra={
                    "operation": "exam.update",
                    "record_id": record.id,
                    "error": "business_validation",
                },
            )
            return False

        if not is_storable_id(record.id):
            _log_absent(operation="update", outcome="updated", record_id=record.id)
            return False

        performed_at = now_local()
        try:
            with self._connection.session() as session:
                result = session.execute(
                    update(Exam)
                    .where(Exam.id == record.id)
                    .values(
                        description=record.description,
                        performed_at=performed_at,
                        patient_id=record.patient_id,
                    )
                )
                session.commit()
        except SQLAlchemyError as exc:
            _log_store_failure(operation="update", exc=exc, record_id=record.id)
            return False

        if result.rowcount == 0:
            _log_absent(operation="update", outcome="updated", record_id=record.id)
            return False

        record.performed_at = performed_at
        return True

    def delete(self, record: ExamRecord) -> bool:
        if not is_storable_id(record.id):
            _log_absent(operation="delete", outcome="deleted", record_id=record.id)
            return False

        try:
            with self._connection.session() as session:
                result = session.execute(delete(Exam).where(Exam.id == record.id))
                session.commit()
        except SQLAlchemyError as exc:
            _log_store_failure(operation="delete", exc=exc, record_id=record.id)
            return False

        if result.rowcount == 0:
            _log_absent(operation="delete", outcome="deleted", record_id=record.id)
            return False
        return True
