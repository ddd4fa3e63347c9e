from __future__ import annotations

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from prontuario.core.db import ConnectionProvider, is_storable_id
from prontuario.domain.exceptions import BusinessValidationError
from prontuario.patients.exams.repository import ExamRepository
from prontuario.patients.models import Patient
from prontuario.patients.schemas import PatientRecord

logger = logging.getLogger("prontuario.patients")


def _validate_patient(*, record: PatientRecord) -> None:
    if record.name is None or not record.name.strip():
        raise BusinessValidationError("Patient name is required.")
    if record.national_id is None or not record.national_id.strip():
        raise BusinessValidationError("Patient national id is required.")


def _log_absent(*, operation: str, outcome: str, record_id: int | None) -> None:
    logger.info(
        "No patient %s (patient_id=%s)",
        outcome,
        record_id,
        extra={"operation": f"patient.{operation}", "record_id": record_id},
    )


def _log_store_failure(*, operation: str, exc: SQLAlchemyError, record_id: int | None) -> None:
    # IntegrityError messages echo the national id (PII); log the class only.
    logger.error(
        "Patient %s failed (patient_id=%s, error=%s)",
        operation,
        record_id,
        exc.__class__.__name__,
        extra={
            "operation": f"patient.{operation}",
            "record_id": record_id,
            "error": exc.__class__.__name__,
        },
    )


class PatientRepository:
    """
    CRUD access to the `patients` table.

    Every call acquires and releases its own session. Exams attached to a new
    patient are created through the exam repository once the patient row exists.
    """

    def __init__(
        self,
        *,
        connection: ConnectionProvider,
        exams: ExamRepository | None = None,
    ):
        self._connection = connection
        self._exams = exams or ExamRepository(connection=connection)

    @property
    def exams(self) -> ExamRepository:
        return self._exams

    def create(self, record: PatientRecord) -> PatientRecord | None:
        try:
            _validate_patient(record=record)
        except BusinessValidationError as exc:
            logger.warning(
                "Patient not created: %s",
                exc.message,
                extra={"operation": "patient.create", "error": "business_validation"},
            )
            return None

        try:
            with self._connection.session() as session:
                patient = Patient(name=record.name, national_id=record.national_id)
                session.add(patient)
                session.commit()
                record.id = patient.id
        except SQLAlchemyError as exc:
            _log_store_failure(operation="create", exc=exc, record_id=None)
            return None

        logger.info(
            "Patient created (patient_id=%s)",
            record.id,
            extra={"operation": "patient.create", "record_id": record.id},
        )

        # The patient row must exist before its exams reference it.
        for exam in record.exams:
            exam.patient_id = record.id
            self._exams.create(exam)

        return record

    def find_by_id(self, patient_id: int) -> PatientRecord | None:
        if not is_storable_id(patient_id):
            _log_absent(operation="find_by_id", outcome="found", record_id=patient_id)
            return None

        try:
            with self._connection.session() as session:
                patient = session.get(Patient, patient_id)
                if patient is None:
                    _log_absent(operation="find_by_id", outcome="found", record_id=patient_id)
                    return None
                return PatientRecord.model_validate(patient)
        except SQLAlchemyError as exc:
            _log_store_failure(operation="find_by_id", exc=exc, record_id=patient_id)
            return None

    def find_all(self) -> list[PatientRecord]:
        try:
            with self._connection.session() as session:
                patients = session.execute(select(Patient).order_by(Patient.id)).scalars().all()
                return [PatientRecord.model_validate(p) for p in patients]
        except SQLAlchemyError as exc:
            _log_store_failure(operation="find_all", exc=exc, record_id=None)
            return []

    def update(self, record: PatientRecord) -> bool:
        try:
            _validate_patient(record=record)
        except BusinessValidationError as exc:
            logger.warning(
                "Patient not updated: %s",
                exc.message,
                extra={
                    "operation": "patient.update",
                    "record_id": record.id,
                    "error": "business_validation",
                },
            )
            return False

        if not is_storable_id(record.id):
            _log_absent(operation="update", outcome="updated", record_id=record.id)
            return False

        try:
            with self._connection.session() as session:
                result = session.execute(
                    update(Patient)
                    .where(Patient.id == record.id)
                    .values(name=record.name, national_id=record.national_id)
                )
                session.commit()
        except SQLAlchemyError as exc:
            _log_store_failure(operation="update", exc=exc, record_id=record.id)
            return False

        if result.rowcount == 0:
            _log_absent(operation="update", outcome="updated", record_id=record.id)
            return False
        return True

    def delete(self, record: PatientRecord) -> bool:
        """Delete the patient row; the store's cascade removes its exams."""
        if not is_storable_id(record.id):
            _log_absent(operation="delete", outcome="deleted", record_id=record.id)
            return False

        try:
            with self._connection.session() as session:
                result = session.execute(delete(Patient).where(Patient.id == record.id))
                session.commit()
        except SQLAlchemyError as exc:
            _log_store_failure(operation="delete", exc=exc, record_id=record.id)
            return False

        if result.rowcount == 0:
            _log_absent(operation="delete", outcome="deleted", record_id=record.id)
            return False
        return True
