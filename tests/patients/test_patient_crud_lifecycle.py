"""Integration tests: patient CRUD lifecycle."""

from __future__ import annotations

import logging

import pytest

from prontuario.patients.exams.schemas import ExamRecord
from prontuario.patients.repository import PatientRepository
from prontuario.patients.schemas import PatientRecord
from tests.patients._helpers import create_patient


def test_patient_crud_lifecycle_happy_path(patients: PatientRepository) -> None:
    """Create -> Get -> Update -> Delete -> absent."""
    patient_id = create_patient(
        patients=patients, name="Ada Lovelace", national_id="123.456.789-00"
    )

    found = patients.find_by_id(patient_id)
    assert found is not None
    assert found.id == patient_id
    assert found.name == "Ada Lovelace"
    assert found.national_id == "123.456.789-00"

    found.name = "Ada King"
    assert patients.update(found) is True
    assert patients.find_by_id(patient_id).name == "Ada King"

    assert patients.delete(found) is True
    assert patients.find_by_id(patient_id) is None


def test_create_writes_generated_id_into_the_same_record(patients: PatientRepository) -> None:
    record = PatientRecord(name="Alan Turing", national_id="222.222.222-22")
    assert record.id is None

    returned = patients.create(record)

    assert returned is record
    assert isinstance(record.id, int)


@pytest.mark.parametrize(
    ("name", "national_id"),
    [(None, "333.333.333-33"), ("Grace Hopper", None), ("   ", "333.333.333-33"), ("Grace", "")],
)
def test_create_rejects_missing_required_fields(
    patients: PatientRepository,
    caplog: pytest.LogCaptureFixture,
    name: str | None,
    national_id: str | None,
) -> None:
    caplog.set_level(logging.WARNING, logger="prontuario.patients")
    record = PatientRecord(name=name, national_id=national_id)

    assert patients.create(record) is None
    assert record.id is None
    assert patients.find_all() == []

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert warnings[0].__dict__["error"] == "business_validation"


def test_duplicate_national_id_is_rejected_and_count_unchanged(
    patients: PatientRepository, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.ERROR, logger="prontuario.patients")
    create_patient(patients=patients, name="First Owner", national_id="444.444.444-44")
    before = len(patients.find_all())

    duplicate = PatientRecord(name="Second Owner", national_id="444.444.444-44")
    assert patients.create(duplicate) is None
    assert duplicate.id is None
    assert len(patients.find_all()) == before

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert errors[0].__dict__["error"] == "IntegrityError"
    # The national id is PII and must not reach the logs.
    assert "444.444.444-44" not in errors[0].getMessage()


def test_find_by_id_missing_returns_none(patients: PatientRepository) -> None:
    assert patients.find_by_id(9999) is None


@pytest.mark.parametrize("patient_id", [2**31, 2**64, -(2**63) - 1])
def test_ids_beyond_the_int_column_are_absent(
    patients: PatientRepository, patient_id: int
) -> None:
    create_patient(patients=patients, name="Ada", national_id="123.456.789-00")
    ghost = PatientRecord(id=patient_id, name="Nobody", national_id="000.000.000-00")

    assert patients.find_by_id(patient_id) is None
    assert patients.update(ghost) is False
    assert patients.delete(ghost) is False
    assert len(patients.find_all()) == 1


def test_find_all_returns_patients_in_id_order(patients: PatientRepository) -> None:
    ids = [
        create_patient(patients=patients, name=name, national_id=f"555.555.555-0{i}")
        for i, name in enumerate(["Carol", "Alice", "Bob"])
    ]

    listed = patients.find_all()

    assert [p.id for p in listed] == ids
    assert [p.name for p in listed] == ["Carol", "Alice", "Bob"]
    assert all(p.exams == [] for p in listed)


def test_update_of_unknown_patient_is_logged_not_raised(
    patients: PatientRepository, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="prontuario.patients")

    ghost = PatientRecord(id=4242, name="Nobody", national_id="000.000.000-00")
    assert patients.update(ghost) is False

    infos = [r for r in caplog.records if r.levelno == logging.INFO]
    assert any(r.__dict__.get("operation") == "patient.update" for r in infos)


def test_update_to_a_taken_national_id_fails(patients: PatientRepository) -> None:
    create_patient(patients=patients, name="Owner", national_id="666.666.666-66")
    other_id = create_patient(patients=patients, name="Other", national_id="777.777.777-77")

    other = patients.find_by_id(other_id)
    other.national_id = "666.666.666-66"

    assert patients.update(other) is False
    assert patients.find_by_id(other_id).national_id == "777.777.777-77"


def test_delete_of_unknown_patient_returns_false(patients: PatientRepository) -> None:
    assert patients.delete(PatientRecord(id=4242, name="x", national_id="x")) is False


def test_create_persists_attached_exams_after_the_patient(patients: PatientRepository) -> None:
    record = PatientRecord(
        name="Katherine Johnson",
        national_id="888.888.888-88",
        exams=[ExamRecord(description="Bloodwork"), ExamRecord(description="X-ray")],
    )

    assert patients.create(record) is not None

    assert all(e.patient_id == record.id for e in record.exams)
    assert all(e.id is not None for e in record.exams)
    stored = [e for e in patients.exams.find_all() if e.patient_id == record.id]
    assert sorted(e.description for e in stored) == ["Bloodwork", "X-ray"]
