from __future__ import annotations

from prontuario.console.context import ConsoleContext
from prontuario.console.prompts import ask, ask_int
from prontuario.console.tables import Column, render_table
from prontuario.patients.exams.console import exams_for_patient, render_patient_exams
from prontuario.patients.schemas import PatientRecord

PATIENT_COLUMNS: tuple[Column, ...] = (
    ("ID", 3),
    ("Name", 28),
    ("National ID", 15),
)

SECTION_RULE = "-" * 50


def render_patients(patients: list[PatientRecord]) -> str:
    return render_table(PATIENT_COLUMNS, [(p.id, p.name, p.national_id) for p in patients])


def create_patient(ctx: ConsoleContext) -> None:
    print("===== Register patient =====")
    name = ask("Name: ")
    national_id = ask("National ID (CPF): ")

    record = PatientRecord(name=name, national_id=national_id)
    if ctx.patients.create(record) is None:
        print("\nPatient could not be registered. Name and national ID are required and the")
        print("national ID must not belong to another patient.")
        return

    print(f"\nPatient registered with ID {record.id}.")


def list_patients(ctx: ConsoleContext) -> None:
    patients = ctx.patients.find_all()
    if not patients:
        print("No patients found.")
        return

    print("===== Patients =====")
    print(render_patients(patients))


def find_patient(ctx: ConsoleContext) -> None:
    patient_id = ask_int("Patient ID: ")
    patient = ctx.patients.find_by_id(patient_id)
    if patient is None:
        print("Patient not found.")
        return

    print("===== Patient =====")
    print(render_patients([patient]))


def edit_patient(ctx: ConsoleContext) -> None:
    """Blank answers keep the current value."""
    patient_id = ask_int("ID of the patient to edit: ")
    patient = ctx.patients.find_by_id(patient_id)
    if patient is None:
        print("Patient not found.")
        return

    name = ask("New name (leave blank to keep current): ")
    if name:
        patient.name = name

    national_id = ask("New national ID (leave blank to keep current): ")
    if national_id:
        patient.national_id = national_id

    if ctx.patients.update(patient):
        print("\nPatient updated.")
    else:
        print("\nPatient could not be updated.")


def delete_patient(ctx: ConsoleContext) -> None:
    patient_id = ask_int("ID of the patient to delete: ")
    patient = ctx.patients.find_by_id(patient_id)
    if patient is None:
        print("Patient not found.")
        return

    if ctx.patients.delete(patient):
        print("Patient deleted, together with their exams.")
    else:
        print("Patient could not be deleted.")


def list_patients_with_exams(ctx: ConsoleContext) -> None:
    patients = ctx.patients.find_all()
    if not patients:
        print("No patients found.")
        return

    all_exams = ctx.exams.find_all()

    print("===== Patients and their exams =====")
    for p in patients:
        print(f"\n{SECTION_RULE}")
        print(f"Patient ID: {p.id} | Name: {p.name} | National ID: {p.national_id}")
        print(SECTION_RULE)
        print(
            render_patient_exams(
                exams_for_patient(all_exams, p.id),
                empty_message="No exams for this patient",
            )
        )
