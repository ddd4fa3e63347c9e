from __future__ import annotations

from collections.abc import Iterable

from prontuario.console.context import ConsoleContext
from prontuario.console.prompts import ask, ask_int
from prontuario.console.tables import Column, format_timestamp, render_table
from prontuario.core.time_utils import now_local
from prontuario.patients.exams.schemas import ExamRecord

EXAM_COLUMNS: tuple[Column, ...] = (
    ("ID", 3),
    ("Description", 28),
    ("Date", 19),
    ("Patient ID", 10),
)

# Used when the owning patient is already shown.
PATIENT_EXAM_COLUMNS: tuple[Column, ...] = EXAM_COLUMNS[:3]


def exams_for_patient(exams: Iterable[ExamRecord], patient_id: int | None) -> list[ExamRecord]:
    return [e for e in exams if e.patient_id == patient_id]


def render_exams(exams: list[ExamRecord]) -> str:
    return render_table(
        EXAM_COLUMNS,
        [(e.id, e.description, format_timestamp(e.performed_at), e.patient_id) for e in exams],
    )


def render_patient_exams(exams: list[ExamRecord], *, empty_message: str) -> str:
    return render_table(
        PATIENT_EXAM_COLUMNS,
        [(e.id, e.description, format_timestamp(e.performed_at)) for e in exams],
        empty_message=empty_message,
    )


def create_exam(ctx: ConsoleContext) -> None:
    print("===== Register exam =====")
    description = ask("Description: ")
    patient_id = ask_int("Patient ID: ")

    record = ExamRecord(description=description, performed_at=now_local(), patient_id=patient_id)
    if ctx.exams.create(record) is None:
        print("\nExam could not be registered.")
        return

    print(f"\nExam registered with ID {record.id}.")
    print(f"Exam date recorded as: {format_timestamp(record.performed_at)}")


def list_exams(ctx: ConsoleContext) -> None:
    exams = ctx.exams.find_all()
    if not exams:
        print("No exams found.")
        return

    print("===== Exams =====")
    print(render_exams(exams))


def find_exam(ctx: ConsoleContext) -> None:
    exam_id = ask_int("Exam ID: ")
    exam = ctx.exams.find_by_id(exam_id)
    if exam is None:
        print("Exam not found.")
        return

    print("===== Exam =====")
    print(render_exams([exam]))


def edit_exam(ctx: ConsoleContext) -> None:
    """Blank description keeps the current one; the exam date always moves to now."""
    exam_id = ask_int("ID of the exam to edit: ")
    exam = ctx.exams.find_by_id(exam_id)
    if exam is None:
        print("Exam not found.")
        return

    description = ask("New description (leave blank to keep current): ")
    if description:
        exam.description = description

    if not ctx.exams.update(exam):
        print("\nExam could not be updated.")
        return

    print("\nExam updated.")
    print(f"Exam date updated to: {format_timestamp(exam.performed_at)}")


def delete_exam(ctx: ConsoleContext) -> None:
    exam_id = ask_int("ID of the exam to delete: ")
    exam = ctx.exams.find_by_id(exam_id)
    if exam is None:
        print("Exam not found.")
        return

    if ctx.exams.delete(exam):
        print("Exam deleted.")
    else:
        print("Exam could not be deleted.")


def list_patient_exams(ctx: ConsoleContext) -> None:
    patient_id = ask_int("Patient ID: ")
    exams = exams_for_patient(ctx.exams.find_all(), patient_id)

    print(f"===== Exams of patient ID: {patient_id} =====")
    print(render_patient_exams(exams, empty_message="No exams found for this patient"))
