from __future__ import annotations

import logging
from collections.abc import Callable

from prontuario.console.context import ConsoleContext
from prontuario.console.prompts import ask_int
from prontuario.patients import console as patients_console
from prontuario.patients.exams import console as exams_console

logger = logging.getLogger("prontuario.console")

MenuHandler = Callable[[ConsoleContext], None]

EXIT_OPTION = 0
RULE = "=" * 50
SEPARATOR = "-" * 50

# Groups are printed with a separator between them.
MENU: tuple[tuple[tuple[int, str, MenuHandler], ...], ...] = (
    (
        (1, "Register patient", patients_console.create_patient),
        (2, "List patients", patients_console.list_patients),
        (3, "Find patient by ID", patients_console.find_patient),
        (4, "Edit patient", patients_console.edit_patient),
        (5, "Delete patient", patients_console.delete_patient),
    ),
    (
        (6, "Register exam", exams_console.create_exam),
        (7, "List exams", exams_console.list_exams),
        (8, "Find exam by ID", exams_console.find_exam),
        (9, "Edit exam", exams_console.edit_exam),
        (10, "Delete exam", exams_console.delete_exam),
    ),
    (
        (11, "Exams of a patient", exams_console.list_patient_exams),
        (12, "Patients and their exams", patients_console.list_patients_with_exams),
    ),
)

HANDLERS: dict[int, MenuHandler] = {
    number: handler for group in MENU for number, _, handler in group
}


def render_menu() -> str:
    lines = [f"\n{RULE}", "MEDICAL RECORDS".center(len(RULE)).rstrip(), RULE]
    for index, group in enumerate(MENU):
        if index:
            lines.append(SEPARATOR)
        lines.extend(f"{number:<2} | {label}" for number, label, _ in group)
    lines.append(f"{EXIT_OPTION:<2} | Exit")
    return "\n".join(lines)


def read_selection() -> int:
    try:
        return ask_int("\nChoose an option: ")
    except EOFError:
        # Closed stdin ends the session like an explicit exit.
        return EXIT_OPTION


def run_menu(ctx: ConsoleContext) -> None:
    """Show the menu and dispatch selections until the user exits."""
    logger.info("Console session started")
    while True:
        print(render_menu())
        selection = read_selection()
        print()

        if selection == EXIT_OPTION:
            print("Shutting down. Goodbye!")
            break

        handler = HANDLERS.get(selection)
        if handler is None:
            print("Invalid option. Try again.")
            continue

        try:
            handler(ctx)
        except EOFError:
            print("\nInput closed. Goodbye!")
            break

    logger.info("Console session finished")
