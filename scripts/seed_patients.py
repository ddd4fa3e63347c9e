"""Seed patient data for local development.

This script is designed to be safe to run multiple times:
- It only runs when APP_ENV=development
- It inserts rows only when the patients table is empty

Usage:
    APP_ENV=development python -m scripts.seed_patients [config.properties]
"""

# ruff: noqa: I001
from __future__ import annotations

import sys
from datetime import datetime

from sqlalchemy import func, select

from prontuario.core.db import ConnectionProvider, SqlAlchemyConnectionProvider
from prontuario.core.settings import DEFAULT_CONFIG_FILE, load_settings
from prontuario.patients.exams.schemas import ExamRecord
from prontuario.patients.models import Patient
from prontuario.patients.repository import PatientRepository
from prontuario.patients.schemas import PatientRecord


def _seed_rows() -> list[PatientRecord]:
    """Return a deterministic set of synthetic patients, each with exams attached."""
    rows = [
        ("Ada Lovelace", "100.000.000-01", [("Complete blood count", datetime(2025, 1, 6, 8, 30))]),
        (
            "Alan Turing",
            "100.000.000-02",
            [
                ("Chest X-ray", datetime(2025, 1, 7, 9, 15)),
                ("Lipid panel", datetime(2025, 2, 3, 7, 45)),
            ],
        ),
        ("Grace Hopper", "100.000.000-03", [("Electrocardiogram", datetime(2025, 1, 9, 14, 0))]),
        ("Katherine Johnson", "100.000.000-04", []),
        (
            "Margaret Hamilton",
            "100.000.000-05",
            [("Fasting glucose", datetime(2025, 2, 11, 7, 10))],
        ),
    ]

    return [
        PatientRecord(
            name=name,
            national_id=national_id,
            exams=[ExamRecord(description=d, performed_at=at) for d, at in exams],
        )
        for name, national_id, exams in rows
    ]


def seed_patients_if_empty(
    *, repository: PatientRepository, connection: ConnectionProvider
) -> None:
    """Seed the demo patients if the patients table is empty."""
    with connection.session() as session:
        total = int(session.execute(select(func.count()).select_from(Patient)).scalar_one())
    if total > 0:
        print(f"Seed skipped: patients table already has {total} row(s).")
        return

    created = [p for p in _seed_rows() if repository.create(p) is not None]
    print(f"Seeded {len(created)} patients.")


def main() -> None:
    """Entry point."""
    config = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_FILE
    settings = load_settings(config)
    if not settings.is_development:
        print(f"Seed skipped: APP_ENV={settings.app_env!r} (seeding only runs in development).")
        return

    missing = settings.missing_connection_keys()
    if missing:
        raise SystemExit("Missing configuration keys: " + ", ".join(missing))

    connection = SqlAlchemyConnectionProvider(settings=settings)
    try:
        seed_patients_if_empty(
            repository=PatientRepository(connection=connection),
            connection=connection,
        )
    finally:
        connection.dispose()


if __name__ == "__main__":
    main()
