from __future__ import annotations

import pytest

from prontuario.console.context import ConsoleContext
from prontuario.core.db import SqlAlchemyConnectionProvider
from prontuario.core.settings import Settings
from prontuario.patients.exams.repository import ExamRepository
from prontuario.patients.repository import PatientRepository

CONFIG_ENV_KEYS = (
    "APP_ENV",
    "DATABASE_URL",
    "DB_SCHEMA",
    "DB_NAME",
    "DB_USER",
    "DB_PASSWORD",
    "DB_ADDRESS",
    "DB_HOST",
    "DB_PORT",
)


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Environment variables override the config file; keep the host's out of the tests.
    for key in CONFIG_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def database_url(tmp_path) -> str:
    db_file = tmp_path / "test.sqlite3"
    return f"sqlite:///{db_file}"


@pytest.fixture()
def settings(database_url: str) -> Settings:
    return Settings(_env_file=None, database_url=database_url)


@pytest.fixture()
def connection(settings: Settings):
    provider = SqlAlchemyConnectionProvider(settings=settings)
    yield provider
    provider.dispose()


@pytest.fixture()
def exams(connection: SqlAlchemyConnectionProvider) -> ExamRepository:
    return ExamRepository(connection=connection)


@pytest.fixture()
def patients(connection: SqlAlchemyConnectionProvider, exams: ExamRepository) -> PatientRepository:
    return PatientRepository(connection=connection, exams=exams)


@pytest.fixture()
def ctx(patients: PatientRepository, exams: ExamRepository) -> ConsoleContext:
    return ConsoleContext(patients=patients, exams=exams)
