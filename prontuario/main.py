from __future__ import annotations

import logging

import fire

from prontuario.console.context import ConsoleContext
from prontuario.console.menu import run_menu
from prontuario.core.db import ConnectionProvider, SqlAlchemyConnectionProvider
from prontuario.core.logging import setup_logging
from prontuario.core.settings import DEFAULT_CONFIG_FILE, Settings, load_settings
from prontuario.domain.exceptions import ConfigurationError
from prontuario.patients.exams.repository import ExamRepository
from prontuario.patients.repository import PatientRepository

logger = logging.getLogger("prontuario")


def create_context(*, connection: ConnectionProvider) -> ConsoleContext:
    exams = ExamRepository(connection=connection)
    patients = PatientRepository(connection=connection, exams=exams)
    return ConsoleContext(patients=patients, exams=exams)


def create_connection(*, settings: Settings) -> SqlAlchemyConnectionProvider:
    missing = settings.missing_connection_keys()
    if missing:
        raise ConfigurationError(missing)
    return SqlAlchemyConnectionProvider(settings=settings)


def run(config: str = DEFAULT_CONFIG_FILE, log_level: str | int | None = None) -> None:
    """Start the interactive medical records console.

    Args:
        config: Path to the `key=value` configuration file.
        log_level: Overrides the LOG_LEVEL environment variable.
    """
    setup_logging(log_level)
    settings = load_settings(config)

    try:
        connection = create_connection(settings=settings)
    except ConfigurationError as exc:
        logger.error("Cannot start: %s", exc.message, extra={"error": "configuration"})
        raise SystemExit(f"{exc.message} (config file: {config})") from None

    try:
        run_menu(create_context(connection=connection))
    finally:
        connection.dispose()


def cli() -> None:
    fire.Fire(run)


if __name__ == "__main__":
    cli()
