from __future__ import annotations


class BusinessValidationError(Exception):
    """Raised when a record is missing a required field."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(Exception):
    """Raised when the configuration lacks the keys needed to reach the store."""

    def __init__(self, missing_keys: list[str]):
        message = "Missing configuration keys: " + ", ".join(missing_keys)
        super().__init__(message)
        self.message = message
        self.missing_keys = missing_keys
