"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.

A missing note is reported as None by the store and repository.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class StoreError(ApplicationError):
    """Raised when the record store fails to read or write."""

    def __init__(self, message: str = "Store error", operation: str | None = None) -> None:
        self.operation = operation
        super().__init__(message, code="SYS_STORE_ERROR")


class ConfigurationError(ApplicationError):
    """Raised when a configuration file is missing keys or has invalid values."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="SYS_CONFIG_ERROR")
