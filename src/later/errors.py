"""Application error taxonomy shared by the data, service and controller layers."""

from __future__ import annotations

import logging
from enum import IntEnum, StrEnum
from typing import Any

logger = logging.getLogger(__name__)


class ErrorSeverity(IntEnum):
    """How loudly an error should be reported."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4


class ErrorCode(StrEnum):
    """Registry of every error kind the app can surface."""

    # Database
    DATABASE_UNIQUE_CONSTRAINT = "database_unique_constraint"
    DATABASE_FOREIGN_KEY_VIOLATION = "database_foreign_key_violation"
    DATABASE_NOT_NULL_VIOLATION = "database_not_null_violation"
    DATABASE_PERMISSION_DENIED = "database_permission_denied"
    DATABASE_TIMEOUT = "database_timeout"
    DATABASE_GENERIC = "database_generic"

    # Network
    NETWORK_TIMEOUT = "network_timeout"
    NETWORK_NO_CONNECTION = "network_no_connection"
    NETWORK_SERVER_ERROR = "network_server_error"
    NETWORK_GENERIC = "network_generic"

    # Validation
    VALIDATION_REQUIRED = "validation_required"
    VALIDATION_INVALID_FORMAT = "validation_invalid_format"
    VALIDATION_OUT_OF_RANGE = "validation_out_of_range"

    # Business logic
    SPACE_NOT_FOUND = "space_not_found"
    INSUFFICIENT_PERMISSIONS = "insufficient_permissions"

    UNKNOWN_ERROR = "unknown_error"

    @property
    def is_retryable(self) -> bool:
        return self in _RETRYABLE_CODES

    @property
    def severity(self) -> ErrorSeverity:
        return _SEVERITY_BY_CODE.get(self, ErrorSeverity.HIGH)


_RETRYABLE_CODES = frozenset(
    {
        ErrorCode.DATABASE_TIMEOUT,
        ErrorCode.NETWORK_TIMEOUT,
        ErrorCode.NETWORK_NO_CONNECTION,
        ErrorCode.NETWORK_SERVER_ERROR,
        ErrorCode.NETWORK_GENERIC,
    }
)

_SEVERITY_BY_CODE: dict[ErrorCode, ErrorSeverity] = {
    ErrorCode.DATABASE_FOREIGN_KEY_VIOLATION: ErrorSeverity.CRITICAL,
    ErrorCode.DATABASE_NOT_NULL_VIOLATION: ErrorSeverity.CRITICAL,
    ErrorCode.NETWORK_TIMEOUT: ErrorSeverity.MEDIUM,
    ErrorCode.NETWORK_NO_CONNECTION: ErrorSeverity.MEDIUM,
    ErrorCode.NETWORK_SERVER_ERROR: ErrorSeverity.MEDIUM,
    ErrorCode.NETWORK_GENERIC: ErrorSeverity.MEDIUM,
    ErrorCode.SPACE_NOT_FOUND: ErrorSeverity.MEDIUM,
    ErrorCode.VALIDATION_REQUIRED: ErrorSeverity.LOW,
    ErrorCode.VALIDATION_INVALID_FORMAT: ErrorSeverity.LOW,
    ErrorCode.VALIDATION_OUT_OF_RANGE: ErrorSeverity.LOW,
}

_DEFAULT_USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.DATABASE_PERMISSION_DENIED: "You do not have permission to access this data.",
    ErrorCode.DATABASE_TIMEOUT: "The search took too long. Please try again.",
    ErrorCode.NETWORK_NO_CONNECTION: "No connection. Check your network and try again.",
    ErrorCode.VALIDATION_REQUIRED: "{field_name} is required.",
    ErrorCode.VALIDATION_OUT_OF_RANGE: "{field_name} must be between {min} and {max}.",
}


class AppError(Exception):
    """Structured error carrying a code, a technical message and UI context."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        technical_details: str | None = None,
        context: dict[str, Any] | None = None,
        user_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.technical_details = technical_details
        self.context = dict(context or {})
        self.user_message = user_message

    @property
    def is_retryable(self) -> bool:
        return self.code.is_retryable

    @property
    def severity(self) -> ErrorSeverity:
        return self.code.severity

    def get_user_message(self) -> str:
        """Message suitable for display, interpolating context where possible."""
        if self.user_message:
            return self.user_message
        template = _DEFAULT_USER_MESSAGES.get(self.code)
        if template is None:
            return "An unexpected error occurred. Please try again."
        try:
            return template.format(**self.context)
        except KeyError:
            return "Invalid input. Please check your data and try again."

    @classmethod
    def unknown(cls, exc: BaseException, where: str) -> AppError:
        """Wrap an unrecognized exception."""
        return cls(
            ErrorCode.UNKNOWN_ERROR,
            f"Unexpected error in {where}: {exc}",
            technical_details=repr(exc),
        )

    def __repr__(self) -> str:
        return f"AppError(code={self.code.value!r}, message={self.message!r})"

    def __str__(self) -> str:
        if self.technical_details:
            return f"AppError({self.code.value}): {self.message} - Details: {self.technical_details}"
        return f"AppError({self.code.value}): {self.message}"


def required_field(field_name: str) -> AppError:
    return AppError(
        ErrorCode.VALIDATION_REQUIRED,
        f"Required field is missing: {field_name}",
        context={"field_name": field_name},
    )


def out_of_range(field_name: str, min_value: str, max_value: str) -> AppError:
    return AppError(
        ErrorCode.VALIDATION_OUT_OF_RANGE,
        f"Value out of range for {field_name} (expected {min_value}-{max_value})",
        context={"field_name": field_name, "min": min_value, "max": max_value},
    )


_LOG_LEVELS = {
    ErrorSeverity.LOW: logging.INFO,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def log_error(error: AppError, context: str = "") -> None:
    """Log an AppError at a level matching its severity."""
    level = _LOG_LEVELS[error.severity]
    prefix = f"[{context}] " if context else ""
    logger.log(level, "%s%s", prefix, error)
