"""Map SQLite driver exceptions onto application error codes."""

from __future__ import annotations

import logging
import sqlite3

from later.errors import AppError, ErrorCode

logger = logging.getLogger(__name__)

_CODES_BY_ERRNAME: dict[str, ErrorCode] = {
    "SQLITE_BUSY": ErrorCode.DATABASE_TIMEOUT,
    "SQLITE_BUSY_TIMEOUT": ErrorCode.DATABASE_TIMEOUT,
    "SQLITE_LOCKED": ErrorCode.DATABASE_TIMEOUT,
    "SQLITE_INTERRUPT": ErrorCode.DATABASE_TIMEOUT,
    "SQLITE_AUTH": ErrorCode.DATABASE_PERMISSION_DENIED,
    "SQLITE_PERM": ErrorCode.DATABASE_PERMISSION_DENIED,
    "SQLITE_READONLY": ErrorCode.DATABASE_PERMISSION_DENIED,
    "SQLITE_CONSTRAINT_UNIQUE": ErrorCode.DATABASE_UNIQUE_CONSTRAINT,
    "SQLITE_CONSTRAINT_PRIMARYKEY": ErrorCode.DATABASE_UNIQUE_CONSTRAINT,
    "SQLITE_CONSTRAINT_FOREIGNKEY": ErrorCode.DATABASE_FOREIGN_KEY_VIOLATION,
    "SQLITE_CONSTRAINT_NOTNULL": ErrorCode.DATABASE_NOT_NULL_VIOLATION,
}

# Fallback when the driver does not expose an error name.
_CODES_BY_MESSAGE: tuple[tuple[str, ErrorCode], ...] = (
    ("interrupted", ErrorCode.DATABASE_TIMEOUT),
    ("database is locked", ErrorCode.DATABASE_TIMEOUT),
    ("database table is locked", ErrorCode.DATABASE_TIMEOUT),
    ("not authorized", ErrorCode.DATABASE_PERMISSION_DENIED),
    ("readonly database", ErrorCode.DATABASE_PERMISSION_DENIED),
    ("unique constraint failed", ErrorCode.DATABASE_UNIQUE_CONSTRAINT),
    ("foreign key constraint failed", ErrorCode.DATABASE_FOREIGN_KEY_VIOLATION),
    ("not null constraint failed", ErrorCode.DATABASE_NOT_NULL_VIOLATION),
)


def map_database_error(exc: sqlite3.Error) -> AppError:
    """Convert a ``sqlite3`` exception into an :class:`AppError`."""
    errname = getattr(exc, "sqlite_errorname", None) or ""
    code = _CODES_BY_ERRNAME.get(errname)
    if code is None:
        lowered = str(exc).lower()
        code = next(
            (mapped for needle, mapped in _CODES_BY_MESSAGE if needle in lowered),
            ErrorCode.DATABASE_GENERIC,
        )
        if code is ErrorCode.DATABASE_GENERIC and errname:
            logger.debug("Unmapped SQLite error %s: %s", errname, exc)

    return AppError(
        code,
        f"Database operation failed: {exc}",
        technical_details=f"{type(exc).__name__}(errorname={errname or None}, message={exc})",
    )
