"""
Translation of driver integrity errors into StorageError.

Understands PostgreSQL SQLSTATE codes (psycopg2 `pgcode`, psycopg 3
`sqlstate`) and SQLite's constraint messages. Column names are reported
as API field names (camelCase).
"""

import re

from pydantic.alias_generators import to_camel
from sqlalchemy.exc import IntegrityError

from recy.domain.audit.errors import StorageError, StorageErrorCode

PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"

_PG_KEY_COLUMNS = re.compile(r"Key \(([^)]+)\)=")
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: ([^\n]+)")
_SQLITE_FOREIGN_KEY = "FOREIGN KEY constraint failed"


def _field_names(columns: str) -> tuple[str, ...]:
    names = []
    for column in columns.split(","):
        column = column.strip().strip('"')
        if column:
            names.append(to_camel(column.rsplit(".", 1)[-1]))
    return tuple(names)


def translate_integrity_error(
    exc: IntegrityError,
    table: str,
    foreign_keys: tuple[str, ...] = (),
) -> StorageError:
    """Map an IntegrityError to the store's StorageError contract.

    Args:
        exc: The error raised by SQLAlchemy.
        table: Table the failing statement targeted.
        foreign_keys: API field names of the table's foreign keys, reported
            when the driver does not name the offending column.
    """
    original = exc.orig
    sqlstate = getattr(original, "pgcode", None) or getattr(original, "sqlstate", None)
    message = str(original)

    if sqlstate == PG_UNIQUE_VIOLATION:
        match = _PG_KEY_COLUMNS.search(message)
        fields = _field_names(match.group(1)) if match else ()
        return StorageError(StorageErrorCode.UNIQUE_VIOLATION, fields, table)
    if sqlstate == PG_FOREIGN_KEY_VIOLATION:
        match = _PG_KEY_COLUMNS.search(message)
        fields = _field_names(match.group(1)) if match else foreign_keys
        return StorageError(StorageErrorCode.FOREIGN_KEY_VIOLATION, fields, table)

    match = _SQLITE_UNIQUE.search(message)
    if match:
        return StorageError(StorageErrorCode.UNIQUE_VIOLATION, _field_names(match.group(1)), table)
    if _SQLITE_FOREIGN_KEY in message:
        return StorageError(StorageErrorCode.FOREIGN_KEY_VIOLATION, foreign_keys, table)

    return StorageError(StorageErrorCode.OTHER, (), table)
