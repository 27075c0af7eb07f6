"""Database kinds, their parameter binding styles and SQL literal rendering."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from flowcontrib.coerce import to_string

__all__ = ["BindType", "DbHelper", "DbType", "get_db_helper", "to_db_type"]


class DbType(IntEnum):
    """Supported database kinds."""

    UNKNOWN = 0
    MYSQL = 1
    ORACLE = 2
    POSTGRES = 3
    SQLITE = 4
    SQLSERVER = 5


class BindType(IntEnum):
    """How a database marks the parameters of a prepared statement."""

    UNKNOWN = 0
    AT = 1
    COLON = 2
    DOLLAR = 3
    QUESTION = 4


_DB_NAMES = {
    "mysql": DbType.MYSQL,
    "oracle": DbType.ORACLE,
    "postgres": DbType.POSTGRES,
    "sqlite": DbType.SQLITE,
    "sqlserver": DbType.SQLSERVER,
}


def to_db_type(name: str) -> DbType:
    """Return the database kind with the given name (case-insensitive)."""
    try:
        return _DB_NAMES[name.lower()]
    except (KeyError, AttributeError):
        raise ValueError(f"unknown type: {name}") from None


@dataclass(frozen=True)
class DbHelper:
    """Database-specific details needed to build and run statements."""

    db_type: DbType
    bind_type: BindType
    true_literal: str = "true"
    false_literal: str = "false"

    def to_sql_statement_val(self, value: Any) -> str:
        """Render a value as a literal to be placed directly in SQL text."""
        if isinstance(value, bool):
            return self.true_literal if value else self.false_literal
        if isinstance(value, (int, float)):
            return to_string(value)
        return "'" + to_string(value) + "'"


_HELPERS = {
    DbType.MYSQL: DbHelper(DbType.MYSQL, BindType.QUESTION),
    DbType.ORACLE: DbHelper(DbType.ORACLE, BindType.COLON, "1", "0"),
    DbType.POSTGRES: DbHelper(DbType.POSTGRES, BindType.DOLLAR, "TRUE", "FALSE"),
    DbType.SQLITE: DbHelper(DbType.SQLITE, BindType.QUESTION, "1", "0"),
    DbType.SQLSERVER: DbHelper(DbType.SQLSERVER, BindType.AT, "TRUE", "FALSE"),
}


def get_db_helper(name: str) -> DbHelper:
    """Return the helper for the named database kind."""
    db_type = to_db_type(name)
    try:
        return _HELPERS[db_type]
    except KeyError:
        raise ValueError(f"unsupported db: {name}") from None