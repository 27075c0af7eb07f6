"""Parsing of SQL statements with `:name` parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Union

from flowcontrib.sqldb import BindType, DbHelper

__all__ = ["SQLStatement", "StmtType", "new_sql_statement", "to_stmt_type"]


class StmtType(IntEnum):
    """Kinds of data manipulation statement."""

    UNKNOWN = 0
    SELECT = 1
    INSERT = 2
    UPDATE = 3
    DELETE = 4


_STMT_NAMES = {
    "select": StmtType.SELECT,
    "insert": StmtType.INSERT,
    "update": StmtType.UPDATE,
    "delete": StmtType.DELETE,
}


def to_stmt_type(name: str) -> StmtType:
    """Return the statement kind named by a SQL keyword (case-insensitive)."""
    try:
        return _STMT_NAMES[name.lower()]
    except KeyError:
        raise ValueError(f"unknown statement type: {name}") from None


@dataclass(frozen=True)
class _Literal:
    text: str

    def to_value(self, helper: DbHelper, params: dict[str, Any]) -> str:
        return self.text

    @property
    def placeholder(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class _Param:
    name: str
    placeholder: str

    def to_value(self, helper: DbHelper, params: dict[str, Any]) -> str:
        return helper.to_sql_statement_val(params.get(self.name))

    def __str__(self) -> str:
        return ":" + self.name


_Part = Union[_Literal, _Param]


def _new_param(name: str, bind_type: BindType) -> _Param:
    if bind_type == BindType.AT:
        return _Param(name, "@" + name)
    if bind_type == BindType.COLON:
        return _Param(name, ":" + name)
    return _Param(name, "?")


def _parse(sql: str, bind_type: BindType) -> list[_Part]:
    """Split SQL into literal text and parameters; quoted text is left alone."""
    parts: list[_Part] = []
    size = len(sql)
    start = 0
    pos = 0
    while pos < size:
        ch = sql[pos]
        if ch in "\"'":
            close = sql.find(ch, pos + 1)
            pos = size if close < 0 else close + 1
        elif ch == ":":
            parts.append(_Literal(sql[start:pos]))
            end = sql.find(" ", pos)
            if end < 0:
                end = size
            parts.append(_new_param(sql[pos + 1 : end], bind_type))
            start = end
            pos = end + 1
        else:
            pos += 1
    if start < size:
        parts.append(_Literal(sql[start:]))
    return parts


class SQLStatement:
    """A parsed statement that can be rendered as prepared or literal SQL."""

    def __init__(self, helper: DbHelper, stmt_type: StmtType, parts: list[_Part]) -> None:
        self.helper = helper
        self.stmt_type = stmt_type
        self._parts = parts
        self.prepared_sql = "".join(part.placeholder for part in parts)
        self._param_names = [part.name for part in parts if isinstance(part, _Param)]
        self.placeholder_ids: dict[str, int] = {}
        if helper.bind_type == BindType.DOLLAR:
            for name in self._param_names:
                self.placeholder_ids.setdefault(name, len(self.placeholder_ids) + 1)

    def has_params(self) -> bool:
        """Report whether the statement holds any parameter."""
        return len(self._parts) > 1

    def __str__(self) -> str:
        return "".join(str(part) for part in self._parts)

    def to_statement_sql(self, params: dict[str, Any]) -> str:
        """Render the statement with the parameters written in as literals."""
        return "".join(part.to_value(self.helper, params) for part in self._parts)

    def prepared_statement_args(self, params: dict[str, Any]) -> list[Any] | dict[str, Any]:
        """Return the arguments for the prepared form of the statement."""
        bind_type = self.helper.bind_type
        if bind_type in (BindType.AT, BindType.COLON):
            return dict(params)
        if bind_type == BindType.QUESTION:
            return [params[name] for name in self._param_names if name in params]
        if bind_type == BindType.DOLLAR:
            return [params.get(name) for name in self.placeholder_ids]
        return []


def new_sql_statement(helper: DbHelper, sql: str) -> SQLStatement:
    """Parse SQL for the given database; the first word names its kind."""
    sql = sql.strip()
    words = sql.split()
    if not words:
        raise ValueError(f"invalid sql '{sql}'")
    stmt_type = to_stmt_type(words[0])
    return SQLStatement(helper, stmt_type, _parse(sql, helper.bind_type))