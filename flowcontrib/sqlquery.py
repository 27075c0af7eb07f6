"""An activity that runs a parameterised SELECT query."""

from __future__ import annotations

import sqlite3
from contextlib import closing
from dataclasses import dataclass
from typing import Any

from flowcontrib.activity import Activity, ActivityContext, InitContext
from flowcontrib.coerce import to_bool, to_int, to_object, to_string
from flowcontrib.sqldb import DbHelper, get_db_helper
from flowcontrib.sqlstatement import SQLStatement, StmtType, new_sql_statement

__all__ = ["QuerySettings", "SQLQueryActivity", "connect"]

_SQLITE_DRIVERS = ("sqlite3", "sqlite")


def _required(values: dict[str, Any], key: str) -> str:
    value = values.get(key)
    if value is None or value == "":
        raise ValueError(f"required setting '{key}' not set")
    return to_string(value)


@dataclass
class QuerySettings:
    """Settings of the SQL query activity."""

    db_type: str
    driver_name: str
    data_source_name: str
    query: str
    max_open_conns: int = 0
    max_idle_conns: int = 2
    disable_prepared: bool = False
    labeled_results: bool = False

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> QuerySettings:
        """Build settings from their configuration names."""
        idle = values.get("maxIdleConnections")
        return cls(
            db_type=_required(values, "dbType"),
            driver_name=_required(values, "driverName"),
            data_source_name=_required(values, "dataSourceName"),
            query=_required(values, "query"),
            max_open_conns=to_int(values.get("maxOpenConnections")),
            max_idle_conns=2 if idle is None else to_int(idle),
            disable_prepared=to_bool(values.get("disablePrepared")),
            labeled_results=to_bool(values.get("labeledResults")),
        )


def connect(settings: QuerySettings) -> sqlite3.Connection:
    """Open a connection with the driver the settings name."""
    if settings.driver_name not in _SQLITE_DRIVERS:
        raise ValueError(f"sql: unknown driver {settings.driver_name!r}")
    return sqlite3.connect(settings.data_source_name, check_same_thread=False)


class SQLQueryActivity(Activity):
    """Runs a SELECT statement with the params input and outputs the rows."""

    def __init__(
        self,
        connection: sqlite3.Connection,
        helper: DbHelper,
        statement: SQLStatement,
        use_prepared: bool = True,
        labeled_results: bool = False,
    ) -> None:
        self.connection = connection
        self.helper = helper
        self.statement = statement
        self.use_prepared = use_prepared
        self.labeled_results = labeled_results

    @classmethod
    def from_context(cls, ctx: InitContext) -> SQLQueryActivity:
        settings = QuerySettings.from_dict(ctx.settings)
        helper = get_db_helper(settings.db_type)
        ctx.logger.debug("DB: '%s'", settings.db_type)
        statement = new_sql_statement(helper, settings.query)
        if statement.stmt_type != StmtType.SELECT:
            raise ValueError("only select statement is supported")
        connection = connect(settings)
        if not settings.disable_prepared:
            ctx.logger.debug("Using PreparedStatement: %s", statement.prepared_sql)
        return cls(
            connection,
            helper,
            statement,
            use_prepared=not settings.disable_prepared,
            labeled_results=settings.labeled_results,
        )

    def eval(self, ctx: ActivityContext) -> bool:
        params = to_object(ctx.get_input("params"))
        ctx.set_output("results", self._select(params))
        return True

    def _select(self, params: dict[str, Any]) -> list[Any]:
        if self.use_prepared:
            args = self.statement.prepared_statement_args(params)
            cursor = self.connection.execute(self.statement.prepared_sql, args)
        else:
            cursor = self.connection.execute(self.statement.to_statement_sql(params))
        with closing(cursor):
            columns = [column[0] for column in cursor.description or ()]
            rows = cursor.fetchall()
        if self.labeled_results:
            return [dict(zip(columns, row)) for row in rows]
        return [list(row) for row in rows]

    def cleanup(self) -> None:
        """Close the database connection."""
        self.connection.close()