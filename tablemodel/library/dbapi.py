"""
DB-API (PEP 249) database library for tablemodel.

Runs the statements rendered by the query builder on a connection handed
in by the caller. Opening, pooling and closing connections stay with the
caller.
"""

import logging
import sqlite3
from typing import Any, Optional, Sequence

from tablemodel.library.base import Error, Library, NoDataError, NoErrorError, QueryError
from tablemodel.library.builder import ColumnSpec, QueryBuilder
from tablemodel.library.result import Result

logger = logging.getLogger(__name__)


class DBAPILibrary(Library):
    """
    Library executing statements on a PEP 249 connection.

    Args:
        connection: Open DB-API connection
        driver_error: Base exception class of the driver (the module's ``Error``)
        builder: Query builder matching the driver's dialect and paramstyle
        autocommit: Commit after every successful statement

    Example:
        >>> import psycopg2
        >>> library = DBAPILibrary(
        ...     psycopg2.connect(dsn),
        ...     psycopg2.Error,
        ...     builder=QueryBuilder(paramstyle="format"),
        ... )
    """

    def __init__(
        self,
        connection: Any,
        driver_error: type[Exception],
        builder: Optional[QueryBuilder] = None,
        autocommit: bool = True,
    ):
        self.connection = connection
        self.driver_error = driver_error
        self.autocommit = autocommit
        self._builder = builder or QueryBuilder()
        self._result: Optional[Result] = None
        self._error: Optional[Error] = None

    @property
    def builder(self) -> QueryBuilder:
        """Query builder holding the pending state of the next statement."""
        return self._builder

    def _make_error(self, exc: Exception, query: str, params: Sequence[Any]) -> Error:
        """Build the Error value for a failed statement."""
        return Error(message=str(exc), query=query, params=tuple(params))

    def execute(self, query: str, params: Sequence[Any] = ()) -> bool:
        """
        Execute a statement.

        A statement yielding rows replaces the fetchable result set. A failed
        statement is recorded as the last error and reported by returning
        False.
        """
        logger.debug("Executing statement: %s %r", query, tuple(params))
        self._result = None
        cursor = None
        try:
            cursor = self.connection.cursor()
            cursor.execute(query, tuple(params))
            if cursor.description is not None:
                columns = [description[0] for description in cursor.description]
                self._result = Result([dict(zip(columns, row)) for row in cursor.fetchall()])
            if self.autocommit:
                self.connection.commit()
        except self.driver_error as e:
            self._error = self._make_error(e, query, params)
            logger.warning("Statement failed: %s (%s)", self._error.message, query)
            return False
        finally:
            if cursor is not None:
                cursor.close()
        return True

    def insert(self, table: str, data: dict[str, Any]) -> bool:
        query = self._builder.insert(table, data)
        return self.execute(query, self._builder.params)

    def select(self, table: str, columns: Sequence[ColumnSpec]) -> Result:
        query = self._builder.select(table, columns)
        if not self.execute(query, self._builder.params):
            raise QueryError(self.last_error())
        return self.fetch()

    def update(self, table: str, columns: dict[str, Any]) -> bool:
        query = self._builder.update(table, columns)
        return self.execute(query, self._builder.params)

    def delete(self, table: str) -> bool:
        query = self._builder.delete(table)
        return self.execute(query, self._builder.params)

    def fetch(self) -> Result:
        if self._result is None:
            raise NoDataError("No result set available, execute a select statement first")
        return self._result

    def last_error(self) -> Error:
        if self._error is None:
            raise NoErrorError("No statement has failed")
        return self._error


class SQLiteLibrary(DBAPILibrary):
    """
    DB-API library for the standard library ``sqlite3`` driver.

    SQLite has no NOW() function, so the current timestamp marker renders
    as CURRENT_TIMESTAMP.

    Example:
        >>> library = SQLiteLibrary(sqlite3.connect("app.db"))
    """

    def __init__(self, connection: sqlite3.Connection, autocommit: bool = True):
        super().__init__(
            connection,
            sqlite3.Error,
            builder=QueryBuilder(paramstyle="qmark", functions={"NOW": "CURRENT_TIMESTAMP"}),
            autocommit=autocommit,
        )

    def _make_error(self, exc: Exception, query: str, params: Sequence[Any]) -> Error:
        return Error(
            message=str(exc),
            code=getattr(exc, "sqlite_errorname", None),
            query=query,
            params=tuple(params),
        )
