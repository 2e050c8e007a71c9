"""
Base library interface for tablemodel.

Defines the abstract interface that every database library must implement
so models can run their statements through it.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from tablemodel.library.builder import ColumnSpec, QueryBuilder
    from tablemodel.library.result import Result


class Error(BaseModel):
    """
    Error of a failed statement.

    Attributes:
        message: Driver error message
        code: Driver error code, if the driver reports one
        query: The statement that failed
        params: Parameters that were bound into the statement
    """

    model_config = ConfigDict(frozen=True)

    message: str
    code: Optional[Any] = None
    query: str = ""
    params: tuple[Any, ...] = ()


class Library(ABC):
    """
    Abstract base class for database libraries.

    A library owns a query builder that accumulates the pending predicates,
    joins, grouping, ordering and limits of the next statement. Terminal
    methods (insert, select, update, delete) consume that state, execute the
    statement, and leave the builder clean for the next one.
    """

    @abstractmethod
    def execute(self, query: str, params: Sequence[Any] = ()) -> bool:
        """
        Execute a statement with bound parameters.

        Args:
            query: Statement to execute
            params: Parameters to bind into the statement

        Returns:
            True if the statement executed, False if it failed
        """
        pass

    @abstractmethod
    def insert(self, table: str, data: dict[str, Any]) -> bool:
        """
        Insert a row.

        Args:
            table: Table to insert into
            data: Column values of the new row

        Returns:
            True on success, False on failure
        """
        pass

    @abstractmethod
    def select(self, table: str, columns: Sequence["ColumnSpec"]) -> "Result":
        """
        Run a select statement with the staged predicates, joins, etc.

        Args:
            table: Table to select from
            columns: Column list. An entry is either a column name or a
                mapping with "func", "col" and optional "as" keys

        Returns:
            Result of the statement

        Raises:
            QueryError: If the statement failed
            NoDataError: If the statement yielded no result set
        """
        pass

    @abstractmethod
    def update(self, table: str, columns: dict[str, Any]) -> bool:
        """
        Run an update statement using the staged predicates.

        Args:
            table: Table to update
            columns: Columns and their new values

        Returns:
            True on success, False on failure
        """
        pass

    @abstractmethod
    def delete(self, table: str) -> bool:
        """
        Run a delete statement using the staged predicates.

        Args:
            table: Table to delete from

        Returns:
            True on success, False on failure
        """
        pass

    @abstractmethod
    def fetch(self) -> "Result":
        """
        Fetch the result set of the last executed statement.

        Raises:
            NoDataError: If no statement yielded a result set yet
        """
        pass

    @abstractmethod
    def last_error(self) -> Error:
        """
        Get the error of the last failed statement.

        Raises:
            NoErrorError: If no statement has failed
        """
        pass

    # === Builder state ===

    @property
    @abstractmethod
    def builder(self) -> "QueryBuilder":
        """Query builder holding the pending state of the next statement."""
        raise NotImplementedError

    def where(self, column: str, value: Any, operator: str = "=", link: str = "AND") -> None:
        """Add a where predicate to the next statement."""
        self.builder.where(column, value, operator, link)

    def group_where(self, predicates: Callable[["QueryBuilder"], Any], link: str = "AND") -> None:
        """Add a group of predicates built by the ``predicates`` closure."""
        self.builder.group_where(predicates, link)

    def nested_where(
        self,
        column: str,
        nested: Callable[["QueryBuilder"], str],
        operator: str = "IN",
        link: str = "AND",
    ) -> None:
        """Add a predicate comparing ``column`` to a nested select."""
        self.builder.nested_where(column, nested, operator, link)

    def join(self, table: str, join_type: str = "INNER JOIN") -> None:
        """Add a table to join."""
        self.builder.join(table, join_type)

    def join_cond(self, primary_key: str, foreign_key: str, operator: str = "=") -> None:
        """Add a condition to the last join."""
        self.builder.join_cond(primary_key, foreign_key, operator)

    def or_join_cond(self, primary_key: str, foreign_key: str, operator: str = "=") -> None:
        """Add an OR condition to the last join."""
        self.builder.join_cond(primary_key, foreign_key, operator, "OR")

    def join_cols(self, columns: Sequence["ColumnSpec"]) -> None:
        """Add columns of the last joined table to the select list."""
        self.builder.join_cols(columns)

    def group_by(self, column: str) -> None:
        """Add a column to the group by list."""
        self.builder.group_by(column)

    def order_by(self, column: str, direction: str = "ASC", func: str = "") -> None:
        """Add a column to the order by list."""
        self.builder.order_by(column, direction, func)

    def limit(self, limit: int, offset: int = 0) -> None:
        """Limit the number of returned rows."""
        self.builder.limit(limit, offset)


class LibraryError(Exception):
    """Base exception for database library errors."""
    pass


class QueryError(LibraryError):
    """Statement execution failed."""

    def __init__(self, error: Error):
        self.error = error
        super().__init__(error.message)


class QueryBuilderError(LibraryError):
    """Query builder was used incorrectly or cannot render the statement."""
    pass


class NoDataError(LibraryError):
    """No result set is available to read from."""
    pass


class NoErrorError(LibraryError):
    """Error requested but no statement has failed."""
    pass


class ColumnNotFoundError(LibraryError):
    """Requested column is not part of the result row."""
    pass
