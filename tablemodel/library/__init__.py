"""Database library implementations for tablemodel."""

from tablemodel.library.base import (
    Library,
    Error,
    LibraryError,
    QueryError,
    QueryBuilderError,
    NoDataError,
    NoErrorError,
    ColumnNotFoundError,
)
from tablemodel.library.builder import QueryBuilder, SqlFunction, CURRENT_TIMESTAMP, ColumnSpec
from tablemodel.library.dbapi import DBAPILibrary, SQLiteLibrary
from tablemodel.library.result import Result

__all__ = [
    "Library",
    "Error",
    "LibraryError",
    "QueryError",
    "QueryBuilderError",
    "NoDataError",
    "NoErrorError",
    "ColumnNotFoundError",
    "QueryBuilder",
    "SqlFunction",
    "CURRENT_TIMESTAMP",
    "ColumnSpec",
    "DBAPILibrary",
    "SQLiteLibrary",
    "Result",
]
