"""
tablemodel - Table models with lifecycle callbacks and soft delete.

Models resolve their table name, run callbacks around create, select,
update and delete, and hand query building to a pluggable database library.
"""

from tablemodel.config import ModelConfig, SoftDeleteConfig, SoftDeleteValue, TableNameStyle
from tablemodel.library import (
    CURRENT_TIMESTAMP,
    ColumnNotFoundError,
    DBAPILibrary,
    Error,
    Library,
    LibraryError,
    NoDataError,
    NoErrorError,
    QueryBuilder,
    QueryBuilderError,
    QueryError,
    Result,
    SQLiteLibrary,
    SqlFunction,
)
from tablemodel.loader import ModelLoader
from tablemodel.models import (
    CallbackRegistry,
    Model,
    ModelDescriptor,
    Operation,
    SoftDeletePolicy,
    Timing,
    after,
    before,
)
from tablemodel.naming import InflectionInflector, Inflector, TableNameResolver

__version__ = "0.1.0"

__all__ = [
    "Model",
    "ModelDescriptor",
    "ModelLoader",
    "CallbackRegistry",
    "Operation",
    "Timing",
    "before",
    "after",
    "SoftDeletePolicy",
    "ModelConfig",
    "SoftDeleteConfig",
    "SoftDeleteValue",
    "TableNameStyle",
    "TableNameResolver",
    "Inflector",
    "InflectionInflector",
    "Library",
    "DBAPILibrary",
    "SQLiteLibrary",
    "QueryBuilder",
    "SqlFunction",
    "CURRENT_TIMESTAMP",
    "Result",
    "Error",
    "LibraryError",
    "QueryError",
    "QueryBuilderError",
    "NoDataError",
    "NoErrorError",
    "ColumnNotFoundError",
]
