"""
Base model class for tablemodel.

A model is the CRUD surface of one table. It resolves the table name,
runs lifecycle callbacks around its operations, forwards query building
calls to the database library and rewrites deletes into updates when soft
delete is enabled.
"""

import logging
from typing import Any, Callable, ClassVar, Mapping, Optional, Sequence, Union

from tablemodel.config import ModelConfig, SoftDeleteConfig
from tablemodel.library.base import Error, Library, QueryError
from tablemodel.library.builder import ColumnSpec, QueryBuilder
from tablemodel.library.result import Result
from tablemodel.models.descriptor import ModelDescriptor
from tablemodel.models.hooks import CallbackRegistry, Operation, Timing
from tablemodel.models.soft_delete import SoftDeletePolicy
from tablemodel.naming import Inflector, InflectionInflector, TableNameResolver


class Model:
    """
    Base model class for tablemodel.

    Subclasses set the table name, soft delete settings and callbacks as
    class attributes. A plain Model built with a ModelDescriptor works the
    same way without subclassing.

    Query building methods stage state in the library and return the model,
    so calls chain until a terminal operation (create, select, update,
    delete) runs the statement.

    Example:
        >>> class Users(Model):
        ...     soft_delete = SoftDeleteConfig(enabled=True, column="deleted_at", value="timestamp")
        ...
        ...     @before("create")
        ...     def set_defaults(self, data):
        ...         data.setdefault("status", "new")
        ...
        >>> users = Users(library, config)
        >>> users.create({"name": "Alice"})
        True
        >>> result = users.where("status", "new").order_by("name").limit(10).select(["id", "name"])
        >>> users.where("id", 1).delete()  # UPDATE "users" SET "deleted_at" = NOW() WHERE "id" = ?
        True
    """

    # Explicit table name, resolved from the class name when empty
    table: str = ""

    # Soft delete settings, None to use ModelConfig.soft_delete
    soft_delete: ClassVar[Optional[SoftDeleteConfig]] = None

    # Callback methods of the class, {method name: (operation, timing)}
    _callback_methods: ClassVar[dict[str, tuple[Operation, Timing]]] = {}

    def __init_subclass__(cls, **kwargs: Any):
        """Collect callback methods, base classes first, in definition order."""
        super().__init_subclass__(**kwargs)

        methods: dict[str, tuple[Operation, Timing]] = {}
        for base in reversed(cls.__mro__):
            for attr_name, attr in vars(base).items():
                slot = getattr(attr, '_callback_slot', None)
                if callable(attr) and slot is not None:
                    methods[attr_name] = slot
                elif attr_name in methods:
                    # Overridden without the decorator
                    del methods[attr_name]
        cls._callback_methods = methods

    @classmethod
    def describe(cls) -> ModelDescriptor:
        """Build the descriptor of this model class."""
        return ModelDescriptor(
            name=f"{cls.__module__}.{cls.__qualname__}",
            table=cls.table,
            soft_delete=cls.soft_delete,
        )

    def __init__(
        self,
        library: Library,
        config: Union[ModelConfig, Mapping[str, Any], None] = None,
        *,
        inflector: Optional[Inflector] = None,
        logger: Optional[logging.Logger] = None,
        descriptor: Optional[ModelDescriptor] = None,
    ):
        """
        Initialize the model.

        Args:
            library: Database library executing the statements
            config: ModelConfig, or a dotted-key mapping ("database.autoTable")
            inflector: Inflector for table name resolution
            logger: Logger, defaults to this module's logger
            descriptor: Descriptor to use instead of the class attributes
        """
        descriptor = descriptor or self.describe()
        self.callbacks = self._build_callbacks(descriptor)
        self.callbacks.invoke(Operation.INIT, Timing.BEFORE)

        self.library = library
        self.config = self._load_config(config)
        self.inflector = inflector or InflectionInflector()
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.name = descriptor.name
        self.table = descriptor.table
        self._error: Optional[Error] = None

        if self.table == "" and self.config.auto_table:
            self.table = TableNameResolver(self.inflector).resolve(
                self.name,
                self.config.pluralize_table_name,
                self.config.table_name_style,
            )

        self.soft_delete_policy = SoftDeletePolicy(descriptor.soft_delete or self.config.soft_delete)

        self.logger.info("Model initialized successfully", extra={"model": self.name})

        self.callbacks.invoke(Operation.INIT, Timing.AFTER)

    @staticmethod
    def _load_config(config: Union[ModelConfig, Mapping[str, Any], None]) -> ModelConfig:
        if config is None:
            return ModelConfig()
        if isinstance(config, ModelConfig):
            return config
        return ModelConfig.from_mapping(config)

    def _build_callbacks(self, descriptor: ModelDescriptor) -> CallbackRegistry:
        """Class callback methods bound to this instance, then the descriptor's callbacks."""
        registry = CallbackRegistry()
        for attr_name, (operation, timing) in self._callback_methods.items():
            registry.register(operation, timing, getattr(self, attr_name))
        registry.extend(descriptor.callbacks)
        return registry

    def _record(self, status: bool) -> bool:
        """Capture the library's last error when a statement failed."""
        if status is False:
            self._error = self.library.last_error()
        return status

    # === Operations ===

    def create(self, data: dict[str, Any]) -> bool:
        """
        Insert a row.

        Callbacks:
            - "create" before and after callbacks receive ``data``

        Args:
            data: Column values of the new row

        Returns:
            True on success, False on failure (see last_error())
        """
        self.callbacks.invoke(Operation.CREATE, Timing.BEFORE, data)
        try:
            return self._record(self.library.insert(self.table, data))
        finally:
            self.callbacks.invoke(Operation.CREATE, Timing.AFTER, data)

    def select(self, columns: Sequence[ColumnSpec]) -> Result:
        """
        Select rows with the staged predicates, joins, grouping and limits.

        A column list entry is either a column name or a function column
        {"func": "COUNT", "col": "id", "as": "total"}.

        Callbacks:
            - "select" before and after callbacks receive ``columns``

        Returns:
            Result of the library

        Raises:
            QueryError: If the statement failed. The error is recorded first
        """
        self.callbacks.invoke(Operation.SELECT, Timing.BEFORE, columns)
        try:
            return self.library.select(self.table, columns)
        except QueryError as e:
            self._error = e.error
            raise
        finally:
            self.callbacks.invoke(Operation.SELECT, Timing.AFTER, columns)

    def update(self, columns: dict[str, Any]) -> bool:
        """
        Update rows matching the staged predicates.

        Callbacks:
            - "update" before and after callbacks receive ``columns``

        Returns:
            True on success, False on failure (see last_error())
        """
        self.callbacks.invoke(Operation.UPDATE, Timing.BEFORE, columns)
        try:
            return self._record(self.library.update(self.table, columns))
        finally:
            self.callbacks.invoke(Operation.UPDATE, Timing.AFTER, columns)

    def delete(self) -> bool:
        """
        Delete rows matching the staged predicates.

        With soft delete enabled the rows are updated instead, through
        update(), so the "update" callbacks run inside the "delete" ones.

        Returns:
            True on success, False on failure (see last_error())
        """
        self.callbacks.invoke(Operation.DELETE, Timing.BEFORE)
        try:
            columns = self.soft_delete_policy.apply()
            if columns is not None:
                return self.update(columns)
            return self._record(self.library.delete(self.table))
        finally:
            self.callbacks.invoke(Operation.DELETE, Timing.AFTER)

    def last_error(self) -> Optional[Error]:
        """Error of the last failed operation, None if none failed yet."""
        return self._error

    # === Query building ===

    def where(self, column: str, value: Any, operator: str = "=") -> "Model":
        """
        Add a where predicate for the next statement.

        Args:
            column: Column name
            value: Value of the predicate
            operator: Comparison operator, default "="
        """
        self.library.where(column, value, operator)
        return self

    def or_where(self, column: str, value: Any, operator: str = "=") -> "Model":
        """Add a where predicate linked with OR."""
        self.library.where(column, value, operator, "OR")
        return self

    def group_where(self, predicates: Callable[[QueryBuilder], Any]) -> "Model":
        """
        Add a group of predicates.

        The closure receives a builder and adds the grouped predicates to it.

        Example:
            >>> users.where("status", "active").group_where(
            ...     lambda b: b.where("age", 18, "<").where("age", 65, ">", "OR")
            ... )
        """
        self.library.group_where(predicates)
        return self

    def or_group_where(self, predicates: Callable[[QueryBuilder], Any]) -> "Model":
        """Add a group of predicates linked with OR."""
        self.library.group_where(predicates, "OR")
        return self

    def nested_where(self, column: str, nested: Callable[[QueryBuilder], str], operator: str = "IN") -> "Model":
        """
        Compare a column to a nested select.

        Example:
            >>> users.nested_where("id", lambda b: b.select("orders", ["user_id"]))
        """
        self.library.nested_where(column, nested, operator)
        return self

    def or_nested_where(self, column: str, nested: Callable[[QueryBuilder], str], operator: str = "IN") -> "Model":
        """Compare a column to a nested select, linked with OR."""
        self.library.nested_where(column, nested, operator, "OR")
        return self

    def join(self, table: str, join_type: str = "INNER JOIN") -> "Model":
        """
        Add a table to join.

        A join needs at least one join_cond() before the statement runs,
        except for cross joins.
        """
        self.library.join(table, join_type)
        return self

    def left_join(self, table: str) -> "Model":
        return self.join(table, "LEFT OUTER JOIN")

    def right_join(self, table: str) -> "Model":
        return self.join(table, "RIGHT OUTER JOIN")

    def full_join(self, table: str) -> "Model":
        return self.join(table, "FULL JOIN")

    def cross_join(self, table: str) -> "Model":
        return self.join(table, "CROSS JOIN")

    def join_cond(self, primary_key: str, foreign_key: str, operator: str = "=") -> "Model":
        """
        Add a condition to the last join.

        Args:
            primary_key: Column of this model's table
            foreign_key: Column of the joined table
            operator: Comparison operator for the two columns
        """
        self.library.join_cond(primary_key, foreign_key, operator)
        return self

    def or_join_cond(self, primary_key: str, foreign_key: str, operator: str = "=") -> "Model":
        """Add a join condition linked with OR."""
        self.library.or_join_cond(primary_key, foreign_key, operator)
        return self

    def join_cols(self, columns: Sequence[ColumnSpec]) -> "Model":
        """Add columns of the last joined table to the select list."""
        self.library.join_cols(columns)
        return self

    def group_by(self, column: str) -> "Model":
        self.library.group_by(column)
        return self

    def order_by(self, column: str, direction: str = "ASC", func: str = "") -> "Model":
        """
        Order the results.

        Args:
            column: Column name
            direction: "ASC" or "DESC"
            func: SQL function to apply on top of the column
        """
        self.library.order_by(column, direction, func)
        return self

    def limit(self, limit: int, offset: int = 0) -> "Model":
        self.library.limit(limit, offset)
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}(table={self.table!r})"
