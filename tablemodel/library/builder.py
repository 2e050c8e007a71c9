"""
SQL query builder for tablemodel.

Accumulates the pending state of the next statement (predicates, joins,
grouping, ordering, limits) and renders it into a parametrized SQL
statement. Rendering a statement always clears the pending state so
consecutive statements never share predicates.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from tablemodel.library.base import QueryBuilderError

logger = logging.getLogger(__name__)

# Column list entry: a column name, or {"func": ..., "col": ..., "as": ...}
ColumnSpec = Union[str, Mapping[str, str]]

PLACEHOLDERS = {
    "qmark": "?",
    "format": "%s",
}

LINKS = ("AND", "OR")
DIRECTIONS = ("ASC", "DESC")


@dataclass(frozen=True)
class SqlFunction:
    """
    SQL function call rendered into the statement instead of a bound value.

    Example:
        >>> builder.update("posts", {"deleted_at": SqlFunction("NOW")})
        'UPDATE "posts" SET "deleted_at" = NOW()'
    """

    name: str
    args: tuple[str, ...] = ()


# Marker for "let the database compute the current timestamp"
CURRENT_TIMESTAMP = SqlFunction("NOW")


@dataclass
class _Join:
    table: str
    join_type: str
    conditions: list[tuple[str, str, str, str]]
    columns: list[ColumnSpec]


class QueryBuilder:
    """
    Builder for parametrized SQL statements.

    Predicate and join methods stage state for the next statement. The
    insert, select, update and delete methods render the statement, store
    its bound parameters in ``params`` and reset the staged state.

    Args:
        delimiter: Identifier quoting character
        paramstyle: DB-API paramstyle of the driver ("qmark" or "format")
        functions: Dialect replacements for SqlFunction names, e.g.
            {"NOW": "CURRENT_TIMESTAMP"}

    Example:
        >>> builder = QueryBuilder()
        >>> builder.where("age", 18, ">=")
        >>> builder.select("users", ["id", "name"])
        'SELECT "users"."id", "users"."name" FROM "users" WHERE "age" >= ?'
        >>> builder.params
        (18,)
    """

    def __init__(
        self,
        delimiter: str = '"',
        paramstyle: str = "qmark",
        functions: Optional[dict[str, str]] = None,
    ):
        if paramstyle not in PLACEHOLDERS:
            raise ValueError(f"Unsupported paramstyle: {paramstyle}")
        self.delimiter = delimiter
        self.paramstyle = paramstyle
        self.functions = functions or {}
        # Parameters of the last rendered statement
        self.params: tuple[Any, ...] = ()
        self.reset()

    def reset(self) -> None:
        """Clear all pending statement state."""
        # (link, render(table) -> sql, params)
        self._predicates: list[tuple[str, Callable[[str], str], list[Any]]] = []
        self._joins: list[_Join] = []
        self._group_by: list[str] = []
        self._order_by: list[tuple[str, str, str]] = []  # (column, direction, func)
        self._limit: Optional[int] = None
        self._offset: int = 0

    def _new(self) -> "QueryBuilder":
        """Create a fresh builder with the same dialect settings."""
        return QueryBuilder(self.delimiter, self.paramstyle, self.functions)

    # === Rendering helpers ===

    def quote(self, name: str) -> str:
        """
        Quote an identifier, segment by segment for ``table.column``.

        A delimiter inside a segment is doubled.
        """
        if name == "*":
            return name
        d = self.delimiter
        return ".".join(
            part if part == "*" else f"{d}{part.replace(d, d * 2)}{d}"
            for part in name.split(".")
        )

    def _qualify(self, name: str, table: str) -> str:
        if "." in name or name == "*" or not table:
            return name
        return f"{table}.{name}"

    def _ref(self, column: str, table: str) -> str:
        return self.quote(self._qualify(column, table))

    def _function(self, func: SqlFunction) -> str:
        if func.name in self.functions:
            return self.functions[func.name]
        return f"{func.name}({', '.join(func.args)})"

    def _value(self, value: Any, params: list[Any]) -> str:
        if isinstance(value, SqlFunction):
            return self._function(value)
        params.append(value)
        return PLACEHOLDERS[self.paramstyle]

    def _column(self, spec: ColumnSpec, table: str) -> str:
        if isinstance(spec, str):
            return self.quote(self._qualify(spec, table))
        try:
            func, col = spec["func"], spec["col"]
        except KeyError as e:
            raise QueryBuilderError(
                f"Function column requires 'func' and 'col' keys, got {dict(spec)}"
            ) from e
        sql = f"{func}({self.quote(self._qualify(col, table)) if col else ''})"
        if spec.get("as"):
            sql += f" AS {self.quote(spec['as'])}"
        return sql

    def _check_link(self, link: str) -> str:
        link = link.upper()
        if link not in LINKS:
            raise QueryBuilderError(f"Unknown logical operator: {link}")
        return link

    # === Predicates ===

    def where(self, column: str, value: Any, operator: str = "=", link: str = "AND") -> "QueryBuilder":
        """
        Add a where predicate.

        ``IN``/``NOT IN`` take a sequence, ``BETWEEN`` takes a pair, and a
        None value with ``=``/``IS`` (or ``!=``/``IS NOT``) renders a NULL
        check. An unqualified column is qualified with the main table when
        a select with joins is rendered.

        Args:
            column: Column name
            value: Value to compare the column to
            operator: Comparison operator, default "="
            link: Logical operator linking to the previous predicate
        """
        link = self._check_link(link)
        operator = operator.strip().upper()
        params: list[Any] = []

        if operator in ("IN", "NOT IN"):
            values = list(value)
            if not values:
                raise QueryBuilderError(f"Empty value list for {operator} predicate on {column}")
            placeholders = ", ".join(self._value(v, params) for v in values)
            comparison = f"{operator} ({placeholders})"
        elif operator in ("BETWEEN", "NOT BETWEEN"):
            try:
                low, high = value
            except (TypeError, ValueError) as e:
                raise QueryBuilderError(f"{operator} requires a pair of values") from e
            comparison = f"{operator} {self._value(low, params)} AND {self._value(high, params)}"
        elif value is None and operator in ("=", "IS"):
            comparison = "IS NULL"
        elif value is None and operator in ("!=", "<>", "IS NOT"):
            comparison = "IS NOT NULL"
        else:
            comparison = f"{operator} {self._value(value, params)}"

        self._predicates.append(
            (link, lambda table: f"{self._ref(column, table)} {comparison}", params)
        )
        return self

    def group_where(self, predicates: Callable[["QueryBuilder"], Any], link: str = "AND") -> "QueryBuilder":
        """
        Add a parenthesised group of predicates.

        The closure receives a fresh builder and adds the grouped predicates
        to it.
        """
        link = self._check_link(link)
        group = self._new()
        predicates(group)
        if not group._predicates:
            return self
        params = [p for _, _, predicate_params in group._predicates for p in predicate_params]
        self._predicates.append(
            (link, lambda table: f"({group._render_predicates([], table)})", params)
        )
        return self

    def nested_where(
        self,
        column: str,
        nested: Callable[["QueryBuilder"], str],
        operator: str = "IN",
        link: str = "AND",
    ) -> "QueryBuilder":
        """
        Compare a column to the result of a nested select.

        The closure receives a fresh builder and must return the statement
        rendered by its ``select`` method.

        Example:
            >>> builder.nested_where(
            ...     "id",
            ...     lambda b: b.where("total", 100, ">").select("orders", ["user_id"]),
            ... )
        """
        link = self._check_link(link)
        sub = self._new()
        sql = nested(sub)
        if not isinstance(sql, str) or not sql:
            raise QueryBuilderError("Nested select closure must return the rendered select statement")
        operator = operator.strip().upper()
        self._predicates.append(
            (link, lambda table: f"{self._ref(column, table)} {operator} ({sql})", list(sub.params))
        )
        return self

    def _render_predicates(self, params: list[Any], table: str = "") -> str:
        parts = []
        for i, (link, render, predicate_params) in enumerate(self._predicates):
            sql = render(table)
            parts.append(sql if i == 0 else f"{link} {sql}")
            params.extend(predicate_params)
        return " ".join(parts)

    # === Joins ===

    def join(self, table: str, join_type: str = "INNER JOIN") -> "QueryBuilder":
        """Add a table to join. Conditions are added with join_cond()."""
        self._joins.append(_Join(table, join_type.upper(), [], []))
        return self

    def _last_join(self, action: str) -> _Join:
        if not self._joins:
            raise QueryBuilderError(f"Cannot add join {action}, no table to join was added")
        return self._joins[-1]

    def join_cond(
        self,
        primary_key: str,
        foreign_key: str,
        operator: str = "=",
        link: str = "AND",
    ) -> "QueryBuilder":
        """
        Add a condition to the last join.

        Args:
            primary_key: Column of the main table
            foreign_key: Column of the joined table
            operator: Comparison operator for the two columns
            link: Logical operator linking to the previous condition
        """
        join = self._last_join("condition")
        join.conditions.append((self._check_link(link), primary_key, foreign_key, operator))
        return self

    def join_cols(self, columns: Sequence[ColumnSpec]) -> "QueryBuilder":
        """Add columns of the last joined table to the select list."""
        self._last_join("columns").columns.extend(columns)
        return self

    def _render_joins(self, table: str) -> str:
        sql = ""
        for join in self._joins:
            sql += f" {join.join_type} {self.quote(join.table)}"
            if not join.conditions:
                if join.join_type == "CROSS JOIN":
                    continue
                raise QueryBuilderError(f"Join to {join.table} has no join condition")
            conditions = []
            for i, (link, primary, foreign, operator) in enumerate(join.conditions):
                cond = (
                    f"{self.quote(self._qualify(primary, table))} {operator} "
                    f"{self.quote(self._qualify(foreign, join.table))}"
                )
                conditions.append(cond if i == 0 else f"{link} {cond}")
            sql += " ON (" + " ".join(conditions) + ")"
        return sql

    # === Grouping, ordering, limits ===

    def group_by(self, column: str) -> "QueryBuilder":
        """Add a column to the group by list."""
        self._group_by.append(column)
        return self

    def order_by(self, column: str, direction: str = "ASC", func: str = "") -> "QueryBuilder":
        """
        Add a column to the order by list.

        Args:
            column: Column name, may be empty when ``func`` is set
            direction: "ASC" or "DESC"
            func: SQL function to apply on top of the column
        """
        direction = direction.upper()
        if direction not in DIRECTIONS:
            raise QueryBuilderError(f"Unknown order direction: {direction}")
        if not column and not func:
            raise QueryBuilderError("Order by requires a column or a function")
        self._order_by.append((column, direction, func))
        return self

    def limit(self, limit: int, offset: int = 0) -> "QueryBuilder":
        """Limit the number of rows, optionally skipping ``offset`` rows."""
        self._limit = int(limit)
        self._offset = int(offset)
        return self

    def _render_order(self, column: str, direction: str, func: str, table: str) -> str:
        sql = self._ref(column, table) if column else ""
        if func:
            sql = f"{func}({sql})"
        return f"{sql} {direction}"

    def _render_tail(self, params: list[Any], table: str = "") -> str:
        sql = ""
        if self._predicates:
            sql += " WHERE " + self._render_predicates(params, table)
        if self._group_by:
            sql += " GROUP BY " + ", ".join(self._ref(c, table) for c in self._group_by)
        if self._order_by:
            sql += " ORDER BY " + ", ".join(self._render_order(*order, table) for order in self._order_by)
        if self._limit is not None:
            sql += f" LIMIT {self._limit}"
            if self._offset:
                sql += f" OFFSET {self._offset}"
        return sql

    # === Statements ===

    def _finish(self, sql: str, params: list[Any]) -> str:
        self.params = tuple(params)
        logger.debug("Rendered statement: %s", sql)
        return sql

    def insert(self, table: str, data: Mapping[str, Any]) -> str:
        """Render an insert statement for ``data``."""
        try:
            if not data:
                raise QueryBuilderError(f"No data to insert into {table}")
            params: list[Any] = []
            columns = ", ".join(self.quote(c) for c in data)
            values = ", ".join(self._value(v, params) for v in data.values())
            return self._finish(
                f"INSERT INTO {self.quote(table)} ({columns}) VALUES ({values})",
                params,
            )
        finally:
            self.reset()

    def select(self, table: str, columns: Sequence[ColumnSpec]) -> str:
        """Render a select statement with the staged state."""
        try:
            params: list[Any] = []
            cols = [self._column(c, table) for c in columns]
            for join in self._joins:
                cols.extend(self._column(c, join.table) for c in join.columns)
            sql = f"SELECT {', '.join(cols) or '*'} FROM {self.quote(table)}"
            sql += self._render_joins(table)
            # Joined tables may share column names
            sql += self._render_tail(params, table if self._joins else "")
            return self._finish(sql, params)
        finally:
            self.reset()

    def update(self, table: str, columns: Mapping[str, Any]) -> str:
        """Render an update statement using the staged predicates."""
        try:
            if not columns:
                raise QueryBuilderError(f"No columns to update in {table}")
            params: list[Any] = []
            assignments = ", ".join(
                f"{self.quote(c)} = {self._value(v, params)}"
                for c, v in columns.items()
            )
            sql = f"UPDATE {self.quote(table)} SET {assignments}"
            if self._predicates:
                sql += " WHERE " + self._render_predicates(params)
            return self._finish(sql, params)
        finally:
            self.reset()

    def delete(self, table: str) -> str:
        """Render a delete statement using the staged predicates."""
        try:
            params: list[Any] = []
            sql = f"DELETE FROM {self.quote(table)}"
            if self._predicates:
                sql += " WHERE " + self._render_predicates(params)
            return self._finish(sql, params)
        finally:
            self.reset()
