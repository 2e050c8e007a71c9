"""
Result set of a select statement.
"""

from typing import Any, Iterator

from tablemodel.library.base import ColumnNotFoundError, NoDataError


class Result:
    """
    Cursor over the rows returned by a select statement.

    The cursor starts on the first row. ``next()``, ``prev()`` and ``row()``
    move it and return False when the requested row does not exist, leaving
    the cursor where it was.

    Example:
        >>> result = users.where("status", "active").select(["id", "name"])
        >>> while True:
        ...     print(result["name"])
        ...     if not result.next():
        ...         break
    """

    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows
        self._position = 0

    @property
    def row_count(self) -> int:
        """Number of rows in the result."""
        return len(self._rows)

    @property
    def position(self) -> int:
        """Index of the current row."""
        return self._position

    def next(self) -> bool:
        """Move to the next row."""
        return self.row(self._position + 1)

    def prev(self) -> bool:
        """Move to the previous row."""
        return self.row(self._position - 1)

    def row(self, index: int) -> bool:
        """Move to the row at ``index``."""
        if 0 <= index < len(self._rows):
            self._position = index
            return True
        return False

    def current(self) -> dict[str, Any]:
        """
        Get the current row.

        Raises:
            NoDataError: If the result holds no rows
        """
        if not self._rows:
            raise NoDataError("Result holds no rows")
        return self._rows[self._position]

    def get(self, column: str) -> Any:
        """
        Get a column value of the current row.

        Raises:
            NoDataError: If the result holds no rows
            ColumnNotFoundError: If the row has no such column
        """
        row = self.current()
        if column not in row:
            raise ColumnNotFoundError(f"Column '{column}' not found in result row")
        return row[column]

    def get_results(self) -> list[dict[str, Any]]:
        """Get all rows of the result."""
        return list(self._rows)

    def __getitem__(self, column: str) -> Any:
        return self.get(column)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"Result(rows={len(self._rows)}, position={self._position})"
