"""Tables of typed rows with an optional B+ tree primary-key index."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from toydb.bplustree import BPlusTree

Value = Union[None, int, float, str]
Row = List[Value]


class TableError(Exception):
    """Raised when a row violates a table's schema or constraints."""


class ColumnType(IntEnum):
    """Column types; the numeric order ranks values of different types."""

    NULL = 0
    INT = 1
    FLOAT = 2
    TEXT = 3


@dataclass
class ColumnDef:
    """Schema entry for one column."""

    name: str
    type: ColumnType
    primary_key: bool = False
    not_null: bool = False


def value_type(value: Value) -> ColumnType:
    """Return the column type that a value belongs to."""
    if value is None:
        return ColumnType.NULL
    if isinstance(value, bool):
        raise TypeError("boolean values are not supported")
    if isinstance(value, int):
        return ColumnType.INT
    if isinstance(value, float):
        return ColumnType.FLOAT
    if isinstance(value, str):
        return ColumnType.TEXT
    raise TypeError(f"unsupported value type: {type(value).__name__}")


def type_to_string(column_type: ColumnType) -> str:
    """Return the SQL name of a column type."""
    return ColumnType(column_type).name


def value_to_string(value: Value) -> str:
    """Render a value for display; floats always show six decimals."""
    kind = value_type(value)
    if kind is ColumnType.NULL:
        return "NULL"
    if kind is ColumnType.FLOAT:
        return f"{value:.6f}"
    return str(value)


def values_equal(a: Value, b: Value) -> bool:
    """Equality that requires both values to be of the same type."""
    if value_type(a) != value_type(b):
        return False
    return a is None or a == b


def values_less(a: Value, b: Value) -> bool:
    """Ordering in which NULL sorts first and differing types sort by type."""
    if a is None:
        return b is not None
    if b is None:
        return False
    type_a, type_b = value_type(a), value_type(b)
    if type_a != type_b:
        return type_a < type_b
    return a < b  # type: ignore[operator]


_OPERATORS: Dict[str, Callable[[Value, Value], bool]] = {
    "=": values_equal,
    "!=": lambda a, b: not values_equal(a, b),
    "<": values_less,
    ">": lambda a, b: not values_less(a, b) and not values_equal(a, b),
    "<=": lambda a, b: values_less(a, b) or values_equal(a, b),
    ">=": lambda a, b: not values_less(a, b),
}


@dataclass
class Condition:
    """A ``column op value`` filter applied to rows."""

    column_name: str
    op: str
    value: Value

    def evaluate(self, row: Sequence[Value], columns: Sequence[ColumnDef]) -> bool:
        """Return whether ``row`` satisfies the condition.

        Unknown columns and unknown operators never match.
        """
        index = next(
            (i for i, col in enumerate(columns) if col.name == self.column_name), None
        )
        if index is None or index >= len(row):
            return False
        compare = _OPERATORS.get(self.op)
        if compare is None:
            return False
        return compare(row[index], self.value)


class Table:
    """A named table holding rows, indexed on an INT or TEXT primary key."""

    def __init__(self, name: str, columns: Iterable[ColumnDef]) -> None:
        self.name = name
        self.columns: List[ColumnDef] = list(columns)
        self._rows: List[Row] = []
        self._pk: Optional[int] = next(
            (i for i, col in enumerate(self.columns) if col.primary_key), None
        )
        self._index: Optional[BPlusTree] = None
        if self._pk is not None and self.columns[self._pk].type in (
            ColumnType.INT,
            ColumnType.TEXT,
        ):
            self._index = BPlusTree()

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> List[Row]:
        """Copies of all rows in insertion order."""
        return [list(row) for row in self._rows]

    def column_index(self, name: str) -> Optional[int]:
        """Return the position of a column, or None if there is no such column."""
        return next((i for i, col in enumerate(self.columns) if col.name == name), None)

    def insert_row(self, row: Sequence[Value]) -> None:
        """Append a row after checking count, types and constraints."""
        row = list(row)
        if len(row) != len(self.columns):
            raise TableError("Column count mismatch")

        for position, (col, value) in enumerate(zip(self.columns, row)):
            if col.not_null and value is None:
                raise TableError(f"NULL value in NOT NULL column: {col.name}")
            if value is not None and value_type(value) != col.type:
                raise TableError(f"Type mismatch in column {col.name}")
            if position == self._pk and self._index is not None:
                if value is None:
                    raise TableError(f"NULL value in primary key column: {col.name}")
                if self._index.find(value) is not None:
                    raise TableError(f"Duplicate primary key: {value_to_string(value)}")

        self._rows.append(row)
        if self._index is not None:
            self._index.insert(row[self._pk], len(self._rows) - 1)

    def _matches(self, row: Row, conditions: Sequence[Condition]) -> bool:
        return all(cond.evaluate(row, self.columns) for cond in conditions)

    def select(self, conditions: Optional[Sequence[Condition]] = None) -> List[Row]:
        """Return copies of the rows matching every condition."""
        conditions = list(conditions or [])

        if self._index is not None and len(conditions) == 1:
            cond = conditions[0]
            pk_col = self.columns[self._pk]
            if (
                cond.column_name == pk_col.name
                and cond.op == "="
                and cond.value is not None
                and value_type(cond.value) == pk_col.type
            ):
                position = self._index.find(cond.value)
                if position is None or position >= len(self._rows):
                    return []
                return [list(self._rows[position])]

        return [list(row) for row in self._rows if self._matches(row, conditions)]

    def update(
        self,
        updates: Dict[str, Value],
        conditions: Optional[Sequence[Condition]] = None,
    ) -> int:
        """Assign new values to matching rows and return how many were updated.

        Unknown columns and values of the wrong type are ignored; a row whose
        new primary key would clash with another row is left unchanged.
        """
        conditions = list(conditions or [])
        assignments: Dict[int, Value] = {}
        for name, value in updates.items():
            position = self.column_index(name)
            if position is None:
                continue
            if value is not None and value_type(value) != self.columns[position].type:
                continue
            assignments[position] = value

        reindex = self._index is not None and self._pk in assignments
        count = 0
        for position, row in enumerate(self._rows):
            if not self._matches(row, conditions):
                continue

            if reindex:
                new_key = assignments[self._pk]
                if new_key is None:
                    raise TableError(
                        f"NULL value in primary key column: {self.columns[self._pk].name}"
                    )
                existing = self._index.find(new_key)
                if existing is not None and existing != position:
                    continue
                old_key = row[self._pk]

            for column, value in assignments.items():
                row[column] = value

            if reindex:
                if old_key != new_key:
                    self._index.remove(old_key)
                self._index.insert(new_key, position)
            count += 1

        return count

    def remove(self, conditions: Optional[Sequence[Condition]] = None) -> int:
        """Delete matching rows and return how many were deleted."""
        conditions = list(conditions or [])
        kept = [row for row in self._rows if not self._matches(row, conditions)]
        removed = len(self._rows) - len(kept)
        self._rows = kept
        if removed and self._index is not None:
            self._rebuild_index()
        return removed

    def _rebuild_index(self) -> None:
        index = BPlusTree()
        for position, row in enumerate(self._rows):
            index.insert(row[self._pk], position)
        self._index = index