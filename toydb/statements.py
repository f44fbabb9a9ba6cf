"""Parsed SQL statements as plain data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple, Union


@dataclass
class ColumnDefinition:
    """A column as written in CREATE TABLE, with its type still as text."""

    name: str
    type: str
    primary_key: bool = False
    not_null: bool = False


@dataclass
class WhereCondition:
    """A ``column op value`` term of a WHERE clause, value still unparsed."""

    column: str
    op: str
    value: str


@dataclass
class CreateTableStmt:
    table_name: str
    columns: List[ColumnDefinition] = field(default_factory=list)


@dataclass
class InsertStmt:
    """INSERT INTO; ``columns`` is empty when values follow table order."""

    table_name: str
    columns: List[str] = field(default_factory=list)
    values: List[List[str]] = field(default_factory=list)


@dataclass
class SelectStmt:
    """SELECT; an empty ``columns`` list stands for ``*``."""

    table_name: str
    columns: List[str] = field(default_factory=list)
    conditions: List[WhereCondition] = field(default_factory=list)

    @property
    def selects_all(self) -> bool:
        """Whether the statement asked for every column."""
        return not self.columns


@dataclass
class UpdateStmt:
    table_name: str
    updates: List[Tuple[str, str]] = field(default_factory=list)
    conditions: List[WhereCondition] = field(default_factory=list)


@dataclass
class DeleteStmt:
    table_name: str
    conditions: List[WhereCondition] = field(default_factory=list)


@dataclass
class DropTableStmt:
    table_name: str


@dataclass
class ShowTablesStmt:
    pass


@dataclass
class BeginTransactionStmt:
    pass


@dataclass
class CommitTransactionStmt:
    transaction_id: int


@dataclass
class AbortTransactionStmt:
    transaction_id: int


Statement = Union[
    CreateTableStmt,
    InsertStmt,
    SelectStmt,
    UpdateStmt,
    DeleteStmt,
    DropTableStmt,
    ShowTablesStmt,
    BeginTransactionStmt,
    CommitTransactionStmt,
    AbortTransactionStmt,
]