"""A named collection of tables with transaction bookkeeping."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from toydb.table import ColumnDef, Table
from toydb.transaction import TransactionManager


class DatabaseError(Exception):
    """Raised for invalid table-level operations."""


class Database:
    """Holds tables by name and hands out transaction identifiers."""

    def __init__(self, name: str = "toydb") -> None:
        self.name = name
        self._tables: Dict[str, Table] = {}
        self._transactions = TransactionManager()

    def create_table(self, name: str, columns: Iterable[ColumnDef]) -> Table:
        """Create and return a new table."""
        if self.table_exists(name):
            raise DatabaseError(f"Table already exists: {name}")
        columns = list(columns)
        if sum(1 for col in columns if col.primary_key) > 1:
            raise DatabaseError("Multiple primary keys are not supported")
        table = Table(name, columns)
        self._tables[name] = table
        return table

    def drop_table(self, name: str) -> None:
        """Remove a table."""
        if not self.table_exists(name):
            raise DatabaseError(f"Table doesn't exist: {name}")
        del self._tables[name]

    def get_table(self, name: str) -> Optional[Table]:
        """Return the named table, or None if there is none."""
        return self._tables.get(name)

    def list_tables(self) -> List[str]:
        """Return the names of all tables."""
        return list(self._tables)

    def table_exists(self, name: str) -> bool:
        return name in self._tables

    def begin_transaction(self) -> int:
        """Start a transaction and return its identifier."""
        return self._transactions.begin_transaction()

    def commit_transaction(self, transaction_id: int) -> None:
        """Commit a live transaction."""
        self._transactions.commit_transaction(transaction_id)

    def abort_transaction(self, transaction_id: int) -> None:
        """Abort a live transaction."""
        self._transactions.abort_transaction(transaction_id)