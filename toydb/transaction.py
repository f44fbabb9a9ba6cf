"""Transaction bookkeeping: identifiers, states and saved table snapshots."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

TableState = List[List[Any]]


class TransactionNotFoundError(LookupError):
    """Raised when a transaction identifier is not known to the manager."""

    def __init__(self, transaction_id: int) -> None:
        super().__init__(f"Transaction {transaction_id} not found")
        self.transaction_id = transaction_id


class TransactionState(Enum):
    ACTIVE = "active"
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass
class Transaction:
    """A single transaction and the table snapshots recorded for it."""

    id: int
    state: TransactionState = TransactionState.ACTIVE
    table_states: Dict[str, TableState] = field(default_factory=dict)

    def add_table_state(self, table_name: str, state: TableState) -> None:
        """Record a copy of a table's rows under ``table_name``."""
        self.table_states[table_name] = [list(row) for row in state]

    def get_table_state(self, table_name: str) -> TableState:
        """Return the recorded rows for ``table_name``."""
        try:
            return self.table_states[table_name]
        except KeyError:
            raise KeyError(f"No state found for table {table_name}") from None


class TransactionManager:
    """Hands out transaction identifiers and tracks live transactions."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._next_id = 1
        self._transactions: Dict[int, Transaction] = {}

    def begin_transaction(self) -> int:
        """Start a new transaction and return its identifier."""
        with self._lock:
            transaction_id = self._next_id
            self._next_id += 1
            self._transactions[transaction_id] = Transaction(transaction_id)
            return transaction_id

    def _finish(self, transaction_id: int, state: TransactionState) -> None:
        with self._lock:
            transaction = self._transactions.pop(transaction_id, None)
            if transaction is None:
                raise TransactionNotFoundError(transaction_id)
            transaction.state = state

    def commit_transaction(self, transaction_id: int) -> None:
        """Mark a transaction committed and forget it."""
        self._finish(transaction_id, TransactionState.COMMITTED)

    def abort_transaction(self, transaction_id: int) -> None:
        """Mark a transaction aborted and forget it."""
        self._finish(transaction_id, TransactionState.ABORTED)

    def get_transaction(self, transaction_id: int) -> Transaction:
        """Return a live transaction by identifier."""
        with self._lock:
            try:
                return self._transactions[transaction_id]
            except KeyError:
                raise TransactionNotFoundError(transaction_id) from None