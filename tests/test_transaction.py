import pytest

from toydb.transaction import (
    Transaction,
    TransactionManager,
    TransactionNotFoundError,
    TransactionState,
)


def test_ids_start_at_one_and_increase():
    manager = TransactionManager()
    assert manager.begin_transaction() == 1
    assert manager.begin_transaction() == 2
    assert manager.begin_transaction() == 3


def test_new_transaction_is_active():
    manager = TransactionManager()
    tid = manager.begin_transaction()
    transaction = manager.get_transaction(tid)
    assert transaction.id == tid
    assert transaction.state is TransactionState.ACTIVE


def test_commit_sets_state_and_forgets():
    manager = TransactionManager()
    tid = manager.begin_transaction()
    transaction = manager.get_transaction(tid)
    manager.commit_transaction(tid)
    assert transaction.state is TransactionState.COMMITTED
    with pytest.raises(TransactionNotFoundError):
        manager.get_transaction(tid)


def test_abort_sets_state_and_forgets():
    manager = TransactionManager()
    tid = manager.begin_transaction()
    transaction = manager.get_transaction(tid)
    manager.abort_transaction(tid)
    assert transaction.state is TransactionState.ABORTED
    with pytest.raises(TransactionNotFoundError):
        manager.abort_transaction(tid)


def test_unknown_transaction_message():
    manager = TransactionManager()
    with pytest.raises(TransactionNotFoundError, match="Transaction 5 not found") as info:
        manager.commit_transaction(5)
    assert info.value.transaction_id == 5


def test_ids_not_reused_after_commit():
    manager = TransactionManager()
    first = manager.begin_transaction()
    manager.commit_transaction(first)
    second = manager.begin_transaction()
    assert second > first


def test_table_state_round_trip_is_a_copy():
    transaction = Transaction(1)
    rows = [[1, "a"], [2, "b"]]
    transaction.add_table_state("users", rows)
    rows[0][1] = "changed"
    rows.append([3, "c"])
    assert transaction.get_table_state("users") == [[1, "a"], [2, "b"]]


def test_table_state_overwritten():
    transaction = Transaction(1)
    transaction.add_table_state("t", [[1]])
    transaction.add_table_state("t", [[2], [3]])
    assert transaction.get_table_state("t") == [[2], [3]]


def test_missing_table_state_raises():
    transaction = Transaction(1)
    with pytest.raises(KeyError, match="No state found for table orders"):
        transaction.get_table_state("orders")