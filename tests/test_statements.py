import pytest

from toydb.statements import (
    AbortTransactionStmt,
    BeginTransactionStmt,
    ColumnDefinition,
    CommitTransactionStmt,
    CreateTableStmt,
    DeleteStmt,
    DropTableStmt,
    InsertStmt,
    SelectStmt,
    ShowTablesStmt,
    UpdateStmt,
    WhereCondition,
)


def test_column_definition_defaults_have_no_constraints():
    col = ColumnDefinition("id", "INT")
    assert col.primary_key is False
    assert col.not_null is False


def test_column_definition_keeps_constraints():
    col = ColumnDefinition("id", "INT", primary_key=True, not_null=True)
    assert (col.name, col.type, col.primary_key, col.not_null) == ("id", "INT", True, True)


def test_where_condition_fields():
    cond = WhereCondition("age", ">=", "18")
    assert (cond.column, cond.op, cond.value) == ("age", ">=", "18")


def test_create_table_holds_columns():
    cols = [ColumnDefinition("id", "INT"), ColumnDefinition("name", "TEXT")]
    stmt = CreateTableStmt("users", cols)
    assert [c.name for c in stmt.columns] == ["id", "name"]


def test_insert_defaults_are_not_shared():
    first = InsertStmt("t")
    second = InsertStmt("t")
    first.values.append(["1"])
    first.columns.append("id")
    assert second.values == []
    assert second.columns == []


def test_select_empty_columns_means_all():
    assert SelectStmt("t").selects_all is True
    assert SelectStmt("t", columns=["a"]).selects_all is False


def test_update_and_delete_hold_conditions():
    cond = WhereCondition("id", "=", "1")
    update = UpdateStmt("t", updates=[("name", "'bob'")], conditions=[cond])
    delete = DeleteStmt("t", conditions=[cond])
    assert update.updates == [("name", "'bob'")]
    assert update.conditions == delete.conditions == [cond]


def test_equality_is_by_value():
    assert DropTableStmt("t") == DropTableStmt("t")
    assert DropTableStmt("t") != DropTableStmt("u")
    assert ShowTablesStmt() == ShowTablesStmt()
    assert BeginTransactionStmt() == BeginTransactionStmt()


@pytest.mark.parametrize("cls", [CommitTransactionStmt, AbortTransactionStmt])
def test_transaction_statements_carry_id(cls):
    stmt = cls(7)
    assert stmt.transaction_id == 7
    assert stmt == cls(7)
    assert stmt != cls(8)