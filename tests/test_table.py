import pytest

from toydb.table import (
    ColumnDef,
    ColumnType,
    Condition,
    Table,
    TableError,
    type_to_string,
    value_to_string,
    value_type,
    values_equal,
    values_less,
)


def make_people():
    return Table(
        "people",
        [
            ColumnDef("id", ColumnType.INT, primary_key=True),
            ColumnDef("name", ColumnType.TEXT, not_null=True),
            ColumnDef("score", ColumnType.FLOAT),
        ],
    )


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ColumnType.NULL),
        (3, ColumnType.INT),
        (2.5, ColumnType.FLOAT),
        ("x", ColumnType.TEXT),
    ],
)
def test_value_type(value, expected):
    assert value_type(value) is expected


def test_value_type_rejects_unsupported():
    with pytest.raises(TypeError):
        value_type([1])


@pytest.mark.parametrize(
    "column_type, expected",
    [
        (ColumnType.NULL, "NULL"),
        (ColumnType.INT, "INT"),
        (ColumnType.FLOAT, "FLOAT"),
        (ColumnType.TEXT, "TEXT"),
    ],
)
def test_type_to_string(column_type, expected):
    assert type_to_string(column_type) == expected


def test_value_to_string():
    assert value_to_string(None) == "NULL"
    assert value_to_string(42) == str(42)
    assert value_to_string("abc") == "abc"
    assert value_to_string(1.5) == "1.500000"


def test_values_equal_requires_same_type():
    assert values_equal(None, None)
    assert values_equal(7, 7)
    assert not values_equal(1, 1.0)
    assert not values_equal("1", 1)


def test_values_less_orders_null_first_then_by_type():
    assert values_less(None, 1)
    assert not values_less(None, None)
    assert not values_less(1, None)
    assert values_less(1, "a")
    assert not values_less("a", 1)
    assert values_less(1, 2)
    assert values_less("a", "b")


@pytest.mark.parametrize(
    "op, value, expected",
    [
        ("=", 5, True),
        ("=", 6, False),
        ("!=", 6, True),
        ("<", 6, True),
        ("<", 5, False),
        (">", 4, True),
        (">", 5, False),
        ("<=", 5, True),
        (">=", 5, True),
        (">=", 6, False),
    ],
)
def test_condition_operators(op, value, expected):
    columns = [ColumnDef("n", ColumnType.INT)]
    assert Condition("n", op, value).evaluate([5], columns) is expected


def test_condition_unknown_column_or_operator_never_matches():
    columns = [ColumnDef("n", ColumnType.INT)]
    assert not Condition("missing", "=", 5).evaluate([5], columns)
    assert not Condition("n", "~", 5).evaluate([5], columns)


def test_insert_and_select_round_trip():
    table = make_people()
    table.insert_row([1, "ann", 2.5])
    table.insert_row([2, "bob", None])
    assert table.select() == [[1, "ann", 2.5], [2, "bob", None]]
    assert len(table) == 2


def test_insert_column_count_mismatch():
    table = make_people()
    with pytest.raises(TableError, match="Column count mismatch"):
        table.insert_row([1, "ann"])


def test_insert_not_null_violation():
    table = make_people()
    with pytest.raises(TableError, match="NOT NULL column: name"):
        table.insert_row([1, None, 1.0])


def test_insert_type_mismatch():
    table = make_people()
    with pytest.raises(TableError, match="Type mismatch in column score"):
        table.insert_row([1, "ann", 3])


def test_insert_duplicate_primary_key():
    table = make_people()
    table.insert_row([1, "ann", None])
    with pytest.raises(TableError, match="Duplicate primary key: 1"):
        table.insert_row([1, "bob", None])
    assert len(table) == 1


def test_text_primary_key_lookup():
    table = Table("kv", [ColumnDef("k", ColumnType.TEXT, primary_key=True), ColumnDef("v", ColumnType.INT)])
    for number, key in enumerate(["d", "a", "c", "b", "e", "f"]):
        table.insert_row([key, number])
    assert table.select([Condition("k", "=", "c")]) == [["c", 2]]
    assert table.select([Condition("k", "=", "zz")]) == []


def test_select_by_primary_key_and_by_scan_agree():
    table = make_people()
    for i in range(1, 11):
        table.insert_row([i, f"n{i}", None])
    via_index = table.select([Condition("id", "=", 7)])
    via_scan = table.select([Condition("id", "=", 7), Condition("name", "=", "n7")])
    assert via_index == via_scan == [[7, "n7", None]]


def test_select_with_range_condition():
    table = make_people()
    for i in range(1, 6):
        table.insert_row([i, f"n{i}", None])
    result = table.select([Condition("id", ">", 3)])
    assert [row[0] for row in result] == [4, 5]


def test_select_returns_copies():
    table = make_people()
    table.insert_row([1, "ann", None])
    table.select()[0][1] = "changed"
    assert table.select()[0][1] == "ann"


def test_update_matching_rows():
    table = make_people()
    table.insert_row([1, "ann", None])
    table.insert_row([2, "bob", None])
    count = table.update({"score": 9.5}, [Condition("name", "=", "bob")])
    assert count == 1
    assert table.select([Condition("id", "=", 2)]) == [[2, "bob", 9.5]]
    assert table.select([Condition("id", "=", 1)]) == [[1, "ann", None]]


def test_update_skips_type_mismatch_and_unknown_columns():
    table = make_people()
    table.insert_row([1, "ann", 1.0])
    count = table.update({"score": "bad", "nope": 3, "name": "amy"})
    assert count == 1
    assert table.select() == [[1, "amy", 1.0]]


def test_update_primary_key_duplicate_is_skipped():
    table = make_people()
    table.insert_row([1, "ann", None])
    table.insert_row([2, "bob", None])
    count = table.update({"id": 1}, [Condition("name", "=", "bob")])
    assert count == 0
    assert table.select([Condition("name", "=", "bob")])[0][0] == 2


def test_update_primary_key_moves_index_entry():
    table = make_people()
    table.insert_row([1, "ann", None])
    assert table.update({"id": 5}, [Condition("id", "=", 1)]) == 1
    assert table.select([Condition("id", "=", 5)]) == [[5, "ann", None]]
    assert table.select([Condition("id", "=", 1)]) == []
    table.insert_row([1, "new", None])
    assert table.select([Condition("id", "=", 1)]) == [[1, "new", None]]


def test_remove_returns_count_and_keeps_index_consistent():
    table = make_people()
    for i in range(1, 6):
        table.insert_row([i, f"n{i}", None])
    assert table.remove([Condition("id", "<=", 2)]) == 2
    assert len(table) == 3
    assert table.select([Condition("id", "=", 4)]) == [[4, "n4", None]]
    assert table.select([Condition("id", "=", 1)]) == []
    table.insert_row([1, "again", None])
    assert table.select([Condition("id", "=", 1)]) == [[1, "again", None]]


def test_remove_without_conditions_clears_table():
    table = make_people()
    table.insert_row([1, "ann", None])
    table.insert_row([2, "bob", None])
    assert table.remove() == 2
    assert table.select() == []


def test_column_index():
    table = make_people()
    assert table.column_index("id") == 0
    assert table.column_index("score") == 2
    assert table.column_index("missing") is None