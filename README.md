# toydb

toydb is a small in-memory SQL database. Tables are held in memory, and each
table with an `INT` or `TEXT` primary key indexes that key with a B+ tree. You
can use it from an interactive shell or from Python code.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The shell

Run `toydb` with no arguments to start an interactive session. You can also
run `python -m toydb.cli`. A statement ends with `;` and can span several
lines. Keywords are case-insensitive.

```
toydb
toydb> CREATE TABLE users (id INT PRIMARY KEY, name TEXT NOT NULL, score FLOAT);
toydb> INSERT INTO users VALUES (1, 'alice', 9.5), (2, 'bob', 7.25);
toydb> SELECT * FROM users WHERE id = 1;
toydb> UPDATE users SET score = 8.0 WHERE name = 'bob';
toydb> DELETE FROM users WHERE score < 8.5;
toydb> SHOW TABLES;
toydb> DROP TABLE users;
```

Type `help` to list the statements and `exit` or `quit` to leave. Neither
takes a semicolon. The session also ends at end of input.

If you pass arguments, toydb runs each one as a statement and then exits:

```
toydb "CREATE TABLE t (id INT PRIMARY KEY);" "INSERT INTO t VALUES (1);" "SELECT * FROM t;"
```

Results are printed as a bordered table followed by a row count. Floats are
shown with six decimal places. Errors such as a parse failure, a missing table,
a type mismatch or a duplicate primary key are written to standard error, and
the session carries on.

### Supported statements

- `CREATE TABLE name (col TYPE [PRIMARY KEY] [NOT NULL], ...);` creates a
  table. The types are `INT`/`INTEGER`, `FLOAT`/`REAL` and
  `TEXT`/`VARCHAR`/`CHAR`. A table can have at most one primary key.
- `INSERT INTO name [(col, ...)] VALUES (v, ...), ...;` adds rows. Columns
  that are not named are set to NULL. Quoted values (`'...'` or `"..."`) are
  text. `NULL` is the null value.
- `SELECT ... FROM name [WHERE col op value [AND ...]];` reads rows. The
  operators are `=`, `!=`, `<`, `>`, `<=` and `>=`. Every column is printed,
  whatever the column list says.
- `UPDATE name SET col = value, ... [WHERE ...];` changes rows. It skips a row
  whose new primary key would clash with another row's.
- `DELETE FROM name [WHERE ...];` removes rows.
- `DROP TABLE name;` removes a table.
- `SHOW TABLES;` lists the tables.
- `BEGIN TRANSACTION;` prints a new transaction number. `COMMIT TRANSACTION id;`,
  `ABORT TRANSACTION id;` and `ROLLBACK TRANSACTION id;` close it.

## Using it from Python

```python
from toydb.database import Database
from toydb.table import ColumnDef, ColumnType, Condition

db = Database("example")
users = db.create_table("users", [
    ColumnDef("id", ColumnType.INT, primary_key=True),
    ColumnDef("name", ColumnType.TEXT, not_null=True),
])
users.insert_row([1, "alice"])
users.insert_row([2, "bob"])
print(users.select([Condition("id", "=", 2)]))   # [[2, 'bob']]
print(users.update({"name": "carol"}, [Condition("id", "=", 1)]))  # 1
print(users.remove([Condition("name", "=", "bob")]))  # 1
```

`Database.create_table` and `Database.drop_table` raise
`toydb.database.DatabaseError`. `Table.insert_row` raises
`toydb.table.TableError` when a row breaks the schema.

Other modules:

- `toydb.parser.parse(sql)` returns one of the statement dataclasses in
  `toydb.statements` and raises `toydb.parser.ParseError` when the input is
  invalid. `toydb.parser.tokenize(sql)` returns the token list.
- `toydb.convert` turns parsed pieces into typed values. Its functions are
  `parse_value`, `convert_condition`, `convert_column_def` and
  `string_to_column_type`.
- `toydb.bplustree.BPlusTree` is a sorted key-value index. It has `insert`,
  `find`, `update` and `remove`. `range_scan(start, end)` yields
  `(key, value)` pairs in key order.
- `toydb.transaction.TransactionManager` hands out transaction numbers and
  keeps track of the live ones.
- `toydb.cli.CLI` runs the shell over any text streams you give it.

## What it does not do

- Nothing is saved. All data is lost when the process ends.
- Transactions are only numbered and tracked. Statements do not run inside
  them, and aborting one does not undo any changes.
- There are no secondary indexes, no `ALTER TABLE`, no joins, no `OR` in
  `WHERE`, and no column projection in `SELECT`.