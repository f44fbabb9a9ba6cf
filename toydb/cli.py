"""Interactive command-line front end for the database."""

from __future__ import annotations

import sys
from typing import Callable, Dict, List, Optional, Sequence, TextIO

from toydb.convert import convert_column_def, convert_condition, parse_value
from toydb.database import Database, DatabaseError
from toydb.parser import ParseError, parse
from toydb.statements import (
    AbortTransactionStmt,
    BeginTransactionStmt,
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
from toydb.table import ColumnDef, ColumnType, Condition, Row, Table, TableError, value_to_string

WELCOME = (
    "Welcome to ToyDB - A simple C++ database with B+ Tree indexing\n"
    "---------------------------------------------------------------"
)

HELP_TEXT = """\
ToyDB Help:
----------
Commands end with ';' and are case-insensitive.

CREATE TABLE table_name (col1 TYPE [PRIMARY KEY] [NOT NULL], ...);
  - Create a new table with specified columns
  - Supported types: INT, FLOAT, TEXT

INSERT INTO table_name [(col1, col2, ...)] VALUES (val1, val2, ...), ...;
  - Insert one or more rows

SELECT col1, col2, ... FROM table_name [WHERE conditions];
  - Query data (use * for all columns)

UPDATE table_name SET col1 = val1, ... [WHERE conditions];
  - Update rows matching conditions

DELETE FROM table_name [WHERE conditions];
  - Delete rows matching conditions

DROP TABLE table_name;
  - Remove a table

SHOW TABLES;
  - List all tables in the database

Transaction commands:
BEGIN TRANSACTION;
  - Start a new transaction and get a transaction ID

COMMIT TRANSACTION transaction_id;
  - Commit a transaction by ID

ABORT TRANSACTION transaction_id; (or ROLLBACK TRANSACTION transaction_id;)
  - Abort/rollback a transaction by ID

Special commands (without semicolon):
  help - Display this help
  exit/quit - Exit ToyDB"""

_PROMPT = "toydb> "
_TABLE_NAME_HEADER = "TABLE_NAME"


class _CommandError(Exception):
    """Raised when a statement cannot be carried out."""


class CLI:
    """Reads SQL statements, runs them against a database and prints results."""

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        database: Optional[Database] = None,
    ) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.db = database if database is not None else Database("toydb")
        self._handlers: Dict[type, Callable] = {
            CreateTableStmt: self._handle_create_table,
            InsertStmt: self._handle_insert,
            SelectStmt: self._handle_select,
            UpdateStmt: self._handle_update,
            DeleteStmt: self._handle_delete,
            DropTableStmt: self._handle_drop_table,
            ShowTablesStmt: self._handle_show_tables,
            BeginTransactionStmt: self._handle_begin_transaction,
            CommitTransactionStmt: self._handle_commit_transaction,
            AbortTransactionStmt: self._handle_abort_transaction,
        }
        self._out("ToyDB initialized. Type 'help' for usage information.")

    def _out(self, text: str = "", end: str = "\n") -> None:
        print(text, end=end, file=self.stdout)

    def _err(self, text: str) -> None:
        print(text, file=self.stderr)

    def start(self) -> None:
        """Run the interactive loop until end of input, ``exit`` or ``quit``."""
        command = ""
        while True:
            self._out(_PROMPT, end="")
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                break
            command += line.rstrip("\n")

            complete = False
            if command:
                trimmed = command.lstrip(" \t\r\n")
                if trimmed in ("exit", "quit"):
                    self._out("Goodbye!")
                    break
                if trimmed == "help":
                    self._print_help()
                    command = ""
                    continue
                complete = command.endswith(";")

            if complete:
                self.execute_command(command)
                command = ""
            else:
                command += " "

    def execute_command(self, command: str) -> None:
        """Parse and run one statement, reporting problems on the error stream."""
        try:
            statement = parse(command)
        except ParseError as exc:
            self._err(f"Error: {exc}")
            return

        try:
            self._handlers[type(statement)](statement)
        except Exception as exc:  # every failure is reported, none ends the session
            self._err(f"Error executing command: {exc}")

    def print_results(self, rows: Sequence[Row], columns: Sequence[ColumnDef]) -> None:
        """Print rows as a bordered table followed by a row count."""
        if not columns:
            self._out("No columns")
            return

        widths = [len(col.name) for col in columns]
        for row in rows:
            for position, value in enumerate(row[: len(columns)]):
                widths[position] = max(widths[position], len(value_to_string(value)))

        def render(cells: List[str]) -> str:
            return "".join(f"| {cell.ljust(width)} " for cell, width in zip(cells, widths)) + "|"

        self._out(render([col.name for col in columns]))
        self._out("".join(f"+-{'-' * width}-" for width in widths) + "+")
        for row in rows:
            cells = [
                value_to_string(row[position]) if position < len(row) else "NULL"
                for position in range(len(columns))
            ]
            self._out(render(cells))
        self._out(f"{len(rows)} row(s) returned.")

    def _table(self, name: str) -> Optional[Table]:
        table = self.db.get_table(name)
        if table is None:
            self._err(f"Table not found: {name}")
        return table

    @staticmethod
    def _conditions(
        conditions: Sequence[WhereCondition], columns: Sequence[ColumnDef]
    ) -> List[Condition]:
        return [convert_condition(cond, columns) for cond in conditions]

    def _handle_create_table(self, stmt: CreateTableStmt) -> None:
        columns = [convert_column_def(col) for col in stmt.columns]
        try:
            self.db.create_table(stmt.table_name, columns)
        except DatabaseError as exc:
            self._err(str(exc))
            return
        self._out(f"Table created: {stmt.table_name}")

    def _handle_insert(self, stmt: InsertStmt) -> None:
        table = self._table(stmt.table_name)
        if table is None:
            return
        inserted = 0
        for value_strs in stmt.values:
            row = self._parse_row(value_strs, table.columns, stmt.columns)
            try:
                table.insert_row(row)
            except TableError as exc:
                self._err(str(exc))
                continue
            inserted += 1
        self._out(f"{inserted} row(s) inserted.")

    @staticmethod
    def _parse_row(
        value_strs: Sequence[str],
        columns: Sequence[ColumnDef],
        col_names: Sequence[str] = (),
    ) -> Row:
        if len(value_strs) != len(col_names or columns):
            raise _CommandError("Column count mismatch")
        if not col_names:
            return [parse_value(text, col.type) for text, col in zip(value_strs, columns)]

        row: Row = [None] * len(columns)
        for name, text in zip(col_names, value_strs):
            position = next((i for i, col in enumerate(columns) if col.name == name), None)
            if position is None:
                raise _CommandError(f"Column not found: {name}")
            row[position] = parse_value(text, columns[position].type)
        return row

    def _handle_select(self, stmt: SelectStmt) -> None:
        table = self._table(stmt.table_name)
        if table is None:
            return
        rows = table.select(self._conditions(stmt.conditions, table.columns))
        self.print_results(rows, table.columns)

    def _handle_update(self, stmt: UpdateStmt) -> None:
        table = self._table(stmt.table_name)
        if table is None:
            return
        conditions = self._conditions(stmt.conditions, table.columns)
        updates = {}
        for name, text in stmt.updates:
            column_type = next(
                (col.type for col in table.columns if col.name == name), ColumnType.TEXT
            )
            updates[name] = parse_value(text, column_type)
        count = table.update(updates, conditions)
        self._out(f"{count} row(s) updated.")

    def _handle_delete(self, stmt: DeleteStmt) -> None:
        table = self._table(stmt.table_name)
        if table is None:
            return
        count = table.remove(self._conditions(stmt.conditions, table.columns))
        self._out(f"{count} row(s) deleted.")

    def _handle_drop_table(self, stmt: DropTableStmt) -> None:
        try:
            self.db.drop_table(stmt.table_name)
        except DatabaseError as exc:
            self._err(str(exc))
            return
        self._out(f"Table dropped: {stmt.table_name}")

    def _handle_show_tables(self, stmt: ShowTablesStmt) -> None:
        names = self.db.list_tables()
        if not names:
            self._out("No tables found.")
            return
        width = max(len(_TABLE_NAME_HEADER), *(len(name) for name in names))
        self._out(f"| {_TABLE_NAME_HEADER.ljust(width)} |")
        self._out(f"+-{'-' * width}-+")
        for name in names:
            self._out(f"| {name.ljust(width)} |")
        self._out(f"{len(names)} table(s) found.")

    def _handle_begin_transaction(self, stmt: BeginTransactionStmt) -> None:
        transaction_id = self.db.begin_transaction()
        self._out(f"Transaction started with ID: {transaction_id}")

    def _handle_commit_transaction(self, stmt: CommitTransactionStmt) -> None:
        try:
            self.db.commit_transaction(stmt.transaction_id)
        except LookupError as exc:
            self._err(f"Error committing transaction: {exc}")
            return
        self._out(f"Transaction {stmt.transaction_id} committed successfully.")

    def _handle_abort_transaction(self, stmt: AbortTransactionStmt) -> None:
        try:
            self.db.abort_transaction(stmt.transaction_id)
        except LookupError as exc:
            self._err(f"Error aborting transaction: {exc}")
            return
        self._out(f"Transaction {stmt.transaction_id} aborted successfully.")

    def _print_help(self) -> None:
        self._out(HELP_TEXT)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run each argument as a statement, or start the interactive loop."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        print(WELCOME)
        cli = CLI()
        if args:
            for command in args:
                cli.execute_command(command)
        else:
            cli.start()
        return 0
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())