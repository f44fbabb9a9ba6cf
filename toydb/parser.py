"""Tokenizer and parser for the small SQL dialect the database understands."""

from __future__ import annotations

import re
from typing import List, Optional

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
    Statement,
    UpdateStmt,
    WhereCondition,
)

_WHITESPACE = frozenset(" \t\n\v\f\r")
_SINGLE_TOKENS = frozenset(",();")
_OPERATOR_CHARS = frozenset("=<>!")
_QUOTES = frozenset("'\"")

_UINT64_MAX = 2**64 - 1
_UNSIGNED_PREFIX = re.compile(r"([+-]?)(\d+)")


class ParseError(ValueError):
    """Raised when a statement cannot be parsed."""


def tokenize(sql: str) -> List[str]:
    """Split SQL text into tokens.

    Quoted strings keep their quotes and form one token; punctuation and
    comparison operators (one or two characters) are tokens of their own.
    """
    tokens: List[str] = []
    current = ""
    quote: Optional[str] = None
    pos = 0
    length = len(sql)

    while pos < length:
        char = sql[pos]
        if char in _QUOTES:
            if quote is None:
                if current:
                    tokens.append(current)
                quote = char
                current = char
            elif char == quote:
                tokens.append(current + char)
                current = ""
                quote = None
            else:
                current += char
        elif quote is not None:
            current += char
        elif char in _WHITESPACE:
            if current:
                tokens.append(current)
                current = ""
        elif char in _SINGLE_TOKENS:
            if current:
                tokens.append(current)
                current = ""
            tokens.append(char)
        elif char in _OPERATOR_CHARS:
            if current:
                tokens.append(current)
                current = ""
            following = sql[pos + 1:pos + 2]
            if following == "=" or (char == "<" and following == ">"):
                tokens.append(char + following)
                pos += 1
            else:
                tokens.append(char)
        else:
            current += char
        pos += 1

    if current:
        tokens.append(current)
    return tokens


class _Cursor:
    """Forward-only view over a token list."""

    def __init__(self, tokens: List[str]) -> None:
        self._tokens = tokens
        self._pos = 0

    def __len__(self) -> int:
        return len(self._tokens) - self._pos

    def peek(self) -> Optional[str]:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def peek_upper(self) -> Optional[str]:
        token = self.peek()
        return None if token is None else token.upper()

    def pop(self) -> str:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def skip(self, count: int) -> None:
        self._pos += count

    def accept(self, token: str) -> bool:
        if self.peek() == token:
            self._pos += 1
            return True
        return False

    def accept_keyword(self, word: str) -> bool:
        if self.peek_upper() == word:
            self._pos += 1
            return True
        return False


def _parse_conditions(cur: _Cursor) -> List[WhereCondition]:
    conditions: List[WhereCondition] = []
    if not cur.accept_keyword("WHERE"):
        return conditions
    while len(cur):
        if len(cur) < 3:
            raise ParseError("Invalid WHERE clause syntax")
        column, op, value = cur.pop(), cur.pop(), cur.pop()
        conditions.append(WhereCondition(column=column, op=op, value=value))
        if not cur.accept_keyword("AND"):
            break
    return conditions


def _parse_create_table(tokens: List[str]) -> CreateTableStmt:
    if len(tokens) < 4:
        raise ParseError("Invalid CREATE TABLE syntax")
    cur = _Cursor(tokens)
    cur.skip(2)
    table_name = cur.pop()
    if not cur.accept("("):
        raise ParseError("Expected '(' after table name")

    columns: List[ColumnDefinition] = []
    while len(cur):
        if cur.accept(")"):
            break
        col_name = cur.pop()
        if not len(cur):
            raise ParseError("Unexpected end of input while parsing column type")
        column = ColumnDefinition(name=col_name, type=cur.pop().upper())

        while len(cur) and cur.peek() not in (",", ")"):
            constraint = cur.pop().upper()
            if constraint == "PRIMARY" and cur.accept_keyword("KEY"):
                column.primary_key = True
            elif constraint == "NOT" and cur.accept_keyword("NULL"):
                column.not_null = True
            else:
                raise ParseError(f"Unknown column constraint: {constraint}")

        columns.append(column)
        if not cur.accept(",") and len(cur) and cur.peek() != ")":
            raise ParseError("Expected ',' or ')' after column definition")

    cur.accept(";")
    if not columns:
        raise ParseError("No columns defined in CREATE TABLE statement")
    return CreateTableStmt(table_name=table_name, columns=columns)


def _parse_list(cur: _Cursor, separator_error: str) -> List[str]:
    """Read items up to a closing parenthesis, which is left in place."""
    items: List[str] = []
    while len(cur) and cur.peek() != ")":
        items.append(cur.pop())
        if not cur.accept(",") and len(cur) and cur.peek() != ")":
            raise ParseError(separator_error)
    return items


def _parse_insert(tokens: List[str]) -> InsertStmt:
    if len(tokens) < 4:
        raise ParseError("Invalid INSERT syntax")
    cur = _Cursor(tokens)
    cur.skip(1)
    if not cur.accept_keyword("INTO"):
        raise ParseError("Expected 'INTO' after INSERT")
    if not len(cur):
        raise ParseError("Expected table name after INTO")
    stmt = InsertStmt(table_name=cur.pop())

    if cur.accept("("):
        stmt.columns = _parse_list(cur, "Expected ',' or ')' after column name")
        if not cur.accept(")"):
            raise ParseError("Expected ')' after column names")

    if not cur.accept_keyword("VALUES"):
        raise ParseError("Expected 'VALUES' keyword")

    while cur.accept("("):
        row = _parse_list(cur, "Expected ',' or ')' after value")
        if not cur.accept(")"):
            raise ParseError("Expected ')' after values")
        stmt.values.append(row)
        if not cur.accept(","):
            break

    cur.accept(";")
    return stmt


def _parse_select(tokens: List[str]) -> SelectStmt:
    if len(tokens) < 4:
        raise ParseError("Invalid SELECT syntax")
    cur = _Cursor(tokens)
    cur.skip(1)

    columns: List[str] = []
    while len(cur) and cur.peek_upper() != "FROM":
        if cur.accept("*"):
            break
        columns.append(cur.pop())
        if not cur.accept(","):
            break

    if not cur.accept_keyword("FROM"):
        raise ParseError("Expected FROM in SELECT statement")
    if not len(cur):
        raise ParseError("Expected table name after FROM")
    stmt = SelectStmt(table_name=cur.pop(), columns=columns)
    stmt.conditions = _parse_conditions(cur)
    cur.accept(";")
    return stmt


def _parse_update(tokens: List[str]) -> UpdateStmt:
    if len(tokens) < 5:
        raise ParseError("Invalid UPDATE syntax")
    cur = _Cursor(tokens)
    cur.skip(1)
    stmt = UpdateStmt(table_name=cur.pop())
    if not cur.accept_keyword("SET"):
        raise ParseError("Expected SET in UPDATE statement")

    while len(cur) and cur.peek_upper() != "WHERE":
        if len(cur) < 3:
            raise ParseError("Invalid SET clause in UPDATE statement")
        column = cur.pop()
        if not cur.accept("="):
            raise ParseError("Expected '=' after column name in SET clause")
        stmt.updates.append((column, cur.pop()))
        if not cur.accept(","):
            break

    stmt.conditions = _parse_conditions(cur)
    cur.accept(";")
    return stmt


def _parse_delete(tokens: List[str]) -> DeleteStmt:
    if len(tokens) < 4:
        raise ParseError("Invalid DELETE syntax")
    cur = _Cursor(tokens)
    cur.skip(1)
    if not cur.accept_keyword("FROM"):
        raise ParseError("Expected FROM in DELETE statement")
    if not len(cur):
        raise ParseError("Expected table name after FROM")
    stmt = DeleteStmt(table_name=cur.pop())
    stmt.conditions = _parse_conditions(cur)
    cur.accept(";")
    return stmt


def _parse_drop_table(tokens: List[str]) -> DropTableStmt:
    if len(tokens) < 3:
        raise ParseError("Invalid DROP TABLE syntax")
    return DropTableStmt(table_name=tokens[2])


def _parse_transaction_id(token: str) -> int:
    """Read a leading unsigned number; a minus sign wraps as in unsigned arithmetic."""
    match = _UNSIGNED_PREFIX.match(token)
    if match is None:
        raise ParseError(f"Invalid transaction ID: {token}")
    number = int(match.group(2))
    if number > _UINT64_MAX:
        raise ParseError(f"Invalid transaction ID: {token}")
    if match.group(1) == "-":
        number = -number % (_UINT64_MAX + 1)
    return number


def _parse_commit(tokens: List[str]) -> CommitTransactionStmt:
    if len(tokens) < 3:
        raise ParseError("Invalid COMMIT TRANSACTION syntax")
    return CommitTransactionStmt(transaction_id=_parse_transaction_id(tokens[2]))


def _parse_abort(tokens: List[str]) -> AbortTransactionStmt:
    if len(tokens) < 3:
        raise ParseError("Invalid ABORT/ROLLBACK TRANSACTION syntax")
    return AbortTransactionStmt(transaction_id=_parse_transaction_id(tokens[2]))


def parse(sql: str) -> Statement:
    """Parse one SQL statement; raise ParseError if it is not understood."""
    tokens = tokenize(sql)
    if not tokens:
        raise ParseError("Empty SQL statement")

    command = tokens[0].upper()
    second = tokens[1].upper() if len(tokens) > 1 else None

    if command == "CREATE" and second == "TABLE":
        return _parse_create_table(tokens)
    if command == "INSERT":
        return _parse_insert(tokens)
    if command == "SELECT":
        return _parse_select(tokens)
    if command == "UPDATE":
        return _parse_update(tokens)
    if command == "DELETE":
        return _parse_delete(tokens)
    if command == "DROP" and second == "TABLE":
        return _parse_drop_table(tokens)
    if command == "SHOW" and second == "TABLES":
        return ShowTablesStmt()
    if command == "BEGIN" and second == "TRANSACTION":
        return BeginTransactionStmt()
    if command == "COMMIT" and second == "TRANSACTION":
        return _parse_commit(tokens)
    if command in ("ROLLBACK", "ABORT") and second == "TRANSACTION":
        return _parse_abort(tokens)

    raise ParseError(f"Unknown SQL command: {command}")