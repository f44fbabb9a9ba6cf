"""Conversion of parsed statement pieces into typed table values."""

from __future__ import annotations

import math
import re
from typing import Sequence

from toydb.statements import ColumnDefinition, WhereCondition
from toydb.table import ColumnDef, ColumnType, Condition, Value

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_HEX_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?\d+)?)"
)
_DEC_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)
_SPECIAL_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:infinity|inf|nan))", re.IGNORECASE)

_TYPE_NAMES = {
    "INT": ColumnType.INT,
    "INTEGER": ColumnType.INT,
    "FLOAT": ColumnType.FLOAT,
    "REAL": ColumnType.FLOAT,
    "TEXT": ColumnType.TEXT,
    "VARCHAR": ColumnType.TEXT,
    "CHAR": ColumnType.TEXT,
}


def string_to_column_type(type_str: str) -> ColumnType:
    """Map a SQL type name to a column type; unknown names give NULL."""
    return _TYPE_NAMES.get(type_str.upper(), ColumnType.NULL)


def convert_column_def(col_def: ColumnDefinition) -> ColumnDef:
    """Turn a parsed column definition into a schema column."""
    return ColumnDef(
        name=col_def.name,
        type=string_to_column_type(col_def.type),
        primary_key=col_def.primary_key,
        not_null=col_def.not_null,
    )


def _leading_int(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    number = int(match.group(1))
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return number


def _leading_float(text: str) -> float:
    match = _SPECIAL_FLOAT_PREFIX.match(text)
    if match is not None:
        return float(match.group(1))
    match = _HEX_FLOAT_PREFIX.match(text)
    if match is not None:
        number = float.fromhex(match.group(1))
    else:
        match = _DEC_FLOAT_PREFIX.match(text)
        if match is None:
            raise ValueError(f"no number in {text!r}")
        number = float(match.group(1))
    if math.isinf(number):
        raise ValueError(f"number out of range: {text!r}")
    return number


def parse_value(value_str: str, expected_type: ColumnType) -> Value:
    """Parse a literal as written in SQL into a value for a column type.

    NULL gives None and quoted text loses its quotes whatever the type.
    Numbers are read from the start of the text; text that is not a number
    is kept as a string. Columns of NULL type always get None.
    """
    if value_str.upper() == "NULL":
        return None

    first, last = value_str[:1], value_str[-1:]
    if first and first == last and first in ("'", '"'):
        return value_str[1:-1]

    if expected_type == ColumnType.INT:
        try:
            return _leading_int(value_str)
        except ValueError:
            return value_str
    if expected_type == ColumnType.FLOAT:
        try:
            return _leading_float(value_str)
        except ValueError:
            return value_str
    if expected_type == ColumnType.TEXT:
        return value_str
    return None


def convert_condition(cond: WhereCondition, columns: Sequence[ColumnDef]) -> Condition:
    """Build a table condition, typing the value by its column (TEXT if unknown)."""
    column_type = next(
        (col.type for col in columns if col.name == cond.column), ColumnType.TEXT
    )
    return Condition(
        column_name=cond.column,
        op=cond.op,
        value=parse_value(cond.value, column_type),
    )