"""
Coercion helpers for raw spreadsheet cells.

Cells arrive as text, numbers, dates or None. Numeric parsing is lenient:
thousands separators and unit suffixes ("1,000", "100개", "12ea") are
stripped, and anything unparseable becomes 0 instead of an error.
"""

import math
import re
from datetime import date, datetime
from typing import Optional

from coupang_insights.schemas import CellValue, Row

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def is_number(value: CellValue) -> bool:
    """True for real numeric cells (bools are not numbers here)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return not (isinstance(value, float) and math.isnan(value))
    return False


def is_blank(value: CellValue) -> bool:
    """Blank means None, NaN, zero or whitespace-only text."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if is_number(value):
        return value == 0
    if isinstance(value, str):
        return value.strip() == ""
    return False


def cell_text(value: CellValue) -> str:
    """
    Render a cell as trimmed text.
    Integral floats drop their fraction so 20260130.0 reads as '20260130'.
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def cell_at(row: Row, index: Optional[int]) -> CellValue:
    """Cell at index, or None when the column is unresolved or the row is short."""
    if index is None or index < 0 or index >= len(row):
        return None
    return row[index]


def cell_number(value: CellValue) -> float:
    """Parse a number leniently. Unparseable values become 0."""
    if is_number(value):
        return float(value)
    if not isinstance(value, str):
        return 0.0

    cleaned = _NON_NUMERIC.sub("", value).strip()
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return 0.0
    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def cell_quantity(value: CellValue) -> int:
    """Parse a stock or sales quantity as a non-negative integer."""
    number = cell_number(value)
    if math.isnan(number) or math.isinf(number) or number <= 0:
        return 0
    return int(round(number))


def row_is_empty(row: Optional[Row]) -> bool:
    if not row:
        return True
    return all(cell is None or cell_text(cell) == "" for cell in row)
