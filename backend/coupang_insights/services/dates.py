"""
Date normalization for marketplace exports.

Sales sheets encode dates as YYYYMMDD text, spreadsheet serial numbers or
free-form strings. Everything becomes a canonical YYYY-MM-DD string.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional

import pandas as pd

from coupang_insights.schemas import CellValue
from coupang_insights.services.cells import cell_text, is_blank, is_number

# Day 0 of the spreadsheet serial calendar
SERIAL_EPOCH = datetime(1899, 12, 30)
SERIAL_MIN = 35000  # ~1995
SERIAL_MAX = 60000  # ~2064

_NON_DIGIT = re.compile(r"[^0-9]")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today_iso() -> str:
    return date.today().isoformat()


def serial_to_date(serial: float) -> date:
    """Convert a spreadsheet day-count serial to a calendar date."""
    return (SERIAL_EPOCH + timedelta(days=float(serial))).date()


def _parse_generic(value: CellValue) -> Optional[date]:
    if isinstance(value, (datetime, date)):
        parsed = pd.Timestamp(value)
    else:
        try:
            parsed = pd.to_datetime(cell_text(value), errors="coerce")
        except (ValueError, OverflowError):
            return None
    if pd.isna(parsed):
        return None
    if not 2000 < parsed.year < 2100:
        return None
    return parsed.date()


def normalize_date(value: CellValue, fallback: Optional[str] = None) -> str:
    """
    Normalize a raw date cell to YYYY-MM-DD.

    Tried in order, first success wins:
    1. Exactly 8 digits starting with '20' -> YYYYMMDD
    2. Numeric serial in [35000, 60000) -> days since 1899-12-30
    3. Generic parse of non-numeric cells, accepted only for years strictly
       between 2000 and 2100
    4. The fallback date (today when not given)

    Blank cells go straight to the fallback. Falling back is silent.
    """
    fallback = fallback or today_iso()
    if is_blank(value):
        return fallback

    digits = _NON_DIGIT.sub("", cell_text(value))
    if len(digits) == 8 and digits.startswith("20"):
        try:
            return datetime.strptime(digits, "%Y%m%d").date().isoformat()
        except ValueError:
            pass  # not a calendar date, e.g. 20261399

    if is_number(value) and SERIAL_MIN <= value < SERIAL_MAX:
        return serial_to_date(value).isoformat()

    # Other numbers are never dates
    if not is_number(value):
        parsed = _parse_generic(value)
        if parsed is not None:
            return parsed.isoformat()

    return fallback


def is_iso_date(value: str) -> bool:
    """True for strings shaped like YYYY-MM-DD."""
    return bool(value) and bool(_ISO_DATE.match(value))


def parse_iso(value: str) -> date:
    return datetime.strptime(value, "%Y-%m-%d").date()
