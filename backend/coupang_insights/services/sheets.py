"""
Upload decoding for the HTTP layer.

Only the first sheet is read, as a rectangular grid of raw cells. Decoder
failures (corrupt workbook, undecodable text) propagate to the caller.
"""

import logging
import re
from io import BytesIO, StringIO
from pathlib import Path
from typing import List

import pandas as pd

from coupang_insights.schemas import CellValue

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".csv", ".xlsx", ".xls"}

_NUMERIC_TEXT = re.compile(r"^-?\d+(\.\d+)?$")


def _to_cell(value) -> CellValue:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        # CSV text that looks numeric becomes a number, as a spreadsheet would show it
        if _NUMERIC_TEXT.match(text):
            return float(text) if "." in text else int(text)
        return text
    if hasattr(value, "item"):
        return value.item()  # numpy scalar
    return value


def _decode_text(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Korean marketplace exports are often saved as cp949
        logger.info("UTF-8 decoding failed. Retrying with 'cp949'.")
        return content.decode("cp949")


def _read_csv(content: bytes) -> pd.DataFrame:
    text = _decode_text(content)
    # Title rows above the header are shorter than data rows; size the frame to the widest line
    width = max((line.count(",") + 1 for line in text.splitlines()), default=1)
    return pd.read_csv(
        StringIO(text),
        header=None,
        names=list(range(width)),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )


def load_grid(content: bytes, filename: str) -> List[List[CellValue]]:
    """
    Decode an uploaded file into rows of raw cells.

    Raises:
        ValueError: unsupported extension
        pandas / openpyxl errors: the file cannot be decoded
    """
    extension = Path(filename or "").suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise ValueError("Only Excel (.xlsx, .xls) or CSV (.csv) files are supported")

    if extension == ".csv":
        df = _read_csv(content)
    else:
        df = pd.read_excel(BytesIO(content), header=None, sheet_name=0)

    grid = [[_to_cell(v) for v in row] for row in df.itertuples(index=False, name=None)]
    logger.debug(f"Decoded {filename}: {len(grid)} rows")
    return grid
