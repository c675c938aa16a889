# src/resealer/common/tabular.py

import csv
import io
from typing import Dict, List, Sequence, Tuple, Union

from .errors import CorruptInputError


def as_text(data: Union[str, bytes, bytearray]) -> str:
    """Accepts raw export content as text or UTF-8 bytes (BOM tolerated)."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        try:
            return bytes(data).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CorruptInputError(f"Export is not valid UTF-8 text: {e.reason} at byte {e.start}") from e
    text = data or ""
    return text.lstrip("\ufeff")


def read_rows(text: str) -> List[List[str]]:
    """Splits quoted CSV text into rows, dropping rows with no content."""
    reader = csv.reader(io.StringIO(text))
    return [row for row in reader if any(cell.strip() for cell in row)]


def normalize_header(name: str) -> str:
    return name.strip().lower()


def split_header(text: str) -> Tuple[List[str], List[List[str]]]:
    """Returns the normalized header names and the remaining data rows."""
    rows = read_rows(text)
    if not rows:
        return [], []
    header_row, *data_rows = rows
    return [normalize_header(h) for h in header_row], data_rows


def row_to_item(headers: Sequence[str], row: Sequence[str]) -> Dict[str, str]:
    """Maps a row onto its header names; short rows read as empty strings."""
    item = {}
    for index, key in enumerate(headers):
        value = row[index] if index < len(row) else ""
        # Duplicate headers keep their first column
        item.setdefault(key, value.strip())
    return item
