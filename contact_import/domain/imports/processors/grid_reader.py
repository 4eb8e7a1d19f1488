"""
Decode uploaded files into a rectangular grid of string cells.

The reader makes no assumption about headers: row 0 is returned like any
other row and the header classifier decides what it is later.
"""
import io
import logging
import math
import os
from datetime import datetime, time
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from contact_import.domain.imports.errors import UnsupportedContentError, UnsupportedFormatError
from contact_import.domain.imports.models import RawGrid
from contact_import.domain.imports.processors.document_extractor import DocumentExtractor, LocalDocumentExtractor
from contact_import.domain.imports.processors.encoding import decode_text

logger = logging.getLogger(__name__)

SPREADSHEET_EXTENSIONS = ("xlsx", "xls")
DELIMITED_EXTENSIONS = ("csv",)
DEFAULT_DOCUMENT_EXTENSIONS = ("pdf", "txt")
CSV_DELIMITERS = (",", ";")

# A grid plus the 1-based source position of each of its rows.
NumberedGrid = Tuple[RawGrid, List[int]]


def file_extension(filename: str) -> str:
    """Return the lowercase extension of ``filename`` without the dot."""
    return os.path.splitext(filename or "")[1].lstrip(".").lower()


def read_grid(
    filename: str,
    content: bytes,
    *,
    extractor: Optional[DocumentExtractor] = None,
    document_extensions: Sequence[str] = DEFAULT_DOCUMENT_EXTENSIONS,
) -> RawGrid:
    """Decode ``content`` into a RawGrid; see ``read_numbered_grid``."""
    grid, _ = read_numbered_grid(
        filename,
        content,
        extractor=extractor,
        document_extensions=document_extensions,
    )
    return grid


def read_numbered_grid(
    filename: str,
    content: bytes,
    *,
    extractor: Optional[DocumentExtractor] = None,
    document_extensions: Sequence[str] = DEFAULT_DOCUMENT_EXTENSIONS,
) -> NumberedGrid:
    """
    Decode ``content`` into a RawGrid, branching on the file extension.

    Args:
        filename: Original file name; only its extension is used.
        content: Raw file bytes.
        extractor: Extraction collaborator for document formats. Defaults to
            the local PDF/text extractor.
        document_extensions: Extensions delegated to ``extractor``.

    Returns:
        The grid, padded to its widest row and without fully blank rows, and
        the 1-based position of each kept row in the uploaded file.

    Raises:
        UnsupportedFormatError: Unknown extension.
        UnsupportedContentError: The file could not be decoded into a usable grid.
    """
    extension = file_extension(filename)

    if extension in SPREADSHEET_EXTENSIONS:
        grid, row_numbers = read_spreadsheet_grid(content)
    elif extension in DELIMITED_EXTENSIONS:
        grid, row_numbers = read_delimited_grid(content)
    elif extension in {ext.lower().lstrip(".") for ext in document_extensions}:
        grid, row_numbers = read_document_grid(filename, content, extractor or LocalDocumentExtractor())
    else:
        raise UnsupportedFormatError(filename, extension)

    logger.info(
        f"Read {len(grid)} rows x {len(grid[0]) if grid else 0} columns from '{filename}' ({extension})"
    )
    return grid, row_numbers


def read_spreadsheet_grid(content: bytes) -> NumberedGrid:
    """Read the first sheet of an xlsx/xls workbook without a header row."""
    try:
        df = pd.read_excel(io.BytesIO(content), sheet_name=0, header=None, dtype=object, engine="openpyxl")
    except Exception:
        # Fallback to pandas' default engine (xlrd for legacy .xls files)
        try:
            df = pd.read_excel(io.BytesIO(content), sheet_name=0, header=None, dtype=object)
        except Exception as e:
            raise UnsupportedContentError(f"Could not read spreadsheet: {str(e)}")

    rows = [[cell_to_text(value) for value in row] for row in df.itertuples(index=False, name=None)]
    return rectangularize_numbered(rows)


def cell_to_text(value: Any) -> str:
    """Render one spreadsheet cell as text; blanks become empty strings."""
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    if isinstance(value, datetime):
        return value.date().isoformat() if value.time() == time.min else value.isoformat()
    return str(value)


def read_delimited_grid(content: bytes) -> NumberedGrid:
    """Tokenize CSV content line by line, accepting comma or semicolon delimiters."""
    text = decode_text(content)
    rows = [split_delimited_line(line) for line in text.splitlines()]
    return rectangularize_numbered(rows)


def split_delimited_line(line: str, delimiters: Iterable[str] = CSV_DELIMITERS) -> List[str]:
    """
    Split one line on any delimiter found outside double-quoted spans.

    A doubled quote inside a quoted span is a literal quote character:
    ``"a ""b"", c",d`` yields ``['a "b", c', 'd']``.
    """
    separators = set(delimiters)
    cells: List[str] = []
    current: List[str] = []
    in_quotes = False
    index = 0
    length = len(line)

    while index < length:
        char = line[index]
        if char == '"':
            if in_quotes and index + 1 < length and line[index + 1] == '"':
                current.append('"')
                index += 1
            else:
                in_quotes = not in_quotes
        elif char in separators and not in_quotes:
            cells.append("".join(current))
            current = []
        else:
            current.append(char)
        index += 1

    cells.append("".join(current))
    return cells


def read_document_grid(filename: str, content: bytes, extractor: DocumentExtractor) -> NumberedGrid:
    """Delegate a document to the extraction collaborator and validate its grid."""
    response = extractor.extract(filename, content)
    error = response.get("error") if isinstance(response, dict) else "Invalid extraction response"
    if error:
        raise UnsupportedContentError(str(error))

    data = response.get("data")
    if not isinstance(data, list):
        raise UnsupportedContentError("Extraction returned no tabular data")

    rows = [
        ["" if cell is None else str(cell) for cell in row] if isinstance(row, (list, tuple)) else []
        for row in data
    ]
    grid, row_numbers = rectangularize_numbered(rows)
    if len(grid) < 2:
        raise UnsupportedContentError("The document does not contain enough data to import")
    return grid, row_numbers


def rectangularize(rows: List[List[str]]) -> RawGrid:
    """Drop fully blank rows and pad the rest with empty strings to a common width."""
    grid, _ = rectangularize_numbered(rows)
    return grid


def rectangularize_numbered(rows: List[List[str]]) -> NumberedGrid:
    """Like ``rectangularize``, also returning the 1-based input position of every kept row."""
    kept = [(position, list(row)) for position, row in enumerate(rows, start=1) if any(cell.strip() for cell in row)]
    width = max((len(row) for _, row in kept), default=0)
    grid = [row + [""] * (width - len(row)) for _, row in kept]
    return grid, [position for position, _ in kept]


def cell_at(row: Sequence[str], index: int) -> str:
    """Return the cell at ``index`` or an empty string when it is absent."""
    if index < 0 or index >= len(row):
        return ""
    value = row[index]
    return "" if value is None else value
