"""
Decide whether the first row of a grid is a header row.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from contact_import.domain.imports.column_inference import is_email
from contact_import.domain.imports.errors import EmptyContentError
from contact_import.domain.imports.models import RawGrid
from contact_import.domain.imports.vocabulary import DEFAULT_VOCABULARY, ImportVocabulary

logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r"[^\w]+|_")


# Plural endings accepted after a keyword ("nomes", "emails", "celulares").
PLURAL_SUFFIXES = ("s", "es")


@dataclass
class HeaderClassification:
    """Header decision for a grid plus the data rows left to normalize."""
    has_header: bool
    header_labels: List[str]
    data_rows: RawGrid
    first_data_row_number: int  # 1-based position of data_rows[0] in the uploaded grid
    data_row_numbers: List[int] = field(default_factory=list)


def token_matches_keyword(token: str, keywords) -> bool:
    if token in keywords:
        return True
    return any(
        token.endswith(suffix) and token[:-len(suffix)] in keywords
        for suffix in PLURAL_SUFFIXES
    )


def cell_matches_keyword(cell: str, keywords) -> bool:
    """
    True when the whole lowercased cell, or one of its word tokens, is a
    keyword or the plural of one.

    Matching whole tokens keeps data such as ``Agenor`` from being read as the
    ``age`` header. Email addresses are never headers, so ``mails@x.com`` or
    ``joao@gmail.com`` do not count either.
    """
    lowered = cell.strip().lower()
    if not lowered or is_email(lowered):
        return False
    if token_matches_keyword(lowered, keywords):
        return True
    return any(token_matches_keyword(token, keywords) for token in _TOKEN_SPLIT.split(lowered) if token)


def is_header_row(row: Sequence[str], vocabulary: ImportVocabulary = DEFAULT_VOCABULARY) -> bool:
    return any(cell_matches_keyword(cell or "", vocabulary.header_keywords) for cell in row)


def classify_header(
    grid: RawGrid,
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
    row_numbers: Optional[Sequence[int]] = None,
) -> HeaderClassification:
    """
    Split ``grid`` into header labels and data rows.

    ``row_numbers`` gives the position of every grid row in the uploaded file
    (blank rows dropped by the reader leave gaps); it defaults to 1..n.

    Raises:
        EmptyContentError: No data rows remain once the header is consumed.
    """
    if not grid:
        raise EmptyContentError("The file is empty")

    numbers = list(row_numbers) if row_numbers is not None else list(range(1, len(grid) + 1))
    first_row = grid[0]
    if is_header_row(first_row, vocabulary):
        data_row_numbers = numbers[1:]
        classification = HeaderClassification(
            has_header=True,
            header_labels=[cell.strip().lower() for cell in first_row],
            data_rows=grid[1:],
            first_data_row_number=data_row_numbers[0] if data_row_numbers else numbers[0] + 1,
            data_row_numbers=data_row_numbers,
        )
        logger.info(f"Header row detected: {classification.header_labels}")
    else:
        classification = HeaderClassification(
            has_header=False,
            header_labels=[],
            data_rows=grid,
            first_data_row_number=numbers[0],
            data_row_numbers=numbers,
        )
        logger.info("No header row detected; column roles will be inferred from the data")

    if not classification.data_rows:
        raise EmptyContentError("The file only contains a header row")

    return classification
