"""
Turn data rows into candidate contact records.

Rows are normalized independently and in order. A row either becomes a
``CandidateRecord`` or an ``ImportRowError`` explaining why it was skipped;
malformed optional values (age, gender, interests) are dropped without
failing the row.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from contact_import.domain.imports.field_mapper import map_fields
from contact_import.domain.imports.models import CandidateRecord, ImportRowError, RawGrid
from contact_import.domain.imports.processors.grid_reader import cell_at
from contact_import.domain.imports.vocabulary import DEFAULT_VOCABULARY, ImportVocabulary

logger = logging.getLogger(__name__)

EMPTY_NAME_REASON = "empty name, skipped"
MIN_AGE = 0
MAX_AGE = 150

_INTEREST_SEPARATORS = re.compile(r"[,;|]")
_LEADING_INTEGER = re.compile(r"^[+-]?\d+")


@dataclass
class NormalizationResult:
    preview: List[CandidateRecord] = field(default_factory=list)
    errors: List[ImportRowError] = field(default_factory=list)

    @property
    def skipped_rows(self) -> int:
        return len(self.errors)


def title_case(value: str) -> str:
    """Capitalize every whitespace-delimited token and collapse whitespace runs."""
    return " ".join(token[:1].upper() + token[1:].lower() for token in value.split())


def optional_text(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


def parse_age(value: str) -> Optional[int]:
    """Leading integer of ``value`` when it lies strictly between 0 and 150."""
    match = _LEADING_INTEGER.match(value.strip())
    if not match:
        return None
    age = int(match.group(0))
    if MIN_AGE < age < MAX_AGE:
        return age
    return None


def parse_interests(value: str, vocabulary: ImportVocabulary = DEFAULT_VOCABULARY) -> Optional[List[str]]:
    """Keep the tokens that match the canonical interest list, in canonical casing."""
    interests: List[str] = []
    dropped: List[str] = []
    for token in _INTEREST_SEPARATORS.split(value):
        token = token.strip()
        if not token:
            continue
        canonical = vocabulary.canonical_interest(token)
        if canonical is None:
            dropped.append(token)
        elif canonical not in interests:
            interests.append(canonical)

    if dropped:
        logger.debug(f"Dropped interests outside the vocabulary: {dropped}")
    return interests or None


def normalize_row(
    row: Sequence[str],
    column_indices: Dict[str, int],
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
) -> Optional[CandidateRecord]:
    """Build a candidate from one row; None when the name cell is empty."""

    def cell(field_name: str) -> str:
        return (cell_at(row, column_indices.get(field_name, -1)) or "").strip()

    name = cell("name")
    if not name:
        return None

    city = cell("city")
    return CandidateRecord(
        name=title_case(name),
        email=optional_text(cell("email")),
        phone=optional_text(cell("phone")),
        age=parse_age(cell("age")),
        gender=vocabulary.resolve_gender(cell("gender")),
        state=optional_text(cell("state")),
        city=title_case(city) if city else None,
        interests=parse_interests(cell("interests"), vocabulary),
        source=cell("source") or vocabulary.default_source,
        notes=optional_text(cell("notes")),
    )


def normalize_rows(
    rows: RawGrid,
    header_labels: Sequence[str],
    *,
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
    first_row_number: int = 1,
    column_indices: Optional[Dict[str, int]] = None,
    row_numbers: Optional[Sequence[int]] = None,
) -> NormalizationResult:
    """
    Normalize every data row against ``header_labels``.

    This is the single entry point shared by headered uploads and headerless
    uploads with synthesized labels.

    Args:
        rows: Data rows (no header).
        header_labels: Real or synthesized labels, one per column.
        vocabulary: Alias table, interests and gender groups to apply.
        first_row_number: Row number reported for ``rows[0]`` in skip errors.
        column_indices: Precomputed field mapping; resolved from the labels when omitted.
        row_numbers: Source position of each row; overrides ``first_row_number``.

    Raises:
        NoNameColumnError: The labels do not resolve the name field.
    """
    if column_indices is None:
        column_indices = map_fields(header_labels, vocabulary)

    result = NormalizationResult()
    for offset, row in enumerate(rows):
        row_number = row_numbers[offset] if row_numbers is not None else first_row_number + offset
        record = normalize_row(row, column_indices, vocabulary)
        if record is None:
            logger.warning(f"Row {row_number}: {EMPTY_NAME_REASON}")
            result.errors.append(ImportRowError(row_number=row_number, reason=EMPTY_NAME_REASON))
            continue
        result.preview.append(record)

    logger.info(
        f"Normalized {len(rows)} rows: {len(result.preview)} candidates, {result.skipped_rows} skipped"
    )
    return result
