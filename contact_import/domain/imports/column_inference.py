"""
Infer column roles for headerless uploads.

Each sampled cell is classified on its own (email, phone, name or nothing)
and a column takes a role when more than half of its non-empty sampled cells
agree. The resulting roles are turned into synthetic header labels so the
field mapper treats headered and headerless files the same way.
"""
import logging
import re
from collections import Counter
from typing import Dict, List, Optional

from contact_import.domain.imports.models import ColumnRole, RawGrid
from contact_import.domain.imports.processors.grid_reader import cell_at

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 5
MIN_PHONE_DIGITS = 8

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
# Letters (accented included), spaces, hyphens, apostrophes and periods.
NAME_PATTERN = re.compile(r"^(?:[^\W\d_]|[\s'.’-])+$")

# Checked in this order; the cell detectors are mutually exclusive.
VOTING_ROLES = (ColumnRole.EMAIL, ColumnRole.PHONE, ColumnRole.NAME)

SYNTHETIC_LABELS = {
    ColumnRole.NAME: "nome",
    ColumnRole.EMAIL: "email",
    ColumnRole.PHONE: "telefone",
}


def is_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def is_phone(value: str) -> bool:
    return not is_email(value) and len(re.sub(r"\D", "", value)) >= MIN_PHONE_DIGITS


def is_name(value: str) -> bool:
    return (
        not is_email(value)
        and not is_phone(value)
        and len(value) >= 2
        and bool(NAME_PATTERN.match(value))
        and any(char.isalpha() for char in value)
    )


def classify_cell(value: str) -> Optional[ColumnRole]:
    """Classify a single stripped cell; None when no detector accepts it."""
    if is_email(value):
        return ColumnRole.EMAIL
    if is_phone(value):
        return ColumnRole.PHONE
    if is_name(value):
        return ColumnRole.NAME
    return None


def infer_column_roles(rows: RawGrid, *, sample_size: int = DEFAULT_SAMPLE_SIZE) -> Dict[int, ColumnRole]:
    """
    Assign a role to every column by majority vote over the first rows.

    Every headerless import needs a name column: when no column wins the
    name vote, the first column still unknown is assigned ``name``.
    """
    sample = rows[:max(sample_size, 0)]
    width = max((len(row) for row in rows), default=0)
    roles: Dict[int, ColumnRole] = {}

    for column in range(width):
        values = [cell_at(row, column).strip() for row in sample]
        values = [value for value in values if value]
        votes = Counter(classify_cell(value) for value in values)
        role = ColumnRole.UNKNOWN
        for candidate in VOTING_ROLES:
            if votes[candidate] * 2 > len(values):
                role = candidate
                break
        roles[column] = role
        logger.debug(f"Column {column}: {dict(votes)} over {len(values)} sampled cells -> {role.value}")

    if ColumnRole.NAME not in roles.values():
        fallback = next((column for column, role in roles.items() if role is ColumnRole.UNKNOWN), None)
        if fallback is not None:
            roles[fallback] = ColumnRole.NAME
            logger.info(f"No column looked like names; using column {fallback} as the name column")

    logger.info(
        "Inferred column roles: "
        + ", ".join(f"{column}={role.value}" for column, role in sorted(roles.items()))
    )
    return roles


def synthesize_header_labels(roles: Dict[int, ColumnRole], width: Optional[int] = None) -> List[str]:
    """Build header labels (``nome``, ``email``, ``telefone`` or ``colunaN``) from inferred roles."""
    if width is None:
        width = max(roles.keys(), default=-1) + 1
    return [
        SYNTHETIC_LABELS.get(roles.get(column, ColumnRole.UNKNOWN), f"coluna{column + 1}")
        for column in range(width)
    ]
