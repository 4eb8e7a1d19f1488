"""
Resolve canonical contact fields to column indices from header labels.
"""
import logging
from typing import Dict, Optional, Sequence

from contact_import.domain.imports.errors import NoNameColumnError
from contact_import.domain.imports.vocabulary import CANONICAL_FIELDS, DEFAULT_VOCABULARY, ImportVocabulary

logger = logging.getLogger(__name__)

MANDATORY_FIELD = "name"


def find_field_column(
    labels: Sequence[str],
    aliases: Sequence[str],
    exclusions: Sequence[str] = (),
) -> int:
    """Index of the first label containing any alias and no exclusion, or -1."""
    for index, label in enumerate(labels):
        if any(excluded in label for excluded in exclusions):
            continue
        if any(alias in label for alias in aliases):
            return index
    return -1


def map_fields(
    header_labels: Sequence[str],
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
    *,
    require_name: bool = True,
) -> Dict[str, int]:
    """
    Map every canonical field to the index of its column (-1 when absent).

    Labels are compared lowercased and stripped, using substring matches
    against the vocabulary's alias table.

    Raises:
        NoNameColumnError: ``name`` could not be resolved and ``require_name`` is set.
    """
    labels = [(label or "").strip().lower() for label in header_labels]
    indices: Dict[str, int] = {}
    for field_name in CANONICAL_FIELDS:
        indices[field_name] = find_field_column(
            labels,
            vocabulary.aliases.get(field_name, ()),
            vocabulary.alias_exclusions.get(field_name, ()),
        )

    if require_name and indices[MANDATORY_FIELD] == -1:
        raise NoNameColumnError(header_labels)

    mapped = {name: index for name, index in indices.items() if index >= 0}
    logger.info(f"Mapped fields to columns: {mapped}")
    return indices


def describe_mapping(indices: Dict[str, int], header_labels: Sequence[str]) -> Dict[str, Optional[str]]:
    """Field -> original header label, for previews shown to the operator."""
    return {
        field_name: (header_labels[index] if 0 <= index < len(header_labels) else None)
        for field_name, index in indices.items()
    }
