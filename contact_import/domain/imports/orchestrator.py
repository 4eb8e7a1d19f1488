"""
End-to-end import flow: file -> preview session -> confirmed execution.

``build_import_preview`` is synchronous and pure over the uploaded bytes;
nothing reaches the persistence API until ``execute_import`` is called for a
session the operator confirmed.
"""
import logging
from typing import Optional, Sequence

from contact_import.domain.imports.column_inference import DEFAULT_SAMPLE_SIZE, infer_column_roles, synthesize_header_labels
from contact_import.domain.imports.executor import ContactSubmitter, ImportExecutor
from contact_import.domain.imports.field_mapper import map_fields
from contact_import.domain.imports.header_classifier import classify_header
from contact_import.domain.imports.models import ImportResult, ImportSession
from contact_import.domain.imports.normalizer import normalize_rows
from contact_import.domain.imports.processors.document_extractor import DocumentExtractor
from contact_import.domain.imports.processors.grid_reader import DEFAULT_DOCUMENT_EXTENSIONS, read_numbered_grid
from contact_import.domain.imports.vocabulary import DEFAULT_VOCABULARY, ImportVocabulary

logger = logging.getLogger(__name__)


def build_import_preview(
    filename: str,
    content: bytes,
    *,
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
    extractor: Optional[DocumentExtractor] = None,
    document_extensions: Sequence[str] = DEFAULT_DOCUMENT_EXTENSIONS,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
) -> ImportSession:
    """
    Read, classify, map and normalize an uploaded file into a reviewable session.

    Raises:
        FatalImportError: Any of the fatal conditions (unsupported format or
            content, no data rows, no name column). Row-level problems never
            raise; they are collected on ``session.errors``.
    """
    grid, row_numbers = read_numbered_grid(
        filename,
        content,
        extractor=extractor,
        document_extensions=document_extensions,
    )
    classification = classify_header(grid, vocabulary, row_numbers)

    column_roles = None
    header_labels = classification.header_labels
    if not classification.has_header:
        width = len(grid[0]) if grid else 0
        column_roles = infer_column_roles(classification.data_rows, sample_size=sample_size)
        header_labels = synthesize_header_labels(column_roles, width)

    column_indices = map_fields(header_labels, vocabulary)
    normalized = normalize_rows(
        classification.data_rows,
        header_labels,
        vocabulary=vocabulary,
        first_row_number=classification.first_data_row_number,
        column_indices=column_indices,
        row_numbers=classification.data_row_numbers,
    )

    session = ImportSession(
        filename=filename,
        grid=grid,
        has_header=classification.has_header,
        header_labels=list(header_labels),
        column_indices=column_indices,
        column_roles=column_roles,
        preview=normalized.preview,
        errors=normalized.errors,
        data_row_count=len(classification.data_rows),
    )
    logger.info(
        f"Prepared import session {session.id} for '{filename}': "
        f"{len(session.preview)} candidates, {len(session.errors)} skipped rows"
    )
    return session


def execute_import(
    session: ImportSession,
    submitter: ContactSubmitter,
    *,
    concurrency: int = 1,
) -> ImportResult:
    """
    Submit a confirmed session's preview, updating ``session.progress`` as it goes.

    Raises:
        SessionStateError: The session was already executed or cancelled.
    """
    records = session.begin_execution()

    def _track(progress: int) -> None:
        session.progress = progress

    executor = ImportExecutor(submitter, concurrency=concurrency, progress_callback=_track)
    result = executor.run(records)
    session.finish_execution(result)
    return result
