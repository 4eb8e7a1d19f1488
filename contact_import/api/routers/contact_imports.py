"""
Bulk contact import endpoints: upload preview, confirmation, status and template.
"""
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from contact_import.api.dependencies import (
    ensure_within_size_limit,
    get_contact_submitter,
    get_document_extractor,
    get_session_store,
    get_vocabulary,
    require_session,
)
from contact_import.api.schemas.imports import (
    DiscardSessionResponse,
    ImportPreviewResponse,
    ImportResultResponse,
    ImportStatusResponse,
)
from contact_import.core.config import settings
from contact_import.domain.imports.errors import FatalImportError, SessionStateError
from contact_import.domain.imports.executor import ContactSubmitter
from contact_import.domain.imports.field_mapper import describe_mapping
from contact_import.domain.imports.orchestrator import build_import_preview, execute_import
from contact_import.domain.imports.processors.document_extractor import DocumentExtractor
from contact_import.domain.imports.sessions import ImportSessionStore
from contact_import.domain.imports.template import TEMPLATE_MEDIA_TYPES, build_import_template
from contact_import.domain.imports.vocabulary import ImportVocabulary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts/import", tags=["contact-imports"])


@router.get("/template")
def download_import_template(fmt: str = Query("xlsx", alias="format", pattern="^(xlsx|csv)$")):
    """Download the model spreadsheet with the recognized column headers."""
    content = build_import_template(fmt)
    return Response(
        content=content,
        media_type=TEMPLATE_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="modelo_importacao_contatos.{fmt}"'},
    )


@router.post("/preview", response_model=ImportPreviewResponse)
async def preview_import(
    file: UploadFile = File(...),
    store: ImportSessionStore = Depends(get_session_store),
    vocabulary: ImportVocabulary = Depends(get_vocabulary),
    extractor: DocumentExtractor = Depends(get_document_extractor),
):
    """
    Parse an uploaded file into candidate contacts without storing anything.

    Returns the session id to confirm, the candidates and the skipped rows.
    """
    content = await file.read()
    filename = file.filename or ""
    ensure_within_size_limit(len(content), filename)

    try:
        session = build_import_preview(
            filename,
            content,
            vocabulary=vocabulary,
            extractor=extractor,
            document_extensions=settings.document_extensions,
            sample_size=settings.inference_sample_rows,
        )
    except FatalImportError as e:
        logger.warning(f"Import preview failed for '{filename}': {e}")
        raise HTTPException(status_code=400, detail=str(e))

    store.add(session)
    return ImportPreviewResponse.from_session(
        session,
        describe_mapping(session.column_indices, session.header_labels),
    )


@router.post("/{session_id}/confirm", response_model=ImportResultResponse)
def confirm_import(
    session_id: str,
    store: ImportSessionStore = Depends(get_session_store),
    submitter: ContactSubmitter = Depends(get_contact_submitter),
):
    """Submit every previewed candidate; failures are counted, never retried."""
    session = require_session(store, session_id)
    try:
        result = execute_import(session, submitter, concurrency=settings.import_concurrency)
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ImportResultResponse(**result.to_dict())


@router.get("/{session_id}", response_model=ImportStatusResponse)
def get_import_status(session_id: str, store: ImportSessionStore = Depends(get_session_store)):
    session = require_session(store, session_id)
    return ImportStatusResponse(**session.to_status_dict())


@router.delete("/{session_id}", response_model=DiscardSessionResponse)
def discard_import(session_id: str, store: ImportSessionStore = Depends(get_session_store)):
    """Close the import dialog: drop the session and abandon any unconfirmed preview."""
    session = store.discard(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Import session not found")
    return DiscardSessionResponse(session_id=session_id, status=session.status.value)
