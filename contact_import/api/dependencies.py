"""
Shared dependencies for the API routers.

Collaborators are resolved through FastAPI dependencies so tests can swap
them with ``app.dependency_overrides``.
"""
from fastapi import HTTPException

from contact_import.core.config import settings
from contact_import.domain.imports.executor import ContactSubmitter
from contact_import.domain.imports.models import ImportSession
from contact_import.domain.imports.processors.document_extractor import DocumentExtractor
from contact_import.domain.imports.sessions import ImportSessionStore, session_store
from contact_import.domain.imports.vocabulary import DEFAULT_VOCABULARY, ImportVocabulary
from contact_import.integrations.contacts_api import HttpContactSubmitter
from contact_import.integrations.extraction_service import build_document_extractor

MAX_UPLOAD_BYTES = settings.upload_max_file_size_mb * 1024 * 1024


def get_session_store() -> ImportSessionStore:
    return session_store


def get_vocabulary() -> ImportVocabulary:
    return DEFAULT_VOCABULARY


def get_document_extractor() -> DocumentExtractor:
    return build_document_extractor()


def get_contact_submitter() -> ContactSubmitter:
    return HttpContactSubmitter()


def ensure_within_size_limit(file_size: int, file_name: str) -> None:
    """Raise an HTTPException if a file exceeds the configured upload limit."""
    if file_size > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=(
                f"{file_name} is too large. "
                f"Maximum allowed upload size is {settings.upload_max_file_size_mb}MB."
            ),
        )


def require_session(store: ImportSessionStore, session_id: str) -> ImportSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Import session not found")
    return session
