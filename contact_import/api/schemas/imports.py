from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from contact_import.domain.imports.models import CandidateRecord, ImportSession


class ImportPreviewResponse(BaseModel):
    """Preview of an uploaded file, shown to the operator before confirmation."""
    success: bool = True
    session_id: str
    filename: str
    has_header: bool
    header_labels: List[str]
    column_mapping: Dict[str, Optional[str]]
    inferred_roles: Optional[Dict[int, str]] = None
    data_rows: int
    preview: List[CandidateRecord]
    errors: List[str] = Field(default_factory=list)

    @classmethod
    def from_session(cls, session: ImportSession, column_mapping: Dict[str, Optional[str]]) -> "ImportPreviewResponse":
        return cls(
            session_id=session.id,
            filename=session.filename,
            has_header=session.has_header,
            header_labels=session.header_labels,
            column_mapping=column_mapping,
            inferred_roles=(
                {column: role.value for column, role in session.column_roles.items()}
                if session.column_roles is not None
                else None
            ),
            data_rows=session.data_row_count,
            preview=session.preview,
            errors=session.error_messages(),
        )


class ImportResultResponse(BaseModel):
    success: int
    errors: int


class ImportStatusResponse(BaseModel):
    session_id: str
    status: str
    progress: int
    result: Optional[ImportResultResponse] = None


class DiscardSessionResponse(BaseModel):
    success: bool = True
    session_id: str
    status: str
