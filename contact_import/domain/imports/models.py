from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from contact_import.domain.imports.errors import SessionStateError
from contact_import.domain.imports.vocabulary import DEFAULT_SOURCE

RawGrid = List[List[str]]


class ColumnRole(str, Enum):
    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    AGE = "age"
    GENDER = "gender"
    STATE = "state"
    CITY = "city"
    INTERESTS = "interests"
    SOURCE = "source"
    NOTES = "notes"
    UNKNOWN = "unknown"


class CandidateRecord(BaseModel):
    """A normalized contact draft awaiting operator confirmation."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    age: Optional[int] = Field(default=None, gt=0, lt=150)
    gender: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    interests: Optional[List[str]] = None
    source: str = DEFAULT_SOURCE
    notes: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for the persistence API, leaving out absent fields."""
        return self.model_dump(exclude_none=True)


@dataclass(frozen=True)
class ImportRowError:
    """A data row that did not become a candidate record."""
    row_number: int
    reason: str

    def __str__(self) -> str:
        return f"Row {self.row_number}: {self.reason}"


@dataclass
class ImportResult:
    success: int = 0
    errors: int = 0

    @property
    def total(self) -> int:
        return self.success + self.errors

    def to_dict(self) -> Dict[str, int]:
        return {"success": self.success, "errors": self.errors}


class SessionStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class ImportSession:
    """
    Transient state of one upload, from preview to execution.

    Created by ``build_import_preview`` and discarded once the operator closes
    the import dialog. The preview is consumed at most once.
    """
    filename: str
    grid: RawGrid
    has_header: bool
    header_labels: List[str]
    column_indices: Dict[str, int]
    preview: List[CandidateRecord]
    errors: List[ImportRowError]
    data_row_count: int
    column_roles: Optional[Dict[int, ColumnRole]] = None
    progress: int = 0
    result: Optional[ImportResult] = None
    status: SessionStatus = SessionStatus.PENDING
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    _state_lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def error_messages(self) -> List[str]:
        return [str(error) for error in self.errors]

    def begin_execution(self) -> List[CandidateRecord]:
        """Move the session to RUNNING and hand over its preview exactly once."""
        with self._state_lock:
            if self.status is not SessionStatus.PENDING:
                raise SessionStateError(
                    f"Import session {self.id} cannot be confirmed while {self.status.value}"
                )
            self.status = SessionStatus.RUNNING
            self.progress = 0
            return list(self.preview)

    def finish_execution(self, result: ImportResult) -> None:
        with self._state_lock:
            self.result = result
            self.progress = 100
            self.status = SessionStatus.COMPLETED

    def cancel(self) -> None:
        """Abandon the preview; a running import keeps going to completion."""
        with self._state_lock:
            if self.status is SessionStatus.PENDING:
                self.status = SessionStatus.CANCELLED
                self.preview = []

    def to_status_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.id,
            "status": self.status.value,
            "progress": self.progress,
            "result": self.result.to_dict() if self.result else None,
        }
