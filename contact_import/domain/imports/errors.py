"""
Exceptions raised by the contact import pipeline.

Fatal errors stop an upload before any row-level work starts. Row skips are
not exceptions; they are recorded as ``ImportRowError`` entries on the
session.
"""


class ContactImportError(Exception):
    """Base exception for contact import operations."""
    pass


class FatalImportError(ContactImportError):
    """Raised when an upload cannot produce a preview at all."""
    pass


class UnsupportedFormatError(FatalImportError):
    """Raised when the file extension is not one the reader understands."""

    def __init__(self, filename: str, extension: str):
        self.filename = filename
        self.extension = extension
        label = f".{extension}" if extension else "(no extension)"
        super().__init__(f"Unsupported file format {label} for '{filename}'")


class EmptyContentError(FatalImportError):
    """Raised when no data rows remain after header handling."""

    def __init__(self, message: str = "The file does not contain any data rows"):
        super().__init__(message)


class UnsupportedContentError(FatalImportError):
    """Raised when extraction fails or the decoded grid is unusable."""
    pass


class NoNameColumnError(FatalImportError):
    """Raised when no column can be mapped to the mandatory name field."""

    def __init__(self, header_labels=None):
        self.header_labels = list(header_labels or [])
        super().__init__(
            "Could not find a name column. Add a header such as 'Nome' or 'Name' "
            f"(headers found: {', '.join(self.header_labels) or 'none'})"
        )


class SubmissionFailedError(ContactImportError):
    """Raised by a submitter when the persistence API rejects one record."""

    def __init__(self, message: str, status_code=None):
        self.status_code = status_code
        super().__init__(message)


class SessionStateError(ContactImportError):
    """Raised when a session is confirmed twice or after being cancelled."""
    pass
