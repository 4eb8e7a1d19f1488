"""
Extraction collaborators for document uploads.

An extractor turns a document into ``{"data": [[...], ...]}`` on success or
``{"error": "..."}`` on failure. The remote table-extraction service lives in
``contact_import.integrations.extraction_service``. Without it,
``LocalDocumentExtractor`` reads text-based PDFs with pypdf and plain text
that was already pulled out of a document.
"""
import io
import logging
import re
from typing import Any, Dict, List, Protocol

from pypdf import PdfReader

from contact_import.domain.imports.processors.encoding import decode_text

logger = logging.getLogger(__name__)

ExtractionResponse = Dict[str, Any]

_WIDE_GAP = re.compile(r"\s{2,}")
_PDF_SIGNATURE = b"%PDF"
_BINARY_SIGNATURES = (_PDF_SIGNATURE, b"PK\x03\x04", b"\xd0\xcf\x11\xe0")


class DocumentExtractor(Protocol):
    def extract(self, filename: str, content: bytes) -> ExtractionResponse:
        ...


class TextLayoutExtractor:
    """
    Rebuild table rows from text laid out in columns.

    Each non-blank line becomes a row. Lines containing tabs are split on
    tabs, other lines on runs of two or more spaces; empty cells are dropped.
    """

    min_rows = 2

    def extract(self, filename: str, content: bytes) -> ExtractionResponse:
        if content.startswith(_BINARY_SIGNATURES) or b"\x00" in content[:1024]:
            logger.warning(f"'{filename}' is a binary document; configure an extraction service to read it")
            return {"error": "Binary documents require the table extraction service"}

        rows = [self.split_line(line) for line in decode_text(content).splitlines()]
        rows = [row for row in rows if row]

        if len(rows) < self.min_rows:
            return {"error": "Could not extract tabular data from the document"}

        logger.info(f"Extracted {len(rows)} text rows from '{filename}'")
        return {"data": rows}

    @staticmethod
    def split_line(line: str) -> List[str]:
        if "\t" in line:
            parts = line.split("\t")
        else:
            parts = _WIDE_GAP.split(line)
        return [part.strip() for part in parts if part.strip()]


class PdfTextExtractor:
    """
    Read tables out of text-based PDFs without the remote service.

    pypdf's layout mode keeps the horizontal gaps between cells, so each text
    line can be split the same way ``TextLayoutExtractor`` splits plain text.
    Scanned PDFs (no text layer) produce no rows and are reported as errors.
    """

    min_rows = 2

    def extract(self, filename: str, content: bytes) -> ExtractionResponse:
        try:
            reader = PdfReader(io.BytesIO(content))
            pages = [page.extract_text(extraction_mode="layout") or "" for page in reader.pages]
        except Exception as e:
            logger.warning(f"Could not read PDF '{filename}': {e}")
            return {"error": f"Could not read PDF: {str(e)}"}

        rows = [TextLayoutExtractor.split_line(line) for page in pages for line in page.splitlines()]
        rows = [row for row in rows if row]

        if len(rows) < self.min_rows:
            return {"error": "Could not extract tabular data from the document"}

        logger.info(f"Extracted {len(rows)} text rows from {len(pages)} PDF page(s) in '{filename}'")
        return {"data": rows}


class LocalDocumentExtractor:
    """Default extractor when no service is configured: PDFs via pypdf, anything else as text."""

    def __init__(self):
        self.pdf = PdfTextExtractor()
        self.text = TextLayoutExtractor()

    def extract(self, filename: str, content: bytes) -> ExtractionResponse:
        if content.startswith(_PDF_SIGNATURE) or filename.lower().endswith(".pdf"):
            return self.pdf.extract(filename, content)
        return self.text.extract(filename, content)
