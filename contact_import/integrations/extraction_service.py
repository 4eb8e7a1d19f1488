"""
Client for the remote document table-extraction service.

The service receives the uploaded document and answers ``{"data": [[...]]}``
with the extracted grid, or ``{"error": "..."}``.
"""
import logging
from typing import Optional

import requests

from contact_import.core.config import settings
from contact_import.domain.imports.processors.document_extractor import (
    DocumentExtractor,
    ExtractionResponse,
    LocalDocumentExtractor,
)

logger = logging.getLogger(__name__)


class RemoteTableExtractor:
    def __init__(
        self,
        url: str,
        *,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout or settings.extraction_timeout_seconds
        self.session = session or requests.Session()

    def extract(self, filename: str, content: bytes) -> ExtractionResponse:
        logger.info(f"Sending '{filename}' ({len(content)} bytes) to extraction service")
        try:
            response = self.session.post(
                self.url,
                files={"file": (filename, content)},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Extraction service unreachable: {e}")
            return {"error": f"Extraction service unavailable: {e}"}

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            return {"error": f"Extraction service returned an invalid response ({response.status_code})"}
        if response.status_code >= 400 and not payload.get("error"):
            return {"error": f"Extraction service failed with status {response.status_code}"}
        return payload


def build_document_extractor(url: Optional[str] = None) -> DocumentExtractor:
    """Remote extractor when a service URL is configured, local PDF/text extraction otherwise."""
    service_url = settings.extraction_service_url if url is None else url
    if service_url:
        return RemoteTableExtractor(service_url)
    return LocalDocumentExtractor()
