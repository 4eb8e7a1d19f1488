"""
Persistence boundary: create contacts through the product's contacts API.
"""
import logging
from typing import Optional

import requests

from contact_import.core.config import settings
from contact_import.domain.imports.errors import SubmissionFailedError
from contact_import.domain.imports.models import CandidateRecord

logger = logging.getLogger(__name__)


class HttpContactSubmitter:
    """
    POST one candidate per call to the contacts endpoint.

    Raises ``SubmissionFailedError`` for transport errors and non-2xx
    responses so the executor can tally the failure.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        token: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or settings.contacts_api_url
        self.token = token if token is not None else settings.contacts_api_token
        self.timeout = timeout or settings.submission_timeout_seconds
        self.session = session or requests.Session()

    def _headers(self):
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def __call__(self, record: CandidateRecord) -> dict:
        try:
            response = self.session.post(
                self.url,
                json=record.to_payload(),
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SubmissionFailedError(f"Could not reach contacts API: {e}")

        if response.status_code >= 400:
            detail = _error_detail(response)
            raise SubmissionFailedError(
                f"Contacts API rejected '{record.name}' ({response.status_code}): {detail}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError:
            return {}


def _error_detail(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(payload, dict):
        return str(payload.get("error") or payload.get("detail") or payload)
    return str(payload)
