from unittest.mock import MagicMock

import pytest
import requests

from contact_import.domain.imports.errors import SubmissionFailedError
from contact_import.domain.imports.models import CandidateRecord
from contact_import.integrations.contacts_api import HttpContactSubmitter

CONTACTS_URL = "http://contacts.test/api/contacts"


def make_response(status_code, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    if payload is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    response.text = text
    return response


def test_posts_payload_without_empty_fields():
    session = MagicMock()
    session.post.return_value = make_response(201, {"id": 7})
    submitter = HttpContactSubmitter(CONTACTS_URL, token="secret", timeout=5, session=session)

    created = submitter(CandidateRecord(name="Ana Lima", email="ana@x.com"))

    assert created == {"id": 7}
    session.post.assert_called_once_with(
        CONTACTS_URL,
        json={"name": "Ana Lima", "email": "ana@x.com", "source": "Importação"},
        headers={"Content-Type": "application/json", "Authorization": "Bearer secret"},
        timeout=5,
    )


def test_no_authorization_header_without_token():
    session = MagicMock()
    session.post.return_value = make_response(201, {"id": 1})
    submitter = HttpContactSubmitter(CONTACTS_URL, token="", session=session)

    submitter(CandidateRecord(name="Ana"))

    headers = session.post.call_args.kwargs["headers"]
    assert "Authorization" not in headers


def test_rejected_record_raises_with_status():
    session = MagicMock()
    session.post.return_value = make_response(422, {"error": "email already registered"})
    submitter = HttpContactSubmitter(CONTACTS_URL, token="", session=session)

    with pytest.raises(SubmissionFailedError) as exc_info:
        submitter(CandidateRecord(name="Ana"))

    assert exc_info.value.status_code == 422
    assert "email already registered" in str(exc_info.value)


def test_non_json_error_body_is_reported():
    session = MagicMock()
    session.post.return_value = make_response(502, text="Bad Gateway")
    submitter = HttpContactSubmitter(CONTACTS_URL, token="", session=session)

    with pytest.raises(SubmissionFailedError, match="Bad Gateway"):
        submitter(CandidateRecord(name="Ana"))


def test_transport_errors_raise_submission_failed():
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("refused")
    submitter = HttpContactSubmitter(CONTACTS_URL, token="", session=session)

    with pytest.raises(SubmissionFailedError, match="Could not reach contacts API"):
        submitter(CandidateRecord(name="Ana"))


def test_empty_success_body():
    session = MagicMock()
    session.post.return_value = make_response(204)
    submitter = HttpContactSubmitter(CONTACTS_URL, token="", session=session)

    assert submitter(CandidateRecord(name="Ana")) == {}
