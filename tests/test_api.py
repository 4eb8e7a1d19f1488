import pytest
from fastapi.testclient import TestClient

from contact_import.api import dependencies
from contact_import.api.dependencies import get_contact_submitter, get_document_extractor, get_session_store
from contact_import.domain.imports.processors.document_extractor import LocalDocumentExtractor
from contact_import.domain.imports.sessions import ImportSessionStore
from contact_import.main import app
from tests.utils.fakes import StubExtractor

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture
def store():
    return ImportSessionStore()


@pytest.fixture
def client(store, submitter):
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[get_contact_submitter] = lambda: submitter
    app.dependency_overrides[get_document_extractor] = LocalDocumentExtractor
    yield TestClient(app)
    app.dependency_overrides.clear()


def upload(client, filename, content):
    return client.post("/contacts/import/preview", files={"file": (filename, content, "application/octet-stream")})


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Contact Import API", "version": "0.1.0"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_download_xlsx_template(client):
    response = client.get("/contacts/import/template")
    assert response.status_code == 200
    assert response.headers["content-type"] == XLSX_MEDIA_TYPE
    assert "modelo_importacao_contatos.xlsx" in response.headers["content-disposition"]
    assert response.content[:2] == b"PK"


def test_download_csv_template(client):
    response = client.get("/contacts/import/template", params={"format": "csv"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.content.decode("utf-8-sig").startswith('"Nome","Email","Telefone"')


def test_unknown_template_format_is_rejected(client):
    response = client.get("/contacts/import/template", params={"format": "pdf"})
    assert response.status_code == 422


def test_preview_headered_csv(client, store, make_csv):
    content = make_csv(["Nome,Email,Telefone", "joão silva,joao@x.com,11999990000", ",x@x.com,"])

    response = upload(client, "contatos.csv", content)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["has_header"] is True
    assert data["data_rows"] == 2
    assert data["inferred_roles"] is None
    assert data["column_mapping"]["name"] == "nome"
    assert data["column_mapping"]["age"] is None
    assert data["preview"][0]["name"] == "João Silva"
    assert data["preview"][0]["source"] == "Importação"
    assert data["errors"] == ["Row 3: empty name, skipped"]
    assert store.get(data["session_id"]) is not None


def test_preview_headerless_csv(client, make_csv):
    content = make_csv(["joão silva,joao@x.com,11999990000", "maria souza,maria@x.com,21988887777"])

    response = upload(client, "contatos.csv", content)

    assert response.status_code == 200
    data = response.json()
    assert data["has_header"] is False
    assert data["header_labels"] == ["nome", "email", "telefone"]
    assert data["inferred_roles"] == {"0": "name", "1": "email", "2": "phone"}
    assert [record["name"] for record in data["preview"]] == ["João Silva", "Maria Souza"]


def test_preview_document_uses_extraction_collaborator(client):
    app.dependency_overrides[get_document_extractor] = lambda: StubExtractor(
        {"data": [["Nome", "Email"], ["ana lima", "ana@x.com"]]}
    )

    response = upload(client, "lista.pdf", b"%PDF-1.4")

    assert response.status_code == 200
    assert response.json()["preview"][0]["name"] == "Ana Lima"


def test_preview_unsupported_format(client, store):
    response = upload(client, "contatos.json", b"[]")

    assert response.status_code == 400
    assert "Unsupported file format" in response.json()["detail"]
    assert len(store) == 0


def test_preview_without_name_column(client, make_csv):
    response = upload(client, "contatos.csv", make_csv(["Email", "a@x.com"]))

    assert response.status_code == 400
    assert "name column" in response.json()["detail"]


def test_preview_header_only(client, make_csv):
    response = upload(client, "contatos.csv", make_csv(["Nome,Email"]))

    assert response.status_code == 400


def test_preview_too_large(client, monkeypatch, make_csv):
    monkeypatch.setattr(dependencies, "MAX_UPLOAD_BYTES", 10)

    response = upload(client, "contatos.csv", make_csv(["Nome,Email", "Ana,a@x.com"]))

    assert response.status_code == 413


def test_confirm_import_and_status(client, submitter, make_csv):
    submitter.fail_names.add("Bia")
    session_id = upload(client, "contatos.csv", make_csv(["Nome", "Ana", "Bia", "Caio"])).json()["session_id"]

    pending = client.get(f"/contacts/import/{session_id}").json()
    assert pending == {"session_id": session_id, "status": "pending", "progress": 0, "result": None}

    response = client.post(f"/contacts/import/{session_id}/confirm")
    assert response.status_code == 200
    assert response.json() == {"success": 2, "errors": 1}
    assert submitter.names == ["Ana", "Bia", "Caio"]

    status = client.get(f"/contacts/import/{session_id}").json()
    assert status["status"] == "completed"
    assert status["progress"] == 100
    assert status["result"] == {"success": 2, "errors": 1}


def test_confirm_twice_is_a_conflict(client, submitter, make_csv):
    session_id = upload(client, "contatos.csv", make_csv(["Nome", "Ana"])).json()["session_id"]

    assert client.post(f"/contacts/import/{session_id}/confirm").status_code == 200
    response = client.post(f"/contacts/import/{session_id}/confirm")

    assert response.status_code == 409
    assert submitter.names == ["Ana"]


def test_unknown_session(client):
    assert client.get("/contacts/import/does-not-exist").status_code == 404
    assert client.post("/contacts/import/does-not-exist/confirm").status_code == 404
    assert client.delete("/contacts/import/does-not-exist").status_code == 404


def test_discarded_session_is_never_submitted(client, submitter, store, make_csv):
    session_id = upload(client, "contatos.csv", make_csv(["Nome", "Ana"])).json()["session_id"]

    response = client.delete(f"/contacts/import/{session_id}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "session_id": session_id, "status": "cancelled"}
    assert len(store) == 0
    assert client.post(f"/contacts/import/{session_id}/confirm").status_code == 404
    assert submitter.submitted == []


def test_preview_text_pdf_with_default_extractor(client, make_pdf):
    content = make_pdf([["Nome", "Email"], ["ana lima", "ana@x.com"]])

    response = upload(client, "lista.pdf", content)

    assert response.status_code == 200
    assert response.json()["preview"][0]["email"] == "ana@x.com"


def test_preview_reports_source_line_of_skipped_rows(client, make_csv):
    content = make_csv(["Nome,Email", "Ana,a@x.com", "", ",b@x.com"])

    response = upload(client, "contatos.csv", content)

    assert response.json()["errors"] == ["Row 4: empty name, skipped"]
