import pytest

from contact_import.domain.imports.errors import (
    EmptyContentError,
    NoNameColumnError,
    SessionStateError,
    UnsupportedContentError,
    UnsupportedFormatError,
)
from contact_import.domain.imports.models import ColumnRole, SessionStatus
from contact_import.domain.imports.orchestrator import build_import_preview, execute_import
from contact_import.domain.imports.template import build_import_template
from tests.utils.fakes import RecordingSubmitter, StubExtractor


def test_headered_csv_preview(make_csv):
    content = make_csv(["Nome,Email,Telefone", "joão silva,joao@x.com,11999990000"])

    session = build_import_preview("contatos.csv", content)

    assert session.has_header is True
    assert session.header_labels == ["nome", "email", "telefone"]
    assert session.column_roles is None
    assert session.data_row_count == 1
    assert session.errors == []
    assert session.status is SessionStatus.PENDING
    assert [record.to_payload() for record in session.preview] == [
        {"name": "João Silva", "email": "joao@x.com", "phone": "11999990000", "source": "Importação"}
    ]


def test_headerless_csv_preview(make_csv):
    content = make_csv([
        "joão silva,joao@x.com,11999990000",
        "maria souza,maria@x.com,21988887777",
    ])

    session = build_import_preview("contatos.csv", content)

    assert session.has_header is False
    assert session.column_roles == {0: ColumnRole.NAME, 1: ColumnRole.EMAIL, 2: ColumnRole.PHONE}
    assert session.header_labels == ["nome", "email", "telefone"]
    assert [record.name for record in session.preview] == ["João Silva", "Maria Souza"]
    assert session.preview[1].phone == "21988887777"


def test_headerless_unknown_columns_get_numbered_labels(make_csv):
    content = make_csv(["Ana Lima,a@x.com,42", "Bia Reis,b@x.com,37"])

    session = build_import_preview("contatos.csv", content)

    assert session.header_labels == ["nome", "email", "coluna3"]
    assert session.preview[0].age is None


def test_rows_without_name_are_reported(make_csv):
    content = make_csv(["Nome,Email", "Ana,a@x.com", ",b@x.com", "Bia,"])

    session = build_import_preview("contatos.csv", content)

    assert [record.name for record in session.preview] == ["Ana", "Bia"]
    assert session.error_messages() == ["Row 3: empty name, skipped"]
    assert session.data_row_count == 3


def test_headerless_row_numbers_start_at_one(make_csv):
    content = make_csv(["Ana Lima,a@x.com", ",b@x.com", "Bia Reis,c@x.com"])

    session = build_import_preview("contatos.csv", content)

    assert session.error_messages() == ["Row 2: empty name, skipped"]


def test_unsupported_extension_is_fatal():
    with pytest.raises(UnsupportedFormatError):
        build_import_preview("contatos.json", b"[]")


def test_empty_file_is_fatal():
    with pytest.raises(EmptyContentError):
        build_import_preview("contatos.csv", b"")


def test_header_only_file_is_fatal(make_csv):
    with pytest.raises(EmptyContentError):
        build_import_preview("contatos.csv", make_csv(["Nome,Email"]))


def test_header_without_name_column_is_fatal(make_csv):
    with pytest.raises(NoNameColumnError):
        build_import_preview("contatos.csv", make_csv(["Email,Telefone", "a@x.com,11999990000"]))


def test_headerless_grid_without_any_name_candidate_is_fatal(make_csv):
    content = make_csv(["a@x.com,11999990000", "b@x.com,21988887777"])

    with pytest.raises(NoNameColumnError):
        build_import_preview("contatos.csv", content)


def test_text_document_preview():
    content = "Nome\tEmail\nana lima\tana@x.com\n".encode("utf-8")

    session = build_import_preview("lista.txt", content)

    assert session.preview[0].name == "Ana Lima"
    assert session.preview[0].email == "ana@x.com"


def test_malformed_pdf_is_unsupported_content():
    with pytest.raises(UnsupportedContentError):
        build_import_preview("lista.pdf", b"%PDF-1.4 binary")


def test_pdf_through_extraction_collaborator():
    extractor = StubExtractor({"data": [["Nome", "Cidade"], ["ana", "rio de janeiro"]]})

    session = build_import_preview("lista.pdf", b"%PDF-1.4", extractor=extractor)

    assert session.preview[0].city == "Rio De Janeiro"


def test_xlsx_template_end_to_end():
    session = build_import_preview("modelo.xlsx", build_import_template("xlsx"))

    assert session.has_header is True
    assert session.errors == []
    assert session.preview[0].to_payload() == {
        "name": "Maria Souza",
        "email": "maria.souza@exemplo.com",
        "phone": "(11) 99999-0000",
        "age": 35,
        "gender": "Feminino",
        "state": "SP",
        "city": "São Paulo",
        "interests": ["Educação", "Saúde Pública"],
        "source": "Indicação",
        "notes": "Conheceu o gabinete em evento no bairro",
    }


def test_custom_vocabulary_flows_through(vocabulary, make_csv):
    custom = vocabulary.with_overrides(default_source="Planilha")

    session = build_import_preview("contatos.csv", make_csv(["Nome", "Ana"]), vocabulary=custom)

    assert session.preview[0].source == "Planilha"


def test_execute_import_counts_outcomes_and_tracks_progress(make_csv):
    session = build_import_preview("contatos.csv", make_csv(["Nome", "Ana", "Bia", "Caio"]))
    submitter = RecordingSubmitter(fail_names={"Bia"})

    result = execute_import(session, submitter)

    assert result.to_dict() == {"success": 2, "errors": 1}
    assert submitter.names == ["Ana", "Bia", "Caio"]
    assert session.status is SessionStatus.COMPLETED
    assert session.progress == 100
    assert session.to_status_dict()["result"] == {"success": 2, "errors": 1}


def test_preview_is_consumed_only_once(make_csv):
    session = build_import_preview("contatos.csv", make_csv(["Nome", "Ana"]))
    submitter = RecordingSubmitter()
    execute_import(session, submitter)

    with pytest.raises(SessionStateError):
        execute_import(session, submitter)

    assert submitter.names == ["Ana"]


def test_cancelled_session_cannot_be_executed(make_csv):
    session = build_import_preview("contatos.csv", make_csv(["Nome", "Ana"]))
    session.cancel()
    submitter = RecordingSubmitter()

    with pytest.raises(SessionStateError):
        execute_import(session, submitter)

    assert session.status is SessionStatus.CANCELLED
    assert session.preview == []
    assert submitter.submitted == []


def test_skip_errors_point_at_the_uploaded_line_after_blank_lines(make_csv):
    content = make_csv(["Nome,Email", "Ana,a@x.com", "", ",b@x.com", "", "Bia,c@x.com", ",d@x.com"])

    session = build_import_preview("contatos.csv", content)

    assert [record.name for record in session.preview] == ["Ana", "Bia"]
    assert session.error_messages() == ["Row 4: empty name, skipped", "Row 7: empty name, skipped"]


def test_headerless_skip_errors_after_leading_blank_line(make_csv):
    content = make_csv(["", "Ana Lima,a@x.com", ",b@x.com"])

    session = build_import_preview("contatos.csv", content)

    assert session.error_messages() == ["Row 3: empty name, skipped"]


def test_plural_headers_are_not_imported_as_contacts(make_csv):
    content = make_csv(["Nomes,Emails,Telefones", "Ana Lima,a@x.com,11999990000"])

    session = build_import_preview("contatos.csv", content)

    assert session.has_header is True
    assert [record.name for record in session.preview] == ["Ana Lima"]
    assert session.preview[0].email == "a@x.com"
    assert session.preview[0].phone == "11999990000"


def test_text_pdf_preview_without_extraction_service(make_pdf):
    content = make_pdf([["Nome", "Email"], ["ana lima", "ana@x.com"], ["bia reis", "bia@x.com"]])

    session = build_import_preview("lista.pdf", content)

    assert session.has_header is True
    assert [record.name for record in session.preview] == ["Ana Lima", "Bia Reis"]
    assert session.preview[1].email == "bia@x.com"
