"""
Pytest configuration and shared fixtures for the contact import tests.

Spreadsheets are built in memory with pandas/openpyxl and the persistence
API is replaced by recording fakes, so the suite needs no network access.
"""
import pytest

from contact_import.domain.imports.vocabulary import DEFAULT_VOCABULARY
from tests.utils.fakes import RecordingSubmitter, build_csv, build_pdf, build_xlsx


@pytest.fixture
def vocabulary():
    return DEFAULT_VOCABULARY


@pytest.fixture
def submitter():
    return RecordingSubmitter()


@pytest.fixture
def make_xlsx():
    return build_xlsx


@pytest.fixture
def make_csv():
    return build_csv


@pytest.fixture
def make_pdf():
    return build_pdf
