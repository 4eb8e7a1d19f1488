"""
Downloadable model spreadsheet for bulk contact imports.
"""
import csv
import io
from typing import Dict, List, Tuple

import pandas as pd

TEMPLATE_COLUMNS: Tuple[str, ...] = (
    "Nome",
    "Email",
    "Telefone",
    "Idade",
    "Gênero",
    "Estado",
    "Cidade",
    "Interesses",
    "Origem",
    "Observações",
)

TEMPLATE_EXAMPLE_ROW: Tuple[str, ...] = (
    "Maria Souza",
    "maria.souza@exemplo.com",
    "(11) 99999-0000",
    "35",
    "Feminino",
    "SP",
    "São Paulo",
    "Educação; Saúde Pública",
    "Indicação",
    "Conheceu o gabinete em evento no bairro",
)

TEMPLATE_MEDIA_TYPES: Dict[str, str] = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv; charset=utf-8",
}


def _template_frame() -> pd.DataFrame:
    rows: List[Tuple[str, ...]] = [TEMPLATE_EXAMPLE_ROW]
    return pd.DataFrame(rows, columns=list(TEMPLATE_COLUMNS))


def build_import_template(fmt: str = "xlsx") -> bytes:
    """
    Render the import template as ``xlsx`` or ``csv`` bytes.

    The CSV flavour quotes every cell (interests use ";" separators, which the
    reader also treats as a delimiter) and is UTF-8 with a BOM so spreadsheet
    tools keep the accents.
    """
    fmt = (fmt or "").lower()
    df = _template_frame()
    if fmt == "xlsx":
        buffer = io.BytesIO()
        df.to_excel(buffer, index=False, sheet_name="Contatos", engine="openpyxl")
        return buffer.getvalue()
    if fmt == "csv":
        return df.to_csv(index=False, quoting=csv.QUOTE_ALL).encode("utf-8-sig")
    raise ValueError(f"Unsupported template format '{fmt}'. Use 'xlsx' or 'csv'.")
