"""
Exporter: XLSFormDocument -> ordered sheets -> xlsx bytes.

Sheet order is fixed:
    survey    always
    choices   only when there is at least one choice row
    settings  always, exactly one data row
"""

import logging
import os
from typing import List, Union

from formgrid.backends.xlsx import NamedSheet, write_workbook
from formgrid.flatten import flatten_choices, flatten_settings, flatten_tree
from formgrid.model import XLSFormDocument
from formgrid.sheets import rows_to_sheet


logger = logging.getLogger(__name__)

SURVEY_SHEET = "survey"
CHOICES_SHEET = "choices"
SETTINGS_SHEET = "settings"


def build_sheets(doc: XLSFormDocument) -> List[NamedSheet]:
    """Flatten every part of the document into its named sheet, in order."""
    survey_rows = flatten_tree(doc.survey, doc.languages).rows
    choice_rows = flatten_choices(doc.choices, doc.languages)
    settings_rows = flatten_settings(doc.settings)

    sheets = [(SURVEY_SHEET, rows_to_sheet(survey_rows))]
    if choice_rows:
        sheets.append((CHOICES_SHEET, rows_to_sheet(choice_rows)))
    sheets.append((SETTINGS_SHEET, rows_to_sheet(settings_rows)))
    return sheets


def export_to_xlsx(doc: XLSFormDocument) -> bytes:
    """
    Export a document as an XLSForm workbook.

    Returns:
        xlsx bytes with sheets survey, [choices,] settings
    """
    sheets = build_sheets(doc)
    logger.info(
        "Exporting form '%s': %s",
        doc.settings.form_id,
        ", ".join(f"{name}={len(sheet.rows)} rows" for name, sheet in sheets),
    )
    return write_workbook(sheets)


def save_xlsx(doc: XLSFormDocument, path: Union[str, "os.PathLike[str]"]) -> None:
    """Export a document and write the workbook to `path`."""
    data = export_to_xlsx(doc)
    with open(path, "wb") as f:
        f.write(data)
    logger.info("Wrote %s (%d bytes)", path, len(data))


__all__ = [
    "SURVEY_SHEET",
    "CHOICES_SHEET",
    "SETTINGS_SHEET",
    "build_sheets",
    "export_to_xlsx",
    "save_xlsx",
]
