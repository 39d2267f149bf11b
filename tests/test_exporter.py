"""
Tests for the exporter (document -> xlsx workbook).

Workbooks are read back with openpyxl to check sheet order and contents.
"""

from io import BytesIO

import pytest
from openpyxl import load_workbook

from formgrid.exporter import build_sheets, export_to_xlsx, save_xlsx
from formgrid.model import (
    Choice,
    ChoiceList,
    FormSettings,
    SurveyNode,
    XLSFormDocument,
)


def make_doc(**overrides) -> XLSFormDocument:
    values = dict(
        survey=[SurveyNode(id="q1", type="text", name="name", label="Name?")],
        choices=[],
        settings=FormSettings(form_title="Test", form_id="test"),
        languages=[],
    )
    values.update(overrides)
    return XLSFormDocument(**values)


def read_back(data: bytes):
    return load_workbook(BytesIO(data))


def sheet_records(ws):
    """Worksheet -> list of dicts keyed by the header row."""
    lines = list(ws.iter_rows(values_only=True))
    headers = lines[0]
    return [
        {h: v for h, v in zip(headers, line) if v is not None}
        for line in lines[1:]
    ]


class TestBuildSheets:
    def test_without_choices(self):
        assert [name for name, _ in build_sheets(make_doc())] == ["survey", "settings"]

    def test_with_choices(self):
        doc = make_doc(choices=[
            ChoiceList(list_name="c", choices=[Choice(name="a", label="A")]),
        ])
        assert [name for name, _ in build_sheets(doc)] == ["survey", "choices", "settings"]

    def test_choice_lists_without_choices_suppress_sheet(self):
        doc = make_doc(choices=[ChoiceList(list_name="empty")])
        assert [name for name, _ in build_sheets(doc)] == ["survey", "settings"]

    def test_settings_has_one_row(self):
        sheets = dict(build_sheets(make_doc()))
        assert sheets["settings"].headers == ["form_title", "form_id"]
        assert sheets["settings"].rows == [["Test", "test"]]

    def test_empty_survey(self):
        sheets = dict(build_sheets(make_doc(survey=[])))
        assert sheets["survey"].is_empty


class TestExportToXlsx:
    def test_produces_workbook_bytes(self):
        data = export_to_xlsx(make_doc())
        assert isinstance(data, bytes)
        assert data[:2] == b"PK"

    def test_sheet_names_without_choices(self):
        wb = read_back(export_to_xlsx(make_doc()))
        assert wb.sheetnames == ["survey", "settings"]

    def test_sheet_order_with_choices(self):
        doc = make_doc(choices=[
            ChoiceList(list_name="c", choices=[Choice(name="a", label="A")]),
        ])
        wb = read_back(export_to_xlsx(doc))
        assert wb.sheetnames == ["survey", "choices", "settings"]

    def test_survey_content(self):
        wb = read_back(export_to_xlsx(make_doc()))
        assert sheet_records(wb["survey"]) == [
            {"type": "text", "name": "name", "label": "Name?"},
        ]

    def test_choices_content(self):
        doc = make_doc(
            survey=[SurveyNode(id="q1", type="select_one", name="confirm",
                               label="Confirm?", list_name="yesno")],
            choices=[ChoiceList(list_name="yesno", choices=[
                Choice(name="yes", label="Yes"),
                Choice(name="no", label="No"),
            ])],
        )
        wb = read_back(export_to_xlsx(doc))
        assert sheet_records(wb["survey"])[0]["type"] == "select_one yesno"
        records = sheet_records(wb["choices"])
        assert len(records) == 2
        assert records[0] == {"list_name": "yesno", "name": "yes", "label": "Yes"}

    def test_settings_content(self):
        doc = make_doc(settings=FormSettings(form_title="My Form", form_id="my_form",
                                             version="2024"))
        wb = read_back(export_to_xlsx(doc))
        assert sheet_records(wb["settings"]) == [
            {"form_title": "My Form", "form_id": "my_form", "version": "2024"},
        ]

    def test_multi_language(self):
        doc = make_doc(
            survey=[SurveyNode(id="q1", type="text", name="name",
                               label={"English": "Name?", "French": "Nom?"})],
            choices=[ChoiceList(list_name="yesno", choices=[
                Choice(name="yes", label={"English": "Yes", "French": "Oui"}),
            ])],
            languages=["English", "French"],
        )
        wb = read_back(export_to_xlsx(doc))
        survey = sheet_records(wb["survey"])[0]
        assert survey["label::English"] == "Name?"
        assert survey["label::French"] == "Nom?"
        choice = sheet_records(wb["choices"])[0]
        assert choice["label::English"] == "Yes"
        assert choice["label::French"] == "Oui"

    def test_missing_cells_left_blank(self):
        doc = make_doc(survey=[
            SurveyNode(id="q1", type="text", name="a", label="A"),
            SurveyNode(id="q2", type="integer", name="b", label="B", required="yes"),
        ])
        ws = read_back(export_to_xlsx(doc))["survey"]
        lines = list(ws.iter_rows(values_only=True))
        assert lines[0] == ("type", "name", "label", "required")
        assert lines[1] == ("text", "a", "A", None)

    def test_leading_equals_kept_as_text(self):
        doc = make_doc(survey=[
            SurveyNode(id="q1", type="note", name="n", label="=not a formula"),
        ])
        ws = read_back(export_to_xlsx(doc))["survey"]
        assert ws.cell(row=2, column=3).value == "=not a formula"
        assert ws.cell(row=2, column=3).data_type == "s"


def test_save_xlsx(tmp_path):
    path = tmp_path / "test.xlsx"
    save_xlsx(make_doc(), path)
    assert load_workbook(path).sheetnames == ["survey", "settings"]
