"""
Tests for serialization and deserialization of form documents.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `formgrid.serialization`.
"""

from io import BytesIO

import pytest
from openpyxl import load_workbook

from formgrid.examples import build_field_survey
from formgrid.exporter import export_to_xlsx
from formgrid.model import FormSettings, SurveyNode, XLSFormDocument
from formgrid.serialization import (
    document_from_dict,
    document_from_json,
    document_from_yaml,
    document_to_dict,
    document_to_json,
    document_to_yaml,
    dump_document,
    load_document,
    node_from_dict,
    node_to_dict,
)


def test_dict_uses_document_keys():
    d = document_to_dict(build_field_survey())
    age = d["survey"][1]
    assert age["constraintMessage"]["English (en)"] == "Age must be between 1 and 149"
    region = d["survey"][2]["children"][1]
    assert region["listName"] == "regions"
    assert d["choices"][0]["listName"] == "regions"
    assert d["settings"]["formId"] == "field_survey_v1"
    assert d["settings"]["defaultLanguage"] == "English (en)"


def test_absent_fields_omitted():
    d = node_to_dict(SurveyNode(id="q1", type="text", name="q", label="Q?"))
    assert d == {"id": "q1", "type": "text", "name": "q", "label": "Q?"}


def test_leaf_and_empty_container_distinguished():
    leaf = node_from_dict({"id": "a", "type": "text", "name": "a"})
    group = node_from_dict({"id": "g", "type": "group", "name": "g", "children": []})
    assert leaf.children is None
    assert group.children == []


def test_unknown_key_rejected():
    with pytest.raises(TypeError):
        node_from_dict({"id": "a", "type": "text", "name": "a", "colour": "red"})


def test_dict_roundtrip():
    doc = build_field_survey()
    assert document_from_dict(document_to_dict(doc)) == doc


def test_json_roundtrip():
    doc = build_field_survey()
    before = document_to_dict(doc)
    restored = document_from_json(document_to_json(doc))
    assert document_to_dict(restored) == before


def test_yaml_roundtrip():
    doc = build_field_survey()
    before = document_to_dict(doc)
    restored = document_from_yaml(document_to_yaml(doc))
    assert document_to_dict(restored) == before


def test_roundtrip_keeps_extra():
    doc = XLSFormDocument(
        survey=[SurveyNode(id="q1", type="geopoint", name="gps",
                           extra={"body::accuracyThreshold": "10"})],
        settings=FormSettings(form_title="T", form_id="t",
                              extra={"instance_name": "concat('x')"}),
    )
    assert document_from_yaml(document_to_yaml(doc)) == doc


@pytest.mark.parametrize("filename", ["form.json", "form.yaml", "form.yml"])
def test_file_roundtrip(tmp_path, filename):
    doc = build_field_survey()
    path = tmp_path / filename
    dump_document(doc, path)
    assert load_document(path) == doc


def test_unsupported_extension(tmp_path):
    with pytest.raises(ValueError):
        dump_document(build_field_survey(), tmp_path / "form.txt")


YES_NO_YAML = """
survey:
- id: q1
  type: select_one
  name: consent
  label: Consent?
  required: yes
  listName: yn
choices:
- listName: yn
  choices:
  - name: yes
    label:
      English: Yes
  - name: no
    label: No
settings:
  formTitle: Consent
  formId: consent
  version: 2026-02-02
languages:
- English
"""


def test_yaml_scalars_load_as_text():
    doc = document_from_yaml(YES_NO_YAML)
    assert doc.survey[0].required == "yes"
    assert doc.settings.version == "2026-02-02"
    choices = doc.get_choice_list("yn").choices
    assert [c.name for c in choices] == ["yes", "no"]
    assert choices[0].label == {"English": "yes"}
    assert choices[1].label == "no"


def test_yaml_yes_no_list_exports():
    workbook = load_workbook(BytesIO(export_to_xlsx(document_from_yaml(YES_NO_YAML))))
    cells = [
        cell.value
        for sheet in workbook.worksheets
        for row in sheet.iter_rows()
        for cell in row
    ]
    assert all(value is None or isinstance(value, str) for value in cells)
    assert {"yes", "no", "2026-02-02"} <= set(cells)


def test_list_value_rejected():
    with pytest.raises(TypeError):
        node_from_dict({"id": "q1", "type": "text", "name": "q", "label": ["a", "b"]})
