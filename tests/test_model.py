"""
Tests for the form model objects.

These tests verify:
    - Basic model creation and defaults
    - Container detection
    - Document-level lookups
    - Document keys carried in field metadata
"""

from formgrid.model import (
    CONTAINER_TYPES,
    IMPLICIT_TYPES,
    QUESTION_TYPES,
    Choice,
    ChoiceList,
    FormSettings,
    SurveyNode,
    XLSFormDocument,
    iter_document_fields,
)


class TestSurveyNode:
    def test_minimal_node(self):
        node = SurveyNode(id="q1", type="text", name="q")
        assert node.label == ""
        assert node.hint is None
        assert node.children is None
        assert not node.is_container

    def test_container(self):
        node = SurveyNode(id="g1", type="group", name="g", children=[])
        assert node.is_container

    def test_document_keys(self):
        node = SurveyNode(id="q1", type="select_one", name="q", list_name="l",
                          constraint_message="bad", media_image="a.png")
        keys = [key for key, _ in iter_document_fields(node)]
        assert keys == ["id", "type", "name", "label", "constraintMessage",
                        "listName", "mediaImage"]


class TestTypes:
    def test_containers_are_question_types(self):
        assert CONTAINER_TYPES <= QUESTION_TYPES

    def test_implicit_types_disjoint(self):
        assert not (IMPLICIT_TYPES & QUESTION_TYPES)

    def test_date_time_spelling(self):
        assert "dateTime" in QUESTION_TYPES


class TestDocument:
    def make_doc(self):
        return XLSFormDocument(
            survey=[],
            choices=[
                ChoiceList(list_name="yesno", choices=[Choice(name="yes"), Choice(name="no")]),
            ],
            settings=FormSettings(form_title="T", form_id="t"),
        )

    def test_defaults(self):
        doc = XLSFormDocument(survey=[], settings=FormSettings(form_title="T", form_id="t"))
        assert doc.choices == []
        assert doc.languages == []

    def test_get_choice_list(self):
        doc = self.make_doc()
        assert doc.get_choice_list("yesno").list_name == "yesno"
        assert doc.get_choice_list("missing") is None

    def test_settings_fields_skip_none(self):
        settings = FormSettings(form_title="T", form_id="t", style="pages")
        assert dict(iter_document_fields(settings)) == {
            "formTitle": "T", "formId": "t", "style": "pages",
        }
