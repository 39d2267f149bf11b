"""
Tests for the Form Analyzer.

Tests verify that the analyzer correctly:
    - Inventories nodes, containers and depth
    - Detects unknown types and duplicate sibling names
    - Checks choice list references
    - Reports undeclared and missing translations
"""

from formgrid.analyzer import analyze_document
from formgrid.examples import build_field_survey
from formgrid.model import (
    Choice,
    ChoiceList,
    FormSettings,
    SurveyNode,
    XLSFormDocument,
)


def make_doc(survey, choices=None, languages=None):
    return XLSFormDocument(
        survey=survey,
        choices=choices or [],
        settings=FormSettings(form_title="T", form_id="t"),
        languages=languages or [],
    )


def test_field_survey_is_valid():
    report = analyze_document(build_field_survey())
    assert report.is_valid
    assert report.total_nodes == 7
    assert report.total_groups == 1
    assert report.total_questions == 6
    assert report.max_depth == 2
    assert report.total_choice_lists == 2
    assert report.total_choices == 7
    assert report.types_used["select_one"] == 1
    assert report.warnings == []


def test_unknown_type():
    report = analyze_document(make_doc([SurveyNode(id="q1", type="txt", name="q")]))
    assert "txt" in report.unknown_types
    assert not report.is_valid
    assert len(report.warnings) > 0


def test_implicit_types_are_known():
    report = analyze_document(make_doc([SurveyNode(id="s", type="start", name="start")]))
    assert report.unknown_types == set()


def test_duplicate_sibling_names():
    survey = [
        SurveyNode(id="q1", type="text", name="a"),
        SurveyNode(id="q2", type="text", name="a"),
        SurveyNode(id="g1", type="group", name="g", children=[
            SurveyNode(id="q3", type="text", name="a"),
        ]),
    ]
    report = analyze_document(make_doc(survey))
    assert report.duplicate_names == {"a"}
    assert not report.is_valid


def test_same_name_in_different_containers_is_fine():
    survey = [
        SurveyNode(id="g1", type="group", name="g1", children=[
            SurveyNode(id="q1", type="text", name="a"),
        ]),
        SurveyNode(id="g2", type="group", name="g2", children=[
            SurveyNode(id="q2", type="text", name="a"),
        ]),
    ]
    assert analyze_document(make_doc(survey)).duplicate_names == set()


def test_choice_list_references():
    survey = [
        SurveyNode(id="q1", type="select_one", name="a", list_name="missing"),
        SurveyNode(id="q2", type="select_multiple", name="b"),
    ]
    choices = [ChoiceList(list_name="unused", choices=[Choice(name="x", label="X")])]
    report = analyze_document(make_doc(survey, choices))
    assert report.missing_choice_lists == {"missing"}
    assert report.selects_without_list == ["b"]
    assert report.unused_choice_lists == {"unused"}
    assert not report.is_valid


def test_select_type_suffix_resolves_list():
    survey = [SurveyNode(id="q1", type="select_one", name="a", list_name="yn or_other")]
    choices = [ChoiceList(list_name="yn", choices=[Choice(name="yes", label="Yes")])]
    report = analyze_document(make_doc(survey, choices))
    assert report.missing_choice_lists == set()
    assert report.unused_choice_lists == set()
    assert report.is_valid


def test_translations():
    survey = [SurveyNode(id="q1", type="text", name="q",
                         label={"English": "Q", "German": "F"})]
    choices = [ChoiceList(list_name="l", choices=[
        Choice(name="x", label={"Klingon": "x"}),
    ])]
    report = analyze_document(make_doc(survey, choices, languages=["English", "French"]))
    assert report.undeclared_languages == {"German", "Klingon"}
    assert report.missing_translations == [("q", "label", "French")]
    assert report.is_valid


def test_children_on_non_container_type():
    survey = [SurveyNode(id="n", type="note", name="n", children=[])]
    report = analyze_document(make_doc(survey))
    assert report.non_container_children == ["n"]


def test_does_not_modify_document():
    doc = build_field_survey()
    analyze_document(doc)
    assert doc == build_field_survey()
