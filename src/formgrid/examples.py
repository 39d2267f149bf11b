"""
Example form builder: a bilingual field survey.

Covers the main shapes the converter must handle: plain questions, a
localized constraint message, a group with nested questions, select_one and
select_multiple with choice lists, and a closing note.
"""
from formgrid.model import (
    Choice,
    ChoiceList,
    FormSettings,
    SurveyNode,
    XLSFormDocument,
)


EN = "English (en)"
ES = "Spanish (es)"


def _bilingual(english: str, spanish: str):
    return {EN: english, ES: spanish}


def _choices(list_name: str, options) -> ChoiceList:
    return ChoiceList(
        list_name=list_name,
        choices=[Choice(name=name, label=_bilingual(en, es)) for name, en, es in options],
    )


def build_field_survey() -> XLSFormDocument:
    survey = [
        SurveyNode(
            id="q1",
            type="text",
            name="respondent_name",
            label=_bilingual("What is your name?", "¿Cuál es tu nombre?"),
        ),
        SurveyNode(
            id="q2",
            type="integer",
            name="age",
            label=_bilingual("How old are you?", "¿Cuántos años tienes?"),
            required="yes",
            constraint=". > 0 and . < 150",
            constraint_message=_bilingual(
                "Age must be between 1 and 149",
                "La edad debe estar entre 1 y 149",
            ),
        ),
        SurveyNode(
            id="g1",
            type="group",
            name="location_info",
            label=_bilingual("Location", "Ubicación"),
            children=[
                SurveyNode(
                    id="q3",
                    type="geopoint",
                    name="gps",
                    label=_bilingual("Record GPS", "Registrar GPS"),
                ),
                SurveyNode(
                    id="q4",
                    type="select_one",
                    name="region",
                    label=_bilingual("Select region", "Seleccionar región"),
                    list_name="regions",
                ),
            ],
        ),
        SurveyNode(
            id="q5",
            type="select_multiple",
            name="services_needed",
            label=_bilingual("Services needed?", "¿Servicios necesarios?"),
            list_name="services",
        ),
        SurveyNode(
            id="q6",
            type="note",
            name="thank_you",
            label=_bilingual("Thank you!", "¡Gracias!"),
        ),
    ]

    choices = [
        _choices("regions", [
            ("north", "North", "Norte"),
            ("south", "South", "Sur"),
            ("east", "East", "Este"),
            ("west", "West", "Oeste"),
        ]),
        _choices("services", [
            ("water", "Water", "Agua"),
            ("shelter", "Shelter", "Refugio"),
            ("food", "Food", "Comida"),
        ]),
    ]

    settings = FormSettings(
        form_title="Field Survey",
        form_id="field_survey_v1",
        version="2026-02-02",
        default_language=EN,
    )

    return XLSFormDocument(
        survey=survey,
        choices=choices,
        settings=settings,
        languages=[EN, ES],
    )
