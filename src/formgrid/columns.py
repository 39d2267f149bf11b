"""
Column Mapper: document field names -> XLSForm column names.

A fixed, read-only table. Field names it does not list pass through
unchanged, so the mapping is total over every field name.
"""

from types import MappingProxyType
from typing import Mapping


COLUMN_MAP: Mapping[str, str] = MappingProxyType({
    "listName": "list_name",
    "constraintMessage": "constraint_message",
    "choiceFilter": "choice_filter",
    "repeatCount": "repeat_count",
    "readonly": "read_only",
    "mediaImage": "media::image",
    "mediaAudio": "media::audio",
    "formTitle": "form_title",
    "formId": "form_id",
    "defaultLanguage": "default_language",
})

FIELD_MAP: Mapping[str, str] = MappingProxyType(
    {column: field_name for field_name, column in COLUMN_MAP.items()}
)


def column_for_field(field_name: str) -> str:
    """External column name for a document field name."""
    return COLUMN_MAP.get(field_name, field_name)


def field_for_column(column: str) -> str:
    """Document field name for an external column name (inverse mapping)."""
    return FIELD_MAP.get(column, column)


__all__ = ["COLUMN_MAP", "FIELD_MAP", "column_for_field", "field_for_column"]
