"""
Core Form Model Objects

Defines the data structures of an XLSForm document:
    - SurveyNode (questions, notes, groups, repeats)
    - Choice / ChoiceList (options referenced by select questions)
    - FormSettings (the single settings row)
    - XLSFormDocument (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about spreadsheets or binary formats
        - Are plain value trees (edits copy, never mutate)
        - Are fully serializable
        - Treat expressions (relevant, constraint, ...) as opaque strings

Every dataclass field carries its document key in field metadata
(e.g. ``constraint_message`` is ``constraintMessage`` in a document). The
document keys are what the Column Mapper and the serializer operate on.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, Iterator, List, Optional, Tuple, Union


LocalizedString = Union[str, Dict[str, str]]
"""Either one plain string or a mapping from language name to string."""


QUESTION_TYPES = frozenset([
    "text", "integer", "decimal", "note", "select_one", "select_multiple",
    "geopoint", "geotrace", "geoshape", "date", "time", "dateTime",
    "image", "audio", "video", "file", "barcode", "calculate",
    "acknowledge", "range", "rank", "group", "repeat",
])

# Metadata types; also usable as default-value expressions.
IMPLICIT_TYPES = frozenset([
    "start", "end", "today", "phonenumber", "deviceid", "username", "email",
])

CONTAINER_TYPES = frozenset(["group", "repeat"])

SELECT_TYPES = frozenset(["select_one", "select_multiple"])


def _key(name: str):
    """Field metadata naming the document key of a dataclass field."""
    return {"key": name}


@dataclass
class SurveyNode:
    """
    One form element: a question, a note, a group or a repeat.

    Properties:
        id:
            Caller-assigned identity used only for in-memory lookup.
            Never exported.

        type:
            Declared XLSForm type (see QUESTION_TYPES). The core treats
            it as an opaque string; validation lives in the analyzer.

        name:
            Field/variable identifier, unique among siblings by convention.

        label, hint, constraint_message:
            LocalizedString values, fanned out per language on export.

        list_name:
            Choice list reference, meaningful for select_one/select_multiple.
            Its first word names the list; later words ("yn or_other") are
            type suffixes kept as written.

        extra:
            Open mapping of column name -> value for columns the model does
            not name. Last-write-wins over computed columns on export.

        children:
            Ordered child nodes. Present only on containers; None means leaf.

    INVARIANT:
        A node with children is exported as a container (begin/end rows)
        regardless of its declared type.
    """

    id: str
    type: str
    name: str
    label: LocalizedString = ""
    hint: Optional[LocalizedString] = None
    required: Optional[str] = None
    relevant: Optional[str] = None
    constraint: Optional[str] = None
    constraint_message: Optional[LocalizedString] = field(
        default=None, metadata=_key("constraintMessage"))
    appearance: Optional[str] = None
    default: Optional[str] = None
    readonly: Optional[str] = None
    calculation: Optional[str] = None
    choice_filter: Optional[str] = field(default=None, metadata=_key("choiceFilter"))
    repeat_count: Optional[str] = field(default=None, metadata=_key("repeatCount"))
    list_name: Optional[str] = field(default=None, metadata=_key("listName"))
    media_image: Optional[str] = field(default=None, metadata=_key("mediaImage"))
    media_audio: Optional[str] = field(default=None, metadata=_key("mediaAudio"))
    parameters: Optional[str] = None
    extra: Optional[Dict[str, str]] = None
    children: Optional[List["SurveyNode"]] = None

    @property
    def is_container(self) -> bool:
        return self.children is not None


@dataclass
class Choice:
    """A selectable option within a ChoiceList."""

    name: str
    label: LocalizedString = ""
    extra: Optional[Dict[str, str]] = None


@dataclass
class ChoiceList:
    """
    A named, reusable set of options.

    Properties:
        list_name: Unique key referenced by SurveyNode.list_name
        choices: Options in display order
    """

    list_name: str = field(metadata=_key("listName"))
    choices: List[Choice] = field(default_factory=list)


@dataclass
class FormSettings:
    """
    The single row of the settings sheet.

    form_id is required by downstream form compilers; everything else is
    optional and omitted from the row when None.
    """

    form_title: str = field(metadata=_key("formTitle"))
    form_id: str = field(metadata=_key("formId"))
    version: Optional[str] = None
    default_language: Optional[str] = field(default=None, metadata=_key("defaultLanguage"))
    style: Optional[str] = None
    extra: Optional[Dict[str, str]] = None


@dataclass
class XLSFormDocument:
    """
    Root container for a complete form definition.

    Properties:
        survey:
            Root-level ordered sequence of nodes (no implicit root container)

        choices:
            Choice lists, in sheet order

        settings:
            Form settings

        languages:
            Declared language names. Their order is the column emission
            order for localized fields; values keyed by any other language
            are dropped on export.
    """

    survey: List[SurveyNode]
    settings: FormSettings
    choices: List[ChoiceList] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)

    def get_choice_list(self, list_name: str) -> Optional[ChoiceList]:
        """
        Retrieve a choice list by name.

        Returns:
            ChoiceList or None if not found
        """
        for choice_list in self.choices:
            if choice_list.list_name == list_name:
                return choice_list
        return None


def document_key(f) -> str:
    """Document key of a dataclass field (its metadata key, else its name)."""
    return f.metadata.get("key", f.name)


def iter_document_fields(obj) -> Iterator[Tuple[str, object]]:
    """
    Yield (document_key, value) for each declared field of a model object,
    in declaration order, skipping fields that are None.
    """
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        yield document_key(f), value
