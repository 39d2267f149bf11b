"""
Serialization helpers for form documents (XLSFormDocument, SurveyNode, etc.).

Provides lossless JSON/YAML round-trip via an intermediate dict whose keys are
the document keys (listName, constraintMessage, formTitle, ...). Absent
optional fields are left out of the dict.
"""
from __future__ import annotations

import json
import os
from dataclasses import fields
from typing import Any, Dict

import yaml

from formgrid.model import (
    Choice,
    ChoiceList,
    FormSettings,
    SurveyNode,
    XLSFormDocument,
    document_key,
    iter_document_fields,
)


def _attr_names(model_cls) -> Dict[str, str]:
    return {document_key(f): f.name for f in fields(model_cls)}


_NODE_ATTRS = _attr_names(SurveyNode)
_CHOICE_ATTRS = _attr_names(Choice)
_SETTINGS_ATTRS = _attr_names(FormSettings)


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return dict(value)
    return value


def _text(value: Any) -> Any:
    """
    Coerce a loaded scalar back to the string it was written as.

    YAML resolves unquoted yes/no/true/false to booleans, dates to
    datetime.date and digits to numbers; sheet cells are always text.
    Booleans come back as XLSForm's "yes"/"no".
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, dict):
        return {_text(k): _text(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        raise TypeError(f"Expected a string or mapping, got a list: {value!r}")
    return str(value)


def _kwargs_from_dict(d: Dict[str, Any], attrs: Dict[str, str], what: str) -> Dict[str, Any]:
    kwargs = {}
    for key, value in d.items():
        if key not in attrs:
            raise TypeError(f"Unsupported {what} key: {key}")
        kwargs[attrs[key]] = _text(value)
    return kwargs


def node_to_dict(n: SurveyNode) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    for key, value in iter_document_fields(n):
        if key == "children":
            d[key] = [node_to_dict(child) for child in value]
        else:
            d[key] = _plain(value)
    return d


def node_from_dict(d: Dict[str, Any]) -> SurveyNode:
    children = d.get("children")
    kwargs = _kwargs_from_dict(
        {k: v for k, v in d.items() if k != "children"}, _NODE_ATTRS, "SurveyNode"
    )
    if children is not None:
        kwargs["children"] = [node_from_dict(child) for child in children]
    return SurveyNode(**kwargs)


def choice_to_dict(c: Choice) -> Dict[str, Any]:
    return {key: _plain(value) for key, value in iter_document_fields(c)}


def choice_from_dict(d: Dict[str, Any]) -> Choice:
    return Choice(**_kwargs_from_dict(d, _CHOICE_ATTRS, "Choice"))


def choice_list_to_dict(cl: ChoiceList) -> Dict[str, Any]:
    return {"listName": cl.list_name, "choices": [choice_to_dict(c) for c in cl.choices]}


def choice_list_from_dict(d: Dict[str, Any]) -> ChoiceList:
    return ChoiceList(
        list_name=_text(d["listName"]),
        choices=[choice_from_dict(c) for c in d.get("choices", [])],
    )


def settings_to_dict(s: FormSettings) -> Dict[str, Any]:
    return {key: _plain(value) for key, value in iter_document_fields(s)}


def settings_from_dict(d: Dict[str, Any]) -> FormSettings:
    return FormSettings(**_kwargs_from_dict(d, _SETTINGS_ATTRS, "FormSettings"))


def document_to_dict(doc: XLSFormDocument) -> Dict[str, Any]:
    return {
        "survey": [node_to_dict(n) for n in doc.survey],
        "choices": [choice_list_to_dict(cl) for cl in doc.choices],
        "settings": settings_to_dict(doc.settings),
        "languages": list(doc.languages),
    }


def document_from_dict(d: Dict[str, Any]) -> XLSFormDocument:
    return XLSFormDocument(
        survey=[node_from_dict(n) for n in d.get("survey", [])],
        choices=[choice_list_from_dict(cl) for cl in d.get("choices", [])],
        settings=settings_from_dict(d["settings"]),
        languages=[_text(language) for language in d.get("languages", [])],
    )


def document_to_json(doc: XLSFormDocument) -> str:
    return json.dumps(document_to_dict(doc), sort_keys=True, ensure_ascii=False)


def document_from_json(s: str) -> XLSFormDocument:
    return document_from_dict(json.loads(s))


def document_to_yaml(doc: XLSFormDocument) -> str:
    return yaml.safe_dump(document_to_dict(doc), allow_unicode=True, sort_keys=False)


def document_from_yaml(s: str) -> XLSFormDocument:
    return document_from_dict(yaml.safe_load(s))


_WRITERS = {".json": document_to_json, ".yaml": document_to_yaml, ".yml": document_to_yaml}
_READERS = {".json": document_from_json, ".yaml": document_from_yaml, ".yml": document_from_yaml}


def _extension(path) -> str:
    ext = os.path.splitext(os.fspath(path))[1].lower()
    if ext not in _READERS:
        raise ValueError(f"Unsupported document format '{ext}' (use .json, .yaml or .yml)")
    return ext


def load_document(path) -> XLSFormDocument:
    """Read a document from a .json/.yaml/.yml file."""
    ext = _extension(path)
    with open(path, "r", encoding="utf-8") as f:
        return _READERS[ext](f.read())


def dump_document(doc: XLSFormDocument, path) -> None:
    """Write a document to a .json/.yaml/.yml file."""
    ext = _extension(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(_WRITERS[ext](doc))
