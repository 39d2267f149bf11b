"""
Form Analyzer: validation and inventory of form documents.

This module provides lightweight analysis of XLSFormDocument objects:
    - Node inventory (questions, groups, repeats, nesting depth)
    - Type checks against the XLSForm type vocabulary
    - Choice list references (missing and unused lists)
    - Translation coverage (undeclared and missing languages)
    - Warning flags for downstream compilation risk

IMPORTANT: The export pipeline never validates; it treats `type` as an
opaque string. This module is the separate, read-only validation pass.
It does NOT modify the document.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Set, Tuple

from formgrid.localization import LOCALIZABLE_FIELDS
from formgrid.model import (
    CONTAINER_TYPES,
    IMPLICIT_TYPES,
    QUESTION_TYPES,
    SELECT_TYPES,
    SurveyNode,
    XLSFormDocument,
    iter_document_fields,
)


@dataclass
class FormReport:
    """Analysis report for a form document."""

    form_id: str
    total_nodes: int = 0
    total_questions: int = 0
    total_groups: int = 0
    total_repeats: int = 0
    max_depth: int = 0
    total_choice_lists: int = 0
    total_choices: int = 0
    types_used: Dict[str, int] = field(default_factory=dict)

    # Structure
    unknown_types: Set[str] = field(default_factory=set)
    duplicate_names: Set[str] = field(default_factory=set)
    non_container_children: List[str] = field(default_factory=list)

    # Choice lists
    missing_choice_lists: Set[str] = field(default_factory=set)
    selects_without_list: List[str] = field(default_factory=list)
    unused_choice_lists: Set[str] = field(default_factory=set)

    # Translations
    undeclared_languages: Set[str] = field(default_factory=set)
    missing_translations: List[Tuple[str, str, str]] = field(default_factory=list)

    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not (self.unknown_types or self.missing_choice_lists or self.duplicate_names)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def _walk(nodes: List[SurveyNode], depth: int = 1) -> Iterator[Tuple[SurveyNode, int]]:
    for node in nodes:
        yield node, depth
        if node.children is not None:
            yield from _walk(node.children, depth + 1)


def _sibling_lists(nodes: List[SurveyNode]) -> Iterator[List[SurveyNode]]:
    yield nodes
    for node in nodes:
        if node.children:
            yield from _sibling_lists(node.children)


def _localized_values(node: SurveyNode) -> Iterator[Tuple[str, Dict[str, str]]]:
    for key, value in iter_document_fields(node):
        if key in LOCALIZABLE_FIELDS and isinstance(value, dict):
            yield key, value


def analyze_document(doc: XLSFormDocument) -> FormReport:
    """
    Perform analysis of a form document.

    Checks for:
    - Types outside the XLSForm vocabulary
    - Duplicate names among siblings
    - Select questions without a list or with an undefined list
    - Choice lists no question uses
    - Language keys not declared in `languages` (dropped on export)
    - Declared languages missing from localized values

    Returns a FormReport with metrics and warnings.
    """
    report = FormReport(form_id=doc.settings.form_id)
    declared_languages = set(doc.languages)
    defined_lists = {cl.list_name for cl in doc.choices}
    used_lists: Set[str] = set()
    types_used: Counter = Counter()

    # =========================================================================
    # 1. NODE INVENTORY
    # =========================================================================

    for node, depth in _walk(doc.survey):
        report.total_nodes += 1
        report.max_depth = max(report.max_depth, depth)
        types_used[node.type] += 1

        if node.type == "group":
            report.total_groups += 1
        elif node.type == "repeat":
            report.total_repeats += 1
        else:
            report.total_questions += 1

        if node.type not in QUESTION_TYPES and node.type not in IMPLICIT_TYPES:
            report.unknown_types.add(node.type)

        if node.children is not None and node.type not in CONTAINER_TYPES:
            report.non_container_children.append(node.name)

        # Choice list references
        if node.type in SELECT_TYPES:
            if not node.list_name:
                report.selects_without_list.append(node.name)
            else:
                list_name = node.list_name.split()[0]
                used_lists.add(list_name)
                if doc.get_choice_list(list_name) is None:
                    report.missing_choice_lists.add(list_name)

        # Translations
        for key, value in _localized_values(node):
            report.undeclared_languages.update(set(value) - declared_languages)
            for language in doc.languages:
                if language not in value:
                    report.missing_translations.append((node.name, key, language))

    report.types_used = dict(types_used)

    for sibling_list in _sibling_lists(doc.survey):
        counts = Counter(node.name for node in sibling_list)
        report.duplicate_names.update(name for name, n in counts.items() if n > 1)

    report.total_choice_lists = len(doc.choices)
    for choice_list in doc.choices:
        report.total_choices += len(choice_list.choices)
        for choice in choice_list.choices:
            if isinstance(choice.label, dict):
                report.undeclared_languages.update(set(choice.label) - declared_languages)

    report.unused_choice_lists = defined_lists - used_lists

    # =========================================================================
    # 2. WARNING FLAGS
    # =========================================================================

    if report.unknown_types:
        report.add_warning(f"Unknown types: {', '.join(sorted(report.unknown_types))}")

    if report.duplicate_names:
        report.add_warning(
            f"Duplicate sibling names: {', '.join(sorted(report.duplicate_names))}"
        )

    if report.missing_choice_lists:
        report.add_warning(
            f"Undefined choice lists: {', '.join(sorted(report.missing_choice_lists))}"
        )

    if report.selects_without_list:
        report.add_warning(
            f"Select questions without a choice list: {', '.join(report.selects_without_list)}"
        )

    if report.unused_choice_lists:
        report.add_warning(
            f"Unused choice lists: {', '.join(sorted(report.unused_choice_lists))}"
        )

    if report.non_container_children:
        report.add_warning(
            f"Non-group nodes with children (exported as begin/end): "
            f"{', '.join(report.non_container_children)}"
        )

    if report.undeclared_languages:
        report.add_warning(
            f"Undeclared languages (dropped on export): "
            f"{', '.join(sorted(report.undeclared_languages))}"
        )

    if report.missing_translations:
        report.add_warning(f"Missing translations: {len(report.missing_translations)}")

    return report


__all__ = ["FormReport", "analyze_document"]
