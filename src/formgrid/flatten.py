"""
Flattening: document -> ordered rows.

The survey forest is walked depth-first. Each node yields one row; a node
that owns children yields an opening `begin_<type>` row before its
descendants and a closing `end_<type>` row after them. Row order is exactly
document order, which downstream form compilers depend on.

Choice lists and settings flatten the same way, minus the nesting.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from formgrid.columns import column_for_field
from formgrid.localization import LOCALIZABLE_FIELDS, expand_localized
from formgrid.model import (
    ChoiceList,
    FormSettings,
    SELECT_TYPES,
    SurveyNode,
    iter_document_fields,
)


logger = logging.getLogger(__name__)

SurveyRow = Dict[str, str]
"""Column name -> cell value. Key order does not matter."""

# Never copied into a row as-is.
_NODE_SKIPPED_FIELDS = frozenset(["id", "type", "listName", "extra", "children"])

BEGIN_PREFIX = "begin_"
END_PREFIX = "end_"


@dataclass
class FlattenResult:
    """
    Properties:
        rows: Survey rows in document order
        row_to_node: Row position -> node id for every opening/leaf row.
            Closing `end_*` rows are not indexed.
    """

    rows: List[SurveyRow] = field(default_factory=list)
    row_to_node: Dict[int, str] = field(default_factory=dict)


def row_type(node: SurveyNode) -> str:
    """
    The `type` cell for a node's opening row.

    select_one/select_multiple with a list become "<type> <list>"; any node
    carrying children becomes "begin_<type>".
    """
    if node.is_container:
        return f"{BEGIN_PREFIX}{node.type}"
    if node.type in SELECT_TYPES and node.list_name:
        return f"{node.type} {node.list_name}"
    return node.type


def node_to_row(node: SurveyNode, languages: Iterable[str]) -> SurveyRow:
    """Build the opening (or only) row for a single node."""
    row: SurveyRow = {"type": row_type(node)}

    for key, value in iter_document_fields(node):
        if key in _NODE_SKIPPED_FIELDS:
            continue
        if key in LOCALIZABLE_FIELDS:
            row.update(expand_localized(key, value, languages))
            continue
        row[column_for_field(key)] = value

    if node.extra:
        row.update(node.extra)
    return row


def flatten_tree(tree: List[SurveyNode], languages: Iterable[str]) -> FlattenResult:
    """
    Flatten the survey forest into rows.

    Args:
        tree: Root-level nodes
        languages: Declared languages, in column order

    Returns:
        FlattenResult with rows and the row -> node id index
    """
    languages = list(languages)
    result = FlattenResult()

    def walk(nodes: List[SurveyNode]) -> None:
        for node in nodes:
            result.row_to_node[len(result.rows)] = node.id
            result.rows.append(node_to_row(node, languages))

            if node.children is not None:
                walk(node.children)
                result.rows.append({
                    "type": f"{END_PREFIX}{node.type}",
                    "name": node.name,
                })

    walk(tree)
    logger.debug("Flattened survey into %d rows", len(result.rows))
    return result


def flatten_choices(choices: List[ChoiceList], languages: Iterable[str]) -> List[SurveyRow]:
    """One row per choice, lists in document order, choices in list order."""
    languages = list(languages)
    rows: List[SurveyRow] = []

    for choice_list in choices:
        for choice in choice_list.choices:
            row: SurveyRow = {
                column_for_field("listName"): choice_list.list_name,
                "name": choice.name,
            }
            row.update(expand_localized("label", choice.label, languages))
            if choice.extra:
                row.update(choice.extra)
            rows.append(row)

    return rows


def flatten_settings(settings: FormSettings) -> List[SurveyRow]:
    """Exactly one row; absent optional fields are omitted, extra merged last."""
    row: SurveyRow = {}

    for key, value in iter_document_fields(settings):
        if key == "extra":
            continue
        row[column_for_field(key)] = value

    if settings.extra:
        row.update(settings.extra)

    return [row]


__all__ = [
    "SurveyRow",
    "FlattenResult",
    "BEGIN_PREFIX",
    "END_PREFIX",
    "row_type",
    "node_to_row",
    "flatten_tree",
    "flatten_choices",
    "flatten_settings",
]
