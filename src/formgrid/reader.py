"""
Reader: XLSForm sheets -> XLSFormDocument (table -> tree).

The reverse of the flattening pipeline. Nesting is rebuilt from the
`begin_<type>` / `end_<type>` marker rows with a stack of open containers.

Sheet format:
    survey    type, name, label[::lang], hint[::lang], ... (required)
    choices   list_name, name, label[::lang], ...          (optional)
    settings  form_title, form_id, version, ...            (optional)

Syntax Notes:
    - "begin group" / "end group" (space-separated) are accepted as well
    - "select_one <list>" splits back into type and list_name
    - Columns the model does not name are kept in `extra`
"""

import itertools
import logging
import re
import warnings
from dataclasses import fields
from typing import Callable, Dict, List, Mapping, Optional

from formgrid.backends.xlsx import WorkbookSource, read_workbook
from formgrid.columns import column_for_field, field_for_column
from formgrid.exporter import CHOICES_SHEET, SETTINGS_SHEET, SURVEY_SHEET
from formgrid.localization import (
    LANGUAGE_SEPARATOR,
    LOCALIZABLE_FIELDS,
    collect_localized,
    detect_languages,
)
from formgrid.model import (
    Choice,
    ChoiceList,
    FormSettings,
    SELECT_TYPES,
    SurveyNode,
    XLSFormDocument,
    document_key,
)
from formgrid.sheets import sheet_to_rows


logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

_MARKER_RE = re.compile(r"^(begin|end)[_ ](\S+)$")


class SheetParseError(Exception):
    """Raised when sheet rows cannot be turned back into a document."""
    pass


def sequential_ids(prefix: str = "node") -> IdFactory:
    """Id factory yielding prefix-1, prefix-2, ... in call order."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


def _row_to_kwargs(row: Mapping[str, str], model_cls, skip) -> Dict[str, object]:
    """
    Map row columns onto constructor arguments of a model class.

    Localizable columns fold into one LocalizedString, known columns map to
    their attribute through the inverse Column Mapper, columns named in
    `skip` are ignored, and every other column is collected into `extra`.
    """
    attrs = {
        document_key(f): f.name
        for f in fields(model_cls)
        if f.name not in skip and f.name != "extra"
    }
    localized = {
        column_for_field(key): attrs[key]
        for key in LOCALIZABLE_FIELDS
        if key in attrs
    }

    kwargs: Dict[str, object] = {}
    extra: Dict[str, str] = {}
    for column, value in row.items():
        base = column.split(LANGUAGE_SEPARATOR, 1)[0]
        if base in localized:
            attr = localized[base]
            if attr not in kwargs:
                kwargs[attr] = collect_localized(row, base)
            continue
        key = field_for_column(column)
        if key in skip:
            continue
        if key in attrs:
            kwargs[attrs[key]] = value
        else:
            extra[column] = value

    if extra:
        kwargs["extra"] = extra
    return kwargs


def _split_type(type_cell: str):
    """
    Split a question type cell into (type, list_name).

    Everything after the select type is the list reference, so suffixes
    such as "or_other" survive the trip back to a type cell.
    """
    parts = type_cell.split()
    if len(parts) > 1 and parts[0] in SELECT_TYPES:
        return parts[0], " ".join(parts[1:])
    return type_cell, None


def rows_to_tree(rows: List[Mapping[str, str]],
                 id_factory: Optional[IdFactory] = None) -> List[SurveyNode]:
    """
    Rebuild the survey forest from survey rows.

    Args:
        rows: Survey rows in sheet order
        id_factory: Produces node ids (default: node-1, node-2, ...)

    Returns:
        Root-level nodes

    Raises:
        SheetParseError: On a row with no type or name, an unmatched or
            mismatched end row, or a container left open
    """
    if id_factory is None:
        id_factory = sequential_ids()

    root: List[SurveyNode] = []
    open_containers: List[SurveyNode] = []

    for position, row in enumerate(rows, start=1):
        type_cell = (row.get("type") or "").strip()
        if not type_cell:
            raise SheetParseError(f"Row {position} has no type")

        marker = _MARKER_RE.match(type_cell)
        if marker and marker.group(1) == "end":
            declared = marker.group(2)
            if not open_containers:
                raise SheetParseError(
                    f"Row {position}: '{type_cell}' has no matching begin_{declared}"
                )
            if open_containers[-1].type != declared:
                raise SheetParseError(
                    f"Row {position}: '{type_cell}' closes "
                    f"begin_{open_containers[-1].type} '{open_containers[-1].name}'"
                )
            open_containers.pop()
            continue

        if "name" not in row:
            raise SheetParseError(f"Row {position} ({type_cell}) has no name")

        kwargs = _row_to_kwargs(row, SurveyNode, skip={"id", "type", "children"})
        if marker:
            node_type, list_name = marker.group(2), None
        else:
            node_type, list_name = _split_type(type_cell)
        if list_name is not None:
            kwargs["list_name"] = list_name

        node = SurveyNode(id=id_factory(), type=node_type, **kwargs)
        siblings = open_containers[-1].children if open_containers else root
        siblings.append(node)

        if marker:
            node.children = []
            open_containers.append(node)

    if open_containers:
        unclosed = ", ".join(f"begin_{n.type} '{n.name}'" for n in open_containers)
        raise SheetParseError(f"Unclosed containers at end of sheet: {unclosed}")

    return root


def rows_to_choices(rows: List[Mapping[str, str]]) -> List[ChoiceList]:
    """
    Group choice rows into lists, in first-seen list order.

    Rows with no list_name or no name are skipped with a warning.
    """
    lists: Dict[str, ChoiceList] = {}
    list_column = column_for_field("listName")

    for position, row in enumerate(rows, start=1):
        row = dict(row)
        list_name = row.pop(list_column, None)
        if not list_name or "name" not in row:
            missing = "name" if list_name else list_column
            warnings.warn(f"Choice row {position} has no {missing}; skipped", UserWarning)
            continue
        choice = Choice(**_row_to_kwargs(row, Choice, skip=set()))
        lists.setdefault(list_name, ChoiceList(list_name=list_name)).choices.append(choice)

    return list(lists.values())


def rows_to_settings(rows: List[Mapping[str, str]],
                     form_id_fallback: Optional[str] = None) -> FormSettings:
    """
    Build FormSettings from the settings rows (only the first row counts).

    Raises:
        SheetParseError: If there is no form_id and no fallback
    """
    row = dict(rows[0]) if rows else {}
    if len(rows) > 1:
        warnings.warn(
            f"Settings sheet has {len(rows)} rows; only the first is used",
            UserWarning,
        )

    kwargs = _row_to_kwargs(row, FormSettings, skip=set())
    if not kwargs.get("form_id"):
        if form_id_fallback is None:
            raise SheetParseError("Settings have no form_id and no fallback was given")
        kwargs["form_id"] = form_id_fallback
    kwargs.setdefault("form_title", kwargs["form_id"])
    return FormSettings(**kwargs)


def read_xlsx(source: WorkbookSource,
              form_id_fallback: Optional[str] = None,
              id_factory: Optional[IdFactory] = None) -> XLSFormDocument:
    """
    Read an XLSForm workbook into a document.

    Declared languages are inferred from the `::language` suffixes of
    localizable columns, survey sheet first, then choices.

    Args:
        source: xlsx bytes, a path, or a binary file object
        form_id_fallback: form_id to use when the settings carry none
        id_factory: Produces node ids (default: node-1, node-2, ...)

    Raises:
        SheetParseError: If the survey sheet is missing or malformed
    """
    sheets = dict(read_workbook(source))
    if SURVEY_SHEET not in sheets:
        raise SheetParseError(f"Workbook has no '{SURVEY_SHEET}' sheet")

    survey_rows = sheet_to_rows(sheets[SURVEY_SHEET])
    choice_rows = sheet_to_rows(sheets[CHOICES_SHEET]) if CHOICES_SHEET in sheets else []
    settings_rows = sheet_to_rows(sheets[SETTINGS_SHEET]) if SETTINGS_SHEET in sheets else []

    doc = XLSFormDocument(
        survey=rows_to_tree(survey_rows, id_factory=id_factory),
        choices=rows_to_choices(choice_rows),
        settings=rows_to_settings(settings_rows, form_id_fallback=form_id_fallback),
        languages=detect_languages(survey_rows + choice_rows),
    )
    logger.info(
        "Read form '%s': %d survey rows, %d choice lists, languages %s",
        doc.settings.form_id, len(survey_rows), len(doc.choices), doc.languages,
    )
    return doc


__all__ = [
    "SheetParseError",
    "sequential_ids",
    "rows_to_tree",
    "rows_to_choices",
    "rows_to_settings",
    "read_xlsx",
]
