"""
Localization fan-out for LocalizedString values.

A plain string becomes one bare column; a per-language mapping becomes one
`base::language` column per declared language that has a value. Languages
missing from the value are skipped, and keys that are not declared languages
are dropped without error.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from formgrid.columns import column_for_field
from formgrid.model import LocalizedString


logger = logging.getLogger(__name__)

LANGUAGE_SEPARATOR = "::"

# Document field names whose values are LocalizedString.
LOCALIZABLE_FIELDS = frozenset(["label", "hint", "constraintMessage"])


def expand_localized(
    field_name: str,
    value: LocalizedString,
    languages: Iterable[str],
) -> Dict[str, str]:
    """
    Expand one logical field into its column entries.

    Args:
        field_name: Document field name (column-mapped here)
        value: Plain string or language -> string mapping
        languages: Declared languages, in column order

    Returns:
        Mapping of column name -> string
    """
    base = column_for_field(field_name)
    if isinstance(value, str):
        return {base: value}

    languages = list(languages)
    columns = {}
    for language in languages:
        if language in value:
            columns[f"{base}{LANGUAGE_SEPARATOR}{language}"] = value[language]

    dropped = [key for key in value if key not in languages]
    if dropped:
        logger.debug("Dropping undeclared languages %s from '%s'", dropped, base)
    return columns


def localizable_columns() -> List[str]:
    """Column base names of the localizable fields."""
    return [column_for_field(name) for name in sorted(LOCALIZABLE_FIELDS)]


def collect_localized(row: Mapping[str, str], base: str) -> Optional[LocalizedString]:
    """
    Fold the columns of one localizable field back into a LocalizedString.

    A bare `base` column wins over language columns when both are present.

    Returns:
        The plain string, the language mapping, or None if the row has neither
    """
    if base in row:
        return row[base]
    prefix = f"{base}{LANGUAGE_SEPARATOR}"
    values = {
        column[len(prefix):]: value
        for column, value in row.items()
        if column.startswith(prefix)
    }
    return values or None


def detect_languages(rows: Iterable[Mapping[str, str]]) -> List[str]:
    """
    Languages named by localizable columns, in first-seen order.

    Scans rows top to bottom and columns left to right.
    """
    bases = localizable_columns()
    seen: List[str] = []
    for row in rows:
        for column in row:
            for base in bases:
                prefix = f"{base}{LANGUAGE_SEPARATOR}"
                if column.startswith(prefix):
                    language = column[len(prefix):]
                    if language not in seen:
                        seen.append(language)
    return seen


__all__ = [
    "LANGUAGE_SEPARATOR",
    "LOCALIZABLE_FIELDS",
    "expand_localized",
    "collect_localized",
    "localizable_columns",
    "detect_languages",
]
