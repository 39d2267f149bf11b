"""
Sheet Builder: rows (mappings) <-> a rectangular header + data grid.

Rows need not share keys. The header is the union of every row's keys in
first-seen order (rows top to bottom, keys left to right); a row missing a
column gets a None cell.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence


Cell = Optional[str]


@dataclass
class Sheet:
    """
    A tabular sheet.

    Properties:
        headers: Column names (the first spreadsheet row)
        rows: Data lines, one cell per header column

    An empty sheet has neither headers nor rows.
    """

    headers: List[str] = field(default_factory=list)
    rows: List[List[Cell]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.headers and not self.rows


def rows_to_sheet(rows: Sequence[Mapping[str, str]]) -> Sheet:
    """
    Lay rows out under one shared header.

    Every key of every row becomes a column, so heterogeneous rows lose
    nothing; no rows gives an empty sheet.
    """
    if not rows:
        return Sheet()

    headers: Dict[str, None] = {}
    for row in rows:
        for key in row:
            headers.setdefault(key, None)

    header_list = list(headers)
    data = [[row.get(header) for header in header_list] for row in rows]
    return Sheet(headers=header_list, rows=data)


def sheet_to_rows(sheet: Sheet) -> List[Dict[str, str]]:
    """
    Inverse of rows_to_sheet: one mapping per data line.

    None and empty-string cells are left out of the mapping, columns with no
    header are ignored, and lines with no remaining cells are skipped.
    """
    rows = []
    for line in sheet.rows:
        row = {}
        for header, cell in zip(sheet.headers, line):
            if not header or cell is None or cell == "":
                continue
            row[header] = cell
        if row:
            rows.append(row)
    return rows


__all__ = ["Cell", "Sheet", "rows_to_sheet", "sheet_to_rows"]
