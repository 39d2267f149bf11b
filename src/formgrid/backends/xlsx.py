"""
xlsx encoding of ordered sheets, backed by openpyxl.

write_workbook: [(name, Sheet), ...] -> xlsx bytes
read_workbook:  xlsx bytes / path / file object -> [(name, Sheet), ...]

Sheets keep the order they are given in. Every cell is written as a string;
on read, non-string cells are converted back to strings.
"""

import datetime
import os
from io import BytesIO
from typing import BinaryIO, List, Tuple, Union

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

from formgrid.sheets import Cell, Sheet


NamedSheet = Tuple[str, Sheet]
WorkbookSource = Union[bytes, bytearray, str, "os.PathLike[str]", BinaryIO]

_HEADER_FONT = Font(bold=True)


def _write_cell(ws, row: int, column: int, value: Cell, bold: bool = False) -> None:
    if value is None:
        return
    cell = ws.cell(row=row, column=column, value=value)
    # openpyxl treats a leading "=" as a formula
    if isinstance(value, str) and value.startswith("="):
        cell.data_type = "s"
    if bold:
        cell.font = _HEADER_FONT


def write_workbook(sheets: List[NamedSheet]) -> bytes:
    """
    Encode ordered sheets as an xlsx workbook.

    Args:
        sheets: (sheet name, Sheet) pairs, in workbook order

    Returns:
        The workbook as bytes
    """
    wb = Workbook()
    wb.remove(wb.active)

    for name, sheet in sheets:
        ws = wb.create_sheet(title=name)
        for c, header in enumerate(sheet.headers, start=1):
            _write_cell(ws, 1, c, header, bold=True)
        for r, line in enumerate(sheet.rows, start=2):
            for c, value in enumerate(line, start=1):
                _write_cell(ws, r, c, value)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def _cell_to_str(value) -> Cell:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


def _read_sheet(ws) -> Sheet:
    lines = [
        [_cell_to_str(value) for value in line]
        for line in ws.iter_rows(values_only=True)
    ]
    if not lines or all(cell is None for cell in lines[0]):
        return Sheet()

    headers = list(lines[0])
    while headers and headers[-1] is None:
        headers.pop()
    width = len(headers)

    rows = []
    for line in lines[1:]:
        line = (line + [None] * width)[:width]
        rows.append(line)
    return Sheet(headers=[header or "" for header in headers], rows=rows)


def read_workbook(source: WorkbookSource) -> List[NamedSheet]:
    """
    Decode an xlsx workbook into ordered sheets.

    Args:
        source: Raw bytes, a filesystem path, or a binary file object

    Returns:
        (sheet name, Sheet) pairs, in workbook order
    """
    if isinstance(source, (bytes, bytearray)):
        source = BytesIO(source)
    wb = load_workbook(source, read_only=True, data_only=True)
    try:
        return [(ws.title, _read_sheet(ws)) for ws in wb.worksheets]
    finally:
        wb.close()


__all__ = ["NamedSheet", "WorkbookSource", "read_workbook", "write_workbook"]
