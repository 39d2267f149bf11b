"""Backends for binary spreadsheet encoding (xlsx)."""

from .xlsx import read_workbook, write_workbook

__all__ = ["read_workbook", "write_workbook"]
