"""
Command line interface.

    formgrid export form.yaml -o form.xlsx
    formgrid import form.xlsx -o form.yaml [--form-id-fallback ID]
    formgrid check form.yaml
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

import yaml

from formgrid.analyzer import FormReport, analyze_document
from formgrid.exporter import save_xlsx
from formgrid.reader import SheetParseError, read_xlsx
from formgrid.serialization import dump_document, load_document


logger = logging.getLogger(__name__)


def setup_logging(level_str: str = "WARNING") -> None:
    """Configure logging."""
    level = getattr(logging, level_str.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def print_report(report: FormReport) -> None:
    """Pretty-print a FormReport."""
    print(f"Form: {report.form_id}")
    print(f"  Nodes:        {report.total_nodes} "
          f"({report.total_questions} questions, {report.total_groups} groups, "
          f"{report.total_repeats} repeats)")
    print(f"  Max depth:    {report.max_depth}")
    print(f"  Choice lists: {report.total_choice_lists} ({report.total_choices} choices)")
    if report.warnings:
        print(f"  Warnings ({len(report.warnings)}):")
        for warning in report.warnings:
            print(f"    - {warning}")
    print("  Valid" if report.is_valid else "  NOT valid")


def _load(path):
    """load_document, logging the failure instead of raising."""
    try:
        return load_document(path)
    except (TypeError, ValueError, KeyError, yaml.YAMLError) as e:
        logger.error("Cannot load %s: %s", path, e)
        return None


def _cmd_export(args) -> int:
    doc = _load(args.document)
    if doc is None:
        return 1
    output = args.output or f"{doc.settings.form_id}.xlsx"
    save_xlsx(doc, output)
    print(f"Wrote {output}")
    return 0


def _cmd_import(args) -> int:
    fallback = args.form_id_fallback
    if fallback is None:
        fallback = os.path.splitext(os.path.basename(args.workbook))[0]
    try:
        doc = read_xlsx(args.workbook, form_id_fallback=fallback)
    except SheetParseError as e:
        logger.error("Cannot read %s: %s", args.workbook, e)
        return 1
    dump_document(doc, args.output)
    print(f"Wrote {args.output}")
    return 0


def _cmd_check(args) -> int:
    doc = _load(args.document)
    if doc is None:
        return 1
    report = analyze_document(doc)
    print_report(report)
    return 0 if report.is_valid else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formgrid",
        description="Convert XLSForm documents between JSON/YAML and xlsx",
    )
    parser.add_argument("--log-level", default="WARNING",
                        help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_export = sub.add_parser("export", help="Document (.json/.yaml) -> xlsx")
    p_export.add_argument("document", help="Path to a .json/.yaml document")
    p_export.add_argument("-o", "--output", help="Output .xlsx (default: <form_id>.xlsx)")
    p_export.set_defaults(func=_cmd_export)

    p_import = sub.add_parser("import", help="xlsx -> document (.json/.yaml)")
    p_import.add_argument("workbook", help="Path to an XLSForm .xlsx")
    p_import.add_argument("-o", "--output", required=True, help="Output .json/.yaml")
    p_import.add_argument("--form-id-fallback",
                          help="form_id when settings have none (default: file name)")
    p_import.set_defaults(func=_cmd_import)

    p_check = sub.add_parser("check", help="Analyze a document and report problems")
    p_check.add_argument("document", help="Path to a .json/.yaml document")
    p_check.set_defaults(func=_cmd_check)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
