#!/usr/bin/env python3
"""
Complete Pipeline Demo: Document → Analysis → Sheets → xlsx → Document

Shows the full workflow:
1. Build the bilingual field survey document
2. Analyze it
3. Flatten it into survey/choices/settings sheets
4. Encode the workbook and read it back
"""

import sys

from formgrid.analyzer import analyze_document
from formgrid.examples import build_field_survey
from formgrid.exporter import build_sheets, export_to_xlsx
from formgrid.flatten import flatten_tree
from formgrid.reader import read_xlsx


def main(output_path: str = "field_survey_v1.xlsx"):
    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Document → Sheets → xlsx → Document")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Build document
    # =========================================================================
    print("\n1. BUILDING DOCUMENT...")
    doc = build_field_survey()
    print(f"   ✓ Form: {doc.settings.form_title} ({doc.settings.form_id})")
    print(f"   ✓ Root nodes: {len(doc.survey)}")
    print(f"   ✓ Choice lists: {len(doc.choices)}")
    print(f"   ✓ Languages: {', '.join(doc.languages)}")

    # =========================================================================
    # STEP 2: Analyze
    # =========================================================================
    print("\n2. ANALYZING DOCUMENT...")
    report = analyze_document(doc)
    print(f"   ✓ Nodes: {report.total_nodes} (max depth {report.max_depth})")
    print(f"   ✓ Valid: {report.is_valid}")
    for warning in report.warnings:
        print(f"      - {warning}")

    # =========================================================================
    # STEP 3: Flatten
    # =========================================================================
    print("\n3. FLATTENING SURVEY...")
    result = flatten_tree(doc.survey, doc.languages)
    for position, row in enumerate(result.rows):
        node_id = result.row_to_node.get(position, "-")
        print(f"   {position:>2}  {node_id:<4} {row['type']:<28} {row.get('name', '')}")

    for name, sheet in build_sheets(doc):
        print(f"   ✓ Sheet '{name}': {len(sheet.headers)} columns, {len(sheet.rows)} rows")

    # =========================================================================
    # STEP 4: Encode and read back
    # =========================================================================
    print("\n4. WRITING WORKBOOK...")
    data = export_to_xlsx(doc)
    with open(output_path, "wb") as f:
        f.write(data)
    print(f"   ✓ Saved {output_path} ({len(data)} bytes)")

    restored = read_xlsx(data)
    print(f"   ✓ Read back {len(restored.survey)} root nodes, "
          f"languages {', '.join(restored.languages)}")

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main(*sys.argv[1:])
