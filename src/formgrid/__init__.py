"""
formgrid: XLSForm Document Model and Tree <-> Table Engine

Models a hierarchical survey-form definition (questions, groups, repeats,
choice lists, settings, multi-language labels) and converts it to and from
the flat spreadsheet convention used by XLSForm.

ARCHITECTURAL GUARANTEE:
------------------------
The core (model, tree, flatten, sheets, exporter) contains ZERO knowledge of:
    - Rendering or editing UI
    - Network transport
    - File storage
    - Expression semantics (constraints, relevance are opaque strings)

Binary spreadsheet encoding lives in `formgrid.backends`.
"""

__version__ = "0.1.0"
