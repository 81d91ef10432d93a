"""Tabular import and export of tours.

Public API:
    - export_tours: Flatten tours and serialize them as CSV or XLSX
    - import_tours: Parse, validate and create tours from CSV or XLSX
    - get_headers: Display headers and column keys of the tour sheet
    - flatten_tour / build_tour_payload: Row <-> document transforms
    - validate_row: Coerce and validate one raw row
"""

from .columns import (
    DEFAULT_LOCALE,
    HEADER_ALIASES,
    LOCALE_LABELS,
    LOCALES,
    TOUR_COLUMNS,
    ColumnDefinition,
    ColumnType,
    Locale,
    build_header_map,
    get_headers,
    match_headers,
)
from .exporter import export_tours
from .flatten import flatten_tour
from .formats import (
    CsvAdapter,
    SourceRow,
    TableParseError,
    XlsxAdapter,
    generate_export_filename,
    get_adapter,
    get_content_type,
)
from .importer import (
    LookupTables,
    RelationshipResolution,
    import_tours,
    load_lookup_tables,
    resolve_relationships,
)
from .richtext import plain_to_richtext, richtext_to_plain
from .unflatten import ResolvedRelationships, build_tour_payload
from .validation import RowValidation, TourRow, validate_row

__all__ = [
    # Columns
    "DEFAULT_LOCALE",
    "HEADER_ALIASES",
    "LOCALE_LABELS",
    "LOCALES",
    "TOUR_COLUMNS",
    "ColumnDefinition",
    "ColumnType",
    "Locale",
    "build_header_map",
    "get_headers",
    "match_headers",
    # Rich text
    "plain_to_richtext",
    "richtext_to_plain",
    # Rows
    "RowValidation",
    "TourRow",
    "validate_row",
    "flatten_tour",
    "ResolvedRelationships",
    "build_tour_payload",
    # Formats
    "CsvAdapter",
    "XlsxAdapter",
    "SourceRow",
    "TableParseError",
    "generate_export_filename",
    "get_adapter",
    "get_content_type",
    # Orchestration
    "export_tours",
    "import_tours",
    "LookupTables",
    "RelationshipResolution",
    "load_lookup_tables",
    "resolve_relationships",
]
