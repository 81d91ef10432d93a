"""Import tours from CSV or XLSX.

Rows are processed strictly in file order. Each row is validated, checked
against the slugs already present (in the store and earlier in the same
file), resolved against the relationship lookups and then created. The
outcome of every row is recorded in an ``ImportResult``; only an unreadable
file aborts the whole run.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from tourbridge.config import settings
from tourbridge.schemas.transfer import ExportFormat, ImportOptions, ImportResult
from tourbridge.services.transfer.formats import SourceRow, TableParseError, get_adapter
from tourbridge.services.transfer.unflatten import ResolvedRelationships, build_tour_payload
from tourbridge.services.transfer.validation import TourRow, validate_row

if TYPE_CHECKING:
    from tourbridge.services.repository import DocumentRepository

logger = logging.getLogger(__name__)

TOURS = "tours"
GUIDES = "guides"
CATEGORIES = "categories"
NEIGHBORHOODS = "neighborhoods"


@dataclass
class LookupTables:
    """Slug lookups fetched once per import run."""

    existing_slugs: set[str] = field(default_factory=set)
    guides: dict[str, Any] = field(default_factory=dict)
    categories: dict[str, Any] = field(default_factory=dict)
    neighborhoods: dict[str, Any] = field(default_factory=dict)


@dataclass
class RelationshipResolution:
    """Relationship ids for one row, plus the slugs that did not resolve."""

    relationships: Optional[ResolvedRelationships] = None
    missing_guide: Optional[str] = None
    missing_categories: list[str] = field(default_factory=list)
    missing_neighborhoods: list[str] = field(default_factory=list)


def _slug_map(docs: list[dict[str, Any]]) -> dict[str, Any]:
    return {doc["slug"]: doc["id"] for doc in docs if doc.get("slug")}


async def load_lookup_tables(
    repository: "DocumentRepository",
    limit: Optional[int] = None,
) -> LookupTables:
    """Fetch existing tour slugs and the relationship slug -> id maps."""
    limit = limit or settings.lookup_limit

    tours = await repository.find(TOURS, limit=limit)
    guides = await repository.find(GUIDES, limit=limit)
    categories = await repository.find(CATEGORIES, limit=limit)
    neighborhoods = await repository.find(NEIGHBORHOODS, limit=limit)

    return LookupTables(
        existing_slugs={doc["slug"] for doc in tours if doc.get("slug")},
        guides=_slug_map(guides),
        categories=_slug_map(categories),
        neighborhoods=_slug_map(neighborhoods),
    )


def resolve_relationships(row: TourRow, lookups: LookupTables) -> RelationshipResolution:
    """Resolve the guide, category and neighborhood slugs of a row.

    An unknown guide leaves ``relationships`` unset. Unknown categories and
    neighborhoods are reported and left out.
    """
    resolution = RelationshipResolution()

    category_ids = []
    for slug in row.categories:
        if slug in lookups.categories:
            category_ids.append(lookups.categories[slug])
        else:
            resolution.missing_categories.append(slug)

    neighborhood_ids = []
    for slug in row.neighborhoods:
        if slug in lookups.neighborhoods:
            neighborhood_ids.append(lookups.neighborhoods[slug])
        else:
            resolution.missing_neighborhoods.append(slug)

    if row.guide_slug not in lookups.guides:
        resolution.missing_guide = row.guide_slug
        return resolution

    resolution.relationships = ResolvedRelationships(
        guide=lookups.guides[row.guide_slug],
        categories=category_ids,
        neighborhoods=neighborhood_ids,
    )
    return resolution


async def _import_row(
    repository: "DocumentRepository",
    source: SourceRow,
    lookups: LookupTables,
    known_slugs: set[str],
    result: ImportResult,
    dry_run: bool,
) -> None:
    if source.is_empty():
        return

    validation = validate_row(source.cells, source.number)
    if not validation.valid:
        result.errors.extend(validation.errors)
        return
    row = validation.data

    if row.slug in known_slugs:
        result.add_warning(source.number, f'Slug "{row.slug}" already exists, skipping')
        result.skipped += 1
        return

    resolution = resolve_relationships(row, lookups)
    if resolution.relationships is None:
        result.add_error(
            source.number,
            f'Guide with slug "{resolution.missing_guide}" not found',
            field="guide_slug",
        )
        return
    for slug in resolution.missing_categories:
        result.add_warning(source.number, f'Category "{slug}" not found, skipping')
    for slug in resolution.missing_neighborhoods:
        result.add_warning(source.number, f'Neighborhood "{slug}" not found, skipping')

    if dry_run:
        result.created += 1
        known_slugs.add(row.slug)
        return

    payload = build_tour_payload(row, resolution.relationships)
    try:
        await repository.create(TOURS, payload)
    except Exception as e:
        logger.warning("Import error on row %d: %s", source.number, e)
        result.add_error(source.number, f"Failed to create tour: {e}")
        return

    result.created += 1
    known_slugs.add(row.slug)


async def import_tours(
    repository: "DocumentRepository",
    file_content: bytes,
    import_format: ExportFormat = ExportFormat.CSV,
    options: Optional[ImportOptions] = None,
    max_rows: Optional[int] = None,
) -> ImportResult:
    """Import tours from a CSV or XLSX file.

    Args:
        repository: Document store to read lookups from and create tours in.
        file_content: Raw uploaded file bytes.
        import_format: CSV or XLSX.
        options: Import options (dry run).
        max_rows: Maximum number of data rows to process. Defaults to settings,
            where unset means every row is processed.

    Returns:
        ImportResult with created/skipped counts, errors and warnings.
    """
    options = options or ImportOptions()
    max_rows = max_rows or settings.max_import_rows
    result = ImportResult()

    try:
        rows = get_adapter(import_format).parse(file_content)
    except TableParseError as e:
        logger.warning("Import aborted, unreadable file: %s", e)
        result.add_error(0, str(e))
        return result

    if not rows:
        result.add_warning(0, "No data rows found in file")
        return result

    if max_rows is not None and len(rows) > max_rows:
        result.add_warning(
            rows[max_rows].number,
            f"Row limit of {max_rows} reached, {len(rows) - max_rows} rows not processed",
        )
        rows = rows[:max_rows]

    lookups = await load_lookup_tables(repository)
    known_slugs = set(lookups.existing_slugs)

    logger.info(
        "Importing %d rows (%s, dry_run=%s)",
        len(rows),
        ExportFormat(import_format).value,
        options.dry_run,
    )
    for source in rows:
        await _import_row(repository, source, lookups, known_slugs, result, options.dry_run)

    logger.info(
        "Import finished: %d created, %d skipped, %d errors, %d warnings",
        result.created,
        result.skipped,
        len(result.errors),
        len(result.warnings),
    )
    return result
