"""Export tours to CSV or XLSX."""

import logging
from typing import TYPE_CHECKING, Optional

from tourbridge.config import settings
from tourbridge.schemas.transfer import ExportFormat, ExportOptions
from tourbridge.services.transfer.columns import ALL_LOCALES
from tourbridge.services.transfer.flatten import flatten_tour
from tourbridge.services.transfer.formats import get_adapter

if TYPE_CHECKING:
    from tourbridge.services.repository import DocumentRepository

logger = logging.getLogger(__name__)

# Populate guide, categories, neighborhoods and image media
EXPORT_DEPTH = 2


async def export_tours(
    repository: "DocumentRepository",
    export_format: ExportFormat = ExportFormat.CSV,
    options: Optional[ExportOptions] = None,
) -> bytes:
    """Export tours as a file in the requested format.

    Args:
        repository: Document store to read tours from.
        export_format: CSV or XLSX.
        options: Optional status filter and row limit.

    Returns:
        File content as bytes.
    """
    options = options or ExportOptions()
    where = {"status": options.status.value} if options.status else None
    limit = options.limit or settings.export_limit

    tours = await repository.find(
        "tours",
        where=where,
        limit=limit,
        depth=EXPORT_DEPTH,
        locale=ALL_LOCALES,
    )
    rows = [flatten_tour(tour) for tour in tours]

    logger.info(
        "Exporting %d tours as %s (status=%s)",
        len(rows),
        ExportFormat(export_format).value,
        options.status.value if options.status else "any",
    )
    return get_adapter(export_format).serialize(rows)
