"""Tour import/export script for Tourbridge.

Commands:
    export    Write all tours to a CSV or XLSX file
    import    Create tours from a CSV or XLSX file

Exit codes:
    0         Success
    1         The file could not be read, or another fatal error
    2         Some rows were not imported
"""

import argparse
import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from tourbridge.config import settings
from tourbridge.database import close_db, init_db
from tourbridge.schemas.transfer import (
    ExportFormat,
    ExportOptions,
    ImportOptions,
    ImportResult,
    TourStatus,
)
from tourbridge.services.repository import DocumentRepository, MongoDocumentRepository
from tourbridge.services.transfer import (
    export_tours,
    generate_export_filename,
    import_tours,
)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_ROW_ERRORS = 2


@asynccontextmanager
async def open_repository() -> AsyncIterator[DocumentRepository]:
    """Connect to MongoDB for the duration of one command."""
    await init_db()
    try:
        yield MongoDocumentRepository()
    finally:
        await close_db()


def format_for_path(path: Path) -> ExportFormat:
    """Guess the file format from its extension."""
    if path.suffix.lower() == ".xlsx":
        return ExportFormat.XLSX
    return ExportFormat.CSV


def print_result(result: ImportResult, dry_run: bool) -> None:
    """Print an import summary followed by every error and warning."""
    prefix = "[dry run] " if dry_run else ""
    print(
        f"{prefix}Created: {result.created}, Skipped: {result.skipped}, "
        f"Errors: {len(result.errors)}, Warnings: {len(result.warnings)}"
    )
    for error in result.errors:
        field = f" [{error.field}]" if error.field else ""
        print(f"  ERROR   row {error.row}{field}: {error.message}")
    for warning in result.warnings:
        print(f"  WARNING row {warning.row}: {warning.message}")


async def run_export(
    export_format: ExportFormat,
    output: Optional[Path],
    status: Optional[TourStatus],
    limit: Optional[int],
) -> int:
    """Export tours to a file."""
    output = output or Path(generate_export_filename(export_format))
    async with open_repository() as repository:
        content = await export_tours(
            repository,
            export_format,
            ExportOptions(status=status, limit=limit),
        )
    output.write_bytes(content)
    print(f"Exported tours to {output}")
    return EXIT_OK


async def run_import(path: Path, import_format: ExportFormat, dry_run: bool) -> int:
    """Import tours from a file."""
    content = path.read_bytes()
    async with open_repository() as repository:
        result = await import_tours(
            repository,
            content,
            import_format,
            ImportOptions(dry_run=dry_run),
        )
    print_result(result, dry_run)

    if any(error.row == 0 for error in result.errors):
        return EXIT_FATAL
    if result.errors:
        return EXIT_ROW_ERRORS
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Import and export tours for Tourbridge",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export tours to a file")
    export_parser.add_argument(
        "--format", "-f",
        choices=[f.value for f in ExportFormat],
        default=ExportFormat.CSV.value,
        help="File format (default: csv)",
    )
    export_parser.add_argument(
        "--status", "-s",
        choices=[s.value for s in TourStatus],
        help="Only export tours with this status",
    )
    export_parser.add_argument("--limit", "-n", type=int, help="Maximum number of tours")
    export_parser.add_argument("--output", "-o", type=Path, help="Output file path")

    # Import command
    import_parser = subparsers.add_parser("import", help="Import tours from a file")
    import_parser.add_argument("file", type=Path, help="CSV or XLSX file to import")
    import_parser.add_argument(
        "--format", "-f",
        choices=[f.value for f in ExportFormat],
        help="File format (default: from the file extension)",
    )
    import_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and resolve only, create nothing",
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FATAL

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "export":
            if args.limit is not None and args.limit < 1:
                print("Error: --limit must be at least 1")
                return EXIT_FATAL
            return asyncio.run(
                run_export(
                    ExportFormat(args.format),
                    args.output,
                    TourStatus(args.status) if args.status else None,
                    args.limit,
                )
            )

        if args.command == "import":
            if not args.file.is_file():
                print(f"Error: File '{args.file}' not found.")
                return EXIT_FATAL
            import_format = ExportFormat(args.format) if args.format else format_for_path(args.file)
            return asyncio.run(run_import(args.file, import_format, args.dry_run))

    except KeyboardInterrupt:
        print("\nAborted.")
        return EXIT_FATAL

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
