"""Pydantic schemas for tour import and export."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ExportFormat(str, Enum):
    """Supported tabular formats."""

    CSV = "csv"
    XLSX = "xlsx"


class TourStatus(str, Enum):
    """Publication status of a tour."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ExportOptions(BaseModel):
    """Options for exporting tours."""

    status: Optional[TourStatus] = Field(None, description="Only export tours with this status")
    limit: Optional[int] = Field(None, ge=1, description="Maximum number of tours to export")


class ImportOptions(BaseModel):
    """Options for importing tours."""

    dry_run: bool = Field(False, description="Validate and resolve only, create nothing")


class ImportRowError(BaseModel):
    """A row that was not created."""

    row: int
    field: Optional[str] = None
    message: str


class ImportRowWarning(BaseModel):
    """A row that was skipped, or created with something left out."""

    row: int
    message: str


class ImportResult(BaseModel):
    """Aggregated outcome of one import run."""

    created: int = 0
    skipped: int = 0
    errors: list[ImportRowError] = Field(default_factory=list)
    warnings: list[ImportRowWarning] = Field(default_factory=list)

    def add_error(self, row: int, message: str, field: Optional[str] = None) -> None:
        self.errors.append(ImportRowError(row=row, field=field, message=message))

    def add_warning(self, row: int, message: str) -> None:
        self.warnings.append(ImportRowWarning(row=row, message=message))
