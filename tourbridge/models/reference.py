"""Reference documents that tours point at by slug."""

from datetime import datetime, timezone
from typing import Any, Optional

from beanie import Document, Indexed
from pydantic import Field


class Guide(Document):
    """A tour guide. Tours require exactly one."""

    name: str
    slug: Indexed(str, unique=True)
    email: Optional[str] = None
    languages: list[str] = Field(default_factory=list)
    bio: Optional[dict[str, Any]] = None  # Localized rich text

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "guides"


class Category(Document):
    """A tour theme or category."""

    name: dict[str, Optional[str]] = Field(default_factory=dict)  # Localized
    slug: Indexed(str, unique=True)
    type: Optional[str] = None
    icon: Optional[str] = None

    class Settings:
        name = "categories"


class Neighborhood(Document):
    """An area of the city covered by tours."""

    name: dict[str, Optional[str]] = Field(default_factory=dict)  # Localized
    slug: Indexed(str, unique=True)
    city: Optional[str] = None
    coordinates: Optional[list[float]] = None  # [lng, lat]

    class Settings:
        name = "neighborhoods"


class Media(Document):
    """An uploaded image."""

    filename: str
    url: Optional[str] = None
    alt: Optional[str] = None
    mime_type: Optional[str] = None

    class Settings:
        name = "media"
