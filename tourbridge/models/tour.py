"""Tour document model for MongoDB with embedded subdocuments.

Localized fields are stored as a mapping of locale code to value, e.g.
``{"sv": "Gamla stan", "en": "Old Town", "de": "Altstadt"}``.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import BaseModel, Field

LocalizedText = dict[str, Optional[str]]


class HighlightItem(BaseModel):
    """A single tour highlight."""

    highlight: str


class InclusionItem(BaseModel):
    """An entry in the included / not included / what-to-bring lists."""

    item: Optional[str] = None


class Pricing(BaseModel):
    """Embedded pricing group."""

    basePrice: float = Field(ge=0)
    currency: str = "SEK"
    priceType: str
    groupDiscount: bool = False
    childPrice: Optional[float] = Field(default=None, ge=0)


class Duration(BaseModel):
    """Embedded duration group."""

    hours: float = Field(ge=0.5)
    durationText: Optional[LocalizedText] = None


class Logistics(BaseModel):
    """Embedded meeting point and transport information."""

    meetingPointName: LocalizedText
    meetingPointAddress: Optional[LocalizedText] = None
    coordinates: Optional[list[float]] = None  # [lng, lat]
    googleMapsLink: Optional[str] = None
    meetingPointInstructions: Optional[LocalizedText] = None
    endingPoint: Optional[LocalizedText] = None
    parkingInfo: Optional[LocalizedText] = None
    publicTransportInfo: Optional[LocalizedText] = None


class AgeRecommendation(BaseModel):
    """Embedded age recommendation group."""

    minimumAge: Optional[float] = Field(default=None, ge=0)
    childFriendly: bool = False
    teenFriendly: bool = False


class Accessibility(BaseModel):
    """Embedded accessibility group."""

    wheelchairAccessible: bool = False
    mobilityNotes: Optional[LocalizedText] = None
    hearingAssistance: bool = False
    visualAssistance: bool = False
    serviceAnimalsAllowed: bool = False


class TourImage(BaseModel):
    """A gallery entry referencing a Media document."""

    image: PydanticObjectId
    caption: Optional[LocalizedText] = None
    isPrimary: bool = False


class Tour(Document):
    """Tour document model, the core content type."""

    slug: Indexed(str, unique=True)
    title: LocalizedText
    shortDescription: LocalizedText
    description: dict[str, Optional[dict[str, Any]]] = Field(default_factory=dict)  # Rich text trees
    highlights: dict[str, list[HighlightItem]] = Field(default_factory=dict)

    pricing: Pricing
    duration: Duration
    logistics: Logistics

    included: dict[str, list[InclusionItem]] = Field(default_factory=dict)
    notIncluded: dict[str, list[InclusionItem]] = Field(default_factory=dict)
    whatToBring: dict[str, list[InclusionItem]] = Field(default_factory=dict)

    targetAudience: list[str] = Field(default_factory=list)
    difficultyLevel: Optional[str] = None
    ageRecommendation: AgeRecommendation = Field(default_factory=AgeRecommendation)
    accessibility: Accessibility = Field(default_factory=Accessibility)

    # Relationships (surrogate ids inside the store, slugs at the file boundary)
    guide: Indexed(PydanticObjectId)
    categories: list[PydanticObjectId] = Field(default_factory=list)
    neighborhoods: list[PydanticObjectId] = Field(default_factory=list)
    images: list[TourImage] = Field(default_factory=list)

    bokunExperienceId: Optional[str] = None
    availability: str = "available"
    maxGroupSize: Optional[float] = Field(default=None, ge=1)
    minGroupSize: Optional[float] = Field(default=None, ge=1)
    featured: bool = False
    status: Indexed(str) = "draft"

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "tours"

    def __repr__(self) -> str:
        return f"<Tour(id={self.id}, slug={self.slug}, status={self.status})>"
