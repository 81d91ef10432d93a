"""MongoDB document models for Tourbridge."""

from tourbridge.models.reference import Category, Guide, Media, Neighborhood
from tourbridge.models.tour import (
    Accessibility,
    AgeRecommendation,
    Duration,
    HighlightItem,
    InclusionItem,
    Logistics,
    Pricing,
    Tour,
    TourImage,
)

__all__ = [
    # Main documents
    "Tour",
    # Reference documents
    "Guide",
    "Category",
    "Neighborhood",
    "Media",
    # Embedded subdocuments
    "Accessibility",
    "AgeRecommendation",
    "Duration",
    "HighlightItem",
    "InclusionItem",
    "Logistics",
    "Pricing",
    "TourImage",
]
