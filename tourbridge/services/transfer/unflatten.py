"""Build tour creation payloads from validated rows.

Relationship ids are resolved beforehand by the import orchestrator and
passed in as ``ResolvedRelationships``; nothing here touches the repository.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from tourbridge.services.transfer.columns import DEFAULT_LOCALE, LOCALES
from tourbridge.services.transfer.richtext import plain_to_richtext
from tourbridge.services.transfer.validation import TourRow


@dataclass
class ResolvedRelationships:
    """Surrogate ids for the relationships of one row."""

    guide: Any
    categories: list[Any] = field(default_factory=list)
    neighborhoods: list[Any] = field(default_factory=list)


def _localized(row: TourRow, key: str) -> dict[str, Any]:
    """Collect ``{key}_{locale}`` values, filling empty locales from the default."""
    values = {locale.value: getattr(row, f"{key}_{locale.value}") for locale in LOCALES}
    fallback = values[DEFAULT_LOCALE.value]
    return {locale: value or fallback for locale, value in values.items()}


def _localized_items(row: TourRow, key: str, item_field: str) -> dict[str, list[dict[str, str]]]:
    return {
        locale: [{item_field: text} for text in texts]
        for locale, texts in _localized(row, key).items()
    }


def _point(row: TourRow) -> Optional[list[float]]:
    if row.logistics_coordinates is None:
        return None
    return list(row.logistics_coordinates)


def build_tour_payload(row: TourRow, relationships: ResolvedRelationships) -> dict[str, Any]:
    """Turn a validated row into a tour creation payload.

    Every localized field carries every locale. Images are not part of the
    sheet round trip and are left empty.
    """
    description = {
        locale: plain_to_richtext(text) for locale, text in _localized(row, "description").items()
    }

    return {
        "slug": row.slug,
        "title": _localized(row, "title"),
        "shortDescription": _localized(row, "shortDescription"),
        "description": description,
        "highlights": _localized_items(row, "highlights", "highlight"),
        "pricing": {
            "basePrice": row.pricing_basePrice,
            "currency": row.pricing_currency.value,
            "priceType": row.pricing_priceType.value,
            "groupDiscount": row.pricing_groupDiscount,
            "childPrice": row.pricing_childPrice,
        },
        "duration": {
            "hours": row.duration_hours,
            "durationText": _localized(row, "duration_durationText"),
        },
        "logistics": {
            "meetingPointName": _localized(row, "logistics_meetingPointName"),
            "meetingPointAddress": _localized(row, "logistics_meetingPointAddress"),
            "coordinates": _point(row),
            "googleMapsLink": row.logistics_googleMapsLink,
            "meetingPointInstructions": _localized(row, "logistics_meetingPointInstructions"),
            "endingPoint": _localized(row, "logistics_endingPoint"),
            "parkingInfo": _localized(row, "logistics_parkingInfo"),
            "publicTransportInfo": _localized(row, "logistics_publicTransportInfo"),
        },
        "included": _localized_items(row, "included", "item"),
        "notIncluded": _localized_items(row, "notIncluded", "item"),
        "whatToBring": _localized_items(row, "whatToBring", "item"),
        "targetAudience": list(row.targetAudience),
        "difficultyLevel": row.difficultyLevel.value if row.difficultyLevel else None,
        "ageRecommendation": {
            "minimumAge": row.ageRecommendation_minimumAge,
            "childFriendly": row.ageRecommendation_childFriendly,
            "teenFriendly": row.ageRecommendation_teenFriendly,
        },
        "accessibility": {
            "wheelchairAccessible": row.accessibility_wheelchairAccessible,
            "mobilityNotes": _localized(row, "accessibility_mobilityNotes"),
            "hearingAssistance": row.accessibility_hearingAssistance,
            "visualAssistance": row.accessibility_visualAssistance,
            "serviceAnimalsAllowed": row.accessibility_serviceAnimalsAllowed,
        },
        "guide": relationships.guide,
        "categories": list(relationships.categories),
        "neighborhoods": list(relationships.neighborhoods),
        "images": [],
        "bokunExperienceId": row.bokunExperienceId,
        "availability": row.availability.value,
        "maxGroupSize": row.maxGroupSize,
        "minGroupSize": row.minGroupSize,
        "featured": row.featured,
        "status": row.status.value,
    }
