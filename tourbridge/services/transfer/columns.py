"""Column layout for tour spreadsheets.

``TOUR_COLUMNS`` is the single source of truth for the tabular form of a
tour: header generation, export flattening, header matching on import and
spreadsheet styling all walk it in order. A localized definition expands to
one physical column per locale, keyed ``{key}_{locale}``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence


class Locale(str, Enum):
    """Content languages, in column order."""

    SV = "sv"
    EN = "en"
    DE = "de"


LOCALES: tuple[Locale, ...] = tuple(Locale)

DEFAULT_LOCALE = Locale.SV

# Repository read mode returning every locale of localized fields
ALL_LOCALES = "all"

# Locale display names used in header labels
LOCALE_LABELS: dict[Locale, str] = {
    Locale.SV: "Swedish",
    Locale.EN: "English",
    Locale.DE: "German",
}


class ColumnType(str, Enum):
    """Physical cell type of a column definition."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    MULTISELECT = "multiselect"
    ARRAY = "array"
    RELATIONSHIP = "relationship"
    RELATIONSHIP_MANY = "relationshipMany"
    RICHTEXT = "richtext"
    POINT = "point"
    LOCALIZED_ARRAY = "localizedArray"


@dataclass(frozen=True)
class ColumnDefinition:
    """One logical column of the tour sheet."""

    key: str
    path: str  # Dotted path into the tour document
    type: ColumnType
    localized: bool = False
    item_field: Optional[str] = None  # Sub-field read from each array item
    label: Optional[str] = None

    @property
    def display_label(self) -> str:
        return self.label or self.key

    @property
    def physical_keys(self) -> list[str]:
        if self.localized:
            return [f"{self.key}_{locale.value}" for locale in LOCALES]
        return [self.key]


def _col(key: str, path: str, type: ColumnType, label: str, **kwargs) -> ColumnDefinition:
    return ColumnDefinition(key=key, path=path, type=type, label=label, **kwargs)


T = ColumnType

TOUR_COLUMNS: tuple[ColumnDefinition, ...] = (
    # Basic Information
    _col("slug", "slug", T.TEXT, "Slug (URL)"),
    _col("title", "title", T.TEXT, "Title", localized=True),
    _col("shortDescription", "shortDescription", T.TEXT, "Short Description", localized=True),
    _col("description", "description", T.RICHTEXT, "Full Description", localized=True),
    _col("highlights", "highlights", T.LOCALIZED_ARRAY, "Highlights", localized=True, item_field="highlight"),
    # Pricing
    _col("pricing_basePrice", "pricing.basePrice", T.NUMBER, "Base Price"),
    _col("pricing_currency", "pricing.currency", T.SELECT, "Currency"),
    _col("pricing_priceType", "pricing.priceType", T.SELECT, "Price Type"),
    _col("pricing_groupDiscount", "pricing.groupDiscount", T.BOOLEAN, "Group Discount?"),
    _col("pricing_childPrice", "pricing.childPrice", T.NUMBER, "Child Price"),
    # Duration
    _col("duration_hours", "duration.hours", T.NUMBER, "Duration (Hours)"),
    _col("duration_durationText", "duration.durationText", T.TEXT, "Duration Text", localized=True),
    # Logistics
    _col("logistics_meetingPointName", "logistics.meetingPointName", T.TEXT, "Meeting Point Name", localized=True),
    _col("logistics_meetingPointAddress", "logistics.meetingPointAddress", T.TEXT, "Meeting Point Address", localized=True),
    _col("logistics_coordinates", "logistics.coordinates", T.POINT, "Coordinates (lat,lng)"),
    _col("logistics_googleMapsLink", "logistics.googleMapsLink", T.TEXT, "Google Maps Link"),
    _col("logistics_meetingPointInstructions", "logistics.meetingPointInstructions", T.TEXT, "Meeting Instructions", localized=True),
    _col("logistics_endingPoint", "logistics.endingPoint", T.TEXT, "Ending Point", localized=True),
    _col("logistics_parkingInfo", "logistics.parkingInfo", T.TEXT, "Parking Info", localized=True),
    _col("logistics_publicTransportInfo", "logistics.publicTransportInfo", T.TEXT, "Public Transport Info", localized=True),
    # Inclusions
    _col("included", "included", T.LOCALIZED_ARRAY, "Included", localized=True, item_field="item"),
    _col("notIncluded", "notIncluded", T.LOCALIZED_ARRAY, "Not Included", localized=True, item_field="item"),
    _col("whatToBring", "whatToBring", T.LOCALIZED_ARRAY, "What to Bring", localized=True, item_field="item"),
    # Audience & Difficulty
    _col("targetAudience", "targetAudience", T.MULTISELECT, "Target Audience"),
    _col("difficultyLevel", "difficultyLevel", T.SELECT, "Difficulty Level"),
    _col("ageRecommendation_minimumAge", "ageRecommendation.minimumAge", T.NUMBER, "Minimum Age"),
    _col("ageRecommendation_childFriendly", "ageRecommendation.childFriendly", T.BOOLEAN, "Child Friendly?"),
    _col("ageRecommendation_teenFriendly", "ageRecommendation.teenFriendly", T.BOOLEAN, "Teen Friendly?"),
    # Accessibility
    _col("accessibility_wheelchairAccessible", "accessibility.wheelchairAccessible", T.BOOLEAN, "Wheelchair Accessible?"),
    _col("accessibility_mobilityNotes", "accessibility.mobilityNotes", T.TEXT, "Mobility Notes", localized=True),
    _col("accessibility_hearingAssistance", "accessibility.hearingAssistance", T.BOOLEAN, "Hearing Assistance?"),
    _col("accessibility_visualAssistance", "accessibility.visualAssistance", T.BOOLEAN, "Visual Assistance?"),
    _col("accessibility_serviceAnimalsAllowed", "accessibility.serviceAnimalsAllowed", T.BOOLEAN, "Service Animals Allowed?"),
    # Relationships
    _col("guide_slug", "guide", T.RELATIONSHIP, "Guide (slug)"),
    _col("categories", "categories", T.RELATIONSHIP_MANY, "Categories (slugs)"),
    _col("neighborhoods", "neighborhoods", T.RELATIONSHIP_MANY, "Neighborhoods (slugs)"),
    _col("images", "images", T.ARRAY, "Images (URLs)", item_field="image"),
    # Status/Meta
    _col("bokunExperienceId", "bokunExperienceId", T.TEXT, "Bokun Experience ID"),
    _col("availability", "availability", T.SELECT, "Availability"),
    _col("maxGroupSize", "maxGroupSize", T.NUMBER, "Max Group Size"),
    _col("minGroupSize", "minGroupSize", T.NUMBER, "Min Group Size"),
    _col("featured", "featured", T.BOOLEAN, "Featured?"),
    _col("status", "status", T.SELECT, "Status"),
)

# Header alias table: lowercase alias -> physical column key
HEADER_ALIASES: dict[str, str] = {
    "guide": "guide_slug",
}


def get_headers(
    columns: Sequence[ColumnDefinition] = TOUR_COLUMNS,
) -> tuple[list[str], list[str]]:
    """Generate the header row for a column layout.

    Args:
        columns: Column definitions in sheet order.

    Returns:
        Tuple of (display_headers, column_keys), position for position.
    """
    display_headers: list[str] = []
    column_keys: list[str] = []

    for col in columns:
        if col.localized:
            for locale in LOCALES:
                display_headers.append(f"{col.display_label} ({LOCALE_LABELS[locale]})")
                column_keys.append(f"{col.key}_{locale.value}")
        else:
            display_headers.append(col.display_label)
            column_keys.append(col.key)

    return display_headers, column_keys


def normalize_header(header: object) -> str:
    """Normalize a header cell for matching (trimmed, lowercase)."""
    if header is None:
        return ""
    return str(header).strip().lower()


def build_header_map(
    columns: Sequence[ColumnDefinition] = TOUR_COLUMNS,
) -> dict[str, str]:
    """Map normalized display labels, raw keys and aliases to column keys."""
    display_headers, column_keys = get_headers(columns)
    header_map: dict[str, str] = {}

    for header, key in zip(display_headers, column_keys):
        header_map[normalize_header(header)] = key

    # Raw keys map to themselves, for sheets using internal keys
    for key in column_keys:
        header_map[normalize_header(key)] = key

    for alias, key in HEADER_ALIASES.items():
        if key in column_keys:
            header_map.setdefault(alias, key)

    return header_map


def match_headers(headers: Iterable[object], header_map: dict[str, str]) -> list[Optional[str]]:
    """Resolve each header cell to a column key, or None when unrecognized."""
    return [header_map.get(normalize_header(h)) for h in headers]
