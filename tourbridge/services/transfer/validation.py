"""Validation and coercion of raw spreadsheet rows.

A raw row maps physical column keys to untyped cell strings. ``TourRow``
coerces every cell to its final type, applies defaults and collects every
problem in the row at once; ``validate_row`` wraps it with row numbers.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Mapping, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError
from pydantic_core import PydanticCustomError

from tourbridge.schemas.transfer import ImportRowError, TourStatus

SHORT_DESCRIPTION_MAX = 160

Number = Union[int, float]


class Currency(str, Enum):
    SEK = "SEK"
    EUR = "EUR"
    USD = "USD"


class PriceType(str, Enum):
    PER_PERSON = "per_person"
    PER_GROUP = "per_group"
    CUSTOM = "custom"


class DifficultyLevel(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


class Availability(str, Enum):
    AVAILABLE = "available"
    SEASONAL = "seasonal"
    BY_REQUEST = "by_request"
    UNAVAILABLE = "unavailable"


def _clean(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value).strip()


def parse_number(text: str) -> Optional[Number]:
    """Parse a decimal string, returning None when it is not a finite number."""
    try:
        number = float(text)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    if number.is_integer():
        return int(number)
    return number


# =============================================================================
# Coercions
# =============================================================================


def required_text(message: str, max_length: Optional[int] = None) -> BeforeValidator:
    def check(value: Any) -> str:
        text = _clean(value)
        if not text:
            raise PydanticCustomError("required", message)
        if max_length is not None and len(text) > max_length:
            raise PydanticCustomError(
                "too_long", "Max {max_length} characters", {"max_length": max_length}
            )
        return text

    return BeforeValidator(check)


def optional_text(max_length: Optional[int] = None) -> BeforeValidator:
    def check(value: Any) -> Optional[str]:
        text = _clean(value)
        if not text:
            return None
        if max_length is not None and len(text) > max_length:
            raise PydanticCustomError(
                "too_long", "Max {max_length} characters", {"max_length": max_length}
            )
        return text

    return BeforeValidator(check)


def required_number(required_message: str, minimum: Number, minimum_message: str) -> BeforeValidator:
    def check(value: Any) -> Number:
        text = _clean(value)
        if not text:
            raise PydanticCustomError("required", required_message)
        number = parse_number(text)
        if number is None:
            raise PydanticCustomError("number", "Expected a number, got '{value}'", {"value": text})
        if number < minimum:
            raise PydanticCustomError("too_small", minimum_message)
        return number

    return BeforeValidator(check)


def _optional_number(value: Any) -> Optional[Number]:
    return parse_number(_clean(value))


def choice(
    options: type[Enum],
    default: Optional[Enum] = None,
    required_message: Optional[str] = None,
) -> BeforeValidator:
    allowed = [option.value for option in options]

    def check(value: Any) -> Any:
        text = _clean(value)
        if not text:
            if required_message:
                raise PydanticCustomError("required", required_message)
            return default
        if text not in allowed:
            raise PydanticCustomError(
                "choice",
                "Invalid value '{value}', expected one of: {expected}",
                {"value": text, "expected": ", ".join(allowed)},
            )
        return text

    return BeforeValidator(check)


def _flag(value: Any) -> bool:
    # Only the two literal tokens count as true
    text = _clean(value)
    return text == "true" or text == "1"


def _semicolon_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [_clean(item) for item in value if _clean(item)]
    text = _clean(value)
    if not text:
        return []
    return [item.strip() for item in text.split(";") if item.strip()]


def _point(value: Any) -> Optional[tuple[float, float]]:
    """Parse ``"lat,lng"`` into storage order ``(lng, lat)``."""
    parts = _clean(value).split(",")
    if len(parts) != 2:
        return None
    try:
        lat = float(parts[0].strip())
        lng = float(parts[1].strip())
    except ValueError:
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return (lng, lat)


OptionalText = Annotated[Optional[str], optional_text()]
OptionalNumber = Annotated[Optional[Number], BeforeValidator(_optional_number)]
Flag = Annotated[bool, BeforeValidator(_flag)]
SemicolonList = Annotated[list[str], BeforeValidator(_semicolon_list)]
ShortDescription = Annotated[Optional[str], optional_text(SHORT_DESCRIPTION_MAX)]


class TourRow(BaseModel):
    """A validated, fully typed tour row.

    Missing cells are treated like empty cells. Unknown columns are ignored.
    """

    model_config = ConfigDict(extra="ignore", validate_default=True)

    # === Required ===
    slug: Annotated[str, required_text("Slug is required")] = ""
    title_sv: Annotated[str, required_text("Swedish title is required")] = ""
    shortDescription_sv: Annotated[
        str, required_text("Swedish short description is required", SHORT_DESCRIPTION_MAX)
    ] = ""
    pricing_basePrice: Annotated[
        Number, required_number("Base price is required", 0, "Price must be >= 0")
    ] = ""
    pricing_priceType: Annotated[
        PriceType, choice(PriceType, required_message="Price type is required")
    ] = ""
    duration_hours: Annotated[
        Number, required_number("Duration is required", 0.5, "Minimum 0.5 hours")
    ] = ""
    guide_slug: Annotated[str, required_text("Guide slug is required")] = ""
    logistics_meetingPointName_sv: Annotated[
        str, required_text("Swedish meeting point name is required")
    ] = ""

    # === Localized text ===
    title_en: OptionalText = None
    title_de: OptionalText = None
    shortDescription_en: ShortDescription = None
    shortDescription_de: ShortDescription = None
    description_sv: OptionalText = None
    description_en: OptionalText = None
    description_de: OptionalText = None

    # === Pricing ===
    pricing_currency: Annotated[Currency, choice(Currency, default=Currency.SEK)] = Currency.SEK
    pricing_groupDiscount: Flag = False
    pricing_childPrice: OptionalNumber = None

    # === Duration ===
    duration_durationText_sv: OptionalText = None
    duration_durationText_en: OptionalText = None
    duration_durationText_de: OptionalText = None

    # === Logistics ===
    logistics_meetingPointName_en: OptionalText = None
    logistics_meetingPointName_de: OptionalText = None
    logistics_meetingPointAddress_sv: OptionalText = None
    logistics_meetingPointAddress_en: OptionalText = None
    logistics_meetingPointAddress_de: OptionalText = None
    logistics_coordinates: Annotated[Optional[tuple[float, float]], BeforeValidator(_point)] = None
    logistics_googleMapsLink: OptionalText = None
    logistics_meetingPointInstructions_sv: OptionalText = None
    logistics_meetingPointInstructions_en: OptionalText = None
    logistics_meetingPointInstructions_de: OptionalText = None
    logistics_endingPoint_sv: OptionalText = None
    logistics_endingPoint_en: OptionalText = None
    logistics_endingPoint_de: OptionalText = None
    logistics_parkingInfo_sv: OptionalText = None
    logistics_parkingInfo_en: OptionalText = None
    logistics_parkingInfo_de: OptionalText = None
    logistics_publicTransportInfo_sv: OptionalText = None
    logistics_publicTransportInfo_en: OptionalText = None
    logistics_publicTransportInfo_de: OptionalText = None

    # === Localized arrays (semicolon-separated) ===
    highlights_sv: SemicolonList = []
    highlights_en: SemicolonList = []
    highlights_de: SemicolonList = []
    included_sv: SemicolonList = []
    included_en: SemicolonList = []
    included_de: SemicolonList = []
    notIncluded_sv: SemicolonList = []
    notIncluded_en: SemicolonList = []
    notIncluded_de: SemicolonList = []
    whatToBring_sv: SemicolonList = []
    whatToBring_en: SemicolonList = []
    whatToBring_de: SemicolonList = []

    # === Audience & difficulty ===
    targetAudience: SemicolonList = []
    difficultyLevel: Annotated[Optional[DifficultyLevel], choice(DifficultyLevel)] = None
    ageRecommendation_minimumAge: OptionalNumber = None
    ageRecommendation_childFriendly: Flag = False
    ageRecommendation_teenFriendly: Flag = False

    # === Accessibility ===
    accessibility_wheelchairAccessible: Flag = False
    accessibility_mobilityNotes_sv: OptionalText = None
    accessibility_mobilityNotes_en: OptionalText = None
    accessibility_mobilityNotes_de: OptionalText = None
    accessibility_hearingAssistance: Flag = False
    accessibility_visualAssistance: Flag = False
    accessibility_serviceAnimalsAllowed: Flag = False

    # === Relationships (semicolon-separated slugs) ===
    categories: SemicolonList = []
    neighborhoods: SemicolonList = []

    # === Status/meta ===
    bokunExperienceId: OptionalText = None
    availability: Annotated[
        Availability, choice(Availability, default=Availability.AVAILABLE)
    ] = Availability.AVAILABLE
    maxGroupSize: OptionalNumber = None
    minGroupSize: OptionalNumber = None
    featured: Flag = False
    status: Annotated[TourStatus, choice(TourStatus, default=TourStatus.DRAFT)] = TourStatus.DRAFT


@dataclass
class RowValidation:
    """Outcome of validating one row: typed data or field errors."""

    row: int
    data: Optional[TourRow] = None
    errors: list[ImportRowError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.data is not None and not self.errors


def validate_row(row: Mapping[str, Any], row_number: int) -> RowValidation:
    """Validate one raw row.

    Args:
        row: Physical column key -> raw cell value. Keys may be missing.
        row_number: 1-indexed sheet row (the header is row 1).

    Returns:
        RowValidation with either ``data`` or every field error of the row.
    """
    try:
        data = TourRow.model_validate(dict(row))
    except ValidationError as e:
        errors = [
            ImportRowError(
                row=row_number,
                field=".".join(str(part) for part in issue["loc"]) or None,
                message=issue["msg"],
            )
            for issue in e.errors()
        ]
        return RowValidation(row=row_number, errors=errors)

    return RowValidation(row=row_number, data=data)
