"""Tests for building tour payloads from validated rows."""

from tourbridge.services.transfer import ResolvedRelationships, build_tour_payload, validate_row


def _payload(row: dict, relationships: ResolvedRelationships | None = None) -> dict:
    data = validate_row(row, 2).data
    assert data is not None
    return build_tour_payload(data, relationships or ResolvedRelationships(guide="guide-1"))


def test_minimal_payload(minimal_row) -> None:
    """Required fields and defaults land in the nested structure."""
    payload = _payload(minimal_row)
    assert payload["slug"] == "test-tour"
    assert payload["pricing"] == {
        "basePrice": 500,
        "currency": "SEK",
        "priceType": "per_person",
        "groupDiscount": False,
        "childPrice": None,
    }
    assert payload["duration"]["hours"] == 2
    assert payload["guide"] == "guide-1"
    assert payload["categories"] == []
    assert payload["images"] == []
    assert payload["status"] == "draft"
    assert payload["availability"] == "available"
    assert payload["difficultyLevel"] is None


def test_every_locale_populated(minimal_row) -> None:
    """Localized fields carry all three locales."""
    payload = _payload(minimal_row)
    for field in (payload["title"], payload["shortDescription"], payload["logistics"]["meetingPointName"]):
        assert set(field) == {"sv", "en", "de"}


def test_fallback_to_default_locale(minimal_row) -> None:
    """Empty non-default locales take the Swedish value."""
    minimal_row["title_en"] = "Test EN"
    payload = _payload(minimal_row)
    assert payload["title"] == {"sv": "Test", "en": "Test EN", "de": "Test"}
    assert payload["logistics"]["meetingPointName"] == {"sv": "Central", "en": "Central", "de": "Central"}


def test_optional_text_without_default_is_null(minimal_row) -> None:
    """Optional text with no Swedish value stays null."""
    minimal_row["logistics_parkingInfo_en"] = "Parking garage"
    payload = _payload(minimal_row)
    assert payload["logistics"]["parkingInfo"] == {"sv": None, "en": "Parking garage", "de": None}
    assert payload["duration"]["durationText"] == {"sv": None, "en": None, "de": None}


def test_localized_item_lists(minimal_row) -> None:
    """Semicolon lists become item records, with fallback for empty locales."""
    minimal_row["highlights_sv"] = "Slottet;Storkyrkan"
    minimal_row["highlights_de"] = "Schloss"
    minimal_row["included_sv"] = "Guide"
    payload = _payload(minimal_row)
    assert payload["highlights"]["sv"] == [{"highlight": "Slottet"}, {"highlight": "Storkyrkan"}]
    assert payload["highlights"]["en"] == [{"highlight": "Slottet"}, {"highlight": "Storkyrkan"}]
    assert payload["highlights"]["de"] == [{"highlight": "Schloss"}]
    assert payload["included"]["en"] == [{"item": "Guide"}]
    assert payload["whatToBring"] == {"sv": [], "en": [], "de": []}


def test_richtext_description(minimal_row) -> None:
    """Descriptions become rich-text trees per locale."""
    minimal_row["description_sv"] = "# Rubrik\n\nText"
    payload = _payload(minimal_row)
    children = payload["description"]["en"]["root"]["children"]
    assert [child["type"] for child in children] == ["heading", "paragraph"]
    assert payload["description"]["sv"] == payload["description"]["en"]


def test_empty_description_is_empty_tree(minimal_row) -> None:
    """No description gives valid empty trees."""
    payload = _payload(minimal_row)
    assert payload["description"]["sv"]["root"]["children"] == []


def test_coordinates_stored_lng_lat(minimal_row) -> None:
    """Coordinates are stored in [lng, lat] order."""
    minimal_row["logistics_coordinates"] = "59.3293,18.0686"
    assert _payload(minimal_row)["logistics"]["coordinates"] == [18.0686, 59.3293]


def test_relationships_verbatim(minimal_row) -> None:
    """Resolved ids are used as given."""
    relationships = ResolvedRelationships(guide="g", categories=["c1", "c2"], neighborhoods=["n1"])
    payload = _payload(minimal_row, relationships)
    assert payload["guide"] == "g"
    assert payload["categories"] == ["c1", "c2"]
    assert payload["neighborhoods"] == ["n1"]


def test_flags_and_enums(minimal_row) -> None:
    """Booleans, enums and multiselects pass through typed."""
    minimal_row.update(
        {
            "accessibility_wheelchairAccessible": "true",
            "ageRecommendation_childFriendly": "1",
            "targetAudience": "families;couples",
            "difficultyLevel": "moderate",
            "pricing_currency": "EUR",
        }
    )
    payload = _payload(minimal_row)
    assert payload["accessibility"]["wheelchairAccessible"] is True
    assert payload["ageRecommendation"]["childFriendly"] is True
    assert payload["targetAudience"] == ["families", "couples"]
    assert payload["difficultyLevel"] == "moderate"
    assert payload["pricing"]["currency"] == "EUR"
