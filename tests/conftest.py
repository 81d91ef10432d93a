"""Pytest configuration and fixtures for Tourbridge tests."""

import copy
import os
import uuid
from typing import Any, Optional

import pytest
import pytest_asyncio
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from tourbridge.config import reset_settings
from tourbridge.database import get_document_models

# MongoDB connection URL for tests (can be overridden with env var)
TEST_MONGODB_URL = os.environ.get("TEST_MONGODB_URL", "mongodb://localhost:27017")


class FakeRepository:
    """In-memory document repository recording every call."""

    def __init__(
        self,
        collections: Optional[dict[str, list[dict[str, Any]]]] = None,
        failing_slugs: Optional[set[str]] = None,
    ):
        self.collections = {name: list(docs) for name, docs in (collections or {}).items()}
        self.failing_slugs = failing_slugs or set()
        self.find_calls: list[dict[str, Any]] = []
        self.created: list[tuple[str, dict[str, Any]]] = []

    async def find(
        self,
        collection: str,
        where: Optional[dict[str, Any]] = None,
        limit: int = 0,
        depth: int = 0,
        locale: str = "all",
    ) -> list[dict[str, Any]]:
        self.find_calls.append(
            {"collection": collection, "where": where, "limit": limit, "depth": depth, "locale": locale}
        )
        docs = self.collections.get(collection, [])
        if where:
            docs = [doc for doc in docs if all(doc.get(k) == v for k, v in where.items())]
        if limit:
            docs = docs[:limit]
        return copy.deepcopy(docs)

    async def create(self, collection: str, data: dict[str, Any]) -> str:
        if data.get("slug") in self.failing_slugs:
            raise RuntimeError("E11000 duplicate key error")
        docs = self.collections.setdefault(collection, [])
        doc_id = f"{collection}-{len(docs) + 1}"
        docs.append({**data, "id": doc_id})
        self.created.append((collection, data))
        return doc_id


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Load settings from defaults only, isolated from local config files."""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("TOURBRIDGE_"):
            monkeypatch.delenv(name)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def reference_data() -> dict[str, list[dict[str, Any]]]:
    """Guides, categories and neighborhoods known to the store."""
    return {
        "guides": [{"id": "guide-1", "slug": "erik-guide", "name": "Erik"}],
        "categories": [
            {"id": "cat-1", "slug": "history"},
            {"id": "cat-2", "slug": "food"},
        ],
        "neighborhoods": [{"id": "hood-1", "slug": "gamla-stan"}],
    }


@pytest.fixture
def repository(reference_data) -> FakeRepository:
    """Repository with reference data and no tours."""
    return FakeRepository(reference_data)


@pytest.fixture
def minimal_row() -> dict[str, str]:
    """Smallest row that passes validation."""
    return {
        "slug": "test-tour",
        "title_sv": "Test",
        "shortDescription_sv": "x",
        "pricing_basePrice": "500",
        "pricing_priceType": "per_person",
        "duration_hours": "2",
        "guide_slug": "erik-guide",
        "logistics_meetingPointName_sv": "Central",
    }


def _localized(sv: str, en: Optional[str] = None, de: Optional[str] = None) -> dict[str, Optional[str]]:
    return {"sv": sv, "en": en, "de": de}


def _paragraphs(*texts: str) -> dict[str, Any]:
    return {
        "root": {
            "type": "root",
            "children": [
                {"type": "paragraph", "children": [{"type": "text", "text": text}]}
                for text in texts
            ],
        }
    }


@pytest.fixture
def sample_tour() -> dict[str, Any]:
    """A tour as the repository returns it: every locale loaded, relationships populated."""
    return {
        "id": "tour-1",
        "slug": "old-town-walk",
        "title": _localized("Gamla stan", "Old Town", "Altstadt"),
        "shortDescription": _localized("Kort", "Short", "Kurz"),
        "description": {
            "sv": _paragraphs("Första stycket", "Andra stycket"),
            "en": _paragraphs("First paragraph"),
            "de": None,
        },
        "highlights": {
            "sv": [{"highlight": "Slottet"}, {"highlight": "Storkyrkan"}],
            "en": [{"highlight": "The Palace"}],
            "de": [],
        },
        "pricing": {
            "basePrice": 450.0,
            "currency": "SEK",
            "priceType": "per_person",
            "groupDiscount": True,
            "childPrice": 225.5,
        },
        "duration": {"hours": 2.5, "durationText": _localized("2,5 timmar", "2.5 hours")},
        "logistics": {
            "meetingPointName": _localized("Obelisken", "The Obelisk", "Der Obelisk"),
            "meetingPointAddress": _localized("Slottsbacken 1"),
            "coordinates": [18.0686, 59.3293],
            "googleMapsLink": "https://maps.example.com/obelisk",
            "meetingPointInstructions": None,
            "endingPoint": _localized("Stortorget", "Stortorget", "Stortorget"),
            "parkingInfo": None,
            "publicTransportInfo": _localized("T-bana Gamla stan"),
        },
        "included": {"sv": [{"item": "Guide"}, {"item": "Fika"}], "en": [{"item": "Guide"}], "de": []},
        "notIncluded": {"sv": [{"item": "Lunch"}], "en": [], "de": []},
        "whatToBring": {"sv": [], "en": [], "de": []},
        "targetAudience": ["families", "history_buffs"],
        "difficultyLevel": "easy",
        "ageRecommendation": {"minimumAge": 6, "childFriendly": True, "teenFriendly": False},
        "accessibility": {
            "wheelchairAccessible": False,
            "mobilityNotes": _localized("Kullersten"),
            "hearingAssistance": False,
            "visualAssistance": False,
            "serviceAnimalsAllowed": True,
        },
        "guide": {"id": "guide-1", "slug": "erik-guide", "name": "Erik"},
        "categories": [{"id": "cat-1", "slug": "history"}, "cat-unresolved"],
        "neighborhoods": [{"id": "hood-1", "slug": "gamla-stan"}],
        "images": [
            {"image": {"id": "media-1", "url": "https://cdn.example.com/a.jpg"}, "isPrimary": True},
            {"image": "media-2"},
        ],
        "bokunExperienceId": "12345",
        "availability": "seasonal",
        "maxGroupSize": 15,
        "minGroupSize": None,
        "featured": True,
        "status": "published",
    }


# =============================================================================
# MongoDB fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def mongo_client():
    """Create a MongoDB client for testing, skipping when no server answers."""
    client = AsyncIOMotorClient(
        TEST_MONGODB_URL,
        maxPoolSize=10,
        minPoolSize=1,
        serverSelectionTimeoutMS=2000,
    )
    try:
        await client.admin.command("ping")
    except PyMongoError:
        client.close()
        pytest.skip(f"MongoDB not available at {TEST_MONGODB_URL}")
    yield client
    client.close()


@pytest_asyncio.fixture(scope="function")
async def init_test_db(mongo_client):
    """Initialize Beanie with a unique test database, dropped afterwards."""
    db_name = f"test_tourbridge_{uuid.uuid4().hex[:8]}"
    db = mongo_client[db_name]

    await init_beanie(
        database=db,
        document_models=get_document_models(),
    )
    yield db

    await mongo_client.drop_database(db_name)


@pytest.fixture
def make_repository():
    """Factory for repositories with custom contents."""
    return FakeRepository
