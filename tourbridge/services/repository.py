"""Document repository used by the import and export services.

The transfer services only ever list a collection (optionally filtered) and
create single documents. ``DocumentRepository`` is that contract;
``MongoDocumentRepository`` implements it on the Beanie models.
"""

import logging
from typing import Any, Optional, Protocol

from beanie import Document, PydanticObjectId

from tourbridge.models import Category, Guide, Media, Neighborhood, Tour
from tourbridge.services.transfer.columns import ALL_LOCALES, LOCALES, TOUR_COLUMNS

logger = logging.getLogger(__name__)


class DocumentRepository(Protocol):
    """Minimal store interface consumed by the transfer services."""

    async def find(
        self,
        collection: str,
        where: Optional[dict[str, Any]] = None,
        limit: int = 0,
        depth: int = 0,
        locale: str = ALL_LOCALES,
    ) -> list[dict[str, Any]]:
        """Return documents of a collection as plain dicts."""
        ...

    async def create(self, collection: str, data: dict[str, Any]) -> Any:
        """Create one document and return its id."""
        ...


COLLECTION_MODELS: dict[str, type[Document]] = {
    model.Settings.name: model for model in (Tour, Guide, Category, Neighborhood, Media)
}


def _to_dict(doc: Document) -> dict[str, Any]:
    data = doc.model_dump(exclude={"revision_id"})
    data["id"] = doc.id
    return data


def _collapse_locale(tour: dict[str, Any], locale: str) -> None:
    """Replace every localized tour field by its value for one locale."""
    for col in TOUR_COLUMNS:
        if not col.localized:
            continue
        *parents, leaf = col.path.split(".")
        target: Any = tour
        for part in parents:
            target = target.get(part) if isinstance(target, dict) else None
        if isinstance(target, dict) and isinstance(target.get(leaf), dict):
            target[leaf] = target[leaf].get(locale)


class MongoDocumentRepository:
    """Beanie-backed repository keyed by collection name."""

    def _model(self, collection: str) -> type[Document]:
        try:
            return COLLECTION_MODELS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    async def _load_by_ids(self, model: type[Document], ids: set) -> dict[Any, dict[str, Any]]:
        if not ids:
            return {}
        docs = await model.find({"_id": {"$in": list(ids)}}).to_list()
        return {doc.id: _to_dict(doc) for doc in docs}

    async def _populate_tours(self, tours: list[dict[str, Any]]) -> None:
        """Replace relationship ids with the referenced documents, in one query per collection."""
        guide_ids = {tour["guide"] for tour in tours if tour.get("guide")}
        category_ids = {cid for tour in tours for cid in tour.get("categories") or []}
        neighborhood_ids = {nid for tour in tours for nid in tour.get("neighborhoods") or []}
        media_ids = {
            image["image"] for tour in tours for image in tour.get("images") or [] if image.get("image")
        }

        guides = await self._load_by_ids(Guide, guide_ids)
        categories = await self._load_by_ids(Category, category_ids)
        neighborhoods = await self._load_by_ids(Neighborhood, neighborhood_ids)
        media = await self._load_by_ids(Media, media_ids)

        # Dangling references stay as bare ids
        for tour in tours:
            tour["guide"] = guides.get(tour.get("guide"), tour.get("guide"))
            tour["categories"] = [categories.get(cid, cid) for cid in tour.get("categories") or []]
            tour["neighborhoods"] = [
                neighborhoods.get(nid, nid) for nid in tour.get("neighborhoods") or []
            ]
            for image in tour.get("images") or []:
                image["image"] = media.get(image.get("image"), image.get("image"))

    async def find(
        self,
        collection: str,
        where: Optional[dict[str, Any]] = None,
        limit: int = 0,
        depth: int = 0,
        locale: str = ALL_LOCALES,
    ) -> list[dict[str, Any]]:
        model = self._model(collection)
        query = model.find(where or {})
        if limit:
            query = query.limit(limit)
        docs = [_to_dict(doc) for doc in await query.to_list()]

        if model is Tour:
            if depth > 0:
                await self._populate_tours(docs)
            if locale != ALL_LOCALES:
                if locale not in {loc.value for loc in LOCALES}:
                    raise ValueError(f"Unknown locale: {locale}")
                for doc in docs:
                    _collapse_locale(doc, locale)

        logger.debug("Loaded %d documents from %s", len(docs), collection)
        return docs

    async def create(self, collection: str, data: dict[str, Any]) -> PydanticObjectId:
        model = self._model(collection)
        doc = model(**data)
        await doc.insert()
        return doc.id
