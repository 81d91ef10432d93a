"""Flatten tour documents into string rows for export.

The input document is the repository's view of a tour with every locale
loaded (localized fields are ``{locale: value}`` maps) and relationships
populated to the given depth. Rendering never fails: a field that cannot be
rendered becomes an empty string.
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Callable, Optional

from tourbridge.services.transfer.columns import (
    LOCALES,
    TOUR_COLUMNS,
    ColumnDefinition,
    ColumnType,
)
from tourbridge.services.transfer.richtext import richtext_to_plain

ARRAY_SEPARATOR = ";"


def get_path(doc: Any, path: str) -> Any:
    """Read a dotted path from nested mappings, None when any step is missing."""
    value = doc
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def format_number(value: float) -> str:
    """Render a number without a trailing ``.0`` for whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _document_id(value: Mapping) -> Optional[str]:
    doc_id = value.get("id", value.get("_id"))
    return str(doc_id) if doc_id is not None else None


def _render_scalar(col: ColumnDefinition, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, (Mapping, list, tuple)):
        return ""
    return str(value)


def _render_boolean(col: ColumnDefinition, value: Any) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    return ""


def _render_multiselect(col: ColumnDefinition, value: Any) -> str:
    if not _is_list(value):
        return ""
    return ARRAY_SEPARATOR.join(_render_scalar(col, item) for item in value if item is not None)


def _render_media(col: ColumnDefinition, value: Any) -> str:
    if not _is_list(value):
        return ""
    urls = []
    for entry in value:
        media = entry.get(col.item_field) if col.item_field and isinstance(entry, Mapping) else entry
        # Unpopulated media references carry no URL
        if isinstance(media, Mapping) and media.get("url"):
            urls.append(str(media["url"]))
    return ARRAY_SEPARATOR.join(urls)


def _render_relationship(col: ColumnDefinition, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Mapping):
        if value.get("slug"):
            return str(value["slug"])
        return _document_id(value) or ""
    return str(value)


def _render_relationship_many(col: ColumnDefinition, value: Any) -> str:
    if not _is_list(value):
        return ""
    slugs = [
        str(entry["slug"])
        for entry in value
        if isinstance(entry, Mapping) and entry.get("slug")
    ]
    return ARRAY_SEPARATOR.join(slugs)


def _render_richtext(col: ColumnDefinition, value: Any) -> str:
    return richtext_to_plain(value)


def _render_point(col: ColumnDefinition, value: Any) -> str:
    # Stored as [lng, lat], rendered as "lat,lng"
    if not _is_list(value) or len(value) != 2:
        return ""
    lng, lat = value
    if not all(isinstance(n, (int, float)) and not isinstance(n, bool) for n in (lat, lng)):
        return ""
    return f"{format_number(lat)},{format_number(lng)}"


def _render_localized_array(col: ColumnDefinition, value: Any) -> str:
    if not _is_list(value):
        return ""
    texts = []
    for entry in value:
        text = entry.get(col.item_field) if isinstance(entry, Mapping) else entry
        if text:
            texts.append(str(text))
    return ARRAY_SEPARATOR.join(texts)


_RENDERERS: dict[ColumnType, Callable[[ColumnDefinition, Any], str]] = {
    ColumnType.TEXT: _render_scalar,
    ColumnType.NUMBER: _render_scalar,
    ColumnType.SELECT: _render_scalar,
    ColumnType.BOOLEAN: _render_boolean,
    ColumnType.MULTISELECT: _render_multiselect,
    ColumnType.ARRAY: _render_media,
    ColumnType.RELATIONSHIP: _render_relationship,
    ColumnType.RELATIONSHIP_MANY: _render_relationship_many,
    ColumnType.RICHTEXT: _render_richtext,
    ColumnType.POINT: _render_point,
    ColumnType.LOCALIZED_ARRAY: _render_localized_array,
}


def render_value(col: ColumnDefinition, value: Any) -> str:
    """Render one cell of a column, degrading to an empty string."""
    try:
        return _RENDERERS[col.type](col, value)
    except (AttributeError, KeyError, TypeError, ValueError):
        return ""


def flatten_tour(
    doc: Mapping[str, Any],
    columns: Sequence[ColumnDefinition] = TOUR_COLUMNS,
) -> dict[str, str]:
    """Flatten one tour document into a row keyed by physical column key.

    Every physical column is present in the result, in registry order.
    Localized values are read per locale and never substituted from another
    locale.
    """
    row: dict[str, str] = {}

    for col in columns:
        value = get_path(doc, col.path)
        if col.localized:
            locale_map = value if isinstance(value, Mapping) else {}
            for locale in LOCALES:
                row[f"{col.key}_{locale.value}"] = render_value(col, locale_map.get(locale.value))
        else:
            row[col.key] = render_value(col, value)

    return row
