"""Mapping of raw Graph responses into uniform shapes."""

from typing import Any, Callable, Dict, Iterable, Optional

from graphdrive.cursors.link import page_cursor
from graphdrive.schemas.drive import DriveFile, DriveItem, PagedResponse


def normalize_list(
    raw: Optional[Dict[str, Any]],
    item_filter: Optional[Callable[[Dict[str, Any]], bool]] = None,
) -> PagedResponse:
    """Normalize a paged collection response into ``{cursor, items}``.

    Args:
        raw: Raw Graph response (``value`` plus optional ``@odata.nextLink``)
        item_filter: Optional predicate; items it rejects are dropped

    Returns:
        PagedResponse whose cursor is the next link's ``$skiptoken``, or None
    """
    raw = raw or {}
    values: Iterable[Dict[str, Any]] = raw.get("value") or []
    if item_filter is not None:
        values = [value for value in values if item_filter(value)]
    return PagedResponse(
        cursor=page_cursor(raw),
        items=[DriveItem.from_graph(value) for value in values],
    )


def normalize_item(raw: Optional[Dict[str, Any]]) -> DriveFile:
    """Normalize a single drive item response."""
    raw = raw or {}
    package = raw.get("package")
    return DriveFile(
        name=raw.get("name"),
        web_url=raw.get("webUrl"),
        package_type=(package or {}).get("type") or "",
        parent_reference=raw.get("parentReference"),
    )
