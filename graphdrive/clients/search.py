"""Microsoft Search API client.

Search pages are addressed with a client-encoded cursor (see
``graphdrive.cursors.search``); the API itself hands out no continuation link.

Reference: https://learn.microsoft.com/en-us/graph/api/search-query?view=graph-rest-1.0
"""

from typing import Any, Dict, List, Optional, Sequence

from graphdrive.core.config import settings
from graphdrive.core.logging import ContextualLogger
from graphdrive.cursors.search import SearchCursor, decode_cursor, encode_cursor
from graphdrive.http_client.graph_api import GraphAPI
from graphdrive.query import build_url, encode_query
from graphdrive.schemas.drive import DriveItem, PagedResponse


class SearchClient:
    """Full-text search across the user's drives and sites."""

    def __init__(self, graph_api: GraphAPI, logger: Optional[ContextualLogger] = None):
        """Initialize the client.

        Args:
            graph_api: Authenticated request pipeline
            logger: Contextual logger (default: the pipeline's logger)
        """
        self.graph_api = graph_api
        self.logger = (logger or graph_api.logger).with_context(component="search")

    async def search(
        self,
        query: str = "",
        sort_properties: Optional[str] = None,
        entity_types: Sequence[str] = ("driveItem",),
        fields: Sequence[str] = (),
        cursor: Optional[str] = None,
        max_results: int = settings.SEARCH_MAX_RESULTS,
    ) -> PagedResponse:
        """Run a search query.

        Args:
            query: KQL query string, filters included
            sort_properties: Sort clause such as ``"createdDateTime DESC, name ASC"``
            entity_types: Entity types to search (``driveItem``, ``listItem``, ``site``...)
            fields: Fields of the matched entities to return
            cursor: Cursor from a previous page of the same search
            max_results: Page size, capped at ``settings.SEARCH_MAX_RESULTS``

        Returns:
            PagedResponse of matched resources; the cursor is None on the last page
        """
        page = decode_cursor(cursor, self.logger) or SearchCursor(
            from_=0,
            size=_page_size(max_results),
            sort_properties=parse_sort_properties(sort_properties),
        )
        # Cursors are client-readable, so the cap applies to decoded ones too
        page = page.model_copy(update={"size": _page_size(page.size)})
        request_data = _remove_nil_values(
            {
                "entityTypes": list(entity_types),
                "query": {"queryString": query or ""},
                **page.to_request(),
            }
        )

        self.logger.info("Searching in Microsoft account", extra={"dimensions": request_data})

        response = await self.graph_api.request(
            build_url("/search/query", encode_query(fields)),
            "POST",
            {"requests": [request_data]},
        )
        return format_response(page, response)


def parse_sort_properties(sort_properties: Optional[str]) -> Optional[List[Dict[str, Any]]]:
    """Parse ``"name ASC, lastModifiedDateTime DESC"`` into Graph sort properties.

    A missing direction sorts ascending.
    """
    if not sort_properties:
        return None
    parsed = []
    for sorting in sort_properties.split(","):
        values = sorting.split()
        if not values:
            continue
        parsed.append(
            {
                "name": values[0],
                "isDescending": len(values) > 1 and values[1].upper() == "DESC",
            }
        )
    return parsed or None


def format_response(page: SearchCursor, response: Optional[Dict[str, Any]]) -> PagedResponse:
    """Map a search response to ``{cursor, items}``."""
    containers = ((response or {}).get("value") or [{}])[0].get("hitsContainers") or [{}]
    container = containers[0]
    hits = container.get("hits") or []
    return PagedResponse(
        cursor=encode_cursor(page.next_page()) if container.get("moreResultsAvailable") else None,
        items=[DriveItem.from_graph(hit.get("resource") or {}) for hit in hits],
    )


def _page_size(requested: int) -> int:
    return max(1, min(requested, settings.SEARCH_MAX_RESULTS))


def _remove_nil_values(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}
