"""Cursor extraction from server-provided continuation links.

Graph carries paging state in ``@odata.nextLink`` (``$skiptoken``) and change
feed state in ``@odata.deltaLink`` (``token``). Both are full URLs; the cursor
is one named query parameter inside them.
"""

from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlsplit

from graphdrive.core.constants import (
    DELTA_LINK_FIELD,
    DELTA_TOKEN_PARAM,
    NEXT_LINK_FIELD,
    PAGE_TOKEN_PARAM,
)


def extract_query_param(url: Optional[str], param: str) -> Optional[str]:
    """Return the first value of ``param`` in ``url``'s query string.

    Returns None for a missing URL, a URL without a query string, or a query
    string lacking the parameter. Never raises for malformed input.
    """
    if not url or not isinstance(url, str):
        return None
    try:
        query = urlsplit(url).query
    except ValueError:
        return None
    values = parse_qs(query, keep_blank_values=True).get(param)
    if not values or not values[0]:
        return None
    return values[0]


def extract_link_cursor(
    response: Optional[Dict[str, Any]], link_field: str, param: str
) -> Optional[str]:
    """Pull the cursor parameter out of a named link field of a response."""
    if not response:
        return None
    return extract_query_param(response.get(link_field), param)


def page_cursor(response: Optional[Dict[str, Any]]) -> Optional[str]:
    """Cursor for the next page of a collection, or None on the last page."""
    return extract_link_cursor(response, NEXT_LINK_FIELD, PAGE_TOKEN_PARAM)


def delta_cursor(response: Optional[Dict[str, Any]]) -> Optional[str]:
    """Cursor for the next change-feed call.

    A fully drained feed carries ``@odata.deltaLink``; a feed with more pages
    pending carries ``@odata.nextLink`` instead, whose ``token`` resumes it.
    """
    return extract_link_cursor(response, DELTA_LINK_FIELD, DELTA_TOKEN_PARAM) or (
        extract_link_cursor(response, NEXT_LINK_FIELD, DELTA_TOKEN_PARAM)
    )
