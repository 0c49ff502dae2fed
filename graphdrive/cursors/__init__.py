"""Cursor codecs for paged collections, the change feed and search."""

from .link import delta_cursor, extract_link_cursor, extract_query_param, page_cursor
from .search import SearchCursor, decode_cursor, encode_cursor

__all__ = [
    "SearchCursor",
    "decode_cursor",
    "delta_cursor",
    "encode_cursor",
    "extract_link_cursor",
    "extract_query_param",
    "page_cursor",
]
