"""OData query-string construction.

Graph validates ``$select`` against the relations declared by ``$expand``, so
the expand clause is always emitted first.
"""

from typing import Any, Mapping, Optional, Sequence
from urllib.parse import urlencode

# Always selected so every returned item can be addressed again
ID_FIELD = "id"

# OData option names keep their "$" and "@" unescaped
_SAFE_CHARS = "$@,:"


def encode_query(
    fields: Optional[Sequence[str]] = None,
    expand: Optional[Sequence[str]] = None,
) -> str:
    """Build the ``$expand`` / ``$select`` query string.

    Args:
        fields: Fields to select; ``id`` is appended even when already present
        expand: Relations to expand

    Returns:
        Query string without leading ``?``; empty when both inputs are empty
    """
    params = []
    if expand:
        params.append(("$expand", ",".join(expand)))
    if fields:
        params.append(("$select", ",".join([*fields, ID_FIELD])))
    return urlencode(params, safe=_SAFE_CHARS)


def encode_options(options: Optional[Mapping[str, Any]] = None) -> str:
    """Url-encode extra query options, dropping falsy values."""
    if not options:
        return ""
    return urlencode({key: value for key, value in options.items() if value}, safe=_SAFE_CHARS)


def join_query(*parts: str) -> str:
    """Join encoded query fragments, skipping empty ones."""
    return "&".join(part for part in parts if part)


def build_url(base: str, *query_parts: str) -> str:
    """Append the joined query to ``base``; no stray ``?`` when it is empty."""
    query = join_query(*query_parts)
    if not query:
        return base
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{query}"
