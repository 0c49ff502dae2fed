"""Detection of the "access token expired" error.

Graph reports an expired token for drive calls through an error message
containing ``code: 80049228`` rather than a dedicated error code, so detection
is a substring match on that message. It breaks if the upstream rewords the
message; pass a different predicate to ``GraphAPI`` when that happens.
"""

import re
from typing import Any

EXPIRED_TOKEN_PATTERN = re.compile(r"code: 80049228", re.IGNORECASE)


def error_message(body: Any) -> str:
    """Return ``error.message`` from a Graph error body, or an empty string."""
    if not isinstance(body, dict):
        return ""
    error = body.get("error")
    if not isinstance(error, dict):
        return ""
    message = error.get("message")
    return message if isinstance(message, str) else ""


def is_token_expired(body: Any) -> bool:
    """Check whether a Graph error body signals an expired access token."""
    return bool(EXPIRED_TOKEN_PATTERN.search(error_message(body)))
