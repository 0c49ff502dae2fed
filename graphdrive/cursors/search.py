"""Search cursor schema and codec.

The search API has no continuation link, so the client encodes the next
page's request parameters itself: base64(JSON) of ``from``, ``size`` and the
echoed sort state. Paging is reconstructible from the cursor alone; this
format is separate from link-derived cursors.

Reference: https://learn.microsoft.com/en-us/graph/api/resources/search-api-overview
"""

import base64
import binascii
import json
from typing import Any, Dict, List, Optional

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from graphdrive.core.logging import ContextualLogger

from ._base import BaseCursor


class SearchCursor(BaseCursor):
    """Request state for the next search page."""

    from_: int = Field(default=0, alias="from", ge=0, description="Offset of the next page")
    size: int = Field(..., gt=0, description="Page size")
    sort_properties: Optional[List[Dict[str, Any]]] = Field(
        default=None, alias="sortProperties", description="Echoed sort state"
    )

    def next_page(self) -> "SearchCursor":
        """Cursor for the page after this one."""
        return self.model_copy(update={"from_": self.from_ + self.size})

    def to_request(self) -> Dict[str, Any]:
        """Request fields this cursor contributes, in Graph naming."""
        return self.model_dump(by_alias=True, exclude_none=True)


def encode_cursor(cursor: SearchCursor) -> str:
    """Encode a search cursor as url-safe base64 JSON."""
    payload = json.dumps(cursor.to_request(), separators=(",", ":"), sort_keys=True)
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")


def decode_cursor(
    encoded: Optional[str], logger: Optional[ContextualLogger] = None
) -> Optional[SearchCursor]:
    """Decode a search cursor.

    Malformed input (bad base64, bad JSON, wrong shape) decodes to None, the
    "no cursor" signal, instead of raising.

    Args:
        encoded: Cursor from a previous search page
        logger: Caller's logger, told about ignored cursors
    """
    if not encoded:
        return None
    try:
        raw = base64.urlsafe_b64decode(encoded.encode("ascii"))
        data = json.loads(raw.decode("utf-8"))
        if not isinstance(data, dict):
            raise ValueError("cursor payload is not an object")
        return SearchCursor.model_validate(data)
    except (
        binascii.Error,
        UnicodeError,
        ValueError,
        PydanticValidationError,
    ) as e:
        if logger is not None:
            logger.debug(f"Ignoring malformed search cursor: {e}")
        return None
