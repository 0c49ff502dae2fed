"""Drive item and paged response schemas.

Reference:
  https://learn.microsoft.com/en-us/graph/api/resources/driveitem?view=graph-rest-1.0
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DriveItem(BaseModel):
    """A drive entry (file, folder, site...) as returned by a list call.

    Unknown server fields are kept untouched; ``is_folder`` is derived from the
    presence of a non-null ``folder`` facet.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = None
    name: Optional[str] = None
    is_folder: bool = Field(default=False, alias="isFolder")

    @classmethod
    def from_graph(cls, payload: Dict[str, Any]) -> "DriveItem":
        """Build an item from a raw Graph payload."""
        return cls.model_validate({**payload, "isFolder": payload.get("folder") is not None})

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with server field names, ``isFolder`` included."""
        return self.model_dump(by_alias=True)


class DriveFile(BaseModel):
    """Single-item shape returned by ``get_file_by_id``."""

    name: Optional[str] = None
    web_url: Optional[str] = None
    package_type: str = ""
    parent_reference: Optional[Dict[str, Any]] = None


class PagedResponse(BaseModel):
    """Uniform envelope for paged collections.

    ``cursor`` is None exactly when no further page exists. Items keep server
    order and are not de-duplicated.
    """

    cursor: Optional[str] = None
    items: List[DriveItem] = Field(default_factory=list)


class DeltaBatch(BaseModel):
    """One change-feed batch plus the cursor for the next call.

    ``value`` is an ordered log of changes and must be applied in order.
    Every other field of the raw response is kept as an extra.
    """

    model_config = ConfigDict(extra="allow")

    value: List[Dict[str, Any]] = Field(default_factory=list)
    cursor: str
