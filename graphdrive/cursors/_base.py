"""Base cursor class for self-encoded pagination state."""

from pydantic import BaseModel, ConfigDict


class BaseCursor(BaseModel):
    """Base class for cursors the client encodes itself.

    Leverages Pydantic's built-in serialization:
    - model_dump() for dict serialization
    - model_validate() for deserialization

    Link-derived cursors (page and delta tokens) are plain strings handed out by
    the server and do not use this class.
    """

    model_config = ConfigDict(
        # Echoed request state is kept for forward compatibility
        extra="allow",
        populate_by_name=True,
    )
