"""Credential schemas and the refresh capability contract."""

from typing import Awaitable, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CredentialPair(BaseModel):
    """Access/refresh token pair.

    Frozen: a refresh produces a new pair, it never edits one in place.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(..., description="Bearer token sent with every Graph call")
    refresh_token: Optional[str] = Field(
        default=None, description="Token exchanged for a new pair when the access token expires"
    )


# Given a refresh token, yields a new pair or raises
RefreshCallback = Callable[[str], Awaitable[CredentialPair]]

# Called after each successful refresh, e.g. to persist the new pair
OnRefresh = Callable[[CredentialPair], Union[Awaitable[None], None]]
