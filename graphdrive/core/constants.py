"""Protocol constants shared across clients."""

from enum import Enum
from typing import Optional, Union


class ConflictBehavior(str, Enum):
    """Conflict resolution modes for folder creation and content upload.

    Reference:
        https://learn.microsoft.com/en-us/onedrive/developer/rest-api/api/driveitem_put_content#conflict-resolution-behavior
    """

    FAIL = "fail"
    REPLACE = "replace"
    RENAME = "rename"


CONFLICT_BEHAVIOR_PARAM = "@microsoft.graph.conflictBehavior"

DEFAULT_SCOPES = [
    "offline_access",
    "openid",
    "user.read",
    "files.readwrite",
]

ROOT_FOLDER_ID = "root"

# Sites the tenant creates for itself, hidden from site listings
SYSTEM_SITES = ["appcatalog"]

NEXT_LINK_FIELD = "@odata.nextLink"
DELTA_LINK_FIELD = "@odata.deltaLink"
PAGE_TOKEN_PARAM = "$skiptoken"
DELTA_TOKEN_PARAM = "token"


def resolve_conflict_behavior(
    value: Optional[Union[str, ConflictBehavior]],
) -> ConflictBehavior:
    """Map caller input to a conflict behavior.

    Unrecognized values (including None) fall back to ``rename``.
    """
    if isinstance(value, ConflictBehavior):
        return value
    try:
        return ConflictBehavior(str(value).lower())
    except ValueError:
        return ConflictBehavior.RENAME
