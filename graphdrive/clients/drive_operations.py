"""Drive operations shared by the OneDrive and SharePoint clients.

Each backend client composes one ``DriveOperations`` and hands it item paths
built from its own resource-path template. Operations here know nothing about
which backend a path belongs to.

Reference:
  https://learn.microsoft.com/en-us/graph/api/resources/driveitem?view=graph-rest-1.0
  https://learn.microsoft.com/en-us/graph/api/driveitem-invite?view=graph-rest-1.0
  https://learn.microsoft.com/en-us/graph/api/driveitem-createlink?view=graph-rest-1.0
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from urllib.parse import quote

from graphdrive.core.constants import (
    CONFLICT_BEHAVIOR_PARAM,
    PAGE_TOKEN_PARAM,
    ConflictBehavior,
    resolve_conflict_behavior,
)
from graphdrive.core.exceptions import PermissionNotFoundError
from graphdrive.core.logging import ContextualLogger
from graphdrive.http_client.graph_api import GraphAPI
from graphdrive.normalizer import normalize_item, normalize_list
from graphdrive.query import build_url, encode_options, encode_query
from graphdrive.schemas.drive import DriveFile, DriveItem, PagedResponse


class DriveOperations:
    """Item-level operations over any drive reachable through a Graph path."""

    def __init__(self, graph_api: GraphAPI, logger: Optional[ContextualLogger] = None):
        """Initialize the operations.

        Args:
            graph_api: Authenticated request pipeline
            logger: Contextual logger (default: the pipeline's logger)
        """
        self.graph_api = graph_api
        self.logger = logger or graph_api.logger

    async def get_file_by_id(
        self,
        item_path: str,
        fields: Optional[Sequence[str]] = None,
        expand: Optional[Sequence[str]] = None,
    ) -> DriveFile:
        """Get a single drive item.

        Args:
            item_path: Graph path of the item
            fields: Fields to select
            expand: Relations to expand

        Returns:
            DriveFile with name, web URL, package type and parent reference
        """
        data = await self.graph_api.request(build_url(item_path, encode_query(fields, expand)))
        return normalize_item(data)

    async def get_files_from(
        self,
        folder_path: str,
        fields: Optional[Sequence[str]] = None,
        expand: Optional[Sequence[str]] = None,
        options: Optional[Mapping[str, Any]] = None,
        cursor: Optional[str] = None,
    ) -> PagedResponse:
        """List the children of a folder, one page at a time.

        Args:
            folder_path: Graph path of the folder
            fields: Fields to select
            expand: Relations to expand
            options: Extra query options (``$top``, ``$orderby``...); falsy values are dropped
            cursor: Cursor from a previous page of the same listing

        Returns:
            PagedResponse; its cursor fetches the next page
        """
        url = build_url(
            f"{folder_path}/children",
            encode_query(fields, expand),
            encode_options(options),
            encode_options({PAGE_TOKEN_PARAM: cursor}),
        )
        return normalize_list(await self.graph_api.request(url))

    async def get_preview(self, item_path: str) -> List[Dict[str, Any]]:
        """Get the thumbnail sets of an item."""
        data = await self.graph_api.request(f"{item_path}/thumbnails")
        return (data or {}).get("value", [])

    async def share_for_email(
        self,
        item_path: str,
        email: str,
        roles: Sequence[str] = ("read",),
        message: Optional[str] = None,
    ) -> bool:
        """Grant a user access to an item without sending an invitation mail."""
        body: Dict[str, Any] = {
            "requireSignIn": True,
            "sendInvitation": False,
            "roles": list(roles),
            "recipients": [{"email": email}],
        }
        if message:
            body["message"] = message
        await self.graph_api.request(f"{item_path}/invite", "POST", body)
        return True

    async def create_share_link(
        self, item_path: str, link_type: str = "view", scope: str = "anonymous"
    ) -> Dict[str, Any]:
        """Create a sharing link; returns the permission carrying it."""
        return await self.graph_api.request(
            f"{item_path}/createLink", "POST", {"type": link_type, "scope": scope}
        )

    async def list_permissions(self, item_path: str) -> List[Dict[str, Any]]:
        """List the permissions set on an item."""
        data = await self.graph_api.request(f"{item_path}/permissions")
        return (data or {}).get("value", [])

    async def unshare_from(self, item_path: str, email: Optional[str] = None) -> None:
        """Remove one permission from an item.

        With ``email``, removes the permission whose invitation targets that
        address. Without it, removes the first sharing link that carries no
        invitation.

        Raises:
            PermissionNotFoundError: No permission matched
        """
        permissions = await self.list_permissions(item_path)
        permission = next(
            (p for p in permissions if _matches_permission(p, email)),
            None,
        )
        if permission is None:
            self.logger.error(
                "Could not revoke permission from file",
                extra={"dimensions": {"item_path": item_path, "email": email}},
            )
            raise PermissionNotFoundError(item_path, email)

        await self.unshare_permission(item_path, permission["id"])

    async def unshare_permission(self, item_path: str, permission_id: str) -> None:
        """Delete a permission by its identifier."""
        await self.graph_api.request(f"{item_path}/permissions/{permission_id}", "DELETE")

    async def create_folder(
        self,
        parent_path: str,
        name: str,
        conflict_behavior: Optional[Union[str, ConflictBehavior]] = None,
    ) -> DriveItem:
        """Create a folder under ``parent_path``."""
        behavior = resolve_conflict_behavior(conflict_behavior)
        data = await self.graph_api.request(
            f"{parent_path}/children",
            "POST",
            {"name": name, "folder": {}, CONFLICT_BEHAVIOR_PARAM: behavior.value},
        )
        return DriveItem.from_graph(data or {})

    async def upload_file(
        self,
        parent_path: str,
        filename: str,
        content: bytes,
        conflict_behavior: Optional[Union[str, ConflictBehavior]] = None,
    ) -> DriveItem:
        """Upload small content (simple upload) as ``filename`` under ``parent_path``."""
        behavior = resolve_conflict_behavior(conflict_behavior)
        url = build_url(
            f"{parent_path}:/{quote(filename)}:/content",
            encode_options({CONFLICT_BEHAVIOR_PARAM: behavior.value}),
        )
        data = await self.graph_api.request(
            url,
            "PUT",
            content=content,
            headers={"Content-Type": "application/octet-stream"},
        )
        return DriveItem.from_graph(data or {})


def _matches_permission(permission: Dict[str, Any], email: Optional[str]) -> bool:
    # Without an id there is nothing to delete
    if not permission.get("id"):
        return False
    invitation = permission.get("invitation")
    if email is not None:
        return bool(invitation) and invitation.get("email") == email
    return not invitation and permission.get("link") is not None
