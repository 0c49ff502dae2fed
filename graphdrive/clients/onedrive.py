"""OneDrive (personal drive) client.

Reference: https://learn.microsoft.com/en-us/onedrive/developer/rest-api/?view=odsp-graph-online
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from graphdrive.clients.delta import DeltaSync
from graphdrive.clients.drive_operations import DriveOperations
from graphdrive.core.constants import ROOT_FOLDER_ID, ConflictBehavior
from graphdrive.core.logging import ContextualLogger
from graphdrive.http_client.graph_api import GraphAPI
from graphdrive.schemas.drive import DriveFile, DriveItem, PagedResponse


class OneDriveClient:
    """Client for the signed-in user's OneDrive."""

    ITEM_PATH = "/me/drive/items/{item_id}"

    def __init__(self, graph_api: GraphAPI, logger: Optional[ContextualLogger] = None):
        """Initialize the client.

        Args:
            graph_api: Authenticated request pipeline
            logger: Contextual logger (default: the pipeline's logger)
        """
        self.graph_api = graph_api
        self.logger = (logger or graph_api.logger).with_context(component="onedrive")
        self.drive = DriveOperations(graph_api, self.logger)

    def item_path(self, item_id: Optional[str] = None) -> str:
        """Graph path of an item; the drive root when ``item_id`` is omitted."""
        return self.ITEM_PATH.format(item_id=item_id or ROOT_FOLDER_ID)

    async def get_account_id(self) -> str:
        """Identifier of the user's drive."""
        data = await self.graph_api.request("/me/drive")
        return data["id"]

    async def get_files_from(
        self,
        parent_id: Optional[str] = None,
        fields: Optional[Sequence[str]] = None,
        expand: Optional[Sequence[str]] = None,
        options: Optional[Mapping[str, Any]] = None,
        cursor: Optional[str] = None,
    ) -> PagedResponse:
        """List a folder's children (the root when ``parent_id`` is omitted)."""
        self.logger.info(
            "Querying OneDrive files", extra={"dimensions": {"folder": parent_id or ROOT_FOLDER_ID}}
        )
        return await self.drive.get_files_from(
            self.item_path(parent_id), fields=fields, expand=expand, options=options, cursor=cursor
        )

    async def get_file_by_id(
        self,
        file_id: str,
        fields: Optional[Sequence[str]] = None,
        expand: Optional[Sequence[str]] = None,
    ) -> DriveFile:
        """Get a single file or folder."""
        self.logger.info("Getting OneDrive file", extra={"dimensions": {"file_id": file_id}})
        return await self.drive.get_file_by_id(self.item_path(file_id), fields, expand)

    async def get_public_url(self, file_id: str) -> Optional[str]:
        """Browser URL of an item."""
        return (await self.get_file_by_id(file_id)).web_url

    async def get_preview(self, file_id: str) -> List[Dict[str, Any]]:
        """Thumbnail sets of an item."""
        return await self.drive.get_preview(self.item_path(file_id))

    async def share_for_email(self, file_id: str, email: str, **kwargs: Any) -> bool:
        """Grant ``email`` access to an item."""
        return await self.drive.share_for_email(self.item_path(file_id), email, **kwargs)

    async def create_share_link(self, file_id: str, **kwargs: Any) -> Dict[str, Any]:
        """Create a sharing link for an item."""
        return await self.drive.create_share_link(self.item_path(file_id), **kwargs)

    async def unshare_from(self, file_id: str, email: Optional[str] = None) -> None:
        """Revoke ``email``'s access, or the anonymous link when ``email`` is omitted."""
        await self.drive.unshare_from(self.item_path(file_id), email)

    async def create_folder(
        self,
        name: str,
        parent_id: Optional[str] = None,
        conflict_behavior: Optional[Union[str, ConflictBehavior]] = None,
    ) -> DriveItem:
        """Create a folder."""
        return await self.drive.create_folder(self.item_path(parent_id), name, conflict_behavior)

    async def upload_file(
        self,
        filename: str,
        content: bytes,
        parent_id: Optional[str] = None,
        conflict_behavior: Optional[Union[str, ConflictBehavior]] = None,
    ) -> DriveItem:
        """Upload a small file."""
        return await self.drive.upload_file(
            self.item_path(parent_id), filename, content, conflict_behavior
        )

    def delta(self) -> DeltaSync:
        """Change feed over the whole drive."""
        return DeltaSync.for_onedrive(self.graph_api, logger=self.logger)
