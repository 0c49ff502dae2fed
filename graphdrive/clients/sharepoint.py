"""SharePoint (team sites) client.

Items live in the default document library of a site. Site and folder both
default to ``root``.

Reference: https://learn.microsoft.com/en-us/graph/api/resources/sharepoint?view=graph-rest-1.0
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from graphdrive.clients.delta import DeltaSync
from graphdrive.clients.drive_operations import DriveOperations
from graphdrive.core.constants import ROOT_FOLDER_ID, SYSTEM_SITES, ConflictBehavior
from graphdrive.core.logging import ContextualLogger
from graphdrive.http_client.graph_api import GraphAPI
from graphdrive.normalizer import normalize_list
from graphdrive.query import build_url, encode_query
from graphdrive.schemas.drive import DriveFile, DriveItem, PagedResponse


class SharepointClient:
    """Client for SharePoint sites and their document libraries."""

    ITEM_PATH = "/sites/{site_id}/drive/items/{item_id}"

    def __init__(self, graph_api: GraphAPI, logger: Optional[ContextualLogger] = None):
        """Initialize the client.

        Args:
            graph_api: Authenticated request pipeline
            logger: Contextual logger (default: the pipeline's logger)
        """
        self.graph_api = graph_api
        self.logger = (logger or graph_api.logger).with_context(component="sharepoint")
        self.drive = DriveOperations(graph_api, self.logger)

    def item_path(self, item_id: Optional[str] = None, site_id: Optional[str] = None) -> str:
        """Graph path of an item in a site's document library."""
        return self.ITEM_PATH.format(
            site_id=site_id or ROOT_FOLDER_ID, item_id=item_id or ROOT_FOLDER_ID
        )

    async def get_account_info(self, fields: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        """Profile of the signed-in user."""
        return await self.graph_api.request(build_url("/me", encode_query(fields)))

    async def get_account_id(self) -> str:
        """Identifier of the signed-in user."""
        return (await self.get_account_info())["id"]

    async def get_sites(self) -> PagedResponse:
        """Sites visible to the user, system sites excluded."""
        self.logger.info("Getting Sharepoint sites")
        data = await self.graph_api.request("/sites?search=")
        return normalize_list(data, item_filter=lambda site: site.get("name") not in SYSTEM_SITES)

    async def get_files_from(
        self,
        site_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        fields: Optional[Sequence[str]] = None,
        expand: Optional[Sequence[str]] = None,
        options: Optional[Mapping[str, Any]] = None,
        cursor: Optional[str] = None,
    ) -> PagedResponse:
        """List a folder's children in a site's document library."""
        self.logger.info(
            "Querying Sharepoint files",
            extra={
                "dimensions": {
                    "site": site_id or ROOT_FOLDER_ID,
                    "folder": parent_id or ROOT_FOLDER_ID,
                }
            },
        )
        return await self.drive.get_files_from(
            self.item_path(parent_id, site_id),
            fields=fields,
            expand=expand,
            options=options,
            cursor=cursor,
        )

    async def get_file_by_id(
        self,
        file_id: str,
        site_id: Optional[str] = None,
        fields: Optional[Sequence[str]] = None,
        expand: Optional[Sequence[str]] = None,
    ) -> DriveFile:
        """Get a single file or folder."""
        self.logger.info(
            "Getting Sharepoint file",
            extra={"dimensions": {"site_id": site_id or ROOT_FOLDER_ID, "file_id": file_id}},
        )
        return await self.drive.get_file_by_id(self.item_path(file_id, site_id), fields, expand)

    async def get_public_url(self, file_id: str, site_id: Optional[str] = None) -> Optional[str]:
        """Browser URL of an item."""
        return (await self.get_file_by_id(file_id, site_id)).web_url

    async def get_preview(
        self, file_id: str, site_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Thumbnail sets of an item."""
        self.logger.info(
            "Getting Sharepoint file preview",
            extra={"dimensions": {"site_id": site_id or ROOT_FOLDER_ID, "file_id": file_id}},
        )
        return await self.drive.get_preview(self.item_path(file_id, site_id))

    async def share_for_email(
        self, file_id: str, site_id: Optional[str], email: str, **kwargs: Any
    ) -> bool:
        """Grant ``email`` access to an item."""
        return await self.drive.share_for_email(self.item_path(file_id, site_id), email, **kwargs)

    async def create_share_link(
        self, file_id: str, site_id: Optional[str] = None, **kwargs: Any
    ) -> Dict[str, Any]:
        """Create a sharing link for an item."""
        return await self.drive.create_share_link(self.item_path(file_id, site_id), **kwargs)

    async def unshare_from(self, file_id: str, site_id: Optional[str], permission_id: str) -> None:
        """Delete a permission by its identifier."""
        await self.drive.unshare_permission(self.item_path(file_id, site_id), permission_id)

    async def unshare_for_email(
        self, file_id: str, site_id: Optional[str], email: Optional[str] = None
    ) -> None:
        """Revoke ``email``'s access, or the anonymous link when ``email`` is omitted."""
        await self.drive.unshare_from(self.item_path(file_id, site_id), email)

    async def create_folder(
        self,
        name: str,
        site_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        conflict_behavior: Optional[Union[str, ConflictBehavior]] = None,
    ) -> DriveItem:
        """Create a folder."""
        return await self.drive.create_folder(
            self.item_path(parent_id, site_id), name, conflict_behavior
        )

    async def upload_file(
        self,
        filename: str,
        content: bytes,
        site_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        conflict_behavior: Optional[Union[str, ConflictBehavior]] = None,
    ) -> DriveItem:
        """Upload a small file."""
        return await self.drive.upload_file(
            self.item_path(parent_id, site_id), filename, content, conflict_behavior
        )

    def delta(self, site_id: Optional[str] = None) -> DeltaSync:
        """Change feed over a site's document library."""
        return DeltaSync.for_sharepoint(
            self.graph_api, site_id or ROOT_FOLDER_ID, logger=self.logger
        )
