"""Delta sync (change feed) over a drive.

A long-lived consumer moves through:

    UNINITIALIZED --get_baseline_cursor--> SYNCED(cursor)
    SYNCED(cursor) --get_changes_since--> SYNCED(new cursor) ...

A cursor the server rejects (expired or invalid) surfaces as a RequestError;
the consumer goes back to UNINITIALIZED and fetches a new baseline. This class
never re-baselines on its own.

Reference: https://learn.microsoft.com/en-us/graph/api/driveitem-delta?view=graph-rest-1.0
"""

from typing import Any, Dict, Optional

from graphdrive.core.constants import DELTA_LINK_FIELD, DELTA_TOKEN_PARAM
from graphdrive.core.exceptions import InvalidCursorError
from graphdrive.core.logging import ContextualLogger
from graphdrive.cursors.link import delta_cursor
from graphdrive.http_client.graph_api import GraphAPI
from graphdrive.query import build_url, encode_options
from graphdrive.schemas.drive import DeltaBatch


class DeltaSync:
    """Change-feed engine for one drive root.

    Cursors are only meaningful to the drive root that produced them.
    """

    def __init__(
        self,
        graph_api: GraphAPI,
        drive_root: str,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the engine.

        Args:
            graph_api: Authenticated request pipeline
            drive_root: Graph path of the watched folder (e.g. ``/me/drive/root``)
            logger: Contextual logger (default: the pipeline's logger)
        """
        self.graph_api = graph_api
        self.drive_root = drive_root.rstrip("/")
        self.logger = (logger or graph_api.logger).with_context(
            component="delta_sync", drive_root=self.drive_root
        )

    @classmethod
    def for_onedrive(cls, graph_api: GraphAPI, **kwargs: Any) -> "DeltaSync":
        """Engine over the signed-in user's OneDrive root."""
        return cls(graph_api, "/me/drive/root", **kwargs)

    @classmethod
    def for_sharepoint(cls, graph_api: GraphAPI, site_id: str, **kwargs: Any) -> "DeltaSync":
        """Engine over a SharePoint site's default document library."""
        return cls(graph_api, f"/sites/{site_id}/drive/root", **kwargs)

    def _delta_url(self, token: str) -> str:
        return build_url(f"{self.drive_root}/delta", encode_options({DELTA_TOKEN_PARAM: token}))

    async def get_baseline_cursor(self) -> str:
        """Cursor for "now": changes made after this call are reported next time."""
        self.logger.info("Requesting baseline delta cursor")
        response = await self.graph_api.request(self._delta_url("latest"))
        return self._require_cursor(response)

    async def get_changes_since(self, cursor: str) -> DeltaBatch:
        """Fetch the changes made since ``cursor``.

        Returns:
            The raw change batch plus the cursor for the next call. ``value``
            is an ordered log and must be applied in order.
        """
        self.logger.debug("Requesting delta changes")
        response = await self.graph_api.request(self._delta_url(cursor))
        next_cursor = self._require_cursor(response)
        batch = DeltaBatch.model_validate({**(response or {}), "cursor": next_cursor})
        self.logger.info(
            f"Received {len(batch.value)} changes",
            extra={"dimensions": {"more_pages": DELTA_LINK_FIELD not in (response or {})}},
        )
        return batch

    def _require_cursor(self, response: Optional[Dict[str, Any]]) -> str:
        cursor = delta_cursor(response)
        if cursor is None:
            self.logger.error(
                "Delta response carried no cursor",
                extra={"dimensions": {"keys": sorted((response or {}).keys())}},
            )
            raise InvalidCursorError(
                "Delta response carried no cursor",
                body=response,
                url=self.graph_api.url(f"{self.drive_root}/delta"),
            )
        return cursor
