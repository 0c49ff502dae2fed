"""Async client for Microsoft Graph drives: OneDrive, SharePoint and search."""

from graphdrive.auth import GraphAuth
from graphdrive.clients import (
    DeltaSync,
    OneDriveClient,
    SearchClient,
    SharepointClient,
    SubscriptionsClient,
)
from graphdrive.core.constants import ConflictBehavior
from graphdrive.core.exceptions import (
    GraphDriveException,
    InvalidCursorError,
    PermissionNotFoundError,
    RefreshFailedError,
    RequestError,
    TokenExpiredNoRefresh,
    ValidationError,
)
from graphdrive.http_client import GraphAPI
from graphdrive.schemas import CredentialPair, DeltaBatch, DriveFile, DriveItem, PagedResponse

__all__ = [
    "ConflictBehavior",
    "CredentialPair",
    "DeltaBatch",
    "DeltaSync",
    "DriveFile",
    "DriveItem",
    "GraphAPI",
    "GraphAuth",
    "GraphDriveException",
    "InvalidCursorError",
    "OneDriveClient",
    "PagedResponse",
    "PermissionNotFoundError",
    "RefreshFailedError",
    "RequestError",
    "SearchClient",
    "SharepointClient",
    "SubscriptionsClient",
    "TokenExpiredNoRefresh",
    "ValidationError",
]
