"""Resource clients built on the request pipeline."""

from .delta import DeltaSync
from .drive_operations import DriveOperations
from .onedrive import OneDriveClient
from .search import SearchClient
from .sharepoint import SharepointClient
from .subscriptions import SubscriptionsClient

__all__ = [
    "DeltaSync",
    "DriveOperations",
    "OneDriveClient",
    "SearchClient",
    "SharepointClient",
    "SubscriptionsClient",
]
