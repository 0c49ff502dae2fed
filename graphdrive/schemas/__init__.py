"""Schemas for graphdrive."""

from .auth import CredentialPair, OnRefresh, RefreshCallback
from .drive import DeltaBatch, DriveFile, DriveItem, PagedResponse
from .subscription import SubscriptionRequest

__all__ = [
    "CredentialPair",
    "DeltaBatch",
    "DriveFile",
    "DriveItem",
    "OnRefresh",
    "PagedResponse",
    "RefreshCallback",
    "SubscriptionRequest",
]
