"""Webhook subscription schemas.

Reference:
  https://learn.microsoft.com/en-us/graph/api/resources/subscription?view=graph-rest-1.0
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from graphdrive.core.config import settings


def default_expiration() -> datetime:
    """Longest expiry the upstream accepts for drive subscriptions."""
    return datetime.now(timezone.utc) + timedelta(days=settings.SUBSCRIPTION_MAX_DAYS)


class SubscriptionRequest(BaseModel):
    """Payload for a webhook registration."""

    notification_url: str = Field(..., description="Callback URL receiving change notifications")
    change_type: str = Field(default="updated")
    resource: str = Field(default="/me/drive/root", description="Watched resource path")
    expiration_date_time: datetime = Field(default_factory=default_expiration)
    client_state: str = Field(default="", description="Opaque string echoed in notifications")

    def to_graph(self) -> Dict[str, Any]:
        """Serialize to the Graph request body."""
        return {
            "changeType": self.change_type,
            "notificationUrl": self.notification_url,
            "resource": self.resource,
            "expirationDateTime": _isoformat(self.expiration_date_time),
            "clientState": self.client_state,
        }


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def expiration_body(expiration_date_time: Optional[datetime] = None) -> Dict[str, str]:
    """Body for a subscription renewal."""
    return {"expirationDateTime": _isoformat(expiration_date_time or default_expiration())}
