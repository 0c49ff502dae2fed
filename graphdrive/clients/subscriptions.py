"""Webhook subscriptions on drive resources.

Reference:
  https://learn.microsoft.com/en-us/graph/api/subscription-post-subscriptions?view=graph-rest-1.0
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from graphdrive.core.exceptions import ValidationError
from graphdrive.core.logging import ContextualLogger
from graphdrive.http_client.graph_api import GraphAPI
from graphdrive.schemas.subscription import SubscriptionRequest, expiration_body


class SubscriptionsClient:
    """Create, renew, list and delete change-notification subscriptions."""

    def __init__(self, graph_api: GraphAPI, logger: Optional[ContextualLogger] = None):
        """Initialize the client.

        Args:
            graph_api: Authenticated request pipeline
            logger: Contextual logger (default: the pipeline's logger)
        """
        self.graph_api = graph_api
        self.logger = (logger or graph_api.logger).with_context(component="subscriptions")

    async def create_subscription(
        self,
        notification_url: Optional[str],
        change_type: Optional[str] = None,
        resource: Optional[str] = None,
        expiration_date_time: Optional[datetime] = None,
        client_state: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Register a webhook.

        Args:
            notification_url: Callback URL (required)
            change_type: Change type to watch (default: ``updated``)
            resource: Watched resource path (default: the drive root)
            expiration_date_time: Expiry (default: 30 days out, the upstream maximum)
            client_state: Opaque string echoed in notifications (default: empty)

        Raises:
            ValidationError: ``notification_url`` is missing; raised before any request
        """
        if not notification_url:
            self.logger.error("Cannot create a subscription without a notification URL")
            raise ValidationError("A notification URL is required to create a subscription")

        overrides = {
            "change_type": change_type,
            "resource": resource,
            "expiration_date_time": expiration_date_time,
            "client_state": client_state,
        }
        subscription = SubscriptionRequest(
            notification_url=notification_url,
            **{key: value for key, value in overrides.items() if value is not None},
        )

        self.logger.info(
            "Creating subscription",
            extra={"dimensions": {"resource": subscription.resource}},
        )
        return await self.graph_api.request("/subscriptions", "POST", subscription.to_graph())

    async def renew_subscription(
        self, subscription_id: str, expiration_date_time: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Push a subscription's expiry forward (default: 30 days out)."""
        return await self.graph_api.request(
            f"/subscriptions/{subscription_id}", "PATCH", expiration_body(expiration_date_time)
        )

    async def list_subscriptions(self) -> List[Dict[str, Any]]:
        """Subscriptions owned by the application."""
        data = await self.graph_api.request("/subscriptions")
        return (data or {}).get("value", [])

    async def delete_subscription(self, subscription_id: str) -> None:
        """Delete a subscription."""
        await self.graph_api.request(f"/subscriptions/{subscription_id}", "DELETE")
