"""Microsoft identity platform OAuth 2.0 helper.

Builds the consent URL, exchanges authorization codes and refreshes token
pairs. ``GraphAuth.refresh`` satisfies the ``RefreshCallback`` contract and can
be handed directly to ``GraphAPI``.

Reference:
  https://learn.microsoft.com/en-us/entra/identity-platform/v2-oauth2-auth-code-flow
"""

from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import httpx

from graphdrive.core.config import settings
from graphdrive.core.constants import DEFAULT_SCOPES
from graphdrive.core.exceptions import RequestError
from graphdrive.core.logging import ContextualLogger
from graphdrive.core.logging import logger as default_logger
from graphdrive.schemas.auth import CredentialPair


class GraphAuth:
    """OAuth client for a registered Microsoft Entra application."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        callback_url: str,
        scopes: Optional[List[str]] = None,
        logger: Optional[ContextualLogger] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        oauth_url: Optional[str] = None,
    ):
        """Initialize the OAuth client.

        Args:
            client_id: Application (client) ID
            client_secret: Application secret
            callback_url: Redirect URI registered for the application
            scopes: Requested scopes (default: offline_access, openid, user.read, files.readwrite)
            logger: Contextual logger
            http_client: httpx client for token calls; one is created and owned if omitted
            oauth_url: OAuth root (default: ``settings.OAUTH_URL``)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self.scopes = list(scopes or DEFAULT_SCOPES)
        self.logger = (logger or default_logger).with_context(component="graph_auth")
        self.oauth_url = (oauth_url or settings.OAUTH_URL).rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)

    def generate_auth_url(self, state: Optional[str] = None) -> str:
        """Build the URL the user is sent to for consent."""
        params = {
            "scope": " ".join(self.scopes),
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "prompt": "consent",
            "response_type": "code",
        }
        if state:
            params["state"] = state
        self.logger.info(
            "Generating OAuth url", extra={"dimensions": {"client_id": self.client_id}}
        )
        return f"{self.oauth_url}/authorize?{urlencode(params)}"

    async def tokens_from_code(self, auth_code: str) -> CredentialPair:
        """Exchange an authorization code for a token pair."""
        return await self._token_request(
            {
                "redirect_uri": self.callback_url,
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "scope": " ".join(self.scopes),
                "code": auth_code,
            },
            failure_message="Non-200 while exchanging auth code for access token",
        )

    async def refresh(self, refresh_token: str) -> CredentialPair:
        """Exchange a refresh token for a new token pair."""
        credentials = await self._token_request(
            {
                "grant_type": "refresh_token",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "scope": " ".join(self.scopes),
                "refresh_token": refresh_token,
            },
            failure_message="Non-200 while using the refresh token",
        )
        self.logger.info("Successfully used refresh token")
        return credentials

    async def _token_request(self, form: Dict[str, Any], failure_message: str) -> CredentialPair:
        url = f"{self.oauth_url}/token"
        try:
            response = await self._client.post(
                url,
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded; charset=utf-8"},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            body = _response_body(e.response)
            self.logger.error(
                failure_message,
                extra={"dimensions": {"status": e.response.status_code, "body": body, "url": url}},
            )
            raise RequestError(
                failure_message, status=e.response.status_code, body=body, url=url
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error(f"Unexpected error: {e}", extra={"dimensions": {"url": url}})
            raise RequestError(f"{failure_message}: {e}", url=url) from e

        if not isinstance(data, dict) or not data.get("access_token"):
            self.logger.error(
                f"{failure_message}: no access token in response",
                extra={"dimensions": {"status": response.status_code, "url": url}},
            )
            raise RequestError(
                f"{failure_message}: no access token in response",
                status=response.status_code,
                body=data,
                url=url,
            )

        return CredentialPair(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this helper created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "GraphAuth":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args) -> None:
        """Exit async context manager."""
        await self.aclose()


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
