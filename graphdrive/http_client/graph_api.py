"""GraphAPI - authenticated request pipeline with transparent token refresh.

Every Graph call in graphdrive goes through ``GraphAPI.request``. The pipeline:

1. Sends the call with ``Authorization: Bearer <access token>``
2. On failure, applies the expiry predicate to the error body
3. On expiry, refreshes the credential pair through the injected callback and
   retries the original call exactly once
4. Raises a typed ``RequestError`` for everything else

Nothing else is retried: transient network failures and throttling surface to
the caller unchanged.
"""

import inspect
from typing import Any, Callable, Dict, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from graphdrive.core.config import settings
from graphdrive.core.exceptions import RefreshFailedError, RequestError, TokenExpiredNoRefresh
from graphdrive.core.logging import ContextualLogger
from graphdrive.core.logging import logger as default_logger
from graphdrive.http_client.expiry import is_token_expired
from graphdrive.http_client.token_store import TokenStore
from graphdrive.schemas.auth import CredentialPair, OnRefresh, RefreshCallback


class _AccessTokenRefreshed(Exception):
    """Internal signal: the pair was refreshed, retry the original call."""


class GraphAPI:
    """Authenticated Microsoft Graph request pipeline.

    Holds the shared token store of one client instance. Concurrent calls that
    hit an expired token coalesce into one refresh: the first caller refreshes
    under the store's lock, the others find the rotated pair and only retry.
    """

    def __init__(
        self,
        credentials: CredentialPair,
        refresh_callback: Optional[RefreshCallback] = None,
        on_refresh: Optional[OnRefresh] = None,
        logger: Optional[ContextualLogger] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        root_url: Optional[str] = None,
        expiry_predicate: Callable[[Any], bool] = is_token_expired,
    ):
        """Initialize the pipeline.

        Args:
            credentials: Initial access/refresh token pair
            refresh_callback: Async callable exchanging a refresh token for a new pair.
                Without it an expired token is fatal.
            on_refresh: Observer called with the new pair after each refresh
            logger: Contextual logger (a ``component=graph_api`` child is derived)
            http_client: httpx client to send calls with; one is created and owned if omitted
            root_url: Versioned Graph root (default: ``settings.GRAPH_ROOT_URL``)
            expiry_predicate: Predicate over an error body signalling token expiry
        """
        self.token_store = TokenStore(credentials)
        self.refresh_callback = refresh_callback
        self.on_refresh = on_refresh
        self.logger = (logger or default_logger).with_context(component="graph_api")
        self.root_url = (root_url or settings.GRAPH_ROOT_URL).rstrip("/")
        self.is_token_expired = expiry_predicate
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)

    def url(self, path: str) -> str:
        """Absolute URL for a resource path under the Graph root."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.root_url}/{path.lstrip('/')}"

    async def request(
        self,
        url: str,
        method: str = "GET",
        data: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Execute an authenticated Graph call.

        Args:
            url: Absolute URL or resource path under the Graph root
            method: HTTP method
            data: JSON body
            content: Raw body (uploads); mutually exclusive with ``data``
            headers: Extra headers

        Returns:
            Parsed JSON body, or None for an empty response

        Raises:
            TokenExpiredNoRefresh: Token expired and no refresh callback is configured
            RefreshFailedError: The refresh callback failed
            RequestError: Any other non-success outcome
        """
        url = self.url(url)
        method = method.upper()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(2),
            retry=retry_if_exception_type(_AccessTokenRefreshed),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._send(
                    url,
                    method,
                    data=data,
                    content=content,
                    headers=headers,
                    # A second expiry on the retried call is a plain failure
                    allow_refresh=attempt.retry_state.attempt_number == 1,
                )

    async def _send(
        self,
        url: str,
        method: str,
        data: Any,
        content: Optional[bytes],
        headers: Optional[Dict[str, str]],
        allow_refresh: bool,
    ) -> Any:
        credentials = self.token_store.current()
        request_headers = {
            "Authorization": f"Bearer {credentials.access_token}",
            "Accept": "application/json",
            **(headers or {}),
        }

        try:
            if content is not None:
                response = await self._client.request(
                    method, url, content=content, headers=request_headers
                )
            else:
                response = await self._client.request(
                    method, url, json=data, headers=request_headers
                )
        except httpx.HTTPError as e:
            self.logger.error(
                f"Unexpected error while executing a Graph API call: {e}",
                extra={"dimensions": {"url": url, "method": method}},
            )
            raise RequestError(
                f"Unexpected error while executing a Graph API call: {e}", url=url
            ) from e

        if response.is_success:
            return self._parse_body(response, url)

        body = self._error_body(response)
        if allow_refresh and self.is_token_expired(body):
            await self._refresh(credentials, url, response.status_code, body)
            raise _AccessTokenRefreshed()

        self.logger.error(
            "Received a non-200 while executing a Graph API call",
            extra={"dimensions": {"status": response.status_code, "body": body, "url": url}},
        )
        raise RequestError(
            "Received a non-200 while executing a Graph API call",
            status=response.status_code,
            body=body,
            url=url,
        )

    async def _refresh(
        self, stale: CredentialPair, url: str, status: int, body: Any
    ) -> None:
        """Refresh the credential pair once for all callers holding ``stale``."""
        if self.refresh_callback is None or not stale.refresh_token:
            self.logger.error(
                "The access token has expired, and no refresh callback is set to renew it",
                extra={"dimensions": {"url": url}},
            )
            raise TokenExpiredNoRefresh(
                "Access token has expired", status=status, body=body, url=url
            )

        async with self.token_store.lock:
            if self.token_store.current() != stale:
                self.logger.debug("Access token already refreshed by a concurrent call")
                return

            self.logger.info("Access token expired, trying to refresh")
            try:
                credentials = await self.refresh_callback(stale.refresh_token)
            except Exception as e:
                detail = _failure_detail(e)
                self.logger.error(
                    "Could not use the refresh token",
                    extra={"dimensions": {"response": detail}},
                )
                raise RefreshFailedError(
                    "Could not use refresh token to get a new access token",
                    status=getattr(e, "status", None),
                    body=detail,
                    url=url,
                ) from e

            if not isinstance(credentials, CredentialPair):
                self.logger.error(
                    "Refresh callback returned no credentials",
                    extra={"dimensions": {"response": repr(credentials)}},
                )
                raise RefreshFailedError(
                    "Could not use refresh token to get a new access token", url=url
                )

            self.token_store.replace(credentials)
            self.logger.info("Successful refresh")

            if self.on_refresh is not None:
                # The new pair is already stored; an observer failure must not block the retry
                try:
                    result = self.on_refresh(credentials)
                    if inspect.isawaitable(result):
                        await result
                except Exception as e:
                    self.logger.error(
                        f"Refresh observer failed: {e}",
                        extra={"dimensions": {"url": url, "error": type(e).__name__}},
                    )

    @staticmethod
    def _error_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    def _parse_body(self, response: httpx.Response, url: str) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            self.logger.error(
                "Received a malformed body from a Graph API call",
                extra={"dimensions": {"status": response.status_code, "url": url}},
            )
            raise RequestError(
                "Received a malformed body from a Graph API call",
                status=response.status_code,
                body=response.text,
                url=url,
            ) from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this pipeline created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "GraphAPI":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args) -> None:
        """Exit async context manager."""
        await self.aclose()


def _failure_detail(error: BaseException) -> Any:
    """Response detail of a failed refresh, for logging."""
    if isinstance(error, RequestError):
        return error.body
    response = getattr(error, "response", None)
    if isinstance(response, httpx.Response):
        return response.text
    return str(error)
