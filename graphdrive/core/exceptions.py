"""Exceptions raised by graphdrive.

All library exceptions inherit from GraphDriveException. Failures of the
authenticated request pipeline inherit from RequestError and carry the
upstream status, body and URL.
"""

from typing import Any, Optional


class GraphDriveException(Exception):
    """Base exception for graphdrive."""

    pass


class RequestError(GraphDriveException):
    """Raised when a Graph call ends in a non-success outcome.

    Covers non-2xx statuses, transport errors and malformed response bodies.
    ``status`` is None when no HTTP response was received.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: Any = None,
        url: Optional[str] = None,
    ):
        """Initialize the request error.

        Args:
            message: Human-readable description of the failure
            status: HTTP status code of the failing response, if any
            body: Parsed (or raw text) body of the failing response, if any
            url: URL of the failing call
        """
        self.status = status
        self.body = body
        self.url = url
        super().__init__(message)


class TokenExpiredNoRefresh(RequestError):
    """Raised when the access token expired and no refresh callback is configured."""

    pass


class RefreshFailedError(RequestError):
    """Raised when the refresh callback itself failed.

    Distinct from the expiry error so callers can tell "could not refresh" from
    "refresh succeeded but the retried call still failed".
    """

    pass


class InvalidCursorError(RequestError):
    """Raised when a change-feed response carries no usable cursor.

    Consumers should re-baseline (fetch a new baseline cursor) on this error.
    """

    pass


class PermissionNotFoundError(GraphDriveException):
    """Raised when an unshare operation finds no matching permission.

    The HTTP calls succeeded; the lookup simply matched nothing.
    """

    def __init__(self, item_path: str, email: Optional[str] = None):
        """Initialize the error.

        Args:
            item_path: Drive item the permission was looked up on
            email: Invitee email searched for (None when searching for a link)
        """
        self.item_path = item_path
        self.email = email
        target = f"email '{email}'" if email else "sharing link"
        super().__init__(f"No permission for {target} found on {item_path}")


class ValidationError(GraphDriveException, ValueError):
    """Raised synchronously, before any request, for malformed caller input."""

    pass
