from __future__ import annotations

from znuny_rest_client.domain.errors import ZnunyError


class ClientError(ZnunyError):
    """Base class for errors raised after a request was attempted."""


class TransportError(ClientError):
    """
    The HTTP round trip failed: connection, timeout, non-2xx status or unreadable body.

    `detail` holds the full response body (or the underlying httpx error text) with
    credentials scrubbed; it is None when there was nothing to report.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class AuthError(TransportError):
    """Authentication/authorization failed (typically HTTP 401/403)."""


class NotFoundError(TransportError):
    """Requested resource was not found (HTTP 404)."""


class ServerError(TransportError):
    """Server-side failure (HTTP 5xx)."""


class PlatformError(ClientError):
    """HTTP succeeded but Znuny reported an error in the response body."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        self.code = code
        super().__init__(message)
