from __future__ import annotations

from znuny_rest_client.adapters.znuny.client import AsyncZnunyClient
from znuny_rest_client.adapters.znuny.errors import (
    AuthError,
    ClientError,
    NotFoundError,
    PlatformError,
    ServerError,
    TransportError,
)

__all__ = [
    "AsyncZnunyClient",
    "AuthError",
    "ClientError",
    "NotFoundError",
    "PlatformError",
    "ServerError",
    "TransportError",
]
