"""Key normalization for Znuny responses.

The GenericInterface mixes `TicketID`, `CustomerID`, `SessionID` and friends with
PascalCase keys. Everything returned by the client goes through `normalize_keys` so
callers see one convention: `ticketId`, `customerId`, `sessionId`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_ID_SUFFIX_RE = re.compile(r"([a-z])ID")


def normalize_key(key: Any) -> Any:
    # List indices and other non-string keys pass through untouched.
    if not isinstance(key, str) or not key:
        return key
    lowered = key[0].lower() + key[1:]
    return _ID_SUFFIX_RE.sub(r"\1Id", lowered)


def normalize_keys(value: Any) -> Any:
    """Return a deep copy of `value` with every mapping key normalized."""
    if isinstance(value, Mapping):
        return {normalize_key(key): normalize_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [normalize_keys(item) for item in value]
    if isinstance(value, tuple):
        return tuple(normalize_keys(item) for item in value)
    return value
