"""Shared HTTP client utilities (timeouts, query encoding)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx


def timeouts_for(seconds: float) -> httpx.Timeout:
    """Build httpx.Timeout with bounded connect/pool for fail-fast on unreachable upstreams."""
    total = float(seconds)
    connect = min(5.0, total)
    return httpx.Timeout(connect=connect, read=total, write=total, pool=connect)


def flatten_query(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    """
    Flatten a payload into query pairs the way Znuny's CGI layer expects.

    Nested mappings and lists use bracket notation (`Ticket[State]=open`,
    `Attachment[0][Filename]=a.txt`), booleans become 1/0 and None values are dropped.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in data.items():
        _flatten_into(pairs, str(key), value)
    return pairs


def _flatten_into(pairs: list[tuple[str, str]], prefix: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten_into(pairs, f"{prefix}[{key}]", item)
        return
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten_into(pairs, f"{prefix}[{index}]", item)
        return
    if isinstance(value, bool):
        pairs.append((prefix, "1" if value else "0"))
        return
    pairs.append((prefix, str(value)))
