"""Environment variable aliases for backward compatibility.

Flat names like `ZNUNY_BASE_URL` map onto the nested settings tree. The `OTRS_*`
names from before the Znuny fork are still read, with a DeprecationWarning.
"""
from __future__ import annotations

import os
import warnings
from collections.abc import Iterable, Mapping
from typing import Any


def _warn_deprecated_env_var(old_name: str, new_name: str) -> None:
    warnings.warn(
        f"Environment variable '{old_name}' is deprecated. Use '{new_name}' instead. "
        f"Support for '{old_name}' will be removed in a future version.",
        DeprecationWarning,
        stacklevel=3,
    )


def _set_nested(data: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    node = data
    for part in path[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[path[-1]] = value


def _apply_alias_mappings(
    env: Mapping[str, str],
    data: dict[str, Any],
    mappings: Iterable[tuple[str, tuple[str, ...]]],
) -> None:
    for env_name, path in mappings:
        value = env.get(env_name)
        if value:
            _set_nested(data, path, value)


def _apply_deprecated_aliases(
    env: Mapping[str, str],
    data: dict[str, Any],
    mappings: Iterable[tuple[str, str, tuple[str, ...]]],
) -> None:
    for old_name, new_name, path in mappings:
        old_value = env.get(old_name)
        if not old_value:
            continue
        if env.get(new_name):
            continue
        _warn_deprecated_env_var(old_name, new_name)
        _set_nested(data, path, old_value)


_CANONICAL_MAPPINGS: tuple[tuple[str, tuple[str, ...]], ...] = (
    # Znuny
    ("ZNUNY_BASE_URL", ("znuny", "base_url")),
    ("ZNUNY_USERNAME", ("znuny", "username")),
    ("ZNUNY_PASSWORD", ("znuny", "password")),
    ("ZNUNY_TIMEOUT_SECONDS", ("znuny", "timeout_seconds")),
    ("ZNUNY_VERIFY_TLS", ("znuny", "verify_tls")),
    # Request defaults
    ("ZNUNY_CONTENT_TYPE", ("defaults", "content_type")),
    ("ZNUNY_COMMUNICATION_CHANNEL", ("defaults", "communication_channel")),
    ("ZNUNY_QUEUE_ID", ("defaults", "queue_id")),
    ("ZNUNY_QUEUE_NAME", ("defaults", "queue_name")),
    # Observability
    ("LOG_LEVEL", ("observability", "log_level")),
    ("LOG_FORMAT", ("observability", "log_format")),
    ("LOG_JSON", ("observability", "json_logs")),
    # Hardening
    ("HARDENING_TRANSPORT_TRUST_ENV", ("hardening", "transport", "trust_env")),
    (
        "HARDENING_TRANSPORT_ALLOW_INSECURE_HTTP",
        ("hardening", "transport", "allow_insecure_http"),
    ),
    (
        "HARDENING_TRANSPORT_ALLOW_INSECURE_TLS",
        ("hardening", "transport", "allow_insecure_tls"),
    ),
)

_DEPRECATED_VALUE_MAPPINGS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("OTRS_URL", "ZNUNY_BASE_URL", ("znuny", "base_url")),
    ("OTRS_USERNAME", "ZNUNY_USERNAME", ("znuny", "username")),
    ("OTRS_PASSWORD", "ZNUNY_PASSWORD", ("znuny", "password")),
)


def get_flat_env_settings_source() -> dict[str, Any]:
    env = os.environ
    data: dict[str, Any] = {}

    _apply_alias_mappings(env, data, _CANONICAL_MAPPINGS)
    _apply_deprecated_aliases(env, data, _DEPRECATED_VALUE_MAPPINGS)

    return data
