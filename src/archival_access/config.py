"""Configuration for the archival access server.

All settings come from ``ARCHIVAL_ACCESS_*`` environment variables. Empty values
and the literal string ``null`` count as unset.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from archival_access.errors import ConfigurationError

ENV_PREFIX = "ARCHIVAL_ACCESS_"

# Directory with parsed finding-aid trees, one <collection_id>.json per collection.
DEFAULT_DATA_PATH = Path("~/.local/share/archival-access/trees").expanduser()

DEFAULT_ELASTICSEARCH_URL = "http://localhost:9200"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"

# Longest side, in pixels, of images served under the reduced-fidelity tier.
DEFAULT_TIER_MAX_SIZE = 450


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, read once at startup."""

    services: tuple[str, ...]
    instance: int | None = None
    data_path: Path = DEFAULT_DATA_PATH
    elasticsearch_url: str = DEFAULT_ELASTICSEARCH_URL
    redis_url: str = DEFAULT_REDIS_URL
    internal_ip_addresses: tuple[str, ...] = ()
    access_tokens: frozenset[str] = frozenset()
    login_disabled: bool = False
    external_auth_url: str | None = None
    tier_max_size: int = DEFAULT_TIER_MAX_SIZE
    embargo_dates: Mapping[str, datetime] = field(default_factory=dict)
    log_level: str = "INFO"


def _get(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(ENV_PREFIX + name)
    if value is None:
        return None
    value = value.strip()
    if not value or value == "null":
        return None
    return value


def _get_list(environ: Mapping[str, str], name: str) -> tuple[str, ...]:
    value = _get(environ, name)
    if value is None:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _get_flag(environ: Mapping[str, str], name: str) -> bool:
    value = _get(environ, name)
    return value is not None and (value.lower() == "true" or value == "1")


def _get_int(environ: Mapping[str, str], name: str) -> int | None:
    value = _get(environ, name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        msg = f"{ENV_PREFIX}{name} must be an integer, got {value!r}"
        raise ConfigurationError(msg) from None


def _parse_embargo_dates(pairs: tuple[str, ...]) -> dict[str, datetime]:
    from archival_access.core.access.temporal import parse_date

    dates: dict[str, datetime] = {}
    for pair in pairs:
        collection_id, sep, value = pair.partition("=")
        if not sep or not collection_id.strip():
            msg = (
                f"{ENV_PREFIX}EMBARGO_DATES entries must look like "
                f"'collection=YYYY-MM-DD', got {pair!r}"
            )
            raise ConfigurationError(msg)
        try:
            dates[collection_id.strip()] = parse_date(value.strip())
        except ValueError:
            msg = f"Invalid embargo date for {collection_id.strip()!r}: {value!r}"
            raise ConfigurationError(msg) from None
    return dates


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the environment.

    Raises:
        ConfigurationError: If no services are configured or a value is malformed.
    """
    if environ is None:
        environ = os.environ

    services = _get_list(environ, "SERVICES")
    if not services:
        msg = f"{ENV_PREFIX}SERVICES is not defined"
        raise ConfigurationError(msg)

    data_path = _get(environ, "DATA_PATH")
    tier_max_size = _get_int(environ, "TIER_MAX_SIZE")

    return Settings(
        services=services,
        instance=_get_int(environ, "INSTANCE"),
        data_path=Path(data_path).expanduser() if data_path else DEFAULT_DATA_PATH,
        elasticsearch_url=_get(environ, "ELASTICSEARCH_URL") or DEFAULT_ELASTICSEARCH_URL,
        redis_url=_get(environ, "REDIS_URL") or DEFAULT_REDIS_URL,
        internal_ip_addresses=_get_list(environ, "INTERNAL_IP_ADDRESSES"),
        access_tokens=frozenset(_get_list(environ, "ACCESS_TOKENS")),
        login_disabled=_get_flag(environ, "LOGIN_DISABLED"),
        external_auth_url=_get(environ, "EXTERNAL_AUTH_URL"),
        tier_max_size=tier_max_size if tier_max_size is not None else DEFAULT_TIER_MAX_SIZE,
        embargo_dates=_parse_embargo_dates(_get_list(environ, "EMBARGO_DATES")),
        log_level=_get(environ, "LOG_LEVEL") or "INFO",
    )
