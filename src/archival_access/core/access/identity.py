"""Identity-based access rules and authentication feature flags."""

import ipaddress
from collections.abc import Callable, Iterable

from archival_access.config import Settings
from archival_access.errors import ConfigurationError
from archival_access.models.item import AccessDecision, IdentityContext, Item

AccessRule = Callable[[Item, IdentityContext], AccessDecision | None]

Network = ipaddress.IPv4Network | ipaddress.IPv6Network


def parse_networks(entries: Iterable[str]) -> tuple[Network, ...]:
    """Parse IP addresses and CIDR networks.

    Raises:
        ConfigurationError: If an entry is neither.
    """
    networks: list[Network] = []
    for entry in entries:
        try:
            networks.append(ipaddress.ip_network(entry.strip(), strict=False))
        except ValueError:
            msg = f"Invalid internal IP address or network: {entry!r}"
            raise ConfigurationError(msg) from None
    return tuple(networks)


def is_internal_ip(ip: str, networks: Iterable[Network]) -> bool:
    """True if ``ip`` falls in one of the networks. Unparseable addresses never do."""
    if not ip:
        return False
    try:
        address = ipaddress.ip_address(ip.strip())
    except ValueError:
        return False
    return any(address in network for network in networks)


def internal_ip_rule(entries: Iterable[str]) -> AccessRule:
    """Requests from the institution's own network see everything."""
    networks = parse_networks(entries)

    def rule(item: Item, identity: IdentityContext) -> AccessDecision | None:
        if networks and is_internal_ip(identity.requester_ip, networks):
            return AccessDecision.open()
        return None

    return rule


def credential_tier_rule(
    tokens: Iterable[str],
    max_size: int,
    *,
    item_types: Iterable[str] = ("image",),
) -> AccessRule:
    """A valid credential token turns a closed decision into a tiered one."""
    valid = frozenset(tokens)
    types = frozenset(item_types)

    def rule(item: Item, identity: IdentityContext) -> AccessDecision | None:
        if item.type in types and any(token in valid for token in identity.identities):
            return AccessDecision.tiered(max_size)
        return None

    return rule


def is_login_enabled(settings: Settings) -> bool:
    return not settings.login_disabled


def is_external_enabled(settings: Settings) -> bool:
    return settings.external_auth_url is not None


def is_ip_access_enabled(settings: Settings) -> bool:
    return len(settings.internal_ip_addresses) > 0


def is_authentication_enabled(settings: Settings) -> bool:
    return (
        is_login_enabled(settings)
        or is_external_enabled(settings)
        or is_ip_access_enabled(settings)
    )
