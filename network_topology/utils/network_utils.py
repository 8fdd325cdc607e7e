"""
Network utility functions for IP and MAC address handling.

This module provides helper functions used by the normalizer and the zone
classifier: MAC sentinel detection, IP parsing, private range membership
and string prefix matching.
"""

import ipaddress
from typing import Iterable, List, Optional, Sequence, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

# Upstream scanners use the all-zero MAC for "no device / no connection"
SENTINEL_MAC = "00:00:00:00:00:00"


def is_sentinel_mac(mac_address: str) -> bool:
    """
    Check if a MAC address is the all-zero placeholder.

    Args:
        mac_address: MAC address string in any case, surrounding blanks allowed

    Returns:
        bool: True if the address is the sentinel, False otherwise
    """
    return mac_address.strip().lower() == SENTINEL_MAC


def parse_ip(ip_address: str) -> Optional[IPAddress]:
    """
    Parse a string into an IPv4 or IPv6 address.

    Args:
        ip_address: String to parse

    Returns:
        The parsed address, or None if the string is not an IP address
    """
    try:
        return ipaddress.ip_address(ip_address.strip())
    except (ValueError, AttributeError):
        return None


def parse_networks(networks: Iterable[str]) -> List[IPNetwork]:
    """
    Parse CIDR strings into network objects.

    Args:
        networks: CIDR blocks (e.g. "10.0.0.0/8")

    Returns:
        List of parsed networks, in input order

    Raises:
        ValueError: If any entry is not a valid CIDR block
    """
    parsed = []
    for network in networks:
        try:
            parsed.append(ipaddress.ip_network(network, strict=False))
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid network: {network}") from e
    return parsed


def ip_in_networks(ip_address: IPAddress, networks: Sequence[IPNetwork]) -> bool:
    """
    Check if an address falls inside any of the given networks.

    Networks of a different IP version never match.

    Args:
        ip_address: Parsed IP address
        networks: Parsed networks

    Returns:
        bool: True if the address is inside at least one network
    """
    return any(
        ip_address.version == network.version and ip_address in network
        for network in networks
    )


def is_routable(ip_address: IPAddress) -> bool:
    """
    Check if an address can appear as a routed unicast address.

    Loopback, link-local, unspecified, multicast and reserved addresses are
    not routable, whatever the IP version.
    """
    return not (
        ip_address.is_loopback
        or ip_address.is_link_local
        or ip_address.is_unspecified
        or ip_address.is_multicast
        or ip_address.is_reserved
    )


def starts_with_any(value: str, prefixes: Iterable[str]) -> bool:
    """
    Check if a string starts with any of the given prefixes.

    Args:
        value: String to test
        prefixes: Candidate prefixes

    Returns:
        bool: True if at least one prefix matches
    """
    return any(value.startswith(prefix) for prefix in prefixes)


def octet_prefixes(first_octet: int, second_start: int, second_end: int) -> List[str]:
    """
    Build dotted prefixes covering a range of second octets.

    Example:
        octet_prefixes(172, 16, 31) -> ["172.16.", "172.17.", ..., "172.31."]

    Args:
        first_octet: Fixed first octet
        second_start: First second-octet value (inclusive)
        second_end: Last second-octet value (inclusive)

    Returns:
        List of prefix strings ending with a dot
    """
    if not 0 <= first_octet <= 255 or not 0 <= second_start <= second_end <= 255:
        raise ValueError(
            f"Invalid octet range: {first_octet}.{second_start}-{second_end}"
        )
    return [f"{first_octet}.{octet}." for octet in range(second_start, second_end + 1)]
