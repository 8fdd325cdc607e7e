"""
Device normalization for raw scan entries.

Raw devices arrive with scalar-or-list fields, missing values and a dynamic
connection field keyed by the device's own MAC address. The normalizer turns
each entry into a NormalizedDevice so that downstream code never branches on
field shapes.
"""

from typing import Any, List, Mapping, Optional

from .data_models import NormalizedDevice
from ..utils.network_utils import is_sentinel_mac

DEFAULT_IP = "Unknown"
DEFAULT_VENDOR = "Unknown Vendor"


def _coerce_list(value: Any) -> List[str]:
    """
    Wrap scalars in a list and render entries as strings.

    None and blank entries are dropped; lists are never double-wrapped.
    """
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple)) else [value]

    coerced = []
    for item in items:
        if item is None or isinstance(item, (dict, list, tuple)):
            continue
        text = str(item).strip()
        if text:
            coerced.append(text)
    return coerced


def _coerce_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def _extract_connections(peers: Any, mac_address: str) -> List[str]:
    """
    Read the peer list stored under the device's own MAC.

    Sentinel entries mean "no connection" and are dropped, as are
    self-references and repeated peers. Order of first appearance is kept.
    """
    connections = []
    seen = {mac_address}
    for peer in _coerce_list(peers):
        if is_sentinel_mac(peer) or peer in seen:
            continue
        seen.add(peer)
        connections.append(peer)
    return connections


def normalize(raw: Any, category_label: str) -> Optional[NormalizedDevice]:
    """
    Convert a raw scan device into its canonical form.

    Args:
        raw: Raw device mapping from a mac_data grouping
        category_label: Label of the grouping the device was found under

    Returns:
        NormalizedDevice, or None when the device must be skipped (no usable MAC)
    """
    if not isinstance(raw, Mapping):
        return None

    mac_address = _coerce_text(raw.get("MAC"))
    if mac_address is None or is_sentinel_mac(mac_address):
        return None

    # The peer list is keyed by the MAC exactly as it appears in the record
    peers = raw.get(raw["MAC"])
    if peers is None:
        peers = raw.get(mac_address)
    connections = _extract_connections(peers, mac_address)

    return NormalizedDevice(
        id=mac_address,
        ip=_coerce_list(raw.get("IP")) or [DEFAULT_IP],
        vendor=_coerce_text(raw.get("Vendor")) or DEFAULT_VENDOR,
        protocols=_coerce_list(raw.get("Protocol")),
        ports=_coerce_list(raw.get("Port")),
        status=raw.get("status") == "true",
        connections=connections,
        raw_type=_coerce_text(raw.get("Type")),
        category=category_label,
        subnet_mask=_coerce_text(raw.get("subnet_mask")),
    )
