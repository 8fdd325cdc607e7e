"""
Zone Classification System for Network Topology Module.

This module assigns every normalized device to exactly one zone using an
ordered, data-driven rule cascade:
- Network device override (vendor keywords, network type hint)
- OT heuristics (OT address prefixes, OT type keywords, OT vendor allowlist)
- IT heuristics (IT address prefixes, IT vendor allowlist)
- Optional category label hint (OT, IT, anything else Network)
- Default zone (Unconnected)

The public IP flag is computed independently of the zone.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from .data_models import NormalizedDevice, ZoneAssignment, ZoneBridge, ZoneId
from ..config.config_loader import ClassifierConfig
from ..utils.network_utils import (
    ip_in_networks, is_routable, parse_ip, parse_networks, starts_with_any
)


@dataclass
class ZoneRule:
    """
    A rule for assigning devices to a zone.

    A rule matches when any of its configured criteria matches.

    Attributes:
        name: Human-readable name for the rule
        zone: The zone this rule assigns
        priority: Priority of the rule (higher = evaluated first)
        vendor_keywords: Substrings searched in the vendor (case-insensitive)
        vendor_allowlist: Exact vendor names (case-insensitive)
        type_keywords: Substrings searched in the raw type hint (case-insensitive)
        ip_prefixes: Address prefixes matched against the device addresses
        category_keywords: Substrings searched in the category label (case-sensitive)
        match_any: Matches every device; used for the fallback of a rule group
    """
    name: str
    zone: ZoneId
    priority: int
    vendor_keywords: List[str] = None
    vendor_allowlist: List[str] = None
    type_keywords: List[str] = None
    ip_prefixes: List[str] = None
    category_keywords: List[str] = None
    match_any: bool = False


class ZoneClassifier:
    """
    Deterministic zone classifier.

    The classifier holds no state besides its configuration; the same device
    always lands in the same zone.
    """

    def __init__(self, config: Optional[ClassifierConfig] = None):
        """
        Initialize the zone classifier with rules built from configuration.

        Args:
            config: Classifier configuration, defaults when omitted
        """
        self.config = config or ClassifierConfig()
        self.classification_rules = sorted(
            self._initialize_classification_rules(),
            key=lambda rule: rule.priority,
            reverse=True,
        )
        self.private_networks = parse_networks(self.config.private_networks)
        self.dns_resolvers = {
            address for address in map(parse_ip, self.config.dns_resolver_allowlist) if address
        }
        self.ip_sentinels = set(self.config.ip_sentinels)
        self.zone_levels: Dict[ZoneId, int] = {
            ZoneId(zone_name): level for zone_name, level in self.config.zone_levels.items()
        }

    def classify(self, device: NormalizedDevice,
                 peers: Sequence[NormalizedDevice] = ()) -> ZoneAssignment:
        """
        Classify a device and compute its public IP flag.

        Args:
            device: Device to classify
            peers: Devices this one connects to; only used to compute the
                level range bridged by network devices

        Returns:
            ZoneAssignment with zone, public IP flag and optional bridge
        """
        rule = self.match_rule(device)
        zone = rule.zone if rule else ZoneId.UNCONNECTED

        bridge = None
        if zone is ZoneId.NETWORK and self.config.compute_bridges:
            bridge = self.compute_bridge(peers)

        return ZoneAssignment(
            zone=zone,
            has_public_ip=self.has_public_ip(device.ip),
            matched_rule=rule.name if rule else None,
            bridge=bridge,
        )

    def match_rule(self, device: NormalizedDevice) -> Optional[ZoneRule]:
        """
        Find the first rule in priority order that matches the device.

        Args:
            device: Device to evaluate

        Returns:
            The matching ZoneRule, or None if no rule applies
        """
        for rule in self.classification_rules:
            if self._evaluate_rule(device, rule):
                return rule
        return None

    def has_public_ip(self, addresses: Iterable[str]) -> bool:
        """
        Check whether any address is public.

        Sentinels and unparsable strings are ignored, as are well-known
        public DNS resolvers. Loopback, link-local, unspecified, multicast
        and reserved addresses never count, for IPv4 and IPv6 alike.

        Args:
            addresses: Device IP address strings

        Returns:
            bool: True if at least one address is public
        """
        for address in addresses:
            if address in self.ip_sentinels:
                continue
            parsed = parse_ip(address)
            if parsed is None or parsed in self.dns_resolvers:
                continue
            if ip_in_networks(parsed, self.private_networks):
                continue
            if not is_routable(parsed):
                continue
            return True
        return False

    def compute_bridge(self, peers: Sequence[NormalizedDevice]) -> Optional[ZoneBridge]:
        """
        Compute the level range spanned by a network device's peers.

        Peers are classified with the base rules only. Zones without a level
        (Unconnected) do not contribute.

        Args:
            peers: Devices the network device connects to

        Returns:
            ZoneBridge, or None when no peer has a level
        """
        peer_zones = set()
        for peer in peers:
            rule = self.match_rule(peer)
            zone = rule.zone if rule else ZoneId.UNCONNECTED
            if zone in self.zone_levels:
                peer_zones.add(zone)

        if not peer_zones:
            return None

        levels = [self.zone_levels[zone] for zone in peer_zones]
        return ZoneBridge(
            min_level=min(levels),
            max_level=max(levels),
            zones=[zone for zone in ZoneId if zone in peer_zones],
        )

    def _candidate_ips(self, device: NormalizedDevice) -> List[str]:
        if self.config.primary_ip_only:
            return device.ip[:1]
        return device.ip

    def _evaluate_rule(self, device: NormalizedDevice, rule: ZoneRule) -> bool:
        """
        Evaluate whether a device matches a zone rule.

        Args:
            device: Device to evaluate
            rule: ZoneRule to apply

        Returns:
            True if any of the rule's criteria matches
        """
        if rule.match_any:
            return True

        vendor = device.vendor.lower()
        raw_type = (device.raw_type or "").lower()

        if rule.vendor_keywords and any(keyword.lower() in vendor for keyword in rule.vendor_keywords):
            return True

        if rule.vendor_allowlist and any(
            vendor == allowed.strip().lower() for allowed in rule.vendor_allowlist
        ):
            return True

        if rule.type_keywords and raw_type and any(
            keyword.lower() in raw_type for keyword in rule.type_keywords
        ):
            return True

        if rule.ip_prefixes and any(
            starts_with_any(ip, rule.ip_prefixes) for ip in self._candidate_ips(device)
        ):
            return True

        if rule.category_keywords and any(
            keyword in device.category for keyword in rule.category_keywords
        ):
            return True

        return False

    def _initialize_classification_rules(self) -> List[ZoneRule]:
        """
        Build the classification rule list from configuration.

        Returns:
            List of ZoneRule objects
        """
        config = self.config
        rules = []

        # Network equipment overrides everything else
        rules.append(ZoneRule(
            name="Network Device Override",
            zone=ZoneId.NETWORK,
            priority=100,
            vendor_keywords=config.network_vendor_keywords,
            type_keywords=config.network_type_keywords,
        ))

        rules.append(ZoneRule(
            name="OT Heuristic",
            zone=ZoneId.OT,
            priority=90,
            ip_prefixes=config.ot_ip_prefixes,
            type_keywords=config.ot_type_keywords,
            vendor_allowlist=config.ot_vendor_allowlist,
        ))

        rules.append(ZoneRule(
            name="IT Heuristic",
            zone=ZoneId.IT,
            priority=80,
            ip_prefixes=config.it_ip_prefixes,
            vendor_allowlist=config.it_vendor_allowlist,
        ))

        if config.use_category_hint:
            rules.append(ZoneRule(
                name="Category Hint (OT)",
                zone=ZoneId.OT,
                priority=30,
                category_keywords=["OT"],
            ))
            rules.append(ZoneRule(
                name="Category Hint (IT)",
                zone=ZoneId.IT,
                priority=20,
                category_keywords=["IT"],
            ))
            # Labels naming neither OT nor IT belong to the network segment
            rules.append(ZoneRule(
                name="Category Hint (Network)",
                zone=ZoneId.NETWORK,
                priority=10,
                match_any=True,
            ))

        return rules
