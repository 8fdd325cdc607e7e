"""
Core data models and enums for the Network Topology Module.

This module defines the data structures used throughout the topology
pipeline: normalized and classified devices, cluster nodes, edges, the
output graph model and per-run statistics.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict, Any, Union


class ZoneId(Enum):
    """
    Enumeration of network zones a device can be assigned to.

    Declaration order is the canonical zone order used for output.
    """
    NETWORK = "Network"
    OT = "OT"
    IT = "IT"
    UNCONNECTED = "Unconnected"

    @property
    def cluster_id(self) -> str:
        """Stable identifier of the cluster node aggregating this zone."""
        return f"{self.value}_Cluster"


class EdgeKind(Enum):
    """Enumeration of edge kinds in the graph model."""
    DEVICE_DEVICE = "device-device"
    DEVICE_CLUSTER = "device-cluster"
    CLUSTER_CLUSTER = "cluster-cluster"


class ClusterLinkPolicy(Enum):
    """How cluster nodes are linked to each other."""
    NONE = "none"
    CHAIN = "chain"
    RING = "ring"
    FULL = "full"


@dataclass
class NormalizedDevice:
    """
    Canonical device record produced by the device normalizer.

    Attributes:
        id: MAC address, primary key (never empty, never the sentinel MAC)
        ip: IP addresses, defaults to ["Unknown"]
        vendor: Vendor string, defaults to "Unknown Vendor"
        protocols: Observed protocols, defaults to []
        ports: Observed ports as strings, defaults to []
        status: True iff the raw status was the string "true"
        connections: Peer MAC addresses (sentinel filtered, no duplicates)
        raw_type: Original Type hint, if any
        category: Category label the device was grouped under
        subnet_mask: Subnet mask, if reported
    """
    id: str
    ip: List[str] = field(default_factory=lambda: ["Unknown"])
    vendor: str = "Unknown Vendor"
    protocols: List[str] = field(default_factory=list)
    ports: List[str] = field(default_factory=list)
    status: bool = False
    connections: List[str] = field(default_factory=list)
    raw_type: Optional[str] = None
    category: str = ""
    subnet_mask: Optional[str] = None

    def to_raw(self) -> Dict[str, Any]:
        """
        Render the record back into the raw scan device shape.

        The result normalizes to an equal record.
        """
        raw: Dict[str, Any] = {
            "MAC": self.id,
            "IP": list(self.ip),
            "Vendor": self.vendor,
            "Protocol": list(self.protocols),
            "Port": list(self.ports),
            "status": "true" if self.status else "false",
            self.id: list(self.connections),
        }
        if self.raw_type is not None:
            raw["Type"] = self.raw_type
        if self.subnet_mask is not None:
            raw["subnet_mask"] = self.subnet_mask
        return raw


@dataclass
class ZoneBridge:
    """
    Level range spanned by a network device's peers.

    Attributes:
        min_level: Lowest Purdue level among connected peers
        max_level: Highest Purdue level among connected peers
        zones: Distinct peer zones with a level, in zone order
    """
    min_level: int
    max_level: int
    zones: List[ZoneId] = field(default_factory=list)


@dataclass
class ZoneAssignment:
    """Result of classifying a single device."""
    zone: ZoneId
    has_public_ip: bool = False
    matched_rule: Optional[str] = None
    bridge: Optional[ZoneBridge] = None


@dataclass
class ClassifiedDevice(NormalizedDevice):
    """
    Normalized device annotated with classification metadata.

    Attributes:
        zone: Assigned zone, exactly one
        has_public_ip: True if at least one address is public and not an allowlisted resolver
        matched_rule: Name of the rule that decided the zone (None for the default)
        bridge: Peer level range, only for network devices
    """
    zone: ZoneId = ZoneId.UNCONNECTED
    has_public_ip: bool = False
    matched_rule: Optional[str] = None
    bridge: Optional[ZoneBridge] = None

    @classmethod
    def from_normalized(cls, device: NormalizedDevice,
                        assignment: ZoneAssignment) -> "ClassifiedDevice":
        return cls(
            id=device.id,
            ip=list(device.ip),
            vendor=device.vendor,
            protocols=list(device.protocols),
            ports=list(device.ports),
            status=device.status,
            connections=list(device.connections),
            raw_type=device.raw_type,
            category=device.category,
            subnet_mask=device.subnet_mask,
            zone=assignment.zone,
            has_public_ip=assignment.has_public_ip,
            matched_rule=assignment.matched_rule,
            bridge=assignment.bridge,
        )

    @property
    def label(self) -> str:
        return self.vendor

    @property
    def is_active(self) -> bool:
        return self.status


@dataclass
class ClusterNode:
    """
    Aggregate node standing for one zone.

    Attributes:
        id: Stable identifier, e.g. "IT_Cluster"
        label: Human-readable label
        zone: Zone this cluster aggregates
        member_count: Number of device nodes in the zone
    """
    id: str
    label: str
    zone: ZoneId
    member_count: int = 0


GraphNode = Union[ClassifiedDevice, ClusterNode]


@dataclass
class Edge:
    """
    Directed edge between two node ids.

    Attributes:
        source: Source node id
        target: Target node id
        kind: Edge kind
        protocols: Protocols of the source device (device-device edges only)
    """
    source: str
    target: str
    kind: EdgeKind
    protocols: Optional[List[str]] = None


@dataclass
class GraphModel:
    """
    Output graph handed to the rendering collaborator.

    Attributes:
        nodes: Cluster nodes followed by device nodes
        edges: Device-cluster, device-device, then cluster-cluster edges
    """
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def device_nodes(self) -> List[ClassifiedDevice]:
        return [node for node in self.nodes if isinstance(node, ClassifiedDevice)]

    def cluster_nodes(self) -> List[ClusterNode]:
        return [node for node in self.nodes if isinstance(node, ClusterNode)]

    def edges_of_kind(self, kind: EdgeKind) -> List[Edge]:
        return [edge for edge in self.edges if edge.kind is kind]

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


@dataclass
class GraphStatistics:
    """
    Statistics about one transformation run.

    Attributes:
        devices_seen: Raw device entries encountered
        devices_skipped: Entries dropped for a missing or sentinel MAC
        duplicate_macs: Entries collapsed into an earlier MAC
        edges_dropped: Device links dropped because the target is unknown
        zone_counts: Number of devices per zone, in zone order
        public_ip_devices: Devices flagged with a public IP
    """
    devices_seen: int = 0
    devices_skipped: int = 0
    duplicate_macs: int = 0
    edges_dropped: int = 0
    zone_counts: Dict[str, int] = field(default_factory=dict)
    public_ip_devices: int = 0


__all__ = [
    'ZoneId',
    'EdgeKind',
    'ClusterLinkPolicy',
    'NormalizedDevice',
    'ZoneBridge',
    'ZoneAssignment',
    'ClassifiedDevice',
    'ClusterNode',
    'GraphNode',
    'Edge',
    'GraphModel',
    'GraphStatistics',
]
