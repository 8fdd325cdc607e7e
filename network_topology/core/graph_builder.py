"""
Graph assembly for classified devices.

This module turns a batch of classified devices into the GraphModel consumed
by renderers: cluster nodes, device nodes and the three edge kinds, with
referential integrity between them.
"""

from dataclasses import dataclass
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Set, Tuple, TypeVar

from .data_models import (
    ClassifiedDevice,
    ClusterLinkPolicy,
    ClusterNode,
    Edge,
    EdgeKind,
    GraphModel,
    NormalizedDevice,
    ZoneId,
)
from ..config.config_loader import GraphConfig
from ..utils.logger import Logger, get_logger

DeviceT = TypeVar("DeviceT", bound=NormalizedDevice)


@dataclass
class DroppedEdge:
    """A device link that could not be emitted."""
    source: str
    target: str
    reason: str


@dataclass
class BuildReport:
    """
    Outcome of a graph build.

    Attributes:
        graph: The assembled graph
        duplicate_macs: Devices collapsed into an earlier entry with the same MAC
        dropped_edges: Device links dropped for an unknown target
    """
    graph: GraphModel
    duplicate_macs: int = 0
    dropped_edges: List[DroppedEdge] = None

    def __post_init__(self):
        if self.dropped_edges is None:
            self.dropped_edges = []


def deduplicate(devices: Iterable[DeviceT]) -> Tuple[List[DeviceT], int]:
    """
    Collapse devices sharing a MAC address.

    Last write wins for the record, while the position of the first
    occurrence is kept so output order stays stable.

    Returns:
        Tuple of (unique devices, number of collapsed duplicates)
    """
    unique: Dict[str, DeviceT] = {}
    duplicates = 0
    for device in devices:
        if device.id in unique:
            duplicates += 1
        unique[device.id] = device
    return list(unique.values()), duplicates


class GraphBuilder:
    """
    Builds GraphModel instances from classified devices.

    Node order: cluster nodes in zone order, then devices in first-seen order.
    Edge order: device-cluster, device-device, then cluster-cluster edges.
    """

    def __init__(self, config: Optional[GraphConfig] = None, logger: Optional[Logger] = None):
        """
        Initialize the graph builder.

        Args:
            config: Graph configuration, defaults when omitted
            logger: Logger instance for build diagnostics
        """
        self.config = config or GraphConfig()
        self.logger = logger or get_logger(__name__)
        self.link_policy = ClusterLinkPolicy(self.config.cluster_link_policy)

    def build(self, devices: Iterable[ClassifiedDevice]) -> GraphModel:
        """
        Build the graph model for a batch of classified devices.

        Args:
            devices: Classified devices, duplicates allowed

        Returns:
            GraphModel without dangling edges or duplicate node ids
        """
        return self.build_with_report(devices).graph

    def build_with_report(self, devices: Iterable[ClassifiedDevice]) -> BuildReport:
        """
        Build the graph model and report what was collapsed or dropped.

        Args:
            devices: Classified devices, duplicates allowed

        Returns:
            BuildReport with the graph and build diagnostics
        """
        unique_devices, duplicates = deduplicate(devices)
        if duplicates:
            self.logger.debug(f"Collapsed {duplicates} duplicate MAC entries")

        clusters = self._build_cluster_nodes(unique_devices)
        cluster_ids = {cluster.zone: cluster.id for cluster in clusters}

        edges = [
            Edge(source=device.id, target=cluster_ids[device.zone], kind=EdgeKind.DEVICE_CLUSTER)
            for device in unique_devices
        ]

        device_edges, dropped = self._build_device_edges(unique_devices)
        edges.extend(device_edges)
        edges.extend(self._build_cluster_edges([c for c in clusters if c.member_count]))

        graph = GraphModel(nodes=[*clusters, *unique_devices], edges=edges)
        self._enforce_integrity(graph)

        return BuildReport(graph=graph, duplicate_macs=duplicates, dropped_edges=dropped)

    def _build_cluster_nodes(self, devices: List[ClassifiedDevice]) -> List[ClusterNode]:
        """
        Create one cluster node per populated zone, or per defined zone when
        empty clusters are requested.
        """
        member_counts = {zone: 0 for zone in ZoneId}
        for device in devices:
            member_counts[device.zone] += 1

        clusters = []
        for zone in ZoneId:
            if not member_counts[zone] and not self.config.emit_empty_clusters:
                continue
            clusters.append(ClusterNode(
                id=zone.cluster_id,
                label=self.config.cluster_labels.get(zone.value, zone.value),
                zone=zone,
                member_count=member_counts[zone],
            ))
        return clusters

    def _build_device_edges(
        self, devices: List[ClassifiedDevice]
    ) -> Tuple[List[Edge], List[DroppedEdge]]:
        """
        Create device-device edges from connection lists.

        Links to MACs absent from the batch are dropped, not treated as errors.
        """
        by_id = {device.id: device for device in devices}
        emitted: Set[Tuple[str, str]] = set()
        edges = []
        dropped = []

        for device in devices:
            for target in device.connections:
                if target not in by_id:
                    self.logger.debug(f"Dropping link {device.id} -> {target}: unknown target")
                    dropped.append(DroppedEdge(device.id, target, "unknown target"))
                    continue
                if (self.config.same_cluster_links_only
                        and by_id[target].zone is not device.zone):
                    continue
                if (device.id, target) in emitted:
                    continue
                emitted.add((device.id, target))
                edges.append(Edge(
                    source=device.id,
                    target=target,
                    kind=EdgeKind.DEVICE_DEVICE,
                    protocols=list(device.protocols),
                ))

        return edges, dropped

    def _build_cluster_edges(self, clusters: List[ClusterNode]) -> List[Edge]:
        """
        Link populated clusters according to the configured policy.

        Args:
            clusters: Populated cluster nodes in zone order

        Returns:
            Cluster-cluster edges; chain and ring follow reverse zone order
        """
        ids = [cluster.id for cluster in clusters]

        if self.link_policy is ClusterLinkPolicy.NONE or len(ids) < 2:
            return []

        if self.link_policy is ClusterLinkPolicy.FULL:
            pairs = list(combinations(ids, 2))
        else:
            # Chains run from the highest zone down, e.g. IT -> OT -> Network
            ids.reverse()
            pairs = list(zip(ids, ids[1:]))
            if self.link_policy is ClusterLinkPolicy.RING and len(ids) > 2:
                pairs.append((ids[-1], ids[0]))

        return [
            Edge(source=source, target=target, kind=EdgeKind.CLUSTER_CLUSTER)
            for source, target in pairs
        ]

    def _enforce_integrity(self, graph: GraphModel) -> None:
        """Drop any edge whose endpoints are not both nodes of the graph."""
        node_ids = set(graph.node_ids())
        valid_edges = [
            edge for edge in graph.edges
            if edge.source in node_ids and edge.target in node_ids
        ]
        if len(valid_edges) != len(graph.edges):
            self.logger.warning(
                f"Removed {len(graph.edges) - len(valid_edges)} edges with missing endpoints"
            )
            graph.edges = valid_edges
