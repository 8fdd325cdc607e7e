"""
JSON Report Generator for Network Topology Module.

This module converts transformation results into the JSON document consumed
by rendering front-ends, and writes timestamped report files with collision
handling.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

from ..core.data_models import ClassifiedDevice, ClusterNode, Edge, GraphModel
from ..core.event_emitter import ClassificationEvent
from ..core.topology_pipeline import TransformResult
from .logger import get_logger


class JSONReporter:
    """
    Handles generation of JSON reports from transformation results.

    This class is responsible for:
    - Converting graph models to JSON-serializable dictionaries
    - Keeping node and edge order exactly as produced, so equal inputs
      serialize to identical documents
    - Managing output file naming with timestamp-based collision handling
    """

    def __init__(self, output_directory: Optional[str] = None):
        """
        Initialize the JSON reporter.

        Args:
            output_directory: Directory where JSON reports will be saved
        """
        self.output_directory = Path(output_directory) if output_directory else None
        self.logger = get_logger(__name__)

    def to_dict(self, result: TransformResult) -> Dict[str, Any]:
        """
        Convert a TransformResult to a JSON-serializable dictionary.

        Args:
            result: Transformation result

        Returns:
            Dict with success flag, graph, statistics and events (or the error)
        """
        if not result.success:
            return {
                "success": False,
                "error": {
                    "type": type(result.error).__name__,
                    "message": result.error.message,
                    "path": result.error.path,
                    "suggestions": list(result.error.suggestions),
                },
            }

        statistics = result.statistics
        return {
            "success": True,
            **self.graph_to_dict(result.graph),
            "statistics": {
                "devices_seen": statistics.devices_seen,
                "devices_skipped": statistics.devices_skipped,
                "duplicate_macs": statistics.duplicate_macs,
                "edges_dropped": statistics.edges_dropped,
                "zone_counts": dict(statistics.zone_counts),
                "public_ip_devices": statistics.public_ip_devices,
            },
            "events": [self._event_to_dict(event) for event in result.events],
        }

    def to_json(self, result: TransformResult, indent: Optional[int] = 2) -> str:
        """Serialize a TransformResult to a JSON string."""
        return json.dumps(self.to_dict(result), indent=indent, ensure_ascii=False)

    def graph_to_dict(self, graph: GraphModel) -> Dict[str, Any]:
        """
        Convert a GraphModel to its node/edge dictionary form.

        Args:
            graph: Graph model

        Returns:
            Dict with "nodes" and "edges" lists
        """
        nodes = []
        for node in graph.nodes:
            if isinstance(node, ClusterNode):
                nodes.append(self._cluster_to_dict(node))
            else:
                nodes.append(self._device_to_dict(node))

        return {
            "nodes": nodes,
            "edges": [self._edge_to_dict(edge) for edge in graph.edges],
        }

    def generate_report(self, result: TransformResult, source: str = "") -> str:
        """
        Write a JSON report file for a transformation result.

        Args:
            result: Transformation result
            source: Path of the scan record the result was built from

        Returns:
            str: Path to the generated JSON file

        Raises:
            ValueError: If no output directory was configured
            IOError: If file cannot be written
        """
        if self.output_directory is None:
            raise ValueError("No output directory configured for JSON reports")

        self.output_directory.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now()

        json_data = {
            "report_metadata": {
                "timestamp": timestamp.isoformat(),
                "source": source,
            },
            **self.to_dict(result),
        }

        filepath = self._handle_file_collision(
            self.output_directory / self._generate_filename(timestamp)
        )

        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(json_data, f, indent=2, ensure_ascii=False)

            self.logger.info(f"JSON report successfully generated: {filepath}")
            return str(filepath)

        except IOError as e:
            self.logger.error(f"Failed to write JSON report to {filepath}: {e}")
            raise

    def _device_to_dict(self, device: ClassifiedDevice) -> Dict[str, Any]:
        bridge = None
        if device.bridge is not None:
            bridge = {
                "min_level": device.bridge.min_level,
                "max_level": device.bridge.max_level,
                "zones": [zone.value for zone in device.bridge.zones],
            }

        return {
            "id": device.id,
            "node_type": "device",
            "label": device.label,
            "zone": device.zone.value,
            "cluster": device.zone.cluster_id,
            "ip": list(device.ip),
            "vendor": device.vendor,
            "protocols": list(device.protocols),
            "ports": list(device.ports),
            "status": device.status,
            "is_active": device.is_active,
            "has_public_ip": device.has_public_ip,
            "connections": list(device.connections),
            "type": device.raw_type,
            "category": device.category,
            "subnet_mask": device.subnet_mask,
            "matched_rule": device.matched_rule,
            "bridge": bridge,
        }

    def _cluster_to_dict(self, cluster: ClusterNode) -> Dict[str, Any]:
        return {
            "id": cluster.id,
            "node_type": "cluster",
            "label": cluster.label,
            "zone": cluster.zone.value,
            "member_count": cluster.member_count,
        }

    def _edge_to_dict(self, edge: Edge) -> Dict[str, Any]:
        edge_dict = {
            "source": edge.source,
            "target": edge.target,
            "kind": edge.kind.value,
        }
        if edge.protocols is not None:
            edge_dict["protocols"] = list(edge.protocols)
        return edge_dict

    def _event_to_dict(self, event: ClassificationEvent) -> Dict[str, Any]:
        return {
            "type": event.event_type.value,
            "device_id": event.device_id,
            "message": event.message,
            "details": dict(event.details),
        }

    def _generate_filename(self, timestamp: datetime) -> str:
        """
        Generate a filename based on timestamp.

        Args:
            timestamp: Report timestamp

        Returns:
            str: Generated filename
        """
        # Format: network_topology_YYYYMMDD_HHMMSS.json
        timestamp_str = timestamp.strftime("%Y%m%d_%H%M%S")
        return f"network_topology_{timestamp_str}.json"

    def _handle_file_collision(self, filepath: Path) -> Path:
        """
        Handle filename collisions by adding incremental suffix.

        Args:
            filepath: Original file path

        Returns:
            Path: Unique file path
        """
        if not filepath.exists():
            return filepath

        base_name = filepath.stem
        extension = filepath.suffix
        counter = 1

        while True:
            new_name = f"{base_name}_{counter:03d}{extension}"
            new_filepath = filepath.parent / new_name

            if not new_filepath.exists():
                self.logger.info(f"File collision detected, using filename: {new_name}")
                return new_filepath

            counter += 1

            if counter > 999:
                raise IOError(f"Too many file collisions for {filepath}")
