"""
Topology Pipeline for Network Topology Module.

This module provides the TopologyPipeline class that runs the complete
transformation of a raw scan record: validation → normalization →
deduplication → classification → event emission → graph assembly.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from .data_models import ClassifiedDevice, GraphModel, GraphStatistics, NormalizedDevice, ZoneId
from .device_normalizer import normalize
from .event_emitter import ClassificationEvent, EventEmitter, EventType, public_ip_event
from .graph_builder import GraphBuilder, deduplicate
from .input_validator import validate
from .zone_classifier import ZoneClassifier
from ..config.config_loader import ClassifierConfig, GraphConfig
from ..utils.error_handler import (
    ErrorContext, ErrorHandler, ErrorSeverity, ErrorType, InvalidSchemaError
)
from ..utils.logger import Logger, get_logger


@dataclass
class TransformResult:
    """
    Result of transforming one scan record.

    Attributes:
        success: Whether a graph was produced
        graph: The graph model (None on failure)
        error: Schema error when the record was rejected
        events: Advisory events raised during the run, in emission order
        statistics: Counters describing the run
    """
    success: bool
    graph: Optional[GraphModel] = None
    error: Optional[InvalidSchemaError] = None
    events: List[ClassificationEvent] = field(default_factory=list)
    statistics: GraphStatistics = field(default_factory=GraphStatistics)

    def unwrap(self) -> GraphModel:
        """
        Return the graph or raise the schema error.

        Raises:
            InvalidSchemaError: If the record was rejected
        """
        if not self.success:
            raise self.error
        return self.graph


class TopologyPipeline:
    """
    Runs the scan record → graph model transformation.

    A pipeline only holds configuration and listeners, so one instance can
    transform any number of records; every run builds its results from
    scratch.
    """

    def __init__(
        self,
        classifier_config: Optional[ClassifierConfig] = None,
        graph_config: Optional[GraphConfig] = None,
        emitter: Optional[EventEmitter] = None,
        logger: Optional[Logger] = None,
        on_public_ip_detected: Optional[Callable[[ClassifiedDevice], None]] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            classifier_config: Zone classification configuration (optional)
            graph_config: Graph assembly configuration (optional)
            emitter: Event emitter delivering advisory events (optional)
            logger: Logger instance (optional)
            on_public_ip_detected: Callback invoked once per device with a public IP
        """
        self.logger = logger or get_logger(__name__)
        self.error_handler = ErrorHandler(self.logger)
        self.classifier = ZoneClassifier(classifier_config)
        self.graph_builder = GraphBuilder(graph_config, self.logger)
        self.emitter = emitter or EventEmitter(self.logger, self.error_handler)

        if on_public_ip_detected is not None:
            self.emitter.subscribe(
                EventType.PUBLIC_IP_DETECTED,
                lambda event: on_public_ip_detected(event.device),
            )

    def run(self, raw: Any) -> TransformResult:
        """
        Transform a raw scan record into a graph model.

        Args:
            raw: Parsed scan record of unknown shape

        Returns:
            TransformResult; on a structural failure success is False and no
            partial graph is returned
        """
        validation = validate(raw)
        if not validation.is_valid:
            context = ErrorContext(
                error_type=ErrorType.SCHEMA_ERROR,
                severity=ErrorSeverity.HIGH,
                operation="validate",
                component="TopologyPipeline",
                additional_info={"path": validation.error.path},
            )
            validation.error.error_context = context
            self.error_handler.handle_error(validation.error, context)
            return TransformResult(success=False, error=validation.error)

        events: List[ClassificationEvent] = []
        statistics = GraphStatistics()

        # Phase 1: normalization
        normalized = self._normalize_groupings(validation.groupings, statistics, events)
        unique_devices, statistics.duplicate_macs = deduplicate(normalized)
        self.logger.debug(
            f"Normalized {len(unique_devices)} unique devices",
            seen=statistics.devices_seen,
            skipped=statistics.devices_skipped,
            duplicates=statistics.duplicate_macs,
        )

        # Phase 2: classification, public IP events fire before the graph exists
        classified = self._classify_devices(unique_devices)
        for device in classified:
            if device.has_public_ip:
                self._publish(public_ip_event(device), events)

        # Phase 3: graph assembly
        report = self.graph_builder.build_with_report(classified)
        for dropped in report.dropped_edges:
            self._publish(ClassificationEvent(
                event_type=EventType.EDGE_DROPPED,
                device_id=dropped.source,
                message=f"Link {dropped.source} -> {dropped.target} dropped: {dropped.reason}",
                details={"target": dropped.target, "reason": dropped.reason},
            ), events)

        statistics.edges_dropped = len(report.dropped_edges)
        statistics.zone_counts = self._count_zones(classified)
        statistics.public_ip_devices = sum(1 for device in classified if device.has_public_ip)

        self.logger.info(
            f"Built topology with {len(report.graph.nodes)} nodes and {len(report.graph.edges)} edges",
            devices=len(classified),
            public_ips=statistics.public_ip_devices,
        )

        return TransformResult(
            success=True,
            graph=report.graph,
            events=events,
            statistics=statistics,
        )

    def _normalize_groupings(
        self,
        groupings: List[Any],
        statistics: GraphStatistics,
        events: List[ClassificationEvent],
    ) -> List[NormalizedDevice]:
        """
        Normalize every device of every category grouping.

        Groupings that are not mappings and categories whose value is not a
        list are skipped with a warning.
        """
        normalized = []
        for index, grouping in enumerate(groupings):
            if not isinstance(grouping, Mapping):
                self.logger.warning(f"Skipping mac_data[{index}]: expected an object")
                continue

            for category, raw_devices in grouping.items():
                if not isinstance(raw_devices, list):
                    self.logger.warning(
                        f"Skipping category '{category}' in mac_data[{index}]: expected a list"
                    )
                    continue

                for raw_device in raw_devices:
                    statistics.devices_seen += 1
                    device = normalize(raw_device, str(category))
                    if device is None:
                        statistics.devices_skipped += 1
                        self._publish(self._skipped_event(raw_device, str(category)), events)
                        continue
                    normalized.append(device)

        return normalized

    def _classify_devices(self, devices: List[NormalizedDevice]) -> List[ClassifiedDevice]:
        """Classify each device, handing it the peers present in the batch."""
        by_id = {device.id: device for device in devices}
        classified = []
        for device in devices:
            peers = [by_id[peer] for peer in device.connections if peer in by_id]
            assignment = self.classifier.classify(device, peers)
            classified.append(ClassifiedDevice.from_normalized(device, assignment))
        return classified

    def _skipped_event(self, raw_device: Any, category: str) -> ClassificationEvent:
        mac_address = ""
        if isinstance(raw_device, Mapping) and isinstance(raw_device.get("MAC"), str):
            mac_address = raw_device["MAC"]
        reason = "sentinel MAC" if mac_address.strip() else "missing MAC"
        self.logger.debug(f"Skipping device in category '{category}': {reason}")
        return ClassificationEvent(
            event_type=EventType.DEVICE_SKIPPED,
            device_id=mac_address,
            message=f"Device in category '{category}' skipped: {reason}",
            details={"category": category, "reason": reason},
        )

    def _publish(self, event: ClassificationEvent, events: List[ClassificationEvent]) -> None:
        events.append(event)
        self.emitter.emit(event)

    @staticmethod
    def _count_zones(devices: List[ClassifiedDevice]) -> Dict[str, int]:
        counts = {zone.value: 0 for zone in ZoneId}
        for device in devices:
            counts[device.zone.value] += 1
        return counts


def transform(
    raw: Any,
    classifier_config: Optional[ClassifierConfig] = None,
    graph_config: Optional[GraphConfig] = None,
    on_public_ip_detected: Optional[Callable[[ClassifiedDevice], None]] = None,
    logger: Optional[Logger] = None,
) -> TransformResult:
    """
    Transform a raw scan record into a graph model.

    Convenience wrapper building a one-off TopologyPipeline.

    Args:
        raw: Parsed scan record
        classifier_config: Zone classification configuration (optional)
        graph_config: Graph assembly configuration (optional)
        on_public_ip_detected: Callback invoked once per device with a public IP
        logger: Logger instance (optional)

    Returns:
        TransformResult with the graph or the schema error
    """
    pipeline = TopologyPipeline(
        classifier_config=classifier_config,
        graph_config=graph_config,
        logger=logger,
        on_public_ip_detected=on_public_ip_detected,
    )
    return pipeline.run(raw)
