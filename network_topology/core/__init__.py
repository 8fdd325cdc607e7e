"""
Core components for network topology functionality.
"""

from .data_models import (
    ZoneId,
    EdgeKind,
    ClusterLinkPolicy,
    NormalizedDevice,
    ZoneBridge,
    ZoneAssignment,
    ClassifiedDevice,
    ClusterNode,
    Edge,
    GraphModel,
    GraphStatistics
)
from .device_normalizer import normalize
from .input_validator import validate, ValidationResult
from .event_emitter import EventEmitter, EventType, ClassificationEvent
from .graph_builder import GraphBuilder, BuildReport, deduplicate
from .zone_classifier import ZoneClassifier, ZoneRule
from .topology_pipeline import TopologyPipeline, TransformResult, transform

__all__ = [
    'ZoneId',
    'EdgeKind',
    'ClusterLinkPolicy',
    'NormalizedDevice',
    'ZoneBridge',
    'ZoneAssignment',
    'ClassifiedDevice',
    'ClusterNode',
    'Edge',
    'GraphModel',
    'GraphStatistics',
    'normalize',
    'validate',
    'ValidationResult',
    'EventEmitter',
    'EventType',
    'ClassificationEvent',
    'GraphBuilder',
    'BuildReport',
    'deduplicate',
    'ZoneClassifier',
    'ZoneRule',
    'TopologyPipeline',
    'TransformResult',
    'transform'
]
