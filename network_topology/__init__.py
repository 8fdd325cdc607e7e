"""
Network Topology Module

A Python module that turns a network scan record into a zone-classified
topology graph. Devices are sorted into Purdue-style zones (OT, Network,
IT, Unconnected), flagged when they expose a public IP address, and linked
to their zone clusters and to each other.
"""

__version__ = "1.0.0"
__author__ = "Network Topology Team"

from .core import (
    ClassifiedDevice,
    ClusterNode,
    Edge,
    EdgeKind,
    GraphModel,
    NormalizedDevice,
    TopologyPipeline,
    TransformResult,
    ZoneId,
    transform,
)
from .config import ClassifierConfig, ConfigLoader, GraphConfig
from .utils import ConfigurationError, InvalidSchemaError

__all__ = [
    'transform',
    'TopologyPipeline',
    'TransformResult',
    'NormalizedDevice',
    'ClassifiedDevice',
    'ClusterNode',
    'Edge',
    'EdgeKind',
    'GraphModel',
    'ZoneId',
    'ClassifierConfig',
    'GraphConfig',
    'ConfigLoader',
    'ConfigurationError',
    'InvalidSchemaError',
]
