"""
Configuration module for Network Topology.
Provides configuration loading and validation for classification and graph assembly.
"""

from .config_loader import ConfigLoader, ClassifierConfig, GraphConfig

__all__ = ['ConfigLoader', 'ClassifierConfig', 'GraphConfig']
