"""
Configuration loader for Network Topology Module.
Handles loading and validation of YAML configuration files with fallback to defaults.
"""

import yaml
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, asdict
from pathlib import Path

from ..core.data_models import ZoneId, ClusterLinkPolicy
from ..utils.error_handler import ConfigurationError
from ..utils.logger import get_logger
from ..utils.network_utils import octet_prefixes, parse_networks


DEFAULT_NETWORK_VENDOR_KEYWORDS = [
    "cisco", "router", "switch", "gateway", "juniper",
    "palo alto", "fortinet", "huawei", "arista",
]
DEFAULT_PRIVATE_NETWORKS = [
    "10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16", "fc00::/7",
]
DEFAULT_DNS_RESOLVERS = ["1.1.1.1", "8.8.8.8", "8.8.4.4", "9.9.9.9"]
DEFAULT_ZONE_LEVELS = {"OT": 1, "Network": 2, "IT": 3}
DEFAULT_CLUSTER_LABELS = {
    "Network": "Network Cluster",
    "OT": "OT Cluster",
    "IT": "IT Cluster",
    "Unconnected": "Public Devices",
}


@dataclass
class ClassifierConfig:
    """Configuration for the zone classification rule cascade."""
    network_vendor_keywords: list = None
    network_type_keywords: list = None
    ot_ip_prefixes: list = None
    ot_type_keywords: list = None
    ot_vendor_allowlist: list = None
    it_ip_prefixes: list = None
    it_vendor_allowlist: list = None
    private_networks: list = None
    dns_resolver_allowlist: list = None
    ip_sentinels: list = None
    zone_levels: dict = None
    use_category_hint: bool = False
    primary_ip_only: bool = False
    compute_bridges: bool = True

    def __post_init__(self):
        if self.network_vendor_keywords is None:
            self.network_vendor_keywords = list(DEFAULT_NETWORK_VENDOR_KEYWORDS)
        if self.network_type_keywords is None:
            self.network_type_keywords = ["network"]
        if self.ot_ip_prefixes is None:
            self.ot_ip_prefixes = octet_prefixes(172, 16, 31)
        if self.ot_type_keywords is None:
            self.ot_type_keywords = ["PLC", "RTU", "Sensor", "Actuator"]
        if self.ot_vendor_allowlist is None:
            self.ot_vendor_allowlist = ["Tenda Technology Co.,Ltd.Dongguan branch"]
        if self.it_ip_prefixes is None:
            self.it_ip_prefixes = ["192.168.", "10."]
        if self.it_vendor_allowlist is None:
            self.it_vendor_allowlist = ["TELEMECANIQUE ELECTRIQUE"]
        if self.private_networks is None:
            self.private_networks = list(DEFAULT_PRIVATE_NETWORKS)
        if self.dns_resolver_allowlist is None:
            self.dns_resolver_allowlist = list(DEFAULT_DNS_RESOLVERS)
        if self.ip_sentinels is None:
            self.ip_sentinels = ["Null", "Unknown", "N/A", ""]
        if self.zone_levels is None:
            self.zone_levels = dict(DEFAULT_ZONE_LEVELS)


@dataclass
class GraphConfig:
    """Configuration for graph assembly."""
    emit_empty_clusters: bool = False
    cluster_link_policy: str = ClusterLinkPolicy.FULL.value
    same_cluster_links_only: bool = False
    cluster_labels: dict = None

    def __post_init__(self):
        if self.cluster_labels is None:
            self.cluster_labels = dict(DEFAULT_CLUSTER_LABELS)


class ConfigLoader:
    """
    Loads and validates YAML configuration files for the topology pipeline.
    Provides fallback to default configurations when files are missing.

    In strict mode invalid values raise ConfigurationError instead of being
    replaced by defaults.
    """

    def __init__(self, config_dir: Optional[str] = None, strict: bool = False):
        """
        Initialize ConfigLoader.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to the config directory relative to this file.
            strict: Raise on invalid values instead of falling back to defaults
        """
        if config_dir is None:
            self.config_dir = Path(__file__).parent
        else:
            self.config_dir = Path(config_dir)

        self.strict = strict
        self.logger = get_logger(__name__)

    def load_classifier_config(self, config_file: str = "classifier_config.yml") -> ClassifierConfig:
        """
        Load classifier configuration from YAML file.

        Args:
            config_file: Name of the classifier configuration file

        Returns:
            ClassifierConfig object with loaded or default configuration
        """
        config_data = self._read_section(config_file, 'classifier')
        if config_data is None:
            return ClassifierConfig()
        return self.parse_classifier_config(config_data)

    def load_graph_config(self, config_file: str = "graph_config.yml") -> GraphConfig:
        """
        Load graph configuration from YAML file.

        Args:
            config_file: Name of the graph configuration file

        Returns:
            GraphConfig object with loaded or default configuration
        """
        config_data = self._read_section(config_file, 'graph')
        if config_data is None:
            return GraphConfig()
        return self.parse_graph_config(config_data)

    def parse_classifier_config(self, data: Dict[str, Any]) -> ClassifierConfig:
        """
        Build a ClassifierConfig from an already parsed mapping.

        Missing keys keep their defaults; invalid values are replaced by
        defaults (or rejected in strict mode).
        """
        defaults = ClassifierConfig()
        values = {}

        for key in ('network_vendor_keywords', 'network_type_keywords', 'ot_ip_prefixes',
                    'ot_type_keywords', 'ot_vendor_allowlist', 'it_ip_prefixes',
                    'it_vendor_allowlist', 'dns_resolver_allowlist', 'ip_sentinels'):
            if key in data:
                values[key] = self._validate_string_list(data[key], key, getattr(defaults, key))

        if 'private_networks' in data:
            values['private_networks'] = self._validate_networks(
                data['private_networks'], defaults.private_networks
            )
        if 'zone_levels' in data:
            values['zone_levels'] = self._validate_zone_levels(
                data['zone_levels'], defaults.zone_levels
            )

        for key in ('use_category_hint', 'primary_ip_only', 'compute_bridges'):
            if key in data:
                values[key] = self._validate_bool(data[key], key, getattr(defaults, key))

        return ClassifierConfig(**values)

    def parse_graph_config(self, data: Dict[str, Any]) -> GraphConfig:
        """Build a GraphConfig from an already parsed mapping."""
        defaults = GraphConfig()
        values = {}

        for key in ('emit_empty_clusters', 'same_cluster_links_only'):
            if key in data:
                values[key] = self._validate_bool(data[key], key, getattr(defaults, key))

        if 'cluster_link_policy' in data:
            values['cluster_link_policy'] = self._validate_choice(
                data['cluster_link_policy'],
                'cluster_link_policy',
                [policy.value for policy in ClusterLinkPolicy],
                defaults.cluster_link_policy,
            )

        if 'cluster_labels' in data:
            labels = data['cluster_labels']
            if not isinstance(labels, dict):
                values['cluster_labels'] = self._invalid(
                    f"Invalid cluster_labels: {labels}. Must be a mapping.",
                    defaults.cluster_labels,
                )
            else:
                merged = dict(defaults.cluster_labels)
                for zone_name, label in labels.items():
                    if zone_name not in merged or not isinstance(label, str):
                        self._invalid(f"Invalid cluster label entry: {zone_name}={label}. Skipping.", None)
                        continue
                    merged[zone_name] = label
                values['cluster_labels'] = merged

        return GraphConfig(**values)

    def _read_section(self, config_file: str, section: str) -> Optional[Dict[str, Any]]:
        """
        Read one top-level section from a YAML file.

        Returns:
            The section mapping, or None when defaults should be used
        """
        config_path = self.config_dir / config_file

        if not config_path.exists():
            self.logger.warning(f"Config file not found at {config_path}. Using default configuration.")
            return None

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            if self.strict:
                raise ConfigurationError(f"Error parsing config file {config_path}: {e}") from e
            self.logger.error(f"Error parsing config file {config_path}: {e}")
            self.logger.warning(f"Using default {section} configuration.")
            return None

        if not isinstance(config_data, dict) or not isinstance(config_data.get(section), dict):
            return self._invalid(
                f"Invalid {section} config structure in {config_path}. Using default configuration.",
                None,
            )

        return config_data[section]

    def _invalid(self, message: str, default: Any) -> Any:
        """Report an invalid value and return the fallback."""
        if self.strict:
            raise ConfigurationError(message)
        self.logger.warning(message)
        return default

    def _validate_string_list(self, value: Any, field_name: str, default: List[str]) -> List[str]:
        """
        Validate that a value is a list of strings.

        Args:
            value: Value to validate
            field_name: Name of the field for error messages
            default: Default value to use if validation fails

        Returns:
            Validated list or default
        """
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            return self._invalid(
                f"Invalid {field_name}: {value}. Must be a list of strings. Using default.",
                default,
            )
        return list(value)

    def _validate_bool(self, value: Any, field_name: str, default: bool) -> bool:
        if not isinstance(value, bool):
            return self._invalid(
                f"Invalid {field_name}: {value}. Must be true or false. Using default: {default}",
                default,
            )
        return value

    def _validate_choice(self, value: Any, field_name: str, choices: List[str], default: str) -> str:
        if value not in choices:
            return self._invalid(
                f"Invalid {field_name}: {value}. Must be one of {choices}. Using default: {default}",
                default,
            )
        return value

    def _validate_networks(self, value: Any, default: List[str]) -> List[str]:
        """
        Validate a list of CIDR blocks.

        Args:
            value: Value to validate
            default: Default networks

        Returns:
            Validated list of CIDR strings or default
        """
        networks = self._validate_string_list(value, 'private_networks', None)
        if networks is None:
            return default
        try:
            parse_networks(networks)
        except ValueError as e:
            return self._invalid(f"Invalid private_networks: {e}. Using default.", default)
        return networks

    def _validate_zone_levels(self, value: Any, default: Dict[str, int]) -> Dict[str, int]:
        """
        Validate the zone name to Purdue level mapping.

        Unconnected cannot carry a level; unknown zone names are rejected.
        """
        leveled_zones = [zone.value for zone in ZoneId if zone is not ZoneId.UNCONNECTED]
        if not isinstance(value, dict):
            return self._invalid(f"Invalid zone_levels: {value}. Must be a mapping.", default)

        levels = {}
        for zone_name, level in value.items():
            if zone_name not in leveled_zones or isinstance(level, bool) or not isinstance(level, int):
                return self._invalid(
                    f"Invalid zone level {zone_name}={level}. Zones must be one of "
                    f"{leveled_zones} with integer levels. Using default.",
                    default,
                )
            levels[zone_name] = level
        return levels

    def create_default_configs(self) -> None:
        """
        Create default configuration files if they don't exist.
        """
        self._create_default_config("classifier_config.yml", {'classifier': asdict(ClassifierConfig())})
        self._create_default_config("graph_config.yml", {'graph': asdict(GraphConfig())})

    def _create_default_config(self, config_file: str, default_config: Dict[str, Any]) -> None:
        config_path = self.config_dir / config_file
        if config_path.exists():
            return

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(default_config, f, default_flow_style=False, indent=2, sort_keys=False)
            self.logger.info(f"Created default config at {config_path}")
        except OSError as e:
            self.logger.error(f"Failed to create default config {config_path}: {e}")
