import pytest

from network_topology.config.config_loader import ClassifierConfig, GraphConfig
from network_topology.utils.logger import Logger, LogLevel


def make_device(mac, ip="192.168.1.5", vendor="Dell", connections=None, **extra):
    """Raw scan device as produced by the upload step."""
    device = {"MAC": mac, "IP": ip, "Vendor": vendor, "status": "true"}
    if connections is not None:
        device[mac] = connections
    device.update(extra)
    return device


def make_record(*groupings):
    """Wrap category groupings into a scan record."""
    return [{"mac_data": list(groupings)}]


@pytest.fixture()
def quiet_logger():
    """Logger that only prints errors."""
    return Logger("test", min_level=LogLevel.ERROR)


@pytest.fixture()
def classifier_config():
    return ClassifierConfig()


@pytest.fixture()
def graph_config():
    return GraphConfig()


@pytest.fixture()
def mixed_record():
    """One device per zone, a few links between them and one unknown peer."""
    return make_record(
        {"Network": [
            make_device("AA:00:00:00:00:01", ip="192.168.1.1", vendor="Cisco Systems",
                        connections=["AA:00:00:00:00:02", "AA:00:00:00:00:03"]),
        ]},
        {"OT": [
            make_device("AA:00:00:00:00:02", ip="172.16.0.10", vendor="Siemens",
                        connections=["AA:00:00:00:00:01", "00:00:00:00:00:00"], Type="PLC"),
        ]},
        {"IT": [
            make_device("AA:00:00:00:00:03", ip="192.168.1.20", vendor="Dell",
                        connections=["AA:00:00:00:00:01", "FF:FF:FF:FF:FF:99"]),
            make_device("AA:00:00:00:00:04", ip="203.0.113.5", vendor="Acme Cloud"),
        ]},
    )
