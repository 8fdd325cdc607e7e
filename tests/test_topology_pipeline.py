import pytest

from network_topology import transform
from network_topology.config.config_loader import GraphConfig
from network_topology.core.data_models import EdgeKind, ZoneId
from network_topology.core.event_emitter import EventEmitter, EventType
from network_topology.core.topology_pipeline import TopologyPipeline
from network_topology.utils.error_handler import InvalidSchemaError
from network_topology.utils.json_reporter import JSONReporter

from conftest import make_device, make_record


def test_single_it_device():
    record = make_record({"IT": [
        {"MAC": "AA:BB:CC:DD:EE:01", "IP": "192.168.1.5", "Vendor": "Dell", "status": "true"},
    ]})

    result = transform(record)

    assert result.success is True
    devices = result.graph.device_nodes()
    assert len(devices) == 1
    assert devices[0].zone is ZoneId.IT
    assert devices[0].has_public_ip is False
    assert devices[0].is_active is True
    assert [cluster.id for cluster in result.graph.cluster_nodes()] == ["IT_Cluster"]
    assert [(edge.source, edge.target, edge.kind) for edge in result.graph.edges] == [
        ("AA:BB:CC:DD:EE:01", "IT_Cluster", EdgeKind.DEVICE_CLUSTER),
    ]


def test_dns_resolver_is_not_public():
    record = make_record({"IT": [make_device("AA:BB:CC:DD:EE:01", ip="8.8.8.8")]})

    result = transform(record)

    assert result.graph.device_nodes()[0].has_public_ip is False
    assert result.statistics.public_ip_devices == 0


def test_public_ip_callback_fires_once_per_device():
    detected = []
    record = make_record(
        {"IT": [make_device("AA:BB:CC:DD:EE:01", ip="203.0.113.5")]},
        {"OT": [make_device("AA:BB:CC:DD:EE:01", ip="203.0.113.5")]},
    )

    result = transform(record, on_public_ip_detected=detected.append)

    assert [device.id for device in detected] == ["AA:BB:CC:DD:EE:01"]
    assert detected[0].has_public_ip is True
    public_events = [e for e in result.events if e.event_type is EventType.PUBLIC_IP_DETECTED]
    assert len(public_events) == 1
    assert public_events[0].message == "Device Dell (AA:BB:CC:DD:EE:01) has a public IP address."


def test_links_to_present_and_absent_peers():
    record = make_record({"IT": [
        make_device("AA:BB:CC:DD:EE:01", connections=["AA:BB:CC:DD:EE:02", "AA:BB:CC:DD:EE:09"]),
        make_device("AA:BB:CC:DD:EE:02"),
    ]})

    result = transform(record)

    links = result.graph.edges_of_kind(EdgeKind.DEVICE_DEVICE)
    assert [(edge.source, edge.target) for edge in links] == [
        ("AA:BB:CC:DD:EE:01", "AA:BB:CC:DD:EE:02"),
    ]
    assert result.statistics.edges_dropped == 1
    dropped = [e for e in result.events if e.event_type is EventType.EDGE_DROPPED]
    assert dropped[0].details == {"target": "AA:BB:CC:DD:EE:09", "reason": "unknown target"}


def test_duplicate_macs_collapse_to_one_node():
    record = make_record(
        {"IT": [make_device("AA:BB:CC:DD:EE:01", vendor="First")]},
        {"IT": [make_device("AA:BB:CC:DD:EE:01", vendor="Second")]},
    )

    result = transform(record)

    devices = result.graph.device_nodes()
    assert len(devices) == 1
    assert devices[0].vendor == "Second"
    assert result.statistics.duplicate_macs == 1


def test_sentinel_mac_never_becomes_a_node():
    record = make_record({"IT": [
        make_device("00:00:00:00:00:00"),
        make_device("AA:BB:CC:DD:EE:01", connections=["00:00:00:00:00:00"]),
    ]})

    result = transform(record)

    assert "00:00:00:00:00:00" not in result.graph.node_ids()
    assert result.graph.edges_of_kind(EdgeKind.DEVICE_DEVICE) == []
    assert result.statistics.devices_seen == 2
    assert result.statistics.devices_skipped == 1
    skipped = [e for e in result.events if e.event_type is EventType.DEVICE_SKIPPED]
    assert skipped[0].details["reason"] == "sentinel MAC"


def test_malformed_groupings_are_skipped():
    record = make_record(
        "not a grouping",
        {"IT": "not a list"},
        {"OT": [make_device("AA:BB:CC:DD:EE:01", ip="172.16.0.5"), None]},
    )

    result = transform(record)

    assert result.success is True
    assert [device.id for device in result.graph.device_nodes()] == ["AA:BB:CC:DD:EE:01"]
    assert result.statistics.devices_skipped == 1


def test_invalid_schema_returns_no_graph():
    result = transform({"mac_data": []})

    assert result.success is False
    assert result.graph is None
    assert isinstance(result.error, InvalidSchemaError)
    assert result.error.error_context is not None
    with pytest.raises(InvalidSchemaError):
        result.unwrap()


def test_unwrap_returns_the_graph(mixed_record):
    result = transform(mixed_record)
    assert result.unwrap() is result.graph


def test_every_device_has_exactly_one_zone(mixed_record):
    result = transform(mixed_record)

    zones = {device.id: device.zone for device in result.graph.device_nodes()}
    assert zones == {
        "AA:00:00:00:00:01": ZoneId.NETWORK,
        "AA:00:00:00:00:02": ZoneId.OT,
        "AA:00:00:00:00:03": ZoneId.IT,
        "AA:00:00:00:00:04": ZoneId.UNCONNECTED,
    }
    assert result.statistics.zone_counts == {"Network": 1, "OT": 1, "IT": 1, "Unconnected": 1}


def test_network_device_bridge_uses_batch_peers(mixed_record):
    result = transform(mixed_record)

    router = result.graph.get_node("AA:00:00:00:00:01")
    assert router.bridge.min_level == 1
    assert router.bridge.max_level == 3


def test_mixed_record_graph_shape(mixed_record):
    graph = transform(mixed_record).graph

    assert len(graph.cluster_nodes()) == 4
    assert len(graph.edges_of_kind(EdgeKind.DEVICE_CLUSTER)) == 4
    assert len(graph.edges_of_kind(EdgeKind.DEVICE_DEVICE)) == 4
    assert len(graph.edges_of_kind(EdgeKind.CLUSTER_CLUSTER)) == 6
    node_ids = set(graph.node_ids())
    assert all(edge.source in node_ids and edge.target in node_ids for edge in graph.edges)


def test_identical_input_gives_identical_json(mixed_record):
    reporter = JSONReporter()
    assert reporter.to_json(transform(mixed_record)) == reporter.to_json(transform(mixed_record))


def test_pipeline_instance_can_be_reused(mixed_record, quiet_logger):
    pipeline = TopologyPipeline(graph_config=GraphConfig(cluster_link_policy="chain"),
                                logger=quiet_logger)

    first = pipeline.run(mixed_record)
    second = pipeline.run(mixed_record)

    assert first.graph == second.graph
    assert first.graph is not second.graph
    assert len(second.graph.edges_of_kind(EdgeKind.CLUSTER_CLUSTER)) == 3


def test_failing_callback_does_not_abort(mixed_record, quiet_logger):
    def broken(device):
        raise RuntimeError("boom")

    result = transform(mixed_record, on_public_ip_detected=broken, logger=quiet_logger)

    assert result.success is True
    assert result.statistics.public_ip_devices == 1


def test_injected_emitter_receives_advisory_events(mixed_record, quiet_logger):
    emitter = EventEmitter(quiet_logger)
    dropped = []
    emitter.subscribe(EventType.EDGE_DROPPED, dropped.append)

    TopologyPipeline(emitter=emitter, logger=quiet_logger).run(mixed_record)

    assert [event.details["target"] for event in dropped] == ["FF:FF:FF:FF:FF:99"]


def test_non_routable_addresses_raise_no_public_ip_event():
    detected = []
    record = make_record({"IT": [
        make_device("AA:BB:CC:DD:EE:01", ip=["127.0.0.1", "169.254.1.1", "0.0.0.0"]),
        make_device("AA:BB:CC:DD:EE:02", ip=["::1", "fe80::1"]),
    ]})

    result = transform(record, on_public_ip_detected=detected.append)

    assert detected == []
    assert result.statistics.public_ip_devices == 0
