import pytest

from network_topology.config.config_loader import ClassifierConfig
from network_topology.core.data_models import NormalizedDevice, ZoneId
from network_topology.core.zone_classifier import ZoneClassifier


def device(mac="AA:00:00:00:00:01", ip=None, vendor="Unknown Vendor", raw_type=None, category=""):
    return NormalizedDevice(
        id=mac,
        ip=ip or ["Unknown"],
        vendor=vendor,
        raw_type=raw_type,
        category=category,
    )


@pytest.fixture()
def classifier(classifier_config):
    return ZoneClassifier(classifier_config)


def test_rules_are_ordered_by_priority(classifier):
    priorities = [rule.priority for rule in classifier.classification_rules]
    assert priorities == sorted(priorities, reverse=True)
    assert classifier.classification_rules[0].zone is ZoneId.NETWORK


@pytest.mark.parametrize(
    "kwargs, zone",
    [
        ({"vendor": "Cisco Systems, Inc", "ip": ["172.16.0.1"]}, ZoneId.NETWORK),
        ({"vendor": "Netgear", "raw_type": "Network Switch"}, ZoneId.NETWORK),
        ({"vendor": "TP-Link Router"}, ZoneId.NETWORK),
        ({"ip": ["172.20.4.4"]}, ZoneId.OT),
        ({"raw_type": "plc"}, ZoneId.OT),
        ({"vendor": "tenda technology co.,ltd.dongguan branch"}, ZoneId.OT),
        ({"ip": ["192.168.1.5"]}, ZoneId.IT),
        ({"ip": ["10.1.2.3"]}, ZoneId.IT),
        ({"vendor": "TELEMECANIQUE ELECTRIQUE"}, ZoneId.IT),
        ({"ip": ["203.0.113.5"], "vendor": "Acme"}, ZoneId.UNCONNECTED),
        ({}, ZoneId.UNCONNECTED),
    ],
)
def test_cascade_assigns_exactly_one_zone(classifier, kwargs, zone):
    assert classifier.classify(device(**kwargs)).zone is zone


def test_ot_prefix_wins_over_it_prefix_on_the_same_device(classifier):
    assignment = classifier.classify(device(ip=["192.168.1.5", "172.16.0.2"]))
    assert assignment.zone is ZoneId.OT
    assert assignment.matched_rule == "OT Heuristic"


def test_172_outside_the_private_block_is_not_ot(classifier):
    assert classifier.classify(device(ip=["172.32.0.1"])).zone is ZoneId.UNCONNECTED


def test_default_zone_has_no_matched_rule(classifier):
    assert classifier.classify(device()).matched_rule is None


def test_primary_ip_only_ignores_secondary_addresses():
    classifier = ZoneClassifier(ClassifierConfig(primary_ip_only=True))
    assignment = classifier.classify(device(ip=["203.0.113.5", "192.168.1.5"]))
    assert assignment.zone is ZoneId.UNCONNECTED


def test_category_hint_is_off_by_default(classifier):
    assert classifier.classify(device(category="OT")).zone is ZoneId.UNCONNECTED


def test_category_hint_applies_after_base_rules():
    classifier = ZoneClassifier(ClassifierConfig(use_category_hint=True))

    assert classifier.classify(device(category="OT")).zone is ZoneId.OT
    assert classifier.classify(device(category="IT")).zone is ZoneId.IT
    assert classifier.classify(device(category="Network")).zone is ZoneId.NETWORK
    assert classifier.classify(device(category="IT", ip=["172.16.1.1"])).zone is ZoneId.OT


@pytest.mark.parametrize(
    "addresses, expected",
    [
        (["192.168.1.5"], False),
        (["10.0.0.1", "172.31.255.1"], False),
        (["8.8.8.8"], False),
        (["1.1.1.1", "9.9.9.9"], False),
        (["203.0.113.5"], True),
        (["192.168.1.5", "203.0.113.5"], True),
        (["Unknown", "Null", "N/A", ""], False),
        (["not-an-ip"], False),
        (["fe80::1"], False),
        (["2606:4700:4700::1111"], True),
        (["fd12:3456::1"], False),
        (["127.0.0.1", "169.254.1.1", "0.0.0.0"], False),
        (["224.0.0.251", "255.255.255.255"], False),
        (["::1", "::", "ff02::1"], False),
        (["127.0.0.1", "198.51.100.7"], True),
    ],
)
def test_has_public_ip(classifier, addresses, expected):
    assert classifier.has_public_ip(addresses) is expected


def test_public_ip_flag_is_independent_of_zone(classifier):
    assignment = classifier.classify(device(vendor="Cisco", ip=["198.51.100.7"]))
    assert assignment.zone is ZoneId.NETWORK
    assert assignment.has_public_ip is True


def test_network_device_exposes_bridge_over_peer_levels(classifier):
    router = device(vendor="Cisco")
    peers = [
        device(mac="AA:00:00:00:00:02", ip=["172.16.0.10"]),
        device(mac="AA:00:00:00:00:03", ip=["192.168.1.20"]),
        device(mac="AA:00:00:00:00:04", ip=["203.0.113.5"]),
    ]

    assignment = classifier.classify(router, peers)

    assert assignment.zone is ZoneId.NETWORK
    assert assignment.bridge.min_level == 1
    assert assignment.bridge.max_level == 3
    assert assignment.bridge.zones == [ZoneId.OT, ZoneId.IT]


def test_bridge_is_absent_without_leveled_peers(classifier):
    router = device(vendor="Cisco")
    assert classifier.classify(router).bridge is None
    assert classifier.classify(router, [device(ip=["203.0.113.5"])]).bridge is None


def test_bridge_is_only_computed_for_network_devices(classifier):
    workstation = device(ip=["192.168.1.5"])
    peers = [device(mac="AA:00:00:00:00:02", ip=["172.16.0.10"])]
    assert classifier.classify(workstation, peers).bridge is None


def test_bridges_can_be_disabled():
    classifier = ZoneClassifier(ClassifierConfig(compute_bridges=False))
    peers = [device(mac="AA:00:00:00:00:02", ip=["172.16.0.10"])]
    assert classifier.classify(device(vendor="Cisco"), peers).bridge is None


def test_custom_keywords_drive_the_cascade():
    config = ClassifierConfig(network_vendor_keywords=["mikrotik"], it_ip_prefixes=["100.64."])
    classifier = ZoneClassifier(config)

    assert classifier.classify(device(vendor="MikroTik")).zone is ZoneId.NETWORK
    assert classifier.classify(device(vendor="Cisco")).zone is ZoneId.UNCONNECTED
    assert classifier.classify(device(ip=["100.64.0.1"])).zone is ZoneId.IT


def test_category_hint_sends_other_labels_to_network():
    classifier = ZoneClassifier(ClassifierConfig(use_category_hint=True))

    assignment = classifier.classify(device(category="Servers"))

    assert assignment.zone is ZoneId.NETWORK
    assert assignment.matched_rule == "Category Hint (Network)"
    assert classifier.classify(device()).zone is ZoneId.NETWORK
