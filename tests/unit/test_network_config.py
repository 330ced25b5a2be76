"""Unit tests for napalm_idrac.parser.network_config and napalm_idrac.model.config."""

from __future__ import annotations

import copy
import json
import pathlib
from typing import Any

import pytest

from napalm_idrac.client.errors import IdracParseError, IdracPreconditionError
from napalm_idrac.model.config import NetworkConfiguration
from napalm_idrac.parser.network_config import (
    build_cards,
    name_to_fabric,
    name_to_partition,
    name_to_port,
)
from napalm_idrac.utils.normalize import strip_volatile_network_fields, to_boolean

FIXTURES = pathlib.Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _rack_config() -> dict[str, Any]:
    return json.loads((FIXTURES / "rack_network_config.json").read_text())


def _network(network_id: str, network_type: str = "PUBLIC_LAN", **extra: Any) -> dict[str, Any]:
    network: dict[str, Any] = {"id": network_id, "name": network_id, "type": network_type}
    network.update(extra)
    return network


def _card(
    nictype: str,
    ports: int,
    partitions: int,
    *,
    partitioned: bool = False,
    enabled: bool = True,
    fabrictype: str = "ethernet",
) -> dict[str, Any]:
    return {
        "name": f"{nictype} card",
        "enabled": enabled,
        "fabrictype": fabrictype,
        "nictype": nictype,
        "partitioned": partitioned,
        "interfaces": [
            {
                "name": f"Port {port}",
                "partitions": [
                    {"name": str(partition), "networkObjects": []}
                    for partition in range(1, partitions + 1)
                ],
            }
            for port in range(1, ports + 1)
        ],
    }


# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------

def test_name_to_port() -> None:
    assert name_to_port("Port 1") == 1
    assert name_to_port("Port12") == 12


def test_name_to_port_invalid() -> None:
    with pytest.raises(IdracParseError, match="Invalid port name"):
        name_to_port("Interface 1")


def test_name_to_partition() -> None:
    assert name_to_partition("3") == 3
    assert name_to_partition("Partition 2") == 2
    assert name_to_partition(4) == 4


def test_name_to_partition_invalid() -> None:
    with pytest.raises(IdracParseError, match="Invalid partition name"):
        name_to_partition("first")


def test_name_to_fabric() -> None:
    assert name_to_fabric("Fabric B") == "B"
    with pytest.raises(IdracParseError):
        name_to_fabric("Slot 1")


# ---------------------------------------------------------------------------
# normalize
# ---------------------------------------------------------------------------

def test_to_boolean() -> None:
    assert to_boolean(True) is True
    assert to_boolean("true") is True
    assert to_boolean("YES") is True
    assert to_boolean(1) is True
    assert to_boolean("false") is False
    assert to_boolean(None) is False
    assert to_boolean("") is False


def test_strip_volatile_network_fields_copies() -> None:
    raw = _network(
        "n1",
        staticNetworkConfiguration={"ipAddress": "10.0.0.5", "ipRange": [{"id": "r"}]},
    )
    stripped = strip_volatile_network_fields(raw)
    assert "ipRange" not in stripped["staticNetworkConfiguration"]
    assert "ipRange" in raw["staticNetworkConfiguration"]


# ---------------------------------------------------------------------------
# build_cards
# ---------------------------------------------------------------------------

class TestBuildCards:
    def test_none(self) -> None:
        assert build_cards(None) == ([], False)

    def test_disabled_card_dropped(self) -> None:
        cards, has_fc = build_cards([_card("2x10Gb", 2, 1, enabled=False)])
        assert cards == []
        assert has_fc is False

    def test_enabled_fc_dropped_and_flagged(self) -> None:
        cards, has_fc = build_cards([_card("2", 2, 1, fabrictype="fc")])
        assert cards == []
        assert has_fc is True

    def test_disabled_fc_not_flagged(self) -> None:
        _, has_fc = build_cards([_card("2", 2, 1, fabrictype="fc", enabled=False)])
        assert has_fc is False

    def test_string_enabled(self) -> None:
        raw = _card("2x10Gb", 2, 1)
        raw["enabled"] = "true"
        cards, _ = build_cards([raw])
        assert len(cards) == 1

    def test_unusable_ports_dropped(self) -> None:
        cards, _ = build_cards([_card("2x10Gb,2x1Gb", 4, 1)])
        assert [i.port_no for i in cards[0].interfaces] == [1, 2]

    def test_unpartitioned_keeps_first_partition(self) -> None:
        cards, _ = build_cards([_card("2x10Gb", 2, 4)])
        for interface in cards[0].interfaces:
            assert [p.partition_no for p in interface.partitions] == [1]

    def test_partitioned_keeps_all(self) -> None:
        cards, _ = build_cards([_card("2x10Gb", 2, 4, partitioned=True)])
        for interface in cards[0].interfaces:
            assert [p.partition_no for p in interface.partitions] == [1, 2, 3, 4]

    def test_interface_partitioned_flag(self) -> None:
        raw = _card("2x10Gb", 2, 4)
        raw["interfaces"][1]["partitioned"] = "true"
        cards, _ = build_cards([raw])
        assert len(cards[0].interfaces[0].partitions) == 1
        assert len(cards[0].interfaces[1].partitions) == 4
        assert cards[0].interfaces[1].partitioned is True
        assert cards[0].interfaces[0].partitioned is None

    def test_1gb_card_never_partitioned(self) -> None:
        cards, _ = build_cards([_card("2x1Gb", 2, 4, partitioned=True)])
        assert all(len(i.partitions) == 1 for i in cards[0].interfaces)

    def test_partitions_above_capability_dropped(self) -> None:
        cards, _ = build_cards([_card("2x10Gb", 1, 8, partitioned=True)])
        assert [p.partition_no for p in cards[0].interfaces[0].partitions] == [1, 2, 3, 4]

    def test_partition_names(self) -> None:
        raw = _card("2x10Gb", 1, 2, partitioned=True)
        raw["interfaces"][0]["partitions"][1]["name"] = "Partition 2"
        cards, _ = build_cards([raw])
        assert cards[0].interfaces[0].partitions[1].partition_no == 2
        assert cards[0].interfaces[0].partitions[1].name == "Partition 2"

    def test_legacy_nictype(self) -> None:
        cards, _ = build_cards([_card("2", 2, 1)])
        assert cards[0].nictype.nictype == "2x10Gb"

    def test_invalid_port_name(self) -> None:
        raw = _card("2x10Gb", 1, 1)
        raw["interfaces"][0]["name"] = "eth0"
        with pytest.raises(IdracParseError):
            build_cards([raw])

    def test_invalid_partition_name(self) -> None:
        raw = _card("2x10Gb", 1, 1)
        raw["interfaces"][0]["partitions"][0]["name"] = "first"
        with pytest.raises(IdracParseError):
            build_cards([raw])

    def test_network_without_id(self) -> None:
        raw = _card("2x10Gb", 1, 1)
        raw["interfaces"][0]["partitions"][0]["networkObjects"] = [{"type": "PXE"}]
        with pytest.raises(IdracParseError, match="Network without id"):
            build_cards([raw])

    def test_wrong_shape(self) -> None:
        with pytest.raises(IdracParseError, match="Expected a list"):
            build_cards({"interfaces": []})

    def test_input_not_modified(self) -> None:
        raw = [_card("2x10Gb", 2, 4, partitioned=True)]
        raw[0]["interfaces"][0]["partitions"][0]["networkObjects"] = [
            _network("n1", static=True, staticNetworkConfiguration={"ipRange": []})
        ]
        before = copy.deepcopy(raw)
        build_cards(raw)
        assert raw == before


class TestIndices:
    def test_global_indices_strictly_increasing(self) -> None:
        cards, _ = build_cards(
            [
                _card("2x10Gb", 2, 4, partitioned=True),
                _card("2x10Gb", 2, 1, enabled=False),
                _card("2x10Gb,2x1Gb", 4, 4),
            ]
        )
        assert [c.card_index for c in cards] == [0, 1]
        interfaces = [i for c in cards for i in c.interfaces]
        assert [i.interface_index for i in interfaces] == [0, 1, 2, 3]
        partitions = [p for i in interfaces for p in i.partitions]
        assert [p.partition_index for p in partitions] == list(range(len(partitions)))

    def test_one_first_partition_per_interface(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        interfaces = [i for c in nc.cards for i in c.interfaces]
        firsts = nc.collect_from_partitions(lambda p: p.partition_no == 1)
        assert sum(firsts) == len(interfaces)


# ---------------------------------------------------------------------------
# NetworkConfiguration
# ---------------------------------------------------------------------------

class TestNetworkConfiguration:
    def test_rack_cards(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        assert nc.id == "rack-r730-01"
        assert [c.name for c in nc.cards] == ["NIC in Integrated", "NIC in Slot 4"]
        assert [len(i.partitions) for c in nc.cards for i in c.interfaces] == [4, 4, 1, 1]

    def test_has_fc(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        assert nc.has_fc is True
        assert [raw["name"] for raw in nc.fc_interfaces] == ["FC in Slot 6"]

    def test_not_a_mapping(self) -> None:
        with pytest.raises(IdracParseError):
            NetworkConfiguration([])  # type: ignore[arg-type]

    def test_missing_interfaces(self) -> None:
        nc = NetworkConfiguration({"id": "empty"})
        assert nc.cards == []
        assert nc.has_fc is False

    def test_ip_range_stripped(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        mgmt = nc.get_networks("HYPERVISOR_MANAGEMENT")
        assert len(mgmt) == 1
        assert mgmt[0].static_network_configuration is not None
        assert "ipRange" not in mgmt[0].static_network_configuration.extra

    def test_get_partitions(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        iscsi = nc.get_partitions("STORAGE_ISCSI_SAN")
        assert [(p.port_no, p.partition_no) for p in iscsi] == [(1, 2), (2, 2)]

    def test_get_partitions_by_id(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        vmotion = nc.get_partitions_by_id("ff80808150c8d0e20150c8d7a1b2000c")
        assert len(vmotion) == 2

    def test_get_all_partitions_only_with_networks(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        assert len(nc.get_all_partitions()) == 8

    def test_get_networks_unique(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        names = [n.name for n in nc.get_networks("STORAGE_ISCSI_SAN", "PUBLIC_LAN")]
        assert names == ["iSCSI A", "Workload", "iSCSI B"]

    def test_get_network(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        pxe = nc.get_network("PXE")
        assert pxe is not None
        assert pxe.name == "PXE"
        assert nc.get_network("FILESHARE") is None

    def test_get_network_more_than_one(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        with pytest.raises(IdracPreconditionError, match="only one STORAGE_ISCSI_SAN"):
            nc.get_network("STORAGE_ISCSI_SAN")

    def test_get_static_ips(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        assert nc.get_static_ips("HYPERVISOR_MANAGEMENT") == ["172.28.12.118"]
        assert nc.get_static_ips("STORAGE_ISCSI_SAN") == ["172.16.12.118", "172.17.12.118"]

    def test_card_n_partitions(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        assert [nc.card_n_partitions(c) for c in nc.cards] == [4, 1]

    def test_get_all_fqdds_before_matching(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        assert set(nc.get_all_fqdds()) == {None}

    def test_teams_before_add_nics(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        with pytest.raises(IdracPreconditionError, match="Invoke add_nics"):
            nc.teams()
