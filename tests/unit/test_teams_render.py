"""Unit tests for napalm_idrac.utils.teams and napalm_idrac.utils.render."""

from __future__ import annotations

import json
import pathlib
from typing import Any

from napalm_idrac.model.config import NetworkConfiguration
from napalm_idrac.model.nic_info import create_nic_infos
from napalm_idrac.parser.wsman import parse_enumeration_response

FIXTURES = pathlib.Path(__file__).parent.parent / "fixtures"

PXE_ID = "ff80808150c8d0e20150c8d4dec40007"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _pxe_config() -> dict[str, Any]:
    pxe = {"id": "pxe", "name": "PXE", "type": "PXE", "static": False}
    return {
        "id": "pxe-only",
        "interfaces": [
            {
                "name": "Integrated",
                "enabled": True,
                "fabrictype": "ethernet",
                "nictype": "2x10Gb",
                "partitioned": True,
                "interfaces": [
                    {
                        "name": f"Port {port}",
                        "partitions": [
                            {"name": "1", "networkObjects": [dict(pxe)]},
                            {"name": "2", "networkObjects": []},
                        ],
                    }
                    for port in (1, 2)
                ],
            }
        ],
    }


def _nics_2x10gb() -> list[Any]:
    records = [
        {
            "FQDD": f"NIC.Integrated.1-{port}-{partition}",
            "CurrentMACAddress": f"00:0A:F7:06:8{port}:0{partition}",
            "PermanentMACAddress": f"00:0A:F7:06:8{port}:0{partition}",
            "LinkSpeed": "5",
        }
        for port in (1, 2)
        for partition in (1, 2)
    ]
    return create_nic_infos(records)


def _rack_config() -> dict[str, Any]:
    return json.loads((FIXTURES / "rack_network_config.json").read_text())


def _matched_rack() -> NetworkConfiguration:
    items = parse_enumeration_response((FIXTURES / "x520_i350_nic_view.xml").read_bytes()).items
    nc = NetworkConfiguration(_rack_config())
    nc.add_nics(create_nic_infos(items), add_partitions=True)
    return nc


# ---------------------------------------------------------------------------
# teams
# ---------------------------------------------------------------------------

class TestTeams:
    def test_pxe_excluded_by_default(self) -> None:
        nc = NetworkConfiguration(_pxe_config())
        nc.add_nics(_nics_2x10gb())
        assert nc.teams() == []

    def test_pxe_included(self) -> None:
        nc = NetworkConfiguration(_pxe_config())
        nc.add_nics(_nics_2x10gb())
        teams = nc.teams(include_pxe=True)
        assert len(teams) == 1
        assert [n.id for n in teams[0].networks] == ["pxe"]
        assert teams[0].mac_addresses == ["00:0A:F7:06:81:01", "00:0A:F7:06:82:01"]

    def test_cached_per_include_pxe(self) -> None:
        nc = NetworkConfiguration(_pxe_config())
        nc.add_nics(_nics_2x10gb())
        assert nc.teams() == []
        assert len(nc.teams(include_pxe=True)) == 1
        assert nc.teams(include_pxe=True) is nc.teams(include_pxe=True)

    def test_rack_teams(self) -> None:
        nc = _matched_rack()
        teams = {tuple(t.mac_addresses): [n.name for n in t.networks] for t in nc.teams()}
        assert teams[("A0:36:9F:12:34:50", "A0:36:9F:12:34:52")] == ["Hypervisor Management"]
        assert teams[("90:E2:BA:8C:1D:20", "90:E2:BA:8C:1D:21")] == ["vMotion"]
        # Synthesized partitions have no MAC address yet.
        assert teams[()] == ["iSCSI A", "Workload", "iSCSI B"]
        assert all(n.type != "PXE" for t in nc.teams() for n in t.networks)

    def test_refresh_after_reset(self) -> None:
        nc = NetworkConfiguration(_pxe_config())
        nc.add_nics(_nics_2x10gb())
        before = nc.teams(include_pxe=True)
        nc.cards[0].interfaces[1].partitions[0].mac_address = "00:0A:F7:06:99:01"
        assert nc.teams(include_pxe=True) is before
        refreshed = nc.teams(include_pxe=True, refresh=True)
        assert refreshed[0].mac_addresses == ["00:0A:F7:06:81:01", "00:0A:F7:06:99:01"]


# ---------------------------------------------------------------------------
# to_dict
# ---------------------------------------------------------------------------

class TestToDict:
    def test_shape(self) -> None:
        data = _matched_rack().to_dict()
        assert data["id"] == "rack-r730-01"
        assert [c["name"] for c in data["interfaces"]] == [
            "NIC in Integrated",
            "NIC in Slot 4",
            "FC in Slot 6",
        ]

    def test_derived_fields(self) -> None:
        card = _matched_rack().to_dict()["interfaces"][0]
        assert card["card_index"] == 0
        assert card["id"] == "card-integrated"
        port = card["interfaces"][1]
        assert port["interface_index"] == 1
        assert port["fqdd"] == "NIC.Integrated.1-2-1"
        partition = port["partitions"][0]
        assert partition["port_no"] == 2
        assert partition["partition_no"] == 1
        assert partition["partition_index"] == 4
        assert partition["mac_address"] == "A0:36:9F:12:34:52"

    def test_ip_range_absent(self) -> None:
        card = _matched_rack().to_dict()["interfaces"][0]
        network = card["interfaces"][0]["partitions"][0]["networkObjects"][1]
        assert network["staticNetworkConfiguration"] == {
            "ipAddress": "172.28.12.118",
            "gateway": "172.28.0.1",
            "subnet": "255.255.0.0",
        }
        assert network["vlanId"] == 28

    def test_fc_copied_verbatim(self) -> None:
        raw = _rack_config()
        data = _matched_rack().to_dict()
        assert data["interfaces"][-1] == raw["interfaces"][-1]

    def test_json_serializable(self) -> None:
        json.dumps(_matched_rack().to_dict())

    def test_round_trip(self) -> None:
        nc = _matched_rack()
        rebuilt = NetworkConfiguration(nc.to_dict())
        assert rebuilt.cards == nc.cards
        assert rebuilt.id == nc.id
        assert rebuilt.has_fc == nc.has_fc

    def test_round_trip_unmatched(self) -> None:
        nc = NetworkConfiguration(_rack_config())
        assert NetworkConfiguration(nc.to_dict()).cards == nc.cards
