"""Plain-data renderer for network configurations."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from napalm_idrac.model.network import Card, Interface, Network, Partition

if TYPE_CHECKING:
    from napalm_idrac.model.config import NetworkConfiguration


def render_network_configuration(nc: NetworkConfiguration) -> dict[str, Any]:
    """Serialize *nc* to a JSON/YAML-serializable dict.

    The result mirrors the input the configuration was built from, except:

    - disabled cards, unusable ports and inapplicable partitions are absent;
    - ports and partitions carry the matched ``fqdd`` / ``mac_address`` and
      the ``card_index`` / ``interface_index`` / ``partition_index`` /
      ``port_no`` / ``partition_no`` fields;
    - fibre-channel entries come last, unmodified.

    Physical NIC objects are never included.
    """
    interfaces: list[dict[str, Any]] = [_render_card(card) for card in nc.cards]
    interfaces.extend(copy.deepcopy(raw) for raw in nc.fc_interfaces)
    return {"id": nc.id, "interfaces": interfaces}


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _render_card(card: Card) -> dict[str, Any]:
    data = copy.deepcopy(card.extra)
    _put(data, "name", card.name)
    data["enabled"] = card.enabled
    _put(data, "fabrictype", card.fabrictype)
    data["nictype"] = str(card.nictype)
    data["partitioned"] = card.partitioned
    data["card_index"] = card.card_index
    data["interfaces"] = [_render_interface(i) for i in card.interfaces]
    return data


def _render_interface(interface: Interface) -> dict[str, Any]:
    data = copy.deepcopy(interface.extra)
    data["name"] = interface.name
    _put(data, "partitioned", interface.partitioned)
    data["interface_index"] = interface.interface_index
    _put(data, "fqdd", interface.fqdd)
    data["partitions"] = [_render_partition(p) for p in interface.partitions]
    return data


def _render_partition(partition: Partition) -> dict[str, Any]:
    data = copy.deepcopy(partition.extra)
    data["name"] = partition.name
    data["networkObjects"] = [_render_network(n) for n in partition.networks]
    data["port_no"] = partition.port_no
    data["partition_no"] = partition.partition_no
    data["partition_index"] = partition.partition_index
    _put(data, "fqdd", partition.fqdd)
    _put(data, "mac_address", partition.mac_address)
    _put(data, "lanMacAddress", partition.lan_mac_address)
    _put(data, "iscsiMacAddress", partition.iscsi_mac_address)
    _put(data, "iscsiIQN", partition.iscsi_iqn)
    return data


def _render_network(network: Network) -> dict[str, Any]:
    data = copy.deepcopy(network.extra)
    data["id"] = network.id
    _put(data, "type", network.type)
    _put(data, "name", network.name)
    data["static"] = network.static
    static = network.static_network_configuration
    if static is not None:
        static_data = copy.deepcopy(static.extra)
        _put(static_data, "ipAddress", static.ip_address)
        _put(static_data, "gateway", static.gateway)
        _put(static_data, "subnet", static.subnet)
        data["staticNetworkConfiguration"] = static_data
    return data


def _put(data: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        data[key] = value
