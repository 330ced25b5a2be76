"""Parser for logical network configuration data.

The logical configuration lists top-level cards ("fabrics" on blades) under
``interfaces``; each card lists its ports under a nested ``interfaces`` key
and each port lists partitions. Fibre-channel fabrics are always present,
partitions above one are listed even for unpartitioned ports, and ports
beyond what the card can use may be listed. :func:`build_cards` turns all of
that into a uniform Card -> Interface -> Partition tree.
"""

from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping

from napalm_idrac.client.errors import IdracParseError
from napalm_idrac.model.network import (
    Card,
    Interface,
    Network,
    Partition,
    StaticNetworkConfiguration,
)
from napalm_idrac.model.nic_type import NicType
from napalm_idrac.utils.normalize import strip_volatile_network_fields, to_boolean

logger = logging.getLogger(__name__)

FABRIC_TYPE_FC: str = "fc"

_FABRIC_NAME_RE: re.Pattern[str] = re.compile(r"Fabric ([A-Z])")
_PORT_NAME_RE: re.Pattern[str] = re.compile(r"Port\s*(\d+)", re.IGNORECASE)
_PARTITION_NAME_RE: re.Pattern[str] = re.compile(r"(\d+)")

# Keys mapped onto typed fields (or recomputed) at each level; everything
# else is carried in ``extra``.
_CARD_KEYS: frozenset[str] = frozenset(
    {"name", "enabled", "fabrictype", "nictype", "partitioned", "interfaces", "card_index"}
)
_INTERFACE_KEYS: frozenset[str] = frozenset(
    {"name", "partitioned", "partitions", "fqdd", "interface_index"}
)
_PARTITION_KEYS: frozenset[str] = frozenset(
    {
        "name",
        "networkObjects",
        "fqdd",
        "mac_address",
        "lanMacAddress",
        "iscsiMacAddress",
        "iscsiIQN",
        "port_no",
        "partition_no",
        "partition_index",
    }
)
_NETWORK_KEYS: frozenset[str] = frozenset(
    {"id", "type", "name", "static", "staticNetworkConfiguration"}
)
_STATIC_KEYS: frozenset[str] = frozenset({"ipAddress", "gateway", "subnet"})


def name_to_fabric(fabric_name: str) -> str:
    """Return the fabric letter of ``"Fabric A"``-style names."""
    m = _FABRIC_NAME_RE.search(fabric_name) if isinstance(fabric_name, str) else None
    if not m:
        raise IdracParseError(f"Invalid fabric name {fabric_name!r}")
    return m.group(1)


def name_to_port(port_name: str) -> int:
    """Return the port number of ``"Port N"``-style names."""
    m = _PORT_NAME_RE.search(port_name) if isinstance(port_name, str) else None
    if not m:
        raise IdracParseError(f"Invalid port name {port_name!r}")
    return int(m.group(1))


def name_to_partition(partition_name: str | int) -> int:
    """Return the partition number of ``"N"`` or ``"Partition N"``-style names."""
    if isinstance(partition_name, int) and not isinstance(partition_name, bool):
        return partition_name
    m = _PARTITION_NAME_RE.search(partition_name) if isinstance(partition_name, str) else None
    if not m:
        raise IdracParseError(f"Invalid partition name {partition_name!r}")
    return int(m.group(1))


@dataclass
class _Counters:
    """Global running indices threaded through a single build."""

    card: int = 0
    interface: int = 0
    partition: int = 0


def build_cards(raw_cards: Any) -> tuple[list[Card], bool]:
    """Build the canonical card tree from the raw top-level ``interfaces`` list.

    Disabled cards are dropped. Enabled fibre-channel cards are dropped too
    but reported through the returned flag. Interfaces beyond the card's
    usable port count are dropped, as are partitions above one unless the
    card or interface is partitioned and the partition fits the card's
    partition capability. Card, interface and partition indices are assigned
    from global counters in build order.

    Args:
        raw_cards: The raw ``interfaces`` list, or ``None``.

    Returns:
        ``(cards, has_fc)``.

    Raises:
        IdracParseError: On unparseable port / partition names or when the
            data does not have the expected nesting.
    """
    if raw_cards is None:
        return [], False
    counters = _Counters()
    cards: list[Card] = []
    has_fc = False

    for raw_card in _require_list(raw_cards, "interfaces"):
        raw_card = _require_mapping(raw_card, "card")
        enabled = to_boolean(raw_card.get("enabled"))
        fabrictype = raw_card.get("fabrictype")
        if enabled and fabrictype == FABRIC_TYPE_FC:
            has_fc = True
        if not enabled or fabrictype == FABRIC_TYPE_FC:
            logger.debug(
                "Skipping card %r (enabled=%s, fabrictype=%s)",
                raw_card.get("name"),
                enabled,
                fabrictype,
            )
            continue
        cards.append(_build_card(raw_card, counters))

    return cards, has_fc


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _build_card(raw_card: Mapping[str, Any], counters: _Counters) -> Card:
    nictype = NicType(raw_card.get("nictype"))
    card_partitioned = to_boolean(raw_card.get("partitioned"))
    interfaces: list[Interface] = []

    for raw_interface in _require_list(raw_card.get("interfaces") or [], "card interfaces"):
        raw_interface = _require_mapping(raw_interface, "interface")
        port_no = name_to_port(raw_interface.get("name"))
        # Usable ports enumerate first, e.g. the 1Gb ports of a
        # 2x10Gb,2x1Gb combo card come after the 10Gb ones.
        if port_no > nictype.n_usable_ports:
            logger.debug(
                "Skipping %s on %s card %r: only %d usable port(s)",
                raw_interface.get("name"),
                nictype,
                raw_card.get("name"),
                nictype.n_usable_ports,
            )
            continue

        interface = Interface(
            name=raw_interface["name"],
            port_no=port_no,
            interface_index=counters.interface,
            partitioned=(
                to_boolean(raw_interface["partitioned"])
                if "partitioned" in raw_interface
                else None
            ),
            fqdd=raw_interface.get("fqdd") or None,
            extra=_extra(raw_interface, _INTERFACE_KEYS),
        )
        counters.interface += 1

        partitioned = card_partitioned or bool(interface.partitioned)
        for raw_partition in _require_list(raw_interface.get("partitions") or [], "partitions"):
            raw_partition = _require_mapping(raw_partition, "partition")
            partition_no = name_to_partition(raw_partition.get("name"))
            if not (
                partition_no == 1
                or (partitioned and partition_no <= nictype.n_partitions)
            ):
                continue
            interface.partitions.append(
                _build_partition(raw_partition, port_no, partition_no, counters.partition)
            )
            counters.partition += 1

        interfaces.append(interface)

    card = Card(
        name=raw_card.get("name"),
        fabrictype=raw_card.get("fabrictype"),
        nictype=nictype,
        partitioned=card_partitioned,
        card_index=counters.card,
        interfaces=interfaces,
        extra=_extra(raw_card, _CARD_KEYS),
    )
    counters.card += 1
    logger.debug(
        "Built card %r (%s): %d interface(s)", card.name, card.nictype, len(card.interfaces)
    )
    return card


def _build_partition(
    raw_partition: Mapping[str, Any],
    port_no: int,
    partition_no: int,
    partition_index: int,
) -> Partition:
    networks = [
        _build_network(_require_mapping(raw, "network"))
        for raw in _require_list(raw_partition.get("networkObjects") or [], "networkObjects")
    ]
    return Partition(
        name=str(raw_partition["name"]),
        port_no=port_no,
        partition_no=partition_no,
        partition_index=partition_index,
        networks=networks,
        fqdd=raw_partition.get("fqdd") or None,
        mac_address=raw_partition.get("mac_address") or None,
        lan_mac_address=raw_partition.get("lanMacAddress"),
        iscsi_mac_address=raw_partition.get("iscsiMacAddress"),
        iscsi_iqn=raw_partition.get("iscsiIQN"),
        extra=_extra(raw_partition, _PARTITION_KEYS),
    )


def _build_network(raw_network: Mapping[str, Any]) -> Network:
    raw = strip_volatile_network_fields(raw_network)
    if raw.get("id") is None:
        raise IdracParseError(f"Network without id: {raw_network!r}")
    static_config: StaticNetworkConfiguration | None = None
    raw_static = raw.get("staticNetworkConfiguration")
    if raw_static is not None:
        raw_static = _require_mapping(raw_static, "staticNetworkConfiguration")
        static_config = StaticNetworkConfiguration(
            ip_address=raw_static.get("ipAddress"),
            gateway=raw_static.get("gateway"),
            subnet=raw_static.get("subnet"),
            extra=_extra(raw_static, _STATIC_KEYS),
        )
    return Network(
        id=str(raw["id"]),
        type=raw.get("type"),
        name=raw.get("name"),
        static=to_boolean(raw.get("static")),
        static_network_configuration=static_config,
        extra=_extra(raw, _NETWORK_KEYS),
    )


def _extra(raw: Mapping[str, Any], known: frozenset[str]) -> dict[str, Any]:
    return {k: copy.deepcopy(v) for k, v in raw.items() if k not in known}


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise IdracParseError(f"Expected a mapping for {what}, got {type(value).__name__}")
    return value


def _require_list(value: Any, what: str) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        raise IdracParseError(f"Expected a list for {what}, got {type(value).__name__}")
    return list(value)
