"""Canonical network configuration tree: Card -> Interface -> Partition."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from napalm_idrac.model.nic import NicView
from napalm_idrac.model.nic_info import NicInfo, NicPort
from napalm_idrac.model.nic_type import NicType


@dataclass
class StaticNetworkConfiguration:
    """Static IP settings of a network.

    ``ipRange`` is dropped on input: it differs between otherwise identical
    networks and must not take part in equality.

    Attributes:
        ip_address: ``ipAddress``.
        gateway: ``gateway``.
        subnet: ``subnet``.
        extra: Any other keys, kept verbatim for projection.
    """

    ip_address: str | None = None
    gateway: str | None = None
    subnet: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Network:
    """A network attached to a partition.

    Attributes:
        id: Network identifier.
        type: Network category, e.g. ``"PXE"``, ``"STORAGE_ISCSI_SAN"``,
            ``"PUBLIC_LAN"``.
        name: Display name.
        static: Whether the network uses static addressing.
        static_network_configuration: Static IP settings, if any.
        extra: Any other keys, kept verbatim for projection.
    """

    id: str
    type: str | None = None
    name: str | None = None
    static: bool = False
    static_network_configuration: StaticNetworkConfiguration | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Partition:
    """One kept partition of a canonical interface.

    Attributes:
        name: Raw partition name (``"1"``, ``"Partition 2"``, ...).
        port_no: Port number of the owning interface.
        partition_no: Partition number parsed from :attr:`name`.
        partition_index: Global zero-based index across the whole build.
        networks: Attached networks (``networkObjects``).
        fqdd: Physical FQDD, set by NIC matching.
        mac_address: Physical current MAC address, set by NIC matching.
        lan_mac_address: ``lanMacAddress``.
        iscsi_mac_address: ``iscsiMacAddress``.
        iscsi_iqn: ``iscsiIQN``.
        extra: Any other keys, kept verbatim for projection.
        nic_view: Physical partition at the same position, set by NIC matching.
    """

    name: str
    port_no: int
    partition_no: int
    partition_index: int
    networks: list[Network] = field(default_factory=list)
    fqdd: str | None = None
    mac_address: str | None = None
    lan_mac_address: str | None = None
    iscsi_mac_address: str | None = None
    iscsi_iqn: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    nic_view: NicView | None = field(default=None, compare=False, repr=False)


@dataclass
class Interface:
    """One kept port of a canonical card.

    Attributes:
        name: Raw port name, e.g. ``"Port 1"``.
        port_no: Port number parsed from :attr:`name`.
        interface_index: Global zero-based index across the whole build.
        partitioned: Raw per-port ``partitioned`` flag, if present.
        partitions: Kept partitions in input order.
        fqdd: Physical FQDD; may be supplied in the input, otherwise set by
            NIC matching from the first partition.
        extra: Any other keys, kept verbatim for projection.
        nic_port: Physical port at the same position, set by NIC matching.
    """

    name: str
    port_no: int
    interface_index: int
    partitioned: bool | None = None
    partitions: list[Partition] = field(default_factory=list)
    fqdd: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    nic_port: NicPort | None = field(default=None, compare=False, repr=False)


@dataclass
class Card:
    """One enabled ethernet card (fabric) of the canonical tree.

    Attributes:
        name: Raw card / fabric name.
        fabrictype: Raw ``fabrictype``.
        nictype: Parsed shape label.
        partitioned: Card-level ``partitioned`` flag.
        card_index: Global zero-based index across the whole build.
        interfaces: Kept interfaces in input order.
        enabled: Always ``True`` for built cards.
        extra: Any other keys, kept verbatim for projection.
        nic_info: Matched physical card, set by NIC matching.
    """

    name: str | None
    fabrictype: str | None
    nictype: NicType
    partitioned: bool
    card_index: int
    interfaces: list[Interface] = field(default_factory=list)
    enabled: bool = True
    extra: dict[str, Any] = field(default_factory=dict)
    nic_info: NicInfo | None = field(default=None, compare=False, repr=False)


@dataclass
class Team:
    """Networks served by exactly the same set of MAC addresses."""

    networks: list[Network] = field(default_factory=list)
    mac_addresses: list[str] = field(default_factory=list)
