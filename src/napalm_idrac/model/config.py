"""Canonical network configuration model for napalm-idrac."""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Mapping, TypeVar

from napalm_idrac.client.errors import IdracParseError, IdracPreconditionError
from napalm_idrac.model.network import Card, Network, Partition, Team
from napalm_idrac.model.nic_info import NicInfo
from napalm_idrac.parser.network_config import FABRIC_TYPE_FC, build_cards
from napalm_idrac.utils.match import card_n_partitions, match_nics
from napalm_idrac.utils.render import render_network_configuration
from napalm_idrac.utils.teams import build_teams, macs_for_network

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Placeholder written over static addressing by reset_virtual_mac_addresses().
_BLANK_IP: str = "0.0.0.0"


class NetworkConfiguration:
    """Uniform view of a logical network configuration.

    Blade and rack configurations nest their ports differently and carry
    irrelevant data (disabled fabrics, partitions of unpartitioned ports).
    :attr:`cards` exposes only the relevant parts, so all partitions can be
    walked uniformly::

        nc = NetworkConfiguration(params["network_configuration"])
        for card in nc.cards:
            for interface in card.interfaces:
                for partition in interface.partitions:
                    ...

    :meth:`add_nics` ties the tree to the server's physical NICs.

    Args:
        network_config: Raw configuration with ``id`` and ``interfaces`` keys.

    Raises:
        IdracParseError: If *network_config* does not have the expected shape.
    """

    def __init__(self, network_config: Mapping[str, Any]) -> None:
        if not isinstance(network_config, Mapping):
            raise IdracParseError(
                f"Expected a mapping for network configuration, got {type(network_config).__name__}"
            )
        raw_interfaces = network_config.get("interfaces")
        self.id: Any = network_config.get("id")
        self.cards: list[Card]
        self.cards, self._has_fc = build_cards(raw_interfaces)
        self.fc_interfaces: list[dict[str, Any]] = [
            copy.deepcopy(dict(raw))
            for raw in (raw_interfaces or [])
            if raw.get("fabrictype") == FABRIC_TYPE_FC
        ]
        self.nics_added: bool = False
        self._teams: dict[bool, list[Team]] = {}

    @property
    def has_fc(self) -> bool:
        """``True`` if an enabled fibre-channel card was present in the input."""
        return self._has_fc

    # ------------------------------------------------------------------
    # Partition / network queries
    # ------------------------------------------------------------------

    def collect_from_partitions(self, func: Callable[[Partition], T]) -> list[T]:
        """Apply *func* to every partition, in card / port / partition order."""
        return [
            func(partition)
            for card in self.cards
            for interface in card.interfaces
            for partition in interface.partitions
        ]

    def get_partitions(self, *network_types: str) -> list[Partition]:
        """Return partitions with at least one network of *network_types*."""
        return [
            p
            for p in self.collect_from_partitions(lambda p: p)
            if any(n.type in network_types for n in p.networks)
        ]

    def get_partitions_by_id(self, network_id: str) -> list[Partition]:
        """Return partitions attached to the network *network_id*."""
        return [
            p
            for p in self.collect_from_partitions(lambda p: p)
            if any(n.id == network_id for n in p.networks)
        ]

    def get_all_partitions(self) -> list[Partition]:
        """Return every partition that has networks attached."""
        return [p for p in self.collect_from_partitions(lambda p: p) if p.networks]

    def get_all_fqdds(self) -> list[str | None]:
        return self.collect_from_partitions(lambda p: p.fqdd)

    def get_networks(self, *network_types: str) -> list[Network]:
        """Return the distinct networks of *network_types*, in first-seen order."""
        networks: list[Network] = []
        for partition in self.collect_from_partitions(lambda p: p):
            for network in partition.networks:
                if network.type in network_types and network not in networks:
                    networks.append(network)
        return networks

    def get_network(self, network_type: str) -> Network | None:
        """Return the single network of *network_type*.

        Only valid for network types that allow one network per server, such
        as PXE. Returns ``None`` when there is none.

        Raises:
            IdracPreconditionError: If more than one network is found.
        """
        networks = self.get_networks(network_type)
        if not networks:
            return None
        if len(networks) > 1:
            raise IdracPreconditionError(
                "There should be only one %s network but found %d: %s"
                % (network_type, len(networks), [n.name for n in networks])
            )
        return networks[0]

    def get_static_ips(self, *network_types: str) -> list[str]:
        """Return the distinct static IP addresses of networks of *network_types*."""
        ips: list[str] = []
        for network in self.get_networks(*network_types):
            static = network.static_network_configuration
            if network.static and static is not None and static.ip_address:
                if static.ip_address not in ips:
                    ips.append(static.ip_address)
        return ips

    def macs_for_network(self, network_id: str) -> list[str]:
        return macs_for_network(self.collect_from_partitions(lambda p: p), network_id)

    def card_n_partitions(self, card: Card) -> int:
        return card_n_partitions(card)

    # ------------------------------------------------------------------
    # Physical NICs
    # ------------------------------------------------------------------

    def add_nics(self, nics: list[NicInfo], *, add_partitions: bool = False) -> None:
        """Add ``fqdd`` and ``mac_address`` data from the physical NICs.

        By default partitions that do not exist on the matched NIC are left
        without an FQDD. With *add_partitions*, FQDDs for partition numbers
        above one are generated from the partition 1 FQDD, so partitioned
        configuration can be generated for a NIC that is not partitioned yet.

        Args:
            nics: Physical NICs, typically from
                :func:`~napalm_idrac.client.nic_ops.fetch_nic_infos`. Matched
                NICs are removed from the list.
            add_partitions: Generate FQDDs for missing partitions.

        Raises:
            IdracMatchError: If any card has no matching NIC.
        """
        self.nics_added = True
        self._teams.clear()
        match_nics(self.cards, nics, add_partitions=add_partitions)

    def reset_virtual_mac_addresses(self, permanent_macs: Mapping[str, str | None]) -> None:
        """Reset partition MAC addresses to the permanent ones and blank addressing.

        For every partition with networks: ``lanMacAddress`` and
        ``iscsiMacAddress`` become the permanent MAC of the partition's FQDD,
        ``iscsiIQN`` is cleared and static networks get ``0.0.0.0`` as IP
        address, gateway and subnet.

        Args:
            permanent_macs: FQDD to permanent MAC address mapping.
        """
        for partition in self.get_all_partitions():
            mac = permanent_macs.get(partition.fqdd) if partition.fqdd else None
            partition.lan_mac_address = mac
            partition.iscsi_mac_address = mac
            partition.iscsi_iqn = ""
            for network in partition.networks:
                if not network.static:
                    continue
                static = network.static_network_configuration
                if static is None:
                    continue
                static.gateway = _BLANK_IP
                static.subnet = _BLANK_IP
                static.ip_address = _BLANK_IP
        self._teams.clear()

    def teams(self, *, include_pxe: bool = False, refresh: bool = False) -> list[Team]:
        """Return NIC teaming information: networks grouped by serving MACs.

        The result is cached per *include_pxe* value; pass *refresh* to
        recompute it.

        Raises:
            IdracPreconditionError: If :meth:`add_nics` has not been called.
        """
        if not self.nics_added:
            raise IdracPreconditionError(
                "NIC MAC Address information needs to updated to network "
                "configuration. Invoke add_nics"
            )
        if refresh or include_pxe not in self._teams:
            self._teams[include_pxe] = build_teams(
                self.get_all_partitions(), include_pxe=include_pxe
            )
        return self._teams[include_pxe]

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as plain data; see
        :func:`~napalm_idrac.utils.render.render_network_configuration`."""
        return render_network_configuration(self)
