"""NIC team / bond discovery from matched partitions.

Networks that are served by exactly the same set of MAC addresses can share
one team (bond) on the server.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from napalm_idrac.model.network import Network, Partition, Team

PXE_NETWORK_TYPE: str = "PXE"


def macs_for_network(partitions: Iterable[Partition], network_id: str) -> list[str]:
    """Return the MAC address of every partition attached to *network_id*.

    Partitions without a MAC address are skipped.
    """
    macs: list[str] = []
    for partition in partitions:
        for network in partition.networks:
            if network.id == network_id and partition.mac_address:
                macs.append(partition.mac_address)
    return macs


def build_teams(partitions: Sequence[Partition], *, include_pxe: bool = False) -> list[Team]:
    """Group the networks of *partitions* by the MAC addresses serving them.

    Args:
        partitions: Matched partitions (MAC addresses already assigned).
        include_pxe: Also team ``PXE`` networks.

    Returns:
        One :class:`Team` per distinct MAC address list, in order of first
        appearance of its networks.
    """
    networks: list[Network] = []
    for partition in partitions:
        for network in partition.networks:
            if not include_pxe and network.type == PXE_NETWORK_TYPE:
                continue
            if network not in networks:
                networks.append(network)

    mac_teams: dict[tuple[str, ...], list[Network]] = {}
    for network in networks:
        macs = tuple(macs_for_network(partitions, network.id))
        mac_teams.setdefault(macs, []).append(network)

    return [
        Team(networks=team_networks, mac_addresses=list(macs))
        for macs, team_networks in mac_teams.items()
    ]
