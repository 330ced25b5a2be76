"""Match canonical cards to physical NICs.

Cards are processed in canonical order against a shared pool of
:class:`~napalm_idrac.model.nic_info.NicInfo` objects; a matched NIC is
removed from the pool before the next card is considered, so the first
acceptable NIC always wins.
"""

from __future__ import annotations

import logging

from napalm_idrac.client.errors import IdracInvariantError, IdracMatchError
from napalm_idrac.model.network import Card
from napalm_idrac.model.nic import NicView
from napalm_idrac.model.nic_info import NicInfo

logger = logging.getLogger(__name__)


def card_n_partitions(card: Card) -> int:
    """Return the number of partitions requested on every port of *card*.

    Raises:
        IdracInvariantError: If the card's ports request different numbers
            of partitions.
    """
    counts = list(dict.fromkeys(len(i.partitions) for i in card.interfaces))
    if not counts:
        return 1
    if len(counts) == 1:
        return counts[0]
    raise IdracInvariantError(
        "Different number of partitions requested for ports on %s: %s"
        % (
            card.name,
            ", ".join(
                "Interface: %s # partitions: %d" % (i.name, len(i.partitions))
                for i in card.interfaces
            ),
        )
    )


def find_nic(card: Card, nics: list[NicInfo]) -> int | None:
    """Return the pool index of the NIC to use for *card*, or ``None``.

    A card whose first interface carries an FQDD is matched to the NIC with
    the same card prefix. Otherwise the first enabled NIC with the card's
    shape and at least as many partitions as the card requests is used.
    """
    fqdd = card.interfaces[0].fqdd if card.interfaces else None
    if fqdd:
        prefix = NicView.from_fqdd(fqdd).card_prefix
        return next(
            (i for i, nic in enumerate(nics) if nic.card_prefix == prefix),
            None,
        )

    wanted = card_n_partitions(card)
    return next(
        (
            i
            for i, nic in enumerate(nics)
            if not nic.disabled
            and nic.nic_type == card.nictype.nictype
            and nic.n_partitions >= wanted
        ),
        None,
    )


def match_nics(
    cards: list[Card],
    nics: list[NicInfo],
    *,
    add_partitions: bool = False,
) -> None:
    """Attach physical NIC data to *cards* in place.

    Sets ``card.nic_info``, ``interface.nic_port`` / ``interface.fqdd`` and
    ``partition.nic_view`` / ``partition.fqdd`` / ``partition.mac_address``.
    Matched NICs are removed from *nics*.

    Args:
        cards: Canonical cards, in canonical order.
        nics: Pool of physical NICs; consumed.
        add_partitions: Generate FQDDs for partitions above one that do not
            exist on the physical NIC yet, derived from the partition 1 FQDD.
            This lets partitioned configuration be generated for a NIC that
            is not currently partitioned.

    Raises:
        IdracMatchError: After all cards were processed, if any card had no
            matching NIC. Cards that did match keep their NIC data.
        IdracInvariantError: If a card requests different partition counts
            on different ports.
    """
    missing: list[Card] = []
    for card in cards:
        index = find_nic(card, nics)
        if index is None:
            logger.debug("No NIC found for card %r (%s)", card.name, card.nictype)
            missing.append(card)
            continue

        nic = nics.pop(index)
        logger.debug("Matched card %r (%s) to %s", card.name, card.nictype, nic.card_prefix)
        _apply_nic(card, nic, add_partitions)

    if missing:
        raise IdracMatchError(
            missing=[f"{card.name} ({card.nictype})" for card in missing],
            available=[
                "%s (%s%s)" % (nic.card_prefix, nic.nic_type, ", disabled" if nic.disabled else "")
                for nic in nics
            ],
        )
    logger.info("Matched %d card(s) to physical NICs", len(cards))


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _apply_nic(card: Card, nic: NicInfo, add_partitions: bool) -> None:
    card.nic_info = nic
    for interface_i, interface in enumerate(card.interfaces):
        nic_port = nic.ports[interface_i] if interface_i < len(nic.ports) else None
        interface.nic_port = nic_port
        for partition_i, partition in enumerate(interface.partitions):
            if nic_port is not None and partition_i < len(nic_port.partitions):
                partition.nic_view = nic_port.partitions[partition_i]
            else:
                partition.nic_view = None

            nic_partition = nic.find_partition(interface.port_no, partition.partition_no)
            if nic_partition is not None:
                partition.fqdd = nic_partition.fqdd
                partition.mac_address = nic_partition.mac_address
            elif partition.partition_no > 1 and add_partitions:
                first = nic.find_partition(interface.port_no, 1)
                if first is not None:
                    partition.fqdd = first.with_partition(partition.partition_no).fqdd
                    logger.debug("Synthesized partition FQDD %s", partition.fqdd)
        if interface.partitions:
            interface.fqdd = interface.partitions[0].fqdd
