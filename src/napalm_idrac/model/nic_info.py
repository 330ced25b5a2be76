"""Physical NIC cards assembled from DCIM_NICView records.

A :class:`NicInfo` is one physical card: a contiguous run of ports sharing a
card prefix, each port holding its partitions in order.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from napalm_idrac.client.errors import IdracInvariantError
from napalm_idrac.model.nic import NicView
from napalm_idrac.model.nic_type import NicType, classify_ports, partition_limit
from napalm_idrac.vendor.dell.mappings import (
    BIOS_DISPLAY_NAMES,
    CARD_CATEGORY_ORDER,
    DEFAULT_NIC_STATUS,
)

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class NicPort:
    """One physical port and its partitions, ordered by partition number.

    Attributes:
        partitions: Partition views, partition 1 first.
        nic_info: Owning card.
    """

    partitions: list[NicView]
    nic_info: NicInfo | None = field(default=None, repr=False)

    @property
    def nic_view(self) -> NicView:
        """The port's first partition, which carries the port-level data."""
        return self.partitions[0]

    @property
    def port(self) -> int:
        return self.nic_view.port

    @property
    def mac_address(self) -> str | None:
        return self.nic_view.mac_address

    @property
    def permanent_mac_address(self) -> str | None:
        return next(
            (p.permanent_mac_address for p in self.partitions if p.permanent_mac_address),
            None,
        )

    @property
    def link_speed(self) -> str | None:
        return self.nic_view.link_speed

    @property
    def vendor(self) -> str | None:
        return self.nic_view.vendor

    @property
    def product(self) -> str | None:
        return self.nic_view.product

    @property
    def n_partitions(self) -> int:
        return len(self.partitions)

    @property
    def disabled(self) -> bool:
        """``True`` when none of the partitions reports a permanent MAC address."""
        return self.permanent_mac_address is None


class NicInfo:
    """A physical NIC card with its ports.

    Args:
        nic_views: Partition views of a single card, in any order.
        bios_info: Raw DCIM_BIOSEnumeration records used to look up whether
            the card is enabled in the BIOS.
        nic_status: Explicit status; overrides the *bios_info* lookup.

    Raises:
        IdracInvariantError: If the views belong to several cards or the
            ports / partitions are not contiguous.
    """

    def __init__(
        self,
        nic_views: Sequence[NicView],
        bios_info: Iterable[Mapping[str, Any]] = (),
        nic_status: str | None = None,
    ) -> None:
        views = sorted(nic_views)
        validate_nic_views(views)
        self.ports: list[NicPort] = [
            NicPort(partitions=list(group), nic_info=self)
            for _, group in itertools.groupby(views, key=lambda v: v.port)
        ]
        self.card_prefix: str = views[0].card_prefix if views else ""
        self.nic_status: str = (
            nic_status if nic_status is not None else bios_nic_status(self.card_prefix, bios_info)
        )
        self._nic_type: str | None = None

    # ------------------------------------------------------------------
    # Card properties
    # ------------------------------------------------------------------

    @property
    def nic_view(self) -> NicView | None:
        return self.ports[0].nic_view if self.ports else None

    @property
    def vendor(self) -> str | None:
        return self.ports[0].vendor if self.ports else None

    @property
    def product(self) -> str | None:
        return self.ports[0].product if self.ports else None

    @property
    def nic_type(self) -> str:
        """Shape label such as ``"2x10Gb"``, ``"2x10Gb,2x1Gb"`` or ``"unknown"``."""
        if self._nic_type is None:
            self._nic_type = classify_ports(self.ports)
        return self._nic_type

    @property
    def disabled(self) -> bool:
        """``True`` if the BIOS disables the card or no port has a permanent MAC."""
        if "disabled" in self.nic_status.lower():
            return True
        return all(port.disabled for port in self.ports)

    @property
    def n_partitions(self) -> int:
        """Number of partitions available on every port.

        A uniform partition count above one is what the card is currently
        configured for. A count of one means the card is not partitioned, in
        which case the card's partition capability is reported so that
        partitioned configurations can still be matched against it.

        Raises:
            IdracInvariantError: If the ports report different partition counts.
        """
        counts = sorted({port.n_partitions for port in self.ports})
        if not counts:
            return 1
        if len(counts) > 1:
            raise IdracInvariantError(
                "Different number of partitions found for ports on %s: %s"
                % (
                    self.card_prefix,
                    ", ".join(f"port {p.port}: {p.n_partitions}" for p in self.ports),
                )
            )
        if counts[0] > 1:
            return counts[0]
        limit = partition_limit(self.product)
        return limit if limit is not None else NicType(self.nic_type).n_partitions

    def find_partition(self, port: int, partition_no: int) -> NicView | None:
        """Return the partition view for *port* / *partition_no*, if present."""
        for nic_port in self.ports:
            if nic_port.port != port:
                continue
            for view in nic_port.partitions:
                if view.partition_no == partition_no:
                    return view
        return None

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def sort_key(self) -> tuple[int, str, int, str]:
        """Integrated cards first, then embedded, mezzanine and slot cards."""
        view = self.nic_view
        category = view.nic_type if view else ""
        rank = (
            CARD_CATEGORY_ORDER.index(category)
            if category in CARD_CATEGORY_ORDER
            else len(CARD_CATEGORY_ORDER)
        )
        return (rank, category, view.card_number if view else 0, self.card_prefix)

    def __lt__(self, other: NicInfo) -> bool:
        if not isinstance(other, NicInfo):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __repr__(self) -> str:
        return (
            f"NicInfo(card_prefix={self.card_prefix!r}, nic_type={self.nic_type!r}, "
            f"ports={len(self.ports)}, nic_status={self.nic_status!r})"
        )


def compare_cards(nic1: NicInfo, nic2: NicInfo) -> int:
    """Three-way comparison of two cards: -1, 0 or 1."""
    k1, k2 = nic1.sort_key(), nic2.sort_key()
    return (k1 > k2) - (k1 < k2)


def validate_nic_views(views: Sequence[NicView]) -> None:
    """Check that sorted *views* describe one card with contiguous numbering.

    Raises:
        IdracInvariantError: On mixed card prefixes, a gap between ports, a
            port whose first partition is not 1, or a gap between partitions.
    """
    prefixes = list(dict.fromkeys(v.card_prefix for v in views))
    if len(prefixes) > 1:
        raise IdracInvariantError(
            f"Cannot create single NicInfo for multiple cards: {', '.join(prefixes)}"
        )
    if views and views[0].partition_no != 1:
        raise IdracInvariantError(
            f"First partition for {views[0].fqdd} should be 1 but got {views[0].partition_no}"
        )
    for prev, cur in zip(views, views[1:]):
        if cur.port != prev.port:
            if cur.port != prev.port + 1:
                raise IdracInvariantError(
                    f"Port out of order between {prev.fqdd} and {cur.fqdd}"
                )
            if cur.partition_no != 1:
                raise IdracInvariantError(
                    f"First partition for {cur.fqdd} should be 1 but got {cur.partition_no}"
                )
        elif cur.partition_no != prev.partition_no + 1:
            raise IdracInvariantError(
                f"Partition out of order between {prev.fqdd} and {cur.fqdd}"
            )


def create_nic_infos(
    nic_views: Iterable[NicView | Mapping[str, Any]],
    bios_info: Iterable[Mapping[str, Any]] = (),
) -> list[NicInfo]:
    """Group partition views by card and return one :class:`NicInfo` per card.

    Args:
        nic_views: :class:`NicView` objects or raw DCIM_NICView records, in
            any order and for any number of cards.
        bios_info: Raw DCIM_BIOSEnumeration records.

    Returns:
        Cards sorted integrated first, then by card number.
    """
    bios_records = list(bios_info)
    by_prefix: dict[str, list[NicView]] = {}
    for item in nic_views:
        view = item if isinstance(item, NicView) else NicView.from_record(item)
        by_prefix.setdefault(view.card_prefix, []).append(view)

    nics = [NicInfo(views, bios_records) for views in by_prefix.values()]
    for nic in nics:
        logger.debug(
            "Found NIC %s: %s, %d port(s), status %s",
            nic.card_prefix,
            nic.nic_type,
            len(nic.ports),
            nic.nic_status,
        )
    return sorted(nics)


# ---------------------------------------------------------------------------
# BIOS lookups
# ---------------------------------------------------------------------------

def bios_display_name(fqdd: str) -> str | None:
    """Return the BIOS ``AttributeDisplayName`` that controls the card of *fqdd*.

    ``"NIC.Integrated.1-1-1"`` maps to ``"Integrated Network Card 1"`` and
    ``"NIC.Slot.4-1-1"`` to ``"Slot 4"``. Unknown card categories return ``None``.
    """
    for pattern, template in BIOS_DISPLAY_NAMES:
        m = pattern.match(fqdd)
        if m:
            return m.expand(template)
    return None


def bios_nic_status(fqdd: str, bios_info: Iterable[Mapping[str, Any]]) -> str:
    """Return the BIOS ``CurrentValue`` enabling the card of *fqdd*.

    Defaults to ``"Enabled"`` when the BIOS has no matching attribute.
    """
    display_name = bios_display_name(fqdd)
    if display_name is None:
        return DEFAULT_NIC_STATUS
    for record in bios_info:
        if record.get("AttributeDisplayName") == display_name:
            value = record.get("CurrentValue")
            if not value:
                logger.warning("BIOS attribute %r has no current value", display_name)
                return DEFAULT_NIC_STATUS
            return str(value)
    return DEFAULT_NIC_STATUS
