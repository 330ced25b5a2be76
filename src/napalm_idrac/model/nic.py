"""Typed model for a single physical NIC partition (DCIM_NICView record)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from functools import total_ordering
from typing import Any, Mapping

from napalm_idrac.client.errors import IdracParseError

# "<card prefix>-<port>-<partition>"; the prefix itself may contain dashes.
_FQDD_RE: re.Pattern[str] = re.compile(r"^(?P<prefix>.+)-(?P<port>[^-]+)-(?P<partition>[^-]+)$")

# "NIC.<category>.<card>" card prefixes, e.g. "NIC.Mezzanine.2B".
_PREFIX_RE: re.Pattern[str] = re.compile(r"^[^.]+\.(?P<category>[^.]+)\.(?P<card>[^.]+)$")


def _blank_to_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@total_ordering
@dataclass(eq=False)
class NicView:
    """One physical NIC partition, identified by its FQDD.

    Equality and ordering only consider the parsed identity
    (``card_prefix``, ``port``, ``partition_no``).

    Attributes:
        fqdd: Fully-qualified device descriptor, e.g. ``"NIC.Integrated.1-2-1"``.
        card_prefix: Card-level identity, e.g. ``"NIC.Integrated.1"``.
        port: 1-based port number.
        partition_no: 1-based partition number.
        mac_address: Current (possibly virtual) MAC address.
        permanent_mac_address: Burned-in MAC address; ``None`` when the
            controller does not report one (typically a disabled card).
        vendor: ``VendorName`` as reported by the controller.
        product: ``ProductName`` as reported by the controller.
        link_speed: Raw ``LinkSpeed`` enumeration code.
        pci_device_id: Raw ``PCIDeviceID``.
    """

    fqdd: str
    card_prefix: str
    port: int
    partition_no: int
    mac_address: str | None = None
    permanent_mac_address: str | None = None
    vendor: str | None = None
    product: str | None = None
    link_speed: str | None = None
    pci_device_id: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_fqdd(cls, fqdd: str) -> NicView:
        """Parse *fqdd* into a :class:`NicView` carrying only identity data.

        Raises:
            IdracParseError: If *fqdd* does not end in ``-<port>-<partition>``
                with numeric segments.
        """
        m = _FQDD_RE.match(fqdd.strip()) if isinstance(fqdd, str) else None
        if not m or not m.group("port").isdigit() or not m.group("partition").isdigit():
            raise IdracParseError(f"Invalid NIC FQDD {fqdd!r}")
        return cls(
            fqdd=fqdd.strip(),
            card_prefix=m.group("prefix"),
            port=int(m.group("port")),
            partition_no=int(m.group("partition")),
        )

    @staticmethod
    def is_nic_fqdd(fqdd: str) -> bool:
        """Return ``True`` if *fqdd* parses as a NIC partition FQDD."""
        m = _FQDD_RE.match(fqdd.strip())
        return bool(m and m.group("port").isdigit() and m.group("partition").isdigit())

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> NicView:
        """Build a :class:`NicView` from a raw DCIM_NICView record."""
        view = cls.from_fqdd(record.get("FQDD") or "")
        view.mac_address = _blank_to_none(record.get("CurrentMACAddress"))
        view.permanent_mac_address = _blank_to_none(record.get("PermanentMACAddress"))
        view.vendor = _blank_to_none(record.get("VendorName"))
        view.product = _blank_to_none(record.get("ProductName"))
        view.link_speed = _blank_to_none(record.get("LinkSpeed"))
        view.pci_device_id = _blank_to_none(record.get("PCIDeviceID"))
        view.raw = dict(record)
        return view

    # ------------------------------------------------------------------
    # Derived identity
    # ------------------------------------------------------------------

    @property
    def nic_type(self) -> str:
        """Card category, e.g. ``"Integrated"``, ``"Mezzanine"`` or ``"Slot"``."""
        m = _PREFIX_RE.match(self.card_prefix)
        return m.group("category") if m else self.card_prefix

    @property
    def card(self) -> str:
        """Card designator within its category, e.g. ``"1"`` or ``"2B"``."""
        m = _PREFIX_RE.match(self.card_prefix)
        return m.group("card") if m else ""

    @property
    def card_number(self) -> int:
        """Leading digits of :attr:`card`, or 0 when there are none."""
        m = re.match(r"\d+", self.card)
        return int(m.group(0)) if m else 0

    def with_partition(self, partition_no: int) -> NicView:
        """Return a copy of this view addressing *partition_no* on the same port.

        Only identity fields are carried over; MAC data belongs to the
        physical partition and is left empty.
        """
        fqdd = f"{self.card_prefix}-{self.port}-{partition_no}"
        return replace(
            NicView.from_fqdd(fqdd),
            vendor=self.vendor,
            product=self.product,
        )

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def sort_key(self) -> tuple[str, int, int]:
        return (self.card_prefix, self.port, self.partition_no)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NicView):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __lt__(self, other: NicView) -> bool:
        if not isinstance(other, NicView):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self) -> int:
        return hash(self.sort_key())

    def __str__(self) -> str:
        return self.fqdd
