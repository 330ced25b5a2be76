"""NIC inventory reads against a Dell iDRAC.

Each function enumerates one DCIM class through
:class:`~napalm_idrac.client.session.IdracSession` and returns plain records
or model objects.

Enumerated classes:

    DCIM_NICView: one instance per NIC partition
        FQDD=NIC.Integrated.1-1-1  CurrentMACAddress=...  PermanentMACAddress=...
        ProductName=...  VendorName=...  LinkSpeed=5  PCIDeviceID=...

    DCIM_BIOSEnumeration: one instance per BIOS attribute; the attributes
        whose AttributeDisplayName names a card (e.g. "Integrated Network
        Card 1", "Slot 4") hold its Enabled / Disabled state in CurrentValue.
"""

from __future__ import annotations

import logging
from typing import Any

from napalm_idrac.client.session import IdracSession
from napalm_idrac.model.nic import NicView
from napalm_idrac.model.nic_info import NicInfo, bios_display_name, bios_nic_status, create_nic_infos
from napalm_idrac.vendor.dell.endpoints import BIOS_ENUMERATION, NIC_VIEW

logger = logging.getLogger(__name__)

__all__ = [
    "bios_display_name",
    "fetch_nic_infos",
    "get_bios_enumeration",
    "get_mac_addresses",
    "get_nic_view",
    "get_permanent_mac_addresses",
    "nic_status",
]


def get_nic_view(session: IdracSession) -> list[dict[str, Any]]:
    """Return the raw DCIM_NICView records, one per NIC partition.

    Records whose ``FQDD`` is not a NIC partition FQDD are dropped with a
    warning.
    """
    records = session.enumerate(NIC_VIEW)
    result: list[dict[str, Any]] = []
    for record in records:
        fqdd = record.get("FQDD")
        if not isinstance(fqdd, str) or not NicView.is_nic_fqdd(fqdd):
            logger.warning("Ignoring DCIM_NICView record with FQDD %r", fqdd)
            continue
        result.append(record)
    return result


def get_bios_enumeration(session: IdracSession) -> list[dict[str, Any]]:
    """Return the raw DCIM_BIOSEnumeration records."""
    return session.enumerate(BIOS_ENUMERATION)


def get_mac_addresses(session: IdracSession) -> dict[str, str | None]:
    """Return the current MAC address of every NIC partition, keyed by FQDD."""
    return {r["FQDD"]: r.get("CurrentMACAddress") for r in get_nic_view(session)}


def get_permanent_mac_addresses(session: IdracSession) -> dict[str, str | None]:
    """Return the permanent MAC address of every NIC partition, keyed by FQDD."""
    return {r["FQDD"]: r.get("PermanentMACAddress") for r in get_nic_view(session)}


def nic_status(session: IdracSession, fqdd: str) -> str:
    """Return the BIOS enablement value of the card holding *fqdd*.

    Args:
        session: Open session.
        fqdd: Any FQDD on the card, e.g. ``"NIC.Slot.4-1-1"``.

    Returns:
        The BIOS ``CurrentValue`` such as ``"Enabled"`` or
        ``"DisabledOs"``; ``"Enabled"`` when the BIOS has no matching
        attribute.
    """
    return bios_nic_status(fqdd, get_bios_enumeration(session))


def fetch_nic_infos(session: IdracSession) -> list[NicInfo]:
    """Read the NIC inventory and return one :class:`NicInfo` per card.

    Returns:
        Cards sorted integrated first, then by card number.

    Raises:
        IdracInvariantError: If the reported partitions of a card are not
            contiguous.
    """
    nics = create_nic_infos(get_nic_view(session), get_bios_enumeration(session))
    logger.info(
        "Found %d NIC(s) on %s: %s",
        len(nics),
        session.base_url,
        ", ".join(f"{n.card_prefix} ({n.nic_type})" for n in nics),
    )
    return nics
