"""NIC shape labels ("2x10Gb", "2x10Gb,2x1Gb", ...) and their policies.

A shape label is derived from physical port data by :func:`classify_ports`
and parsed back from the logical configuration's ``nictype`` field by
:class:`NicType`. Matching compares the two labels as plain strings.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Protocol, Sequence

from napalm_idrac.utils.sequence import split_runs
from napalm_idrac.vendor.dell.mappings import (
    CARD_PRODUCT_SHAPE,
    DEFAULT_PARTITIONS,
    LINK_SPEED_MAP,
    PARTITION_LIMITS,
    PORT_PRODUCT_BANDWIDTH,
    UNKNOWN_NIC_TYPE,
)

logger = logging.getLogger(__name__)

# One comma-separated run of a shape label, e.g. "2x10Gb".
_RUN_RE: re.Pattern[str] = re.compile(r"^(\d+)x(\d+(?:\.\d+)?)(Mb|Gb)$")

# Older logical configurations only carried the port count.
_LEGACY_LABELS: dict[str, str] = {
    "2": "2x10Gb",
    "4": "4x10Gb",
}


class PortSignals(Protocol):
    """Subset of port data the classifier relies on."""

    @property
    def link_speed(self) -> str | None: ...

    @property
    def vendor(self) -> str | None: ...

    @property
    def product(self) -> str | None: ...


@dataclass(frozen=True)
class NicType:
    """Parsed NIC shape label with its port and partition policy.

    Attributes:
        nictype: Normalized label, e.g. ``"2x10Gb,2x1Gb"`` or ``"unknown"``.
    """

    nictype: str = UNKNOWN_NIC_TYPE

    def __post_init__(self) -> None:
        label = (self.nictype or UNKNOWN_NIC_TYPE).strip()
        object.__setattr__(self, "nictype", _LEGACY_LABELS.get(label, label))

    @property
    def runs(self) -> list[tuple[int, str]]:
        """``(port count, bandwidth)`` per run; empty if the label is unparseable."""
        result: list[tuple[int, str]] = []
        for part in self.nictype.split(","):
            m = _RUN_RE.match(part.strip())
            if not m:
                return []
            result.append((int(m.group(1)), m.group(2) + m.group(3)))
        return result

    @property
    def n_ports(self) -> int:
        runs = self.runs
        return sum(count for count, _ in runs) if runs else 1

    @property
    def n_usable_ports(self) -> int:
        """Ports that can carry configured networks.

        Combo cards enumerate their fast ports first; only that first run is
        usable (e.g. 2 for ``"2x10Gb,2x1Gb"``).
        """
        runs = self.runs
        return runs[0][0] if runs else 1

    @property
    def n_partitions(self) -> int:
        """Maximum partitions per usable port: 1 for 1Gb-only cards, else 4."""
        runs = self.runs
        if runs and bandwidth_mbps(runs[0][1]) <= 1000:
            return 1
        return DEFAULT_PARTITIONS

    def __str__(self) -> str:
        return self.nictype


def classify_ports(ports: Sequence[PortSignals]) -> str:
    """Return the shape label for an ordered sequence of physical ports.

    Ports are grouped into maximal runs of equal bandwidth and rendered as
    ``<count>x<bandwidth>`` joined by commas, e.g. ``"2x10Gb,2x1Gb"``.

    Bandwidth comes from each port's ``LinkSpeed`` code. When any port lacks
    one, the card-level vendor/product table is tried, then the per-port
    vendor/product table. ``"unknown"`` is returned when nothing matches.
    """
    if not ports:
        return UNKNOWN_NIC_TYPE

    speeds = [LINK_SPEED_MAP.get(p.link_speed or "") for p in ports]
    if all(speeds):
        return _render_runs(ports, speeds)

    card_shape = _card_shape(ports)
    if card_shape is not None:
        logger.debug("Classified %d ports as %s by product", len(ports), card_shape)
        return card_shape

    speeds = [speed or _port_bandwidth(p) for p, speed in zip(ports, speeds)]
    if all(speeds):
        return _render_runs(ports, speeds)

    logger.debug("Could not classify ports: speeds=%s", speeds)
    return UNKNOWN_NIC_TYPE


def partition_limit(product: str | None) -> int | None:
    """Return the product-specific partition capability, if any."""
    for pattern, limit in PARTITION_LIMITS:
        if product and pattern.search(product):
            return limit
    return None


def bandwidth_mbps(bandwidth: str) -> float:
    """Convert a bandwidth label such as ``"10Gb"`` or ``"100Mb"`` to Mbit/s.

    Unparseable labels yield ``0.0``.
    """
    m = re.match(r"^(\d+(?:\.\d+)?)(Mb|Gb)$", bandwidth)
    if not m:
        return 0.0
    value = float(m.group(1))
    return value * 1000 if m.group(2) == "Gb" else value


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _render_runs(ports: Sequence[PortSignals], speeds: Sequence[str | None]) -> str:
    pairs = list(zip(ports, speeds))
    runs = split_runs(pairs, key=lambda pair: pair[1])
    return ",".join(f"{len(run)}x{run[0][1]}" for run in runs)


def _card_shape(ports: Sequence[PortSignals]) -> str | None:
    for vendor_re, product_re, shape in CARD_PRODUCT_SHAPE:
        for port in ports:
            if (
                port.vendor
                and port.product
                and vendor_re.search(port.vendor)
                and product_re.search(port.product)
            ):
                return shape
    return None


def _port_bandwidth(port: PortSignals) -> str | None:
    if not port.vendor or not port.product:
        return None
    for vendor_re, product_re, bandwidth in PORT_PRODUCT_BANDWIDTH:
        if vendor_re.search(port.vendor) and product_re.search(port.product):
            return bandwidth
    return None

