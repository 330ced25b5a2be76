"""Unit tests for napalm_idrac.model.nic_type and napalm_idrac.utils.sequence."""

from __future__ import annotations

from dataclasses import dataclass

from napalm_idrac.model.nic_type import NicType, bandwidth_mbps, classify_ports, partition_limit
from napalm_idrac.utils.sequence import split, split_runs


@dataclass
class _Port:
    link_speed: str | None = None
    vendor: str | None = None
    product: str | None = None


def _odd(n: int) -> bool:
    return n % 2 == 1


# ---------------------------------------------------------------------------
# split / split_runs
# ---------------------------------------------------------------------------

def test_split_where_predicate_true() -> None:
    assert split([2, 3, 4, 5, 6], _odd) == [[2], [3, 4], [5, 6]]


def test_split_no_empty_leading_run() -> None:
    assert split([1, 2, 3, 4], _odd) == [[1, 2], [3, 4]]


def test_split_trailing_single_element() -> None:
    assert split([1, 2, 3, 4, 5], _odd) == [[1, 2], [3, 4], [5]]


def test_split_empty() -> None:
    assert split([], _odd) == []


def test_split_runs_groups_equal_neighbours() -> None:
    assert split_runs(["A", "A", "B", "B"], key=lambda s: s) == [["A", "A"], ["B", "B"]]


def test_split_runs_alternating_gives_singletons() -> None:
    assert split_runs(["A", "B", "A", "B"], key=lambda s: s) == [["A"], ["B"], ["A"], ["B"]]


# ---------------------------------------------------------------------------
# NicType
# ---------------------------------------------------------------------------

class TestNicType:
    def test_default_is_unknown(self) -> None:
        assert NicType().nictype == "unknown"
        assert NicType(None).nictype == "unknown"  # type: ignore[arg-type]

    def test_legacy_labels(self) -> None:
        assert NicType("2").nictype == "2x10Gb"
        assert NicType("4").nictype == "4x10Gb"

    def test_runs(self) -> None:
        assert NicType("2x10Gb,2x1Gb").runs == [(2, "10Gb"), (2, "1Gb")]

    def test_unparseable_runs_empty(self) -> None:
        assert NicType("unknown").runs == []

    def test_combo_card_ports(self) -> None:
        nt = NicType("2x10Gb,2x1Gb")
        assert nt.n_ports == 4
        assert nt.n_usable_ports == 2
        assert nt.n_partitions == 4

    def test_1gb_card_is_not_partitionable(self) -> None:
        assert NicType("4x1Gb").n_partitions == 1

    def test_25gb_card(self) -> None:
        nt = NicType("2x25Gb")
        assert nt.n_usable_ports == 2
        assert nt.n_partitions == 4

    def test_unknown_defaults(self) -> None:
        nt = NicType("unknown")
        assert nt.n_ports == 1
        assert nt.n_usable_ports == 1
        assert nt.n_partitions == 4

    def test_str(self) -> None:
        assert str(NicType(" 2x10Gb ")) == "2x10Gb"

    def test_equality(self) -> None:
        assert NicType("2") == NicType("2x10Gb")


# ---------------------------------------------------------------------------
# classify_ports
# ---------------------------------------------------------------------------

class TestClassifyPorts:
    def test_empty_is_unknown(self) -> None:
        assert classify_ports([]) == "unknown"

    def test_link_speed_runs(self) -> None:
        ports = [_Port("5"), _Port("5"), _Port("3"), _Port("3")]
        assert classify_ports(ports) == "2x10Gb,2x1Gb"

    def test_alternating_speeds(self) -> None:
        ports = [_Port("5"), _Port("3"), _Port("5"), _Port("3")]
        assert classify_ports(ports) == "1x10Gb,1x1Gb,1x10Gb,1x1Gb"

    def test_100gb(self) -> None:
        assert classify_ports([_Port("8"), _Port("8")]) == "2x100Gb"

    def test_unknown_link_speed_uses_product(self) -> None:
        ports = [_Port("0", "Broadcom", "57840")] * 4
        assert classify_ports(ports) == "4x10Gb"

    def test_card_product_table_before_port_table(self) -> None:
        ports = [_Port(None, "Broadcom", "BCM57800")] * 4
        assert classify_ports(ports) == "2x10Gb,2x1Gb"

    def test_mixed_link_speed_and_product(self) -> None:
        ports = [
            _Port("9", "Mellanox Technologies", "ConnectX-4 Lx"),
            _Port("0", "Mellanox Technologies", "ConnectX-4 Lx"),
        ]
        assert classify_ports(ports) == "2x25Gb"

    def test_no_signals_is_unknown(self) -> None:
        assert classify_ports([_Port(), _Port()]) == "unknown"

    def test_idempotent(self) -> None:
        ports = [_Port("5"), _Port("5"), _Port("3"), _Port("3")]
        assert classify_ports(ports) == classify_ports(ports)


# ---------------------------------------------------------------------------
# partition_limit / bandwidth_mbps
# ---------------------------------------------------------------------------

def test_partition_limit_57800() -> None:
    assert partition_limit("57800") == 2
    assert partition_limit("QLogic BCM57800 10 Gigabit Ethernet") == 2


def test_partition_limit_default() -> None:
    assert partition_limit("57810") is None
    assert partition_limit(None) is None


def test_bandwidth_mbps() -> None:
    assert bandwidth_mbps("10Gb") == 10000.0
    assert bandwidth_mbps("2.5Gb") == 2500.0
    assert bandwidth_mbps("100Mb") == 100.0


def test_bandwidth_mbps_unparseable() -> None:
    assert bandwidth_mbps("bogus") == 0.0
