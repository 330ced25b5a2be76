"""Sequence splitting helpers used to group NIC ports into speed runs."""

from __future__ import annotations

from typing import Callable, Hashable, Sequence, TypeVar

T = TypeVar("T")


def split(items: Sequence[T], predicate: Callable[[T], bool]) -> list[list[T]]:
    """Split *items* into runs, starting a new run wherever *predicate* is true.

    The first element always opens the first run, so a true predicate on it
    never produces an empty leading run::

        >>> split([2, 3, 4, 5, 6], lambda n: n % 2 == 1)
        [[2], [3, 4], [5, 6]]
        >>> split([1, 2, 3, 4], lambda n: n % 2 == 1)
        [[1, 2], [3, 4]]

    Args:
        items: Ordered input sequence.
        predicate: Called once per element; ``True`` marks a run boundary.

    Returns:
        List of non-empty runs, in input order.
    """
    runs: list[list[T]] = []
    for item in items:
        if not runs or predicate(item):
            runs.append([item])
        else:
            runs[-1].append(item)
    return runs


def split_runs(items: Sequence[T], key: Callable[[T], Hashable]) -> list[list[T]]:
    """Split *items* into maximal runs of consecutive elements with equal *key*.

    ``[A, A, B, B]`` yields ``[[A, A], [B, B]]`` while ``[A, B, A, B]``
    yields four single-element runs.
    """
    keys = [key(item) for item in items]
    indexed = list(enumerate(items))
    runs = split(indexed, lambda pair: pair[0] > 0 and keys[pair[0]] != keys[pair[0] - 1])
    return [[item for _, item in run] for run in runs]
