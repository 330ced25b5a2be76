"""Normalization helpers for raw network configuration data.

Normalization produces a stable form suitable for equality and uniqueness
checks: loosely typed booleans become ``bool`` and volatile network fields
are removed.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping

# Static network keys that vary between otherwise identical networks.
VOLATILE_STATIC_KEYS: frozenset[str] = frozenset({"ipRange"})


def to_boolean(value: Any) -> bool:
    """Interpret *value* as a boolean.

    ``True`` and the strings ``"true"``, ``"t"``, ``"yes"``, ``"y"``, ``"1"``
    (case-insensitive) are true; everything else, ``None`` included, is false.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in ("true", "t", "yes", "y", "1")


def strip_volatile_network_fields(network: Mapping[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *network* without volatile static-IP keys.

    The input mapping is never modified.
    """
    result = copy.deepcopy(dict(network))
    static = result.get("staticNetworkConfiguration")
    if isinstance(static, Mapping):
        result["staticNetworkConfiguration"] = {
            k: v for k, v in static.items() if k not in VOLATILE_STATIC_KEYS
        }
    return result
