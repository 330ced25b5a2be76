"""Typed models for WS-Man responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class EnumerationPage:
    """One Enumerate or Pull response.

    Attributes:
        items: One plain record per returned instance, keyed by property name.
            Nil properties are ``None``; repeated properties become lists.
        context: Enumeration context to pass to the next Pull, if any.
        end_of_sequence: ``True`` when no further Pull is needed.
    """

    items: list[dict[str, Any]] = field(default_factory=list)
    context: str | None = None
    end_of_sequence: bool = False


@dataclass
class IdentifyInfo:
    """Identify response of a WS-Man service.

    Attributes:
        protocol_version: Supported WS-Man protocol URI.
        product_vendor: E.g. ``"Fujitsu, Dell Inc."``.
        product_version: E.g. ``"iDRAC 9 - 4.40.00.00"``.
    """

    protocol_version: str | None = None
    product_vendor: str | None = None
    product_version: str | None = None
