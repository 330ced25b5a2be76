"""Custom exceptions for napalm-idrac."""

from __future__ import annotations

from dataclasses import dataclass, field


class IdracError(Exception):
    """Base exception for all napalm-idrac errors."""


class IdracRequestError(IdracError):
    """Raised when a network-level error occurs (connection refused, timeout, etc.)."""

    def __init__(self, url: str, cause: Exception) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Request to {url!r} failed: {cause}")


class IdracResponseError(IdracError):
    """Raised when the management controller returns a non-2xx HTTP status code."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} for {url!r}")


class IdracParseError(IdracError):
    """Raised when input data cannot be parsed.

    Covers malformed WS-Man XML, malformed FQDDs and malformed logical
    network configuration data (port / partition / fabric names, wrong shapes).
    """


class IdracInvariantError(IdracError):
    """Raised when physical or logical NIC data violates a structural invariant."""


class IdracPreconditionError(IdracError):
    """Raised when an operation is invoked before its prerequisites hold."""


@dataclass
class IdracFaultError(IdracError):
    """Raised when the WS-Man service answers with a SOAP fault."""

    code: str
    reason: str
    resource_uri: str

    def __post_init__(self) -> None:
        super().__init__(
            f"WS-Man fault {self.code!r} for {self.resource_uri!r}: {self.reason}"
        )


@dataclass
class IdracMatchError(IdracError):
    """Raised when one or more logical cards have no matching physical NIC.

    Attributes:
        missing: ``"<card name> (<shape>)"`` for every unmatched card.
        available: ``"<card prefix> (<shape>[, disabled])"`` for every
            physical NIC still left in the pool.
    """

    missing: list[str]
    available: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.available:
            available = "available: " + ", ".join(self.available)
        else:
            available = "none found"
        super().__init__(f"Missing NICs for {', '.join(self.missing)}; {available}")
