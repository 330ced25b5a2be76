"""Parser for WS-Man SOAP responses (Identify, Enumerate, Pull)."""

from __future__ import annotations

from bs4 import BeautifulSoup

from napalm_idrac.client.errors import IdracFaultError, IdracParseError
from napalm_idrac.model.wsman import EnumerationPage, IdentifyInfo
from napalm_idrac.parser.soap import element_to_record, normalize_text, parse_xml


def parse_enumeration_response(xml: str | bytes, resource_uri: str = "") -> EnumerationPage:
    """Parse an ``EnumerateResponse`` or ``PullResponse`` body.

    Both responses carry their instances under ``Items``; an optimized
    Enumerate response may already contain every item and the
    ``EndOfSequence`` marker.

    Args:
        xml: Raw SOAP response body.
        resource_uri: Enumerated resource, used in error messages.

    Returns:
        An :class:`~napalm_idrac.model.wsman.EnumerationPage`.

    Raises:
        IdracFaultError: If the body is a SOAP fault.
        IdracParseError: If the body is not an enumeration response.
    """
    soup = _parse_body(xml, resource_uri)
    response = soup.find(["EnumerateResponse", "PullResponse"])
    if response is None:
        raise IdracParseError(
            f"No EnumerateResponse or PullResponse in WS-Man response for {resource_uri!r}"
        )

    page = EnumerationPage()
    items = response.find("Items")
    if items is not None:
        page.items = [element_to_record(item) for item in items.find_all(recursive=False)]

    context = response.find("EnumerationContext")
    if context is not None:
        page.context = normalize_text(context.get_text()) or None
    page.end_of_sequence = response.find("EndOfSequence") is not None
    return page


def parse_identify_response(xml: str | bytes) -> IdentifyInfo:
    """Parse an ``IdentifyResponse`` body.

    Raises:
        IdracFaultError: If the body is a SOAP fault.
        IdracParseError: If the body is not an Identify response.
    """
    soup = _parse_body(xml, "identify")
    response = soup.find("IdentifyResponse")
    if response is None:
        raise IdracParseError("No IdentifyResponse in WS-Man response")
    record = element_to_record(response)
    return IdentifyInfo(
        protocol_version=record.get("ProtocolVersion"),
        product_vendor=record.get("ProductVendor"),
        product_version=record.get("ProductVersion"),
    )


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _parse_body(xml: str | bytes, resource_uri: str) -> BeautifulSoup:
    """Parse *xml*, raising on faults and on documents without a SOAP Body."""
    soup = parse_xml(xml)
    if soup.find("Body") is None:
        raise IdracParseError(
            f"No SOAP Body in WS-Man response for {resource_uri!r}: {str(xml)[:200]!r}"
        )
    fault = soup.find("Fault")
    if fault is not None:
        values = [normalize_text(v.get_text()) for v in fault.find_all("Value")]
        reason = fault.find("Text")
        raise IdracFaultError(
            code=values[-1] if values else "",
            reason=normalize_text(reason.get_text()) if reason is not None else "",
            resource_uri=resource_uri,
        )
    return soup
