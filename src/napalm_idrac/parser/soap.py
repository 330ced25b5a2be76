"""Base SOAP/XML parsing utilities shared across WS-Man parsers."""

from __future__ import annotations

import re
from typing import Any

from bs4 import BeautifulSoup, Tag


def parse_xml(xml: str | bytes, parser: str = "xml") -> BeautifulSoup:
    """Parse an XML document and return a BeautifulSoup document.

    Args:
        xml: Raw SOAP response body.
        parser: Parser library to use (default: lxml's XML parser).

    Returns:
        Parsed BeautifulSoup document. Tag names are local names, so
        ``soup.find("Body")`` matches ``<s:Body>``.
    """
    return BeautifulSoup(xml, parser)


def normalize_text(s: str) -> str:
    """Strip surrounding whitespace and collapse internal runs."""
    return re.sub(r"\s+", " ", s).strip()


def is_nil(tag: Tag) -> bool:
    """``True`` if *tag* carries ``xsi:nil="true"``."""
    return any(
        (name == "nil" or name.endswith(":nil")) and str(value).lower() == "true"
        for name, value in tag.attrs.items()
    )


def element_to_record(element: Tag) -> dict[str, Any]:
    """Flatten the child elements of *element* into a plain dict.

    Empty and nil children map to ``None``; children that occur more than
    once are collected into a list.
    """
    record: dict[str, Any] = {}
    for child in element.find_all(recursive=False):
        text = normalize_text(child.get_text())
        value = None if is_nil(child) or not text else text
        if child.name in record:
            existing = record[child.name]
            if not isinstance(existing, list):
                existing = [existing]
            existing.append(value)
            record[child.name] = existing
        else:
            record[child.name] = value
    return record
