"""WS-Man session for Dell iDRAC controllers."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any
from xml.sax.saxutils import escape

from napalm_idrac.client.errors import IdracParseError
from napalm_idrac.client.http import IdracHTTP
from napalm_idrac.model.wsman import IdentifyInfo
from napalm_idrac.parser.wsman import parse_enumeration_response, parse_identify_response
from napalm_idrac.vendor.dell.endpoints import (
    ACTION_ENUMERATE,
    ACTION_PULL,
    ANONYMOUS_ADDRESS,
    NS_ADDRESSING,
    NS_ENUMERATION,
    NS_SOAP,
    NS_WSMAN,
    NS_WSMID,
    WSMAN_PATH,
)

logger = logging.getLogger(__name__)

# Upper bound on Pull round-trips for a single enumeration.
_MAX_PULLS: int = 1000

_IDENTIFY_TEMPLATE: str = (
    '<s:Envelope xmlns:s="{ns_soap}" xmlns:wsmid="{ns_wsmid}">'
    "<s:Header/>"
    "<s:Body><wsmid:Identify/></s:Body>"
    "</s:Envelope>"
)

_REQUEST_TEMPLATE: str = (
    '<s:Envelope xmlns:s="{ns_soap}" xmlns:a="{ns_addressing}" '
    'xmlns:n="{ns_enumeration}" xmlns:w="{ns_wsman}">'
    "<s:Header>"
    '<a:To s:mustUnderstand="true">{to}</a:To>'
    '<w:ResourceURI s:mustUnderstand="true">{resource_uri}</w:ResourceURI>'
    "<a:ReplyTo><a:Address>{anonymous}</a:Address></a:ReplyTo>"
    '<a:Action s:mustUnderstand="true">{action}</a:Action>'
    "<a:MessageID>uuid:{message_id}</a:MessageID>"
    "<w:OperationTimeout>PT{timeout}S</w:OperationTimeout>"
    "</s:Header>"
    "<s:Body>{body}</s:Body>"
    "</s:Envelope>"
)


@dataclass(frozen=True)
class IdracCredentials:
    """Immutable credential pair for an iDRAC.

    Args:
        username: Login username.
        password: Login password.
    """

    username: str
    password: str


class IdracSession:
    """Issues WS-Man requests to an iDRAC over HTTPS.

    Wraps :class:`.IdracHTTP` and adds:
    - SOAP envelope construction for Identify, Enumerate and Pull.
    - Following enumeration contexts until ``EndOfSequence``.
    - SOAP fault detection (raised as :exc:`.IdracFaultError`).

    Failed requests are never retried.

    Args:
        base_url: Controller base URL or host, e.g. ``https://192.168.1.120``.
        credentials: Username/password pair.
        port: HTTPS port used when *base_url* has no scheme (default 443).
        timeout_s: Request timeout in seconds (default 60).
        verify_tls: Whether to verify TLS certificates (default False).
        max_elements: Instances requested per Enumerate / Pull (default 100).
    """

    def __init__(
        self,
        base_url: str,
        credentials: IdracCredentials,
        port: int = 443,
        timeout_s: float = 60.0,
        verify_tls: bool = False,
        max_elements: int = 100,
    ) -> None:
        self._http: IdracHTTP = IdracHTTP(
            base_url=base_url,
            username=credentials.username,
            password=credentials.password,
            port=port,
            timeout_s=timeout_s,
            verify_tls=verify_tls,
        )
        self._timeout_s: float = timeout_s
        self._max_elements: int = max_elements
        self._identity: IdentifyInfo | None = None

    # ------------------------------------------------------------------
    # Public request methods
    # ------------------------------------------------------------------

    def identify(self) -> IdentifyInfo:
        """Send a WS-Man Identify request and remember the answer.

        Raises:
            IdracRequestError: On transport failure.
            IdracResponseError: On HTTP errors, e.g. 401 for bad credentials.
            IdracFaultError: If the service answers with a SOAP fault.
        """
        body = _IDENTIFY_TEMPLATE.format(ns_soap=NS_SOAP, ns_wsmid=NS_WSMID)
        resp = self._http.post_xml(WSMAN_PATH, body)
        self._identity = parse_identify_response(resp.content)
        logger.debug(
            "Identified %s: %s %s",
            self._http.base_url,
            self._identity.product_vendor,
            self._identity.product_version,
        )
        return self._identity

    def enumerate(self, resource_uri: str) -> list[dict[str, Any]]:
        """Enumerate every instance of *resource_uri*.

        Sends an optimized Enumerate and then Pull requests until the service
        reports the end of the sequence.

        Args:
            resource_uri: CIM class URI, e.g.
                :data:`~napalm_idrac.vendor.dell.endpoints.NIC_VIEW`.

        Returns:
            One plain record per instance.

        Raises:
            IdracFaultError: If the service answers with a SOAP fault.
            IdracParseError: If a response cannot be parsed or the service
                never reports the end of the sequence.
        """
        enumerate_body = (
            "<n:Enumerate><w:OptimizeEnumeration/>"
            f"<w:MaxElements>{self._max_elements}</w:MaxElements></n:Enumerate>"
        )
        resp = self._http.post_xml(
            WSMAN_PATH, self._envelope(resource_uri, ACTION_ENUMERATE, enumerate_body)
        )
        page = parse_enumeration_response(resp.content, resource_uri)
        items = list(page.items)

        pulls = 0
        while not page.end_of_sequence and page.context:
            pulls += 1
            if pulls > _MAX_PULLS:
                raise IdracParseError(
                    f"Enumeration of {resource_uri} did not end after {_MAX_PULLS} pulls"
                )
            pull_body = (
                f"<n:Pull><n:EnumerationContext>{escape(page.context)}</n:EnumerationContext>"
                f"<n:MaxElements>{self._max_elements}</n:MaxElements></n:Pull>"
            )
            resp = self._http.post_xml(
                WSMAN_PATH, self._envelope(resource_uri, ACTION_PULL, pull_body)
            )
            page = parse_enumeration_response(resp.content, resource_uri)
            items.extend(page.items)

        logger.debug("Enumerated %d instance(s) of %s", len(items), resource_uri)
        return items

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._http.close()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def identity(self) -> IdentifyInfo | None:
        """Last Identify answer, or ``None`` before :meth:`identify`."""
        return self._identity

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _envelope(self, resource_uri: str, action: str, body: str) -> str:
        return _REQUEST_TEMPLATE.format(
            ns_soap=NS_SOAP,
            ns_addressing=NS_ADDRESSING,
            ns_enumeration=NS_ENUMERATION,
            ns_wsman=NS_WSMAN,
            to=escape(self._http.base_url + WSMAN_PATH),
            resource_uri=escape(resource_uri),
            anonymous=ANONYMOUS_ADDRESS,
            action=action,
            message_id=uuid.uuid4(),
            timeout=int(self._timeout_s),
            body=body,
        )
