"""Low-level HTTP client wrapper for the iDRAC WS-Man service."""

from __future__ import annotations

import importlib.metadata
import logging

import requests

from napalm_idrac.client.errors import IdracRequestError, IdracResponseError

logger = logging.getLogger(__name__)

try:
    _VERSION: str = importlib.metadata.version("napalm-idrac")
except importlib.metadata.PackageNotFoundError:
    _VERSION = "0.0.0"

_USER_AGENT: str = f"napalm-idrac/{_VERSION}"

_SOAP_CONTENT_TYPE: str = "application/soap+xml;charset=UTF-8"


def _normalise_base_url(url: str, port: int = 443) -> str:
    """Ensure the URL has a scheme and no trailing slash.

    Bare hosts get ``https://`` and, for a non-default *port*, an explicit port.
    """
    url = url.rstrip("/")
    if url.startswith(("http://", "https://")):
        return url
    if port == 443:
        return "https://" + url
    return f"https://{url}:{port}"


class IdracHTTP:
    """Low-level HTTP wrapper around :class:`requests.Session`.

    Handles basic authentication, a default ``User-Agent`` header, timeout,
    TLS verification, and maps transport/HTTP errors to :mod:`.errors` types.

    Args:
        base_url: Controller base URL or host, e.g. ``https://192.168.1.120``.
        username: Login username.
        password: Login password.
        port: HTTPS port used when *base_url* has no scheme (default 443).
        timeout_s: Request timeout in seconds (default 60).
        verify_tls: Whether to verify TLS certificates (default False;
            controllers ship self-signed certificates).
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        port: int = 443,
        timeout_s: float = 60.0,
        verify_tls: bool = False,
    ) -> None:
        self.base_url: str = _normalise_base_url(base_url, port)
        self.timeout_s: float = timeout_s
        self.verify_tls: bool = verify_tls
        self._session: requests.Session = requests.Session()
        self._session.auth = (username, password)
        self._session.headers.update(
            {"User-Agent": _USER_AGENT, "Content-Type": _SOAP_CONTENT_TYPE}
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def post_xml(self, path: str, body: str) -> requests.Response:
        """Send an HTTP POST with the SOAP envelope *body* to *path*.

        Args:
            path: URL path relative to :attr:`base_url`.
            body: Serialized SOAP envelope.

        Returns:
            The :class:`requests.Response`.

        Raises:
            IdracRequestError: On any transport-level failure.
            IdracResponseError: On a non-2xx HTTP status code other than a
                SOAP fault (HTTP 400/500 with an XML body), which is returned
                so the caller can report the fault itself.
        """
        url = self.base_url + path
        try:
            resp = self._session.post(
                url,
                data=body.encode("utf-8"),
                timeout=self.timeout_s,
                verify=self.verify_tls,
            )
        except requests.exceptions.RequestException as exc:
            raise IdracRequestError(url, exc) from exc
        logger.debug("POST %s -> HTTP %d (%d bytes)", url, resp.status_code, len(resp.content))
        self._raise_for_status(resp)
        return resp

    def close(self) -> None:
        """Close the underlying :class:`requests.Session`."""
        self._session.close()

    def __enter__(self) -> IdracHTTP:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _raise_for_status(resp: requests.Response) -> None:
        if resp.ok:
            return
        if resp.status_code in (400, 500) and "xml" in resp.headers.get("Content-Type", ""):
            return
        raise IdracResponseError(resp.status_code, resp.url)
