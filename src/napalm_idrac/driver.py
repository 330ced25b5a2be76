"""iDRAC NAPALM driver: top-level NetworkDriver implementation."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from napalm.base.base import NetworkDriver

from napalm_idrac.client.errors import IdracError
from napalm_idrac.client.nic_ops import fetch_nic_infos, get_permanent_mac_addresses
from napalm_idrac.client.session import IdracCredentials, IdracSession
from napalm_idrac.model.config import NetworkConfiguration
from napalm_idrac.model.nic_info import NicInfo
from napalm_idrac.model.nic_type import bandwidth_mbps
from napalm_idrac.vendor.dell.mappings import LINK_SPEED_MAP, LINK_STATUS_UP

logger = logging.getLogger(__name__)

_VENDOR: str = "Dell"


class IdracDriver(NetworkDriver):  # type: ignore[misc]
    """NAPALM driver for the NICs of Dell servers managed through iDRAC.

    Reads the NIC inventory over WS-Man and reconciles logical network
    configurations with it.

    Args:
        hostname: IP address or hostname of the iDRAC, optionally including
            the URL scheme (e.g. ``https://192.168.1.120``).
        username: Login username.
        password: Login password.
        timeout: Default request timeout in seconds.
        optional_args: Optional driver configuration overrides.
            Supported keys:

            - ``port`` (int): HTTPS port (default 443).
            - ``verify_tls`` (bool): Verify TLS certificates (default ``False``).
            - ``max_elements`` (int): Instances per WS-Man Pull (default 100).
            - ``add_partitions`` (bool): Default for :meth:`add_nics`
              (default ``False``).
    """

    def __init__(
        self,
        hostname: str,
        username: str,
        password: str,
        timeout: int = 60,
        optional_args: dict[str, Any] | None = None,
    ) -> None:
        self.hostname = hostname
        self.username = username
        self.password = password
        self.timeout = timeout
        self.optional_args: dict[str, Any] = optional_args or {}

        self._port: int = int(self.optional_args.get("port", 443))
        self._verify_tls: bool = bool(self.optional_args.get("verify_tls", False))
        self._max_elements: int = int(self.optional_args.get("max_elements", 100))
        self._add_partitions: bool = bool(self.optional_args.get("add_partitions", False))
        self._session: IdracSession | None = None

        logger.debug(
            "IdracDriver initialised: host=%s port=%d user=%s",
            self.hostname,
            self._port,
            self.username,
        )

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Open an HTTPS session and check it with a WS-Man Identify.

        Raises:
            IdracResponseError: If the iDRAC rejects the credentials (HTTP 401).
            IdracRequestError: If the iDRAC cannot be reached.
        """
        creds = IdracCredentials(username=self.username, password=self.password)
        session = IdracSession(
            base_url=self.hostname,
            credentials=creds,
            port=self._port,
            timeout_s=float(self.timeout),
            verify_tls=self._verify_tls,
            max_elements=self._max_elements,
        )
        logger.info("Opening connection to %s", session.base_url)
        try:
            session.identify()
        except IdracError:
            session.close()
            raise
        self._session = session

    def close(self) -> None:
        """Close the HTTP session (best-effort; never raises)."""
        if self._session is not None:
            logger.info("Closing connection to %s", self.hostname)
            try:
                self._session.close()
            except Exception:  # noqa: BLE001
                logger.debug("Session close failed (ignored)", exc_info=True)
            finally:
                self._session = None

    def is_alive(self) -> dict[str, bool]:
        """Return liveness status of the HTTP session."""
        return {"is_alive": self._session is not None and self._session.identity is not None}

    # ------------------------------------------------------------------
    # NAPALM getters
    # ------------------------------------------------------------------

    def get_facts(self) -> dict[str, Any]:
        """Return general facts conforming to the NAPALM schema.

        ``model`` and ``os_version`` come from the WS-Man Identify answer,
        e.g. ``"iDRAC 9 - 4.40.00.00"`` is split into ``"iDRAC 9"`` and
        ``"4.40.00.00"``. ``interface_list`` holds every NIC partition FQDD.

        Raises:
            IdracError: If the session is not open.
        """
        session = self._require_session()
        identity = session.identity or session.identify()
        product_version = identity.product_version or ""
        model, _, os_version = product_version.partition(" - ")

        fqdds = [
            view.fqdd
            for nic in fetch_nic_infos(session)
            for port in nic.ports
            for view in port.partitions
        ]
        return {
            "hostname": self.hostname,
            "fqdn": self.hostname,
            "vendor": _VENDOR,
            "model": model.strip() or "unknown",
            "serial_number": "",
            "os_version": os_version.strip() or product_version,
            "uptime": -1.0,
            "interface_list": fqdds,
        }

    def get_interfaces(self) -> dict[str, Any]:
        """Return NIC partition information conforming to the NAPALM schema.

        Returns:
            Dict keyed by partition FQDD (e.g. ``"NIC.Integrated.1-1-1"``),
            each value with keys ``is_up``, ``is_enabled``, ``description``,
            ``last_flapped``, ``speed`` (Mbit/s), ``mtu``, ``mac_address``.

        Raises:
            IdracError: If the session is not open.
        """
        session = self._require_session()
        result: dict[str, Any] = {}
        for nic in fetch_nic_infos(session):
            for port in nic.ports:
                for view in port.partitions:
                    bandwidth = LINK_SPEED_MAP.get(view.link_speed or "")
                    result[view.fqdd] = {
                        "is_up": view.raw.get("LinkStatus") == LINK_STATUS_UP,
                        "is_enabled": not nic.disabled,
                        "description": view.product or "",
                        "last_flapped": -1.0,
                        "speed": bandwidth_mbps(bandwidth) if bandwidth else 0.0,
                        "mtu": 0,
                        "mac_address": view.mac_address or "",
                    }
        return result

    def get_nic_info(self) -> list[NicInfo]:
        """Return the physical NIC cards, integrated first.

        Raises:
            IdracError: If the session is not open.
            IdracInvariantError: If a card reports non-contiguous partitions.
        """
        return fetch_nic_infos(self._require_session())

    # ------------------------------------------------------------------
    # Network configuration
    # ------------------------------------------------------------------

    def add_nics(
        self,
        network_config: NetworkConfiguration | Mapping[str, Any],
        add_partitions: bool | None = None,
    ) -> NetworkConfiguration:
        """Match *network_config* against this server's NICs.

        Args:
            network_config: Parsed configuration or raw configuration data.
            add_partitions: Generate FQDDs for partitions that do not exist
                on the NIC yet. ``None`` means use the ``add_partitions``
                optional arg.

        Returns:
            The configuration with FQDD and MAC data filled in.

        Raises:
            IdracError: If the session is not open.
            IdracMatchError: If any card has no matching NIC.
        """
        session = self._require_session()
        nc = _as_network_configuration(network_config)
        nc.add_nics(
            fetch_nic_infos(session),
            add_partitions=self._add_partitions if add_partitions is None else add_partitions,
        )
        return nc

    def reset_virtual_mac_addresses(
        self, network_config: NetworkConfiguration | Mapping[str, Any]
    ) -> NetworkConfiguration:
        """Reset the partitions of *network_config* to their permanent MACs.

        The configuration must already carry FQDDs, e.g. from :meth:`add_nics`.

        Raises:
            IdracError: If the session is not open.
        """
        session = self._require_session()
        nc = _as_network_configuration(network_config)
        nc.reset_virtual_mac_addresses(get_permanent_mac_addresses(session))
        return nc

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_session(self) -> IdracSession:
        """Return the active session or raise :exc:`.IdracError`."""
        if self._session is None:
            raise IdracError("Session not open, call open() first.")
        return self._session


def _as_network_configuration(
    network_config: NetworkConfiguration | Mapping[str, Any],
) -> NetworkConfiguration:
    if isinstance(network_config, NetworkConfiguration):
        return network_config
    return NetworkConfiguration(network_config)
