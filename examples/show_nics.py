#!/usr/bin/env python3
"""Print the NIC cards of a server as seen by the iDRAC.

One line per card with its shape, partition capability and BIOS status,
followed by the partitions of each port with MAC address and link state.

Usage::

    python examples/show_nics.py [--json]

``--json`` prints the NAPALM ``get_interfaces()`` dict instead.

Environment variables
---------------------
IDRAC_HOST        iDRAC base URL or IP (e.g. https://192.0.2.10)
IDRAC_USERNAME    Login username          (required)
IDRAC_PASSWORD    Login password          (required)
IDRAC_VERIFY_TLS  Set to "true" to verify TLS (default: false)
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any

from napalm_idrac.driver import IdracDriver
from napalm_idrac.model.nic_info import NicInfo


def _env(name: str) -> str:
    value = os.environ.get(name, "")
    if not value:
        print(f"ERROR: required environment variable {name!r} is not set.", file=sys.stderr)
        sys.exit(1)
    return value


def _print_nic(nic: NicInfo, interfaces: dict[str, Any]) -> None:
    status = "disabled" if nic.disabled else nic.nic_status
    print(
        f"{nic.card_prefix}  {nic.nic_type}  x{nic.n_partitions}  [{status}]  {nic.product or ''}"
    )
    for port in nic.ports:
        for view in port.partitions:
            state = "up" if interfaces[view.fqdd]["is_up"] else "down"
            print(f"    {view.fqdd:<28} {view.mac_address or '-':<18} {state}")


def main() -> None:
    driver = IdracDriver(
        hostname=_env("IDRAC_HOST"),
        username=_env("IDRAC_USERNAME"),
        password=_env("IDRAC_PASSWORD"),
        optional_args={
            "verify_tls": os.environ.get("IDRAC_VERIFY_TLS", "false").lower() == "true",
        },
    )
    try:
        driver.open()
        interfaces = driver.get_interfaces()
        if "--json" in sys.argv:
            print(json.dumps(interfaces, indent=2))
            return
        for nic in driver.get_nic_info():
            _print_nic(nic, interfaces)
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        driver.close()


if __name__ == "__main__":
    main()
