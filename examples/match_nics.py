#!/usr/bin/env python3
"""Match a network configuration file against the NICs of a server.

Usage::

    python examples/match_nics.py network_config.json [--add-partitions]

Prints the configuration with FQDDs and MAC addresses filled in, followed by
the NIC teams it implies.

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

from napalm_idrac.driver import IdracDriver


def _require(name: str) -> str:
    value = os.environ.get(name, "")
    if not value:
        print(f"ERROR: required environment variable {name!r} is not set.", file=sys.stderr)
        sys.exit(1)
    return value


def main() -> None:
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if len(args) != 1:
        print(f"Usage: {sys.argv[0]} CONFIG.json [--add-partitions]", file=sys.stderr)
        sys.exit(2)
    with open(args[0], encoding="utf-8") as fh:
        raw = json.load(fh)

    driver = IdracDriver(
        hostname=_require("IDRAC_HOST"),
        username=_require("IDRAC_USERNAME"),
        password=_require("IDRAC_PASSWORD"),
        optional_args={
            "verify_tls": os.environ.get("IDRAC_VERIFY_TLS", "false").lower() == "true",
            "add_partitions": "--add-partitions" in sys.argv,
        },
    )
    try:
        driver.open()
        config = driver.add_nics(raw)
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        driver.close()

    print(json.dumps(config.to_dict(), indent=2))
    for team in config.teams():
        names = ", ".join(n.name or n.id for n in team.networks)
        print(f"{' + '.join(team.mac_addresses) or '(no MACs)'}: {names}")


if __name__ == "__main__":
    main()
