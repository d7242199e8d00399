"""Shared helpers of the commands and the DNS server update command."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Sequence

from varkproxy.aardvark import Aardvark
from varkproxy.errors import NetavarkError, wrap

log = logging.getLogger(__name__)

AARDVARK_DIR_NAME = "aardvark-dns"


def get_config_dir(
    directory: str | os.PathLike[str] | None, cmd: str
) -> str | os.PathLike[str]:
    """Return the configuration directory, which the command requires."""
    if directory is None:
        raise NetavarkError(
            f"--config not specified but required for netavark {cmd}"
        )
    return directory


def update_dns_servers(
    network_name: str,
    network_dns_servers: Sequence[str],
    config_dir: str | os.PathLike[str] | None,
    aardvark_bin: str | os.PathLike[str],
    rootless: bool,
    dns_port: int,
) -> None:
    """Update the DNS servers of an already configured network.

    Nothing is done when the aardvark-dns binary does not exist.
    """
    if not network_name:
        raise NetavarkError("a value is required for network name but none was supplied")
    directory = get_config_dir(config_dir, "update")
    if Path(aardvark_bin).exists():
        aardvark = Aardvark(Path(directory) / AARDVARK_DIR_NAME, rootless, aardvark_bin, dns_port)
        servers = list(network_dns_servers)
        # A single empty value means "no servers", not a server named "".
        if servers == [""]:
            servers = []
        try:
            aardvark.modify_network_dns_servers(network_name, servers)
        except (OSError, NetavarkError) as err:
            raise wrap("unable to modify network dns servers", err) from err
    log.debug("Network update complete")