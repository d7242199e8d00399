"""Locations and defaults used by the DHCP proxy."""

from __future__ import annotations

import os
from pathlib import Path

NETAVARK_PROXY_RUN_DIR = "/run/podman"
NETAVARK_PROXY_RUN_DIR_ENV = "NETAVARK_PROXY_RUN_DIR_ENV"
DEFAULT_UDS_PATH = "/run/podman/nv-proxy.sock"
DEFAULT_CONFIG_DIR = ""
DEFAULT_NETWORK_CONFIG = "/dev/stdin"
DEFAULT_TIMEOUT = 8
PROXY_SOCK_NAME = "nv-proxy.sock"
CACHE_FILE_NAME = "nv-proxy.lease"
DEFAULT_INACTIVITY_TIMEOUT = 300


def get_run_dir(run_cli: str | None = None) -> str:
    """Return the run directory: environment first, then the option, then the default."""
    from_env = os.environ.get(NETAVARK_PROXY_RUN_DIR_ENV)
    if from_env is not None:
        return from_env
    if run_cli is not None:
        return run_cli
    return NETAVARK_PROXY_RUN_DIR


def get_proxy_sock_fqname(run_dir_opt: str | None = None) -> Path:
    """Return the full path of the proxy socket."""
    return Path(get_run_dir(run_dir_opt)) / PROXY_SOCK_NAME


def get_cache_fqname(run_dir: str | None = None) -> Path:
    """Return the full path of the lease cache file."""
    return Path(get_run_dir(run_dir)) / CACHE_FILE_NAME