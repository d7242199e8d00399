"""Maintain the aardvark-dns configuration files and signal the DNS server."""

from __future__ import annotations

import fcntl
import logging
import os
import re
import signal
import subprocess
from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv6Address
from pathlib import Path
from typing import Iterable, Sequence, Union

from varkproxy.errors import NetavarkError, wrap

log = logging.getLogger(__name__)

SYSTEMD_CHECK_PATH = "/run/systemd/system"
SYSTEMD_RUN = "systemd-run"
AARDVARK_COMMIT_LOCK = "aardvark.lock"
AARDVARK_PID_FILE = "aardvark.pid"
INTERNAL_SUFFIX = "%int"

_PID_SYNTAX = re.compile(r"[+-]?[0-9]+")
_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1

IPAddress = Union[IPv4Address, IPv6Address]


def _join(items: Iterable[object]) -> str:
    return ",".join(str(item) for item in items)


def _space_prefixed(servers: Sequence[object] | None) -> str:
    """Render an optional server list as `` a,b`` or as nothing when empty."""
    if not servers:
        return ""
    return f" {_join(servers)}"


def _split_terminator(content: str) -> list[str]:
    """Split on newlines, dropping a single trailing empty piece."""
    parts = content.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def _rust_log_level() -> str:
    level = log.getEffectiveLevel()
    if level > logging.CRITICAL:
        return "OFF"
    if level >= logging.ERROR:
        return "ERROR"
    if level >= logging.WARNING:
        return "WARN"
    if level >= logging.INFO:
        return "INFO"
    if level >= logging.DEBUG:
        return "DEBUG"
    return "TRACE"


@dataclass
class AardvarkEntry:
    """One container's DNS record on one network."""

    network_name: str
    container_id: str
    network_gateways: list[IPAddress] = field(default_factory=list)
    network_dns_servers: list[IPAddress] | None = None
    container_ips_v4: list[IPv4Address] = field(default_factory=list)
    container_ips_v6: list[IPv6Address] = field(default_factory=list)
    container_names: list[str] = field(default_factory=list)
    container_dns_servers: list[IPAddress] | None = None
    is_internal: bool = False


class Aardvark:
    """Writes per-network aardvark-dns config files and manages the server process."""

    def __init__(
        self,
        config: str | os.PathLike[str],
        rootless: bool,
        aardvark_bin: str | os.PathLike[str],
        port: int,
    ) -> None:
        self.config = Path(config)
        self.rootless = rootless
        self.aardvark_bin = os.fspath(aardvark_bin)
        self.port = str(port)

    def _get_aardvark_pid(self) -> int:
        content = (self.config / AARDVARK_PID_FILE).read_text(encoding="utf-8")
        if not _PID_SYNTAX.fullmatch(content):
            reason = (
                "cannot parse integer from empty string"
                if content == ""
                else "invalid digit found in string"
            )
            raise NetavarkError(f"parse aardvark pid: {reason}")
        pid = int(content)
        if not _I32_MIN <= pid <= _I32_MAX:
            raise NetavarkError("parse aardvark pid: number too large to fit in target type")
        return pid

    @staticmethod
    def _is_executable_in_path(program: str) -> bool:
        path = os.environ.get("PATH")
        if path is None:
            return False
        return any(os.path.exists(f"{p}/{program}") for p in path.split(":"))

    def start_aardvark_server(self) -> None:
        """Start aardvark-dns, under systemd-run when systemd is booted."""
        log.debug("Spawning aardvark server")
        args: list[str] = []
        if Path(SYSTEMD_CHECK_PATH).exists() and self._is_executable_in_path(SYSTEMD_RUN):
            args = [SYSTEMD_RUN, "-q", "--scope"]
            if self.rootless:
                args.append("--user")
        args.extend(
            [self.aardvark_bin, "--config", os.fspath(self.config), "-p", self.port, "run"]
        )
        log.debug("start aardvark-dns: %r", args)
        env = dict(os.environ)
        env["RUST_LOG"] = _rust_log_level()
        # Blocks until the server's parent process returns and daemonizes.
        subprocess.run(args, env=env, check=False)

    def _check_netns(self, pid: int) -> None:
        try:
            current = os.readlink("/proc/self/ns/net")
            theirs = os.readlink(f"/proc/{pid}/ns/net")
        except OSError:
            return
        if theirs != current:
            log.error(
                "aardvark-dns runs in a different netns, dns will not work for this "
                "container. To resolve please stop all containers, kill the "
                "aardvark-dns process, remove the %s directory and then start the "
                "containers again",
                self.config,
            )

    def notify(self, start: bool, is_update: bool) -> None:
        """Send SIGHUP to a running server, or start one when allowed."""
        try:
            pid = self._get_aardvark_pid()
        except (OSError, NetavarkError) as err:
            if not start:
                raise wrap("failed to get aardvark pid", err) from err
        else:
            try:
                os.kill(pid, signal.SIGHUP)
            except ProcessLookupError:
                pass
            except OSError as err:
                raise NetavarkError(f"failed to send SIGHUP to aardvark: {err}") from err
            else:
                if not is_update:
                    self._check_netns(pid)
                return
        self.start_aardvark_server()

    def commit_entries(self, entries: Sequence[AardvarkEntry]) -> None:
        """Append entries to their network files while holding the commit lock."""
        lockfile_path = self.config / ".." / AARDVARK_COMMIT_LOCK
        try:
            lockfile = open(lockfile_path, "w+")
        except OSError as e:
            raise OSError(f"Failed to open/create lockfile {str(lockfile_path)!r}: {e}") from e
        with lockfile:
            try:
                fcntl.flock(lockfile.fileno(), fcntl.LOCK_EX)
            except OSError as e:
                raise OSError(
                    f"Failed to acquire exclusive lock on {str(lockfile_path)!r}: {e}"
                ) from e
            for entry in entries:
                self._commit_one(entry)

    def _commit_one(self, entry: AardvarkEntry) -> None:
        path = self.config / entry.network_name
        if entry.is_internal:
            new_path = self.config / (entry.network_name + INTERNAL_SUFFIX)
            try:
                path.rename(new_path)
            except OSError:
                pass
            path = new_path
        try:
            handle = open(path, "x", encoding="utf-8")
        except FileExistsError:
            handle = open(path, "a", encoding="utf-8")
        else:
            with handle:
                header = f"{_join(entry.network_gateways)}{_space_prefixed(entry.network_dns_servers)}\n"
                handle.write(header)
            handle = open(path, "a", encoding="utf-8")
        with handle:
            try:
                self._commit_entry(entry, handle)
            except OSError as er:
                raise OSError(f"Failed to commit entry {entry!r}: {er}") from er

    @staticmethod
    def _commit_entry(entry: AardvarkEntry, handle) -> None:
        line = (
            f"{entry.container_id} {_join(entry.container_ips_v4)} "
            f"{_join(entry.container_ips_v6)} {','.join(entry.container_names)}"
            f"{_space_prefixed(entry.container_dns_servers)}\n"
        )
        handle.write(line)

    def commit_netavark_entries(self, entries: Sequence[AardvarkEntry]) -> None:
        """Commit entries and make sure the server picks them up."""
        if entries:
            self.commit_entries(entries)
            self.notify(True, False)

    def delete_entry(self, container_id: str, network_name: str) -> None:
        """Remove every line mentioning the container; drop the file if only the header is left."""
        path = self.config / network_name
        if not path.exists():
            path = self.config / (network_name + INTERNAL_SUFFIX)
        lines = _split_terminator(path.read_text(encoding="utf-8"))
        kept = [line for line in lines if container_id not in line]
        path.write_text("".join(f"{line}\n" for line in kept), encoding="utf-8")
        if len(kept) <= 1:
            path.unlink()

    def modify_network_dns_servers(
        self, network_name: str, network_dns_servers: Sequence[str]
    ) -> None:
        """Replace the network DNS servers in the header line and notify the server.

        Nothing happens when no config file exists for the network.
        """
        path = self.config / network_name
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return
        modified = False
        out: list[str] = []
        for idx, line in enumerate(_split_terminator(content)):
            if idx == 0:
                bind_ips = line.split(" ")[0]
                if network_dns_servers:
                    modified = True
                out.append(f"{bind_ips}{_space_prefixed(list(network_dns_servers))}")
            else:
                out.append(line)
        path.write_text("".join(f"{line}\n" for line in out), encoding="utf-8")
        if modified:
            self.notify(False, True)

    def delete_from_netavark_entries(self, entries: Sequence[AardvarkEntry]) -> None:
        """Delete each entry's container from its network file, then notify the server."""
        for entry in entries:
            self.delete_entry(entry.container_id, entry.network_name)
        self.notify(False, False)