"""DHCP lease and network configuration records exchanged with the proxy."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from ipaddress import IPv4Address
from typing import Any, Iterable, Mapping

from varkproxy.errors import Code, NetavarkError, Status

_V4_SYNTAX = "invalid IPv4 address syntax"
_UNSPECIFIED = IPv4Address("0.0.0.0")
_MAX_MTU = 0xFFFF


class ProxyError(NetavarkError):
    """An error raised while handling proxy data; reported as an UNKNOWN status."""

    @property
    def status(self) -> Status:
        return Status(Code.UNKNOWN, str(self))


def _parse_v4(text: Any) -> IPv4Address:
    if not isinstance(text, str):
        raise ProxyError(_V4_SYNTAX)
    try:
        return IPv4Address(text)
    except ValueError:
        raise ProxyError(_V4_SYNTAX) from None


def handle_ip_vectors(ips: Iterable[IPv4Address] | None) -> list[str]:
    """Render optional addresses as a list of strings; None becomes an empty list."""
    if ips is None:
        return []
    return [str(ip) for ip in ips]


def to_v4_addrs(values: Iterable[str]) -> list[IPv4Address] | None:
    """Parse strings into IPv4 addresses; an empty input gives None."""
    items = list(values)
    if not items:
        return None
    return [_parse_v4(item) for item in items]


@dataclass
class DhcpV4Lease:
    """A lease as handed out by the DHCPv4 client."""

    siaddr: IPv4Address = _UNSPECIFIED
    yiaddr: IPv4Address = _UNSPECIFIED
    t1: int = 0
    t2: int = 0
    lease_time: int = 0
    srv_id: IPv4Address = _UNSPECIFIED
    subnet_mask: IPv4Address = _UNSPECIFIED
    broadcast_addr: IPv4Address | None = None
    dns_srvs: list[IPv4Address] | None = None
    gateways: list[IPv4Address] | None = None
    ntp_srvs: list[IPv4Address] | None = None
    mtu: int | None = None
    host_name: str | None = None
    domain_name: str | None = None


def _check(data: Mapping[str, Any], spec: Mapping[str, type]) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise NetavarkError("JSON Decoding error: expected an object")
    values: dict[str, Any] = {}
    for name, kind in spec.items():
        if name not in data:
            raise NetavarkError(f"JSON Decoding error: missing field `{name}`")
        value = data[name]
        if kind is int:
            ok = isinstance(value, int) and not isinstance(value, bool) and value >= 0
        elif kind is list:
            ok = isinstance(value, list) and all(isinstance(v, str) for v in value)
        else:
            ok = isinstance(value, kind)
        if not ok:
            raise NetavarkError(
                f"JSON Decoding error: invalid type for field `{name}`"
            )
        values[name] = list(value) if kind is list else value
    return values


_LEASE_SPEC: dict[str, type] = {
    "t1": int,
    "t2": int,
    "lease_time": int,
    "mtu": int,
    "domain_name": str,
    "mac_address": str,
    "is_v6": bool,
    "siaddr": str,
    "yiaddr": str,
    "srv_id": str,
    "subnet_mask": str,
    "broadcast_addr": str,
    "dns_servers": list,
    "gateways": list,
    "ntp_servers": list,
    "host_name": str,
}


@dataclass
class Lease:
    """A lease in the wire form used between proxy, client and cache."""

    t1: int = 0
    t2: int = 0
    lease_time: int = 0
    mtu: int = 0
    domain_name: str = ""
    mac_address: str = ""
    is_v6: bool = False
    siaddr: str = ""
    yiaddr: str = ""
    srv_id: str = ""
    subnet_mask: str = ""
    broadcast_addr: str = ""
    dns_servers: list[str] = field(default_factory=list)
    gateways: list[str] = field(default_factory=list)
    ntp_servers: list[str] = field(default_factory=list)
    host_name: str = ""

    @classmethod
    def from_dhcp_v4(cls, lease: DhcpV4Lease) -> Lease:
        """Build a wire lease from a DHCPv4 client lease."""
        return cls(
            t1=lease.t1,
            t2=lease.t2,
            lease_time=lease.lease_time,
            mtu=lease.mtu if lease.mtu is not None else 0,
            domain_name=lease.domain_name or "",
            mac_address="",
            is_v6=False,
            siaddr=str(lease.siaddr),
            yiaddr=str(lease.yiaddr),
            srv_id=str(lease.srv_id),
            subnet_mask=str(lease.subnet_mask),
            broadcast_addr="",
            dns_servers=handle_ip_vectors(lease.dns_srvs),
            gateways=handle_ip_vectors(lease.gateways),
            ntp_servers=handle_ip_vectors(lease.ntp_srvs),
            host_name=lease.host_name or "",
        )

    def to_dhcp_v4(self) -> DhcpV4Lease:
        """Convert back into a DHCPv4 client lease; raises ProxyError on bad data."""
        host_name = self.host_name or None
        domain_name = self.domain_name or None
        broadcast = _parse_v4(self.broadcast_addr) if self.broadcast_addr else None
        if not 0 <= self.mtu <= _MAX_MTU:
            raise ProxyError("out of range integral type conversion attempted")
        return DhcpV4Lease(
            siaddr=_parse_v4(self.siaddr),
            yiaddr=_parse_v4(self.yiaddr),
            t1=self.t1,
            t2=self.t2,
            lease_time=self.lease_time,
            srv_id=_parse_v4(self.srv_id),
            subnet_mask=_parse_v4(self.subnet_mask),
            broadcast_addr=broadcast,
            dns_srvs=to_v4_addrs(self.dns_servers),
            gateways=to_v4_addrs(self.gateways),
            ntp_srvs=to_v4_addrs(self.ntp_servers),
            mtu=self.mtu,
            host_name=host_name,
            domain_name=domain_name,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Lease:
        return cls(**_check(data, _LEASE_SPEC))

    def add_mac_address(self, mac_addr: str) -> None:
        self.mac_address = mac_addr

    def add_domain_name(self, domain_name: str) -> None:
        self.domain_name = domain_name


_CONFIG_SPEC: dict[str, type] = {
    "host_iface": str,
    "container_mac_addr": str,
    "domain_name": str,
    "host_name": str,
    "version": int,
    "ns_path": str,
    "container_iface": str,
}


@dataclass
class NetworkConfig:
    """What a client asks the proxy to set up or tear down."""

    host_iface: str = ""
    container_mac_addr: str = ""
    domain_name: str = ""
    host_name: str = ""
    version: int = 0
    ns_path: str = ""
    container_iface: str = ""

    @classmethod
    def load(cls, path: str) -> NetworkConfig:
        """Read a configuration from a JSON file."""
        with open(path, encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise NetavarkError(f"JSON Decoding error: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NetworkConfig:
        return cls(**_check(data, _CONFIG_SPEC))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)