"""Turn a DHCP lease into the address and gateways for a container interface."""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address, IPv4Interface, IPv6Address, ip_address
from typing import Iterable

from varkproxy.lease import Lease, ProxyError

_V4_SYNTAX = "invalid IPv4 address syntax"


def _parse_v4(text: str) -> IPv4Address:
    if not isinstance(text, str):
        raise ProxyError(_V4_SYNTAX)
    try:
        return IPv4Address(text)
    except ValueError:
        raise ProxyError(_V4_SYNTAX) from None


def get_prefix_length_v4(netmask: str) -> int:
    """Return the prefix length of a dotted netmask by counting its set bits."""
    return bin(int(_parse_v4(netmask))).count("1")


def handle_gws(gateways: Iterable[str], netmask: str) -> list[IPv4Interface]:
    """Attach the netmask's prefix length to each gateway address."""
    result = []
    for route in gateways:
        prefix = get_prefix_length_v4(netmask)
        gw = _parse_v4(route)
        result.append(IPv4Interface((gw, prefix)))
    return result


@dataclass
class MacVlanAddress:
    """Address information to apply to a macvlan interface in a container."""

    address: IPv4Address | IPv6Address
    gateways: list[IPv4Interface]
    interface: str
    prefix_length: int

    @classmethod
    def from_lease(cls, lease: Lease, interface: str) -> MacVlanAddress:
        try:
            address = ip_address(lease.yiaddr)
        except ValueError:
            raise ProxyError("bad address: invalid IP address syntax") from None
        try:
            gateways = handle_gws(lease.gateways, lease.subnet_mask)
        except ProxyError as exc:
            raise ProxyError(f"bad gateways: {exc}") from exc
        prefix_length = get_prefix_length_v4(lease.subnet_mask)
        return cls(
            address=address,
            gateways=gateways,
            interface=interface,
            prefix_length=prefix_length,
        )