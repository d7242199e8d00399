"""Errors of the DHCP lease search and how they map to statuses and exit codes."""

from __future__ import annotations

import enum

from varkproxy.errors import Code, NetavarkError, Status
from varkproxy.lease import DhcpV4Lease


class DhcpServiceErrorKind(enum.Enum):
    """What went wrong while looking for a DHCP lease."""

    TIMEOUT = "timeout"
    INVALID_ARGUMENT = "invalid_argument"
    INVALID_DHCP_SERVER_REPLY = "invalid_dhcp_server_reply"
    NO_LEASE = "no_lease"
    BUG = "bug"
    LEASE_EXPIRED = "lease_expired"
    UNIMPLEMENTED = "unimplemented"


_STATUS_CODES: dict[DhcpServiceErrorKind, Code] = {
    DhcpServiceErrorKind.TIMEOUT: Code.ABORTED,
    DhcpServiceErrorKind.INVALID_ARGUMENT: Code.INVALID_ARGUMENT,
    DhcpServiceErrorKind.NO_LEASE: Code.NOT_FOUND,
    DhcpServiceErrorKind.BUG: Code.INTERNAL,
}

_EXIT_CODES: dict[Code, int] = {
    Code.UNKNOWN: 155,
    Code.INVALID_ARGUMENT: 156,
    Code.NOT_FOUND: 6,
}


class DhcpServiceError(NetavarkError):
    """An error raised in the process of finding a DHCP lease."""

    def __init__(self, kind: DhcpServiceErrorKind, msg: str) -> None:
        super().__init__(msg)
        self.kind = kind
        self.msg = msg

    def to_status(self) -> Status:
        """Return the gRPC status reported to the client for this error."""
        return Status(_STATUS_CODES.get(self.kind, Code.INTERNAL), self.msg)


def exit_code_for_status(status: Status) -> int:
    """Return the exit code the proxy client uses for a failed request."""
    return _EXIT_CODES.get(status.code, 1)


def lease_addresses_changed(old_lease: DhcpV4Lease, new_lease: DhcpV4Lease) -> bool:
    """Tell whether a renewed lease changed the address, netmask or gateways."""
    return (
        old_lease.yiaddr != new_lease.yiaddr
        or old_lease.subnet_mask != new_lease.subnet_mask
        or old_lease.gateways != new_lease.gateways
    )