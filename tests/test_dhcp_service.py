from ipaddress import IPv4Address

import pytest

from varkproxy.dhcp_service import (
    DhcpServiceError,
    DhcpServiceErrorKind,
    exit_code_for_status,
    lease_addresses_changed,
)
from varkproxy.errors import Code, NetavarkError, Status


@pytest.mark.parametrize(
    "kind, code",
    [
        (DhcpServiceErrorKind.TIMEOUT, Code.ABORTED),
        (DhcpServiceErrorKind.INVALID_ARGUMENT, Code.INVALID_ARGUMENT),
        (DhcpServiceErrorKind.NO_LEASE, Code.NOT_FOUND),
        (DhcpServiceErrorKind.BUG, Code.INTERNAL),
        (DhcpServiceErrorKind.LEASE_EXPIRED, Code.INTERNAL),
        (DhcpServiceErrorKind.UNIMPLEMENTED, Code.INTERNAL),
        (DhcpServiceErrorKind.INVALID_DHCP_SERVER_REPLY, Code.INTERNAL),
    ],
)
def test_to_status_codes(kind, code):
    err = DhcpServiceError(kind, "Could not find a lease within the timeout limit")
    status = err.to_status()
    assert status.code == code
    assert status.message == "Could not find a lease within the timeout limit"


def test_error_display_is_message():
    err = DhcpServiceError(DhcpServiceErrorKind.BUG, "boom")
    assert str(err) == "boom"
    assert err.kind is DhcpServiceErrorKind.BUG


def test_error_is_netavark_error():
    err = DhcpServiceError(DhcpServiceErrorKind.NO_LEASE, "nope")
    assert isinstance(err, NetavarkError)
    assert str(err) == "nope"
    assert err.kind is DhcpServiceErrorKind.NO_LEASE
    status = err.to_status()
    assert status.code == Code.NOT_FOUND
    assert status.message == "nope"


@pytest.mark.parametrize(
    "code, expected",
    [
        (Code.UNKNOWN, 155),
        (Code.INVALID_ARGUMENT, 156),
        (Code.NOT_FOUND, 6),
        (Code.DEADLINE_EXCEEDED, 1),
        (Code.ABORTED, 1),
        (Code.INTERNAL, 1),
    ],
)
def test_exit_code_for_status(code, expected):
    assert exit_code_for_status(Status(code, "x")) == expected


def test_exit_code_from_service_error_round_trip():
    err = DhcpServiceError(DhcpServiceErrorKind.NO_LEASE, "none")
    assert exit_code_for_status(err.to_status()) == 6


def _lease(addr="10.0.0.5", mask="255.255.255.0", gws=("10.0.0.1",)):
    from varkproxy.lease import DhcpV4Lease

    return DhcpV4Lease(
        yiaddr=IPv4Address(addr),
        subnet_mask=IPv4Address(mask),
        gateways=[IPv4Address(g) for g in gws] if gws is not None else None,
    )


def test_same_lease_not_changed():
    assert lease_addresses_changed(_lease(), _lease()) is False


def test_address_change_detected():
    assert lease_addresses_changed(_lease(), _lease(addr="10.0.0.6")) is True


def test_mask_change_detected():
    assert lease_addresses_changed(_lease(), _lease(mask="255.255.0.0")) is True


def test_gateway_change_detected():
    assert lease_addresses_changed(_lease(), _lease(gws=("10.0.0.254",))) is True
    assert lease_addresses_changed(_lease(), _lease(gws=None)) is True


def test_other_fields_ignored():
    old = _lease()
    new = _lease()
    new.t1 = old.t1 + 100
    new.host_name = "other"
    assert lease_addresses_changed(old, new) is False