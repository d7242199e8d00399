"""In-memory lease cache mirrored to a writable stream."""

from __future__ import annotations

import io
import json
import logging
from typing import IO, Any

from varkproxy.lease import Lease

log = logging.getLogger(__name__)


class LeaseCache:
    """Holds the leases per container MAC address and mirrors them to a writer.

    The writer is any seekable, truncatable stream: a file in production,
    an in-memory buffer in tests. Every change rewrites its whole content
    as a JSON object mapping each MAC address to a list of leases.
    """

    def __init__(self, writer: IO[Any]) -> None:
        self._mem: dict[str, list[Lease]] = {}
        self._writer = writer

    def add_lease(self, mac_addr: str, lease: Lease) -> None:
        """Store a new lease for ``mac_addr`` and save the cache."""
        log.debug("add lease: %r", mac_addr)
        self._mem[mac_addr] = [Lease.from_dict(lease.to_dict())]
        self._save()

    def update_lease(self, mac_addr: str, lease: Lease) -> None:
        """Replace the lease held for ``mac_addr`` and save the cache."""
        self._mem[mac_addr] = [lease]
        self._save()

    def remove_lease(self, mac_addr: str) -> Lease:
        """Drop the lease of ``mac_addr`` and return it.

        A blank lease is returned, and nothing is written, when no lease
        is held for that address.
        """
        log.debug("remove lease: %r", mac_addr)
        leases = self._mem.pop(mac_addr, None)
        if leases is None:
            return Lease()
        self._save()
        return leases[0]

    def teardown(self) -> None:
        """Forget every lease and save the now empty cache."""
        self._mem.clear()
        self._save()

    def __len__(self) -> int:
        return len(self._mem)

    def __contains__(self, mac_addr: object) -> bool:
        return mac_addr in self._mem

    def _clear_writer(self) -> bool:
        try:
            self._writer.seek(0)
            self._writer.truncate(0)
        except (OSError, ValueError) as exc:
            log.error(
                "Could not clear the writer. Not updating lease information: %s", exc
            )
            return False
        return True

    def _save(self) -> None:
        if not self._clear_writer():
            return
        payload = json.dumps(
            {mac: [lease.to_dict() for lease in leases] for mac, leases in self._mem.items()},
            separators=(",", ":"),
        )
        if isinstance(self._writer, (io.RawIOBase, io.BufferedIOBase)):
            self._writer.write(payload.encode("utf-8"))
        else:
            self._writer.write(payload)
        self._writer.flush()