# varkproxy

Building blocks for handing out DHCP leases to containers and keeping the
container DNS server (aardvark-dns) configured. It depends only on the
standard library, needs Python 3.10 or later, and runs on Linux (file
locking uses `fcntl`, and the DNS helper reads `/proc`).

## Modules

- **`varkproxy.errors`**: the error hierarchy (`NetavarkError`,
  `ExitCodeError`, `ChainedError`, `MultipleErrors`, `DhcpProxyError`),
  `NetavarkErrorList` for collecting errors, the gRPC-style `Code` and
  `Status`, and `wrap()` for adding context to an error.
- **`varkproxy.proxy_conf`**: where the proxy keeps its socket and lease file
  (`get_run_dir`, `get_proxy_sock_fqname`, `get_cache_fqname`). The
  `NETAVARK_PROXY_RUN_DIR_ENV` environment variable wins over an explicit
  directory, which wins over the default `/run/podman`.
- **`varkproxy.lease`**: `Lease`, `DhcpV4Lease` and `NetworkConfig`, with
  conversion between a DHCPv4 lease and the wire form
  (`Lease.from_dhcp_v4`, `Lease.to_dhcp_v4`), dict conversion, and
  `ProxyError`.
- **`varkproxy.ip`**: `MacVlanAddress.from_lease` turns a lease into the
  address, prefix length and gateways for a container interface;
  `get_prefix_length_v4` and `handle_gws` do the netmask arithmetic.
- **`varkproxy.cache`**: `LeaseCache`, an in-memory map of leases by MAC
  address whose whole content is rewritten as JSON to a stream after every
  change.
- **`varkproxy.aardvark`**: `Aardvark` writes, edits and removes aardvark-dns
  network files, and signals (`SIGHUP`) or starts the aardvark-dns server;
  `AardvarkEntry` describes one container on one network.
- **`varkproxy.dhcp_service`**: `DhcpServiceErrorKind` and
  `DhcpServiceError`, the status each error maps to (`to_status`),
  `exit_code_for_status`, and `lease_addresses_changed` for renewed leases.
- **`varkproxy.commands`**: `get_config_dir` and `update_dns_servers`, which
  changes the DNS servers of a network that is already configured.

## Examples

Find where the proxy socket and lease cache live:

```python
from varkproxy.proxy_conf import get_cache_fqname, get_proxy_sock_fqname

print(get_proxy_sock_fqname(None))      # /run/podman/nv-proxy.sock (unless the env var is set)
print(get_cache_fqname("/tmp/proxy"))   # /tmp/proxy/nv-proxy.lease
```

Work out the address details a lease describes:

```python
from varkproxy.ip import MacVlanAddress, get_prefix_length_v4, handle_gws
from varkproxy.lease import Lease

get_prefix_length_v4("255.255.255.0")          # 24
handle_gws(["192.168.1.1"], "255.255.255.0")   # [IPv4Interface('192.168.1.1/24')]

lease = Lease(yiaddr="10.0.0.5", subnet_mask="255.255.255.0", gateways=["10.0.0.1"])
addr = MacVlanAddress.from_lease(lease, "eth0")
print(addr.address, addr.prefix_length)        # 10.0.0.5 24
```

A malformed address or netmask raises `varkproxy.lease.ProxyError`.

`Lease.from_dict` and `NetworkConfig.from_dict` / `NetworkConfig.load`
expect every field to be present and of the right type; otherwise they raise
`NetavarkError` with a `JSON Decoding error: ...` message.

Keep leases in a cache mirrored to a stream:

```python
import io
from varkproxy.cache import LeaseCache
from varkproxy.lease import Lease

buffer = io.StringIO()
cache = LeaseCache(buffer)
cache.add_lease("02:00:00:00:00:01", Lease(yiaddr="10.0.0.5"))
print(buffer.getvalue())                       # {"02:00:00:00:00:01":[{...}]}
removed = cache.remove_lease("02:00:00:00:00:01")
print(len(cache))                              # 0
```

Removing an address that is not held returns a blank `Lease` and writes
nothing.

Add context to errors and collect several of them:

```python
from varkproxy.errors import NetavarkError, NetavarkErrorList, wrap

errors = NetavarkErrorList()
errors.push(wrap("remove aardvark entries", NetavarkError("file missing")))
errors.raise_if_any()   # raises MultipleErrors: "remove aardvark entries: file missing"
```

With more than one error pushed, the `MultipleErrors` message lists each of
them. `NetavarkError.print_json()` writes `{"error": "..."}` for callers that
read JSON.

## What this package does not do

There is no proxy server, no DHCP client and no command-line program here:
nothing listens on the proxy socket, performs a DHCP exchange, or applies
addresses and routes inside a network namespace. The package supplies the
records, the cache, the address calculations, the error mapping and the
aardvark-dns file handling that such a program would build on.