"""DHCP lease records, lease cache and aardvark-dns configuration for container networks."""

__version__ = "0.1.0"

__all__ = [
    "aardvark",
    "cache",
    "commands",
    "dhcp_service",
    "errors",
    "ip",
    "lease",
    "proxy_conf",
]