#!/usr/bin/env python3
"""Shared constants, the :class:`Message` record and address helpers.

Every layer of the relay (queues, socket loops, host application) speaks in
terms of the symbols defined here so they never disagree on defaults.
"""

from __future__ import annotations       # Postponed annotation evaluation (PEP 563)
import ipaddress                         # Validates the host part of "ip:port"
from dataclasses import dataclass, field # Immutable record type for messages
from typing import Tuple

# --- Network configuration -------------------------------------------------
BUFFER_MAX_SIZE: int = 2000   # Receive buffer; longer datagrams are truncated
DEFAULT_PORT: int = 34243     # Port the server role listens on
LOCALHOST: str = "127.0.0.1"  # Interface both roles bind to by default
POLL_INTERVAL: float = 0.5    # Seconds a loop may block before re-checking shutdown
DEFAULT_TICK: float = 0.1     # Seconds between host application ticks

# (host, port) – the shape socket.sendto()/recvfrom() use for AF_INET.  AF_INET6
# sources keep their (host, port, flowinfo, scope_id) form so replies to
# link-local peers still route.
Address = Tuple[str, int]


@dataclass(frozen=True, slots=True)
class Message:
    """An address-tagged byte payload.

    For outbound messages ``address`` is the destination, for inbound ones it
    is the sender.  Nothing is validated here; the socket layer decides.
    """

    address: Address
    payload: bytes = field(default=b"")

    def __post_init__(self) -> None:
        # Accept bytearray / memoryview but always store immutable bytes.
        if not isinstance(self.payload, bytes):
            object.__setattr__(self, "payload", bytes(self.payload))
        host, port, *rest = self.address
        object.__setattr__(self, "address", (host, int(port), *rest))


# --- Address helpers -------------------------------------------------------

def parse_address(text: str) -> Address:
    """Parse ``"ip:port"`` (or ``"[ipv6]:port"``) into an :data:`Address`.

    Raises:
        ValueError: malformed input.  Callers only pass literals or already
            validated configuration, so this is treated as fatal.
    """
    host, sep, port_text = text.strip().rpartition(":")
    if not sep or not host or not port_text:
        raise ValueError(f"invalid socket address syntax: {text!r}")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
        if ipaddress.ip_address(host).version != 6:
            raise ValueError(f"invalid socket address syntax: {text!r}")
    elif ":" in host:                              # Bare IPv6 needs brackets
        raise ValueError(f"invalid socket address syntax: {text!r}")

    ipaddress.ip_address(host)                     # ValueError on non-IP hosts
    if not (port_text.isascii() and port_text.isdigit()):
        raise ValueError(f"invalid port in socket address: {text!r}")
    port = int(port_text)
    if port > 65535:
        raise ValueError(f"port out of range in socket address: {text!r}")
    return host, port


def format_address(address: Address) -> str:
    """Inverse of :func:`parse_address` – ``("::1", 80)`` ➜ ``"[::1]:80"``."""
    host, port = address[0], address[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"
