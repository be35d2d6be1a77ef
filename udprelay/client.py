#!/usr/bin/env python3
"""Client role: bind an ephemeral port, send to the server every tick and
print whatever comes back, coloured via *colorama*.

Usage (after installing package locally):

    udprelay-client --server 127.0.0.1:34243
"""

from __future__ import annotations
import argparse                          # CLI parsing
import logging
from typing import Callable

from .app import App
from .channel import ChannelError
from .network import Network
from .protocol import (
    DEFAULT_PORT, DEFAULT_TICK, LOCALHOST, Address, Message, format_address, parse_address,
)
from .server import iter_messages
from .util import LOG, configure_logging

# 3rd‑party: coloured terminal output
from colorama import Fore, Style, init

GREETING: bytes = b"message!"


def print_network_messages(net: Network) -> None:
    """Print every received message; undecodable payloads get a warning."""
    for message in iter_messages(net):
        source = format_address(message.address)
        try:
            text = message.payload.decode("utf-8")
        except UnicodeDecodeError:
            LOG.warning("got malformed string from: %s", source)
            continue
        print(f'{Fore.GREEN}got:{Style.RESET_ALL} "{text}" {Fore.CYAN}from:{Style.RESET_ALL} {source}')


def send_client_message(target: Address, payload: bytes = GREETING) -> Callable[[Network], None]:
    """Build a system that sends ``payload`` to ``target`` once per tick."""

    def system(net: Network) -> None:
        try:
            net.try_send(Message(target, payload))
        except ChannelError:
            LOG.warning("failed to send message")

    return system


def build_app(
    server: Address,
    host: str = LOCALHOST,
    tick: float = DEFAULT_TICK,
    payload: bytes = GREETING,
) -> App:
    # Port 0: a client only needs some address to receive replies on.
    app = App((host, 0), tick=tick)
    app.add_system(print_network_messages)
    app.add_system(send_client_message(server, payload))
    return app


# ======================================================================
#  Command‑line entry point
# ======================================================================

def main() -> None:
    """Parse CLI args then run the client until Ctrl‑C."""
    parser = argparse.ArgumentParser("udprelay client")
    parser.add_argument(
        "--server", default=f"{LOCALHOST}:{DEFAULT_PORT}", help="server address as ip:port"
    )
    parser.add_argument("--host", default=LOCALHOST, help="interface to bind")
    parser.add_argument("--tick", type=float, default=DEFAULT_TICK, help="seconds between sends")
    parser.add_argument("--message", default=GREETING.decode(), help="text to send each tick")
    parser.add_argument("--log-file", help="also write a rotating log file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args()

    init(autoreset=True)                             # Reset colour after each print
    configure_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)
    build_app(parse_address(args.server), args.host, args.tick, args.message.encode()).run()


if __name__ == "__main__":
    main()
