#!/usr/bin/env python3
"""Server role: listen on a fixed port, log every message and reply to it.

Usage (after installing package locally):

    udprelay-server --port 34243
"""

from __future__ import annotations
import argparse                          # CLI parsing
import logging

from .app import App
from .channel import ChannelError
from .network import Network
from .protocol import DEFAULT_PORT, DEFAULT_TICK, LOCALHOST, Message, format_address
from .util import LOG, configure_logging

REPLY: bytes = b"reply!"


def print_network_messages(net: Network) -> None:
    """Drain the inbound queue, log each message and answer its sender."""
    for message in iter_messages(net):
        try:
            text = message.payload.decode("utf-8")
            LOG.info('got: "%s" from: %s', text, format_address(message.address))
        except UnicodeDecodeError:
            LOG.warning("got malformed string from: %s", format_address(message.address))

        try:
            net.try_send(Message(message.address, REPLY))
        except ChannelError:
            LOG.warning("failed to send reply")


def iter_messages(net: Network):
    """Yield messages until the relay reports it has nothing more right now."""
    while True:
        try:
            yield net.try_recv()
        except ChannelError:
            return


def build_app(host: str = LOCALHOST, port: int = DEFAULT_PORT, tick: float = DEFAULT_TICK) -> App:
    return App((host, port), tick=tick).add_system(print_network_messages)


# ======================================================================
#  Command‑line entry point
# ======================================================================

def main() -> None:
    parser = argparse.ArgumentParser("udprelay server")
    parser.add_argument("--host", default=LOCALHOST, help="interface to bind")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="UDP port to listen on")
    parser.add_argument("--tick", type=float, default=DEFAULT_TICK, help="seconds between polls")
    parser.add_argument("--log-file", help="also write a rotating log file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args()

    configure_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)
    build_app(args.host, args.port, args.tick).run()


if __name__ == "__main__":
    main()
