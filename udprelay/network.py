#!/usr/bin/env python3
"""Non-blocking UDP relay.

Application code calls :meth:`Network.try_send` / :meth:`Network.try_recv`
from its own loop; two background tasks do the blocking socket work:

* send loop – drains the outbound queue and ``sendto()``s each payload
* recv loop – ``recvfrom()``s datagrams and pushes them onto the inbound queue

Both loops share one bound socket (one only writes, the other only reads)
and never stop because of a network error; failed datagrams are dropped.
"""

from __future__ import annotations
import socket                            # UDP socket operations
import threading                         # Shared shutdown flag
from typing import Optional, Union

from .channel import ChannelError, Disconnected, Empty, Receiver, Sender, unbounded
from .protocol import (
    BUFFER_MAX_SIZE, POLL_INTERVAL, Address, Message, format_address, parse_address,
)
from .tasks import Task, TaskPool
from .util import LOG

__all__ = [
    "BindError", "Network", "bind_socket",
    "recv_loop", "recv_message", "send_loop", "send_message",
]


class BindError(RuntimeError):
    """The relay socket could not be bound.

    Fatal: a relay without a socket cannot work and the cause is almost
    always misconfiguration, so nothing in this package catches it.
    """

    def __init__(self, address: Address, cause: OSError) -> None:
        super().__init__(f"failed to listen on {format_address(address)}: {cause!r}")
        self.address = address
        self.cause = cause


# ---------------------------------------------------------------- binding

def bind_socket(address: Address, timeout: Optional[float] = POLL_INTERVAL) -> socket.socket:
    """Bind a datagram socket to ``address`` (port 0 ➜ OS picks one).

    No SO_REUSEADDR: a second relay on the same fixed port must fail rather
    than silently share it.
    """
    host, port = address
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_DGRAM)
    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        raise BindError(address, exc) from exc
    # recvfrom() wakes up periodically so the loops can notice close().
    sock.settimeout(timeout)
    return sock


# ---------------------------------------------------------------- loops

def send_message(sock: socket.socket, message: Message) -> None:
    """Send one payload to ``message.address``; failures are logged and dropped."""
    try:
        sock.sendto(message.payload, message.address)
    except OSError as exc:
        LOG.warning("failed to send packet to %s: %r", format_address(message.address), exc)


def recv_message(source: Address, data: bytes, incoming: Sender[Message]) -> None:
    """Wrap a datagram in a :class:`Message` and hand it to the application."""
    try:
        incoming.send(Message(source, data))
    except ChannelError as exc:
        LOG.warning("failed to enqueue incoming message: %r", exc)


def send_loop(sock: socket.socket, outgoing: Receiver[Message], running: threading.Event) -> None:
    """Await outbound messages and write them to the socket, in queue order."""
    while running.is_set():
        try:
            message = outgoing.recv(timeout=POLL_INTERVAL)
        except Empty:                                      # Allow shutdown check
            continue
        except Disconnected as exc:
            if not running.is_set():
                break
            LOG.warning("failed to dequeue outgoing message: %r", exc)
            continue
        send_message(sock, message)
    LOG.debug("send loop stopped")


def recv_loop(
    sock: socket.socket,
    incoming: Sender[Message],
    running: threading.Event,
    buffer_size: int = BUFFER_MAX_SIZE,
) -> None:
    """Await datagrams and push them onto the inbound queue.

    Anything longer than ``buffer_size`` is truncated by the OS.
    """
    while running.is_set():
        try:
            data, source = sock.recvfrom(buffer_size)
        except socket.timeout:                             # Allow shutdown check
            continue
        except ConnectionResetError:
            # ICMP port-unreachable reported on a connectionless socket.
            continue
        except OSError as exc:
            if not running.is_set():                       # Socket closed by close()
                break
            LOG.warning("failed to recv packet: %r", exc)
            continue
        recv_message(source, data, incoming)
    LOG.debug("recv loop stopped")


# ---------------------------------------------------------------- controller

class Network:
    """Owns both queues, the socket and the two background tasks.

    Call :meth:`start` exactly once; calling it again binds a new socket and
    abandons the previous tasks.
    """

    def __init__(self, buffer_size: int = BUFFER_MAX_SIZE) -> None:
        self.buffer_size = buffer_size

        # -------- queues (application side keeps one end of each) --------
        self._send_tx, self._send_rx = unbounded()    # app ➜ send loop
        self._recv_tx, self._recv_rx = unbounded()    # recv loop ➜ app

        # -------- populated by start() --------
        self.send_task: Optional[Task] = None
        self.recv_task: Optional[Task] = None
        self._socket: Optional[socket.socket] = None
        self._local_address: Optional[Address] = None
        self._closed = False

        # Cooperative shutdown across both loops.
        self.running = threading.Event()

    # ------------------------------------------------------------ lifecycle
    def start(self, bind_address: Union[Address, str], pool: Optional[TaskPool] = None) -> None:
        """Bind the socket (``BindError`` on failure) and spawn both loops."""
        if self._closed:
            raise RuntimeError("relay is closed")
        if isinstance(bind_address, str):
            bind_address = parse_address(bind_address)
        pool = pool or TaskPool()

        sock = bind_socket(bind_address)
        self._socket = sock
        self._local_address = tuple(sock.getsockname())
        self.running.set()
        LOG.info("relay listening on %s", format_address(self.local_address))

        self.send_task = pool.spawn(send_loop, sock, self._send_rx, self.running, name="send")
        self.recv_task = pool.spawn(
            recv_loop, sock, self._recv_tx, self.running, self.buffer_size, name="recv"
        )

    def close(self) -> None:
        """Stop both loops and release the socket.  Pending messages are dropped."""
        self._closed = True
        self.running.clear()
        self._send_tx.close()
        if self._socket is not None:
            self._socket.close()
        for task in (self.send_task, self.recv_task):
            if task is not None:
                task.join(POLL_INTERVAL * 2)

    def __enter__(self) -> "Network":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------ application API
    def try_send(self, message: Message) -> None:
        """Queue ``message`` for sending; never blocks.

        Raises:
            Disconnected: the relay has been closed.
        """
        self._send_tx.try_send(message)

    def try_recv(self) -> Message:
        """Return the next received message without blocking.

        Raises:
            Empty: nothing arrived since the last poll (the usual case).
            Disconnected: the receive side has been torn down.
        """
        return self._recv_rx.try_recv()

    @property
    def local_address(self) -> Optional[Address]:
        """Address the socket is actually bound to (resolves port 0)."""
        return self._local_address

    @staticmethod
    def parse_socket_addr(text: str) -> Address:
        """Parse ``"ip:port"``; raises ``ValueError`` on malformed input."""
        return parse_address(text)
