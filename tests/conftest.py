"""Shared fixtures and polling helpers for relay tests."""

import time
from typing import Callable, Iterator, List

import pytest

from udprelay import Empty, Message, Network


def wait_for_message(net: Network, timeout: float = 2.0) -> Message:
    """Poll ``try_recv`` until a message shows up or ``timeout`` passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            return net.try_recv()
        except Empty:
            time.sleep(0.01)
    raise AssertionError("no message received in time")


def collect_messages(net: Network, count: int, timeout: float = 2.0) -> List[Message]:
    """Poll until ``count`` messages have arrived."""
    received: List[Message] = []
    deadline = time.monotonic() + timeout
    while len(received) < count and time.monotonic() < deadline:
        try:
            received.append(net.try_recv())
        except Empty:
            time.sleep(0.01)
    return received


@pytest.fixture
def make_relay() -> Iterator[Callable[..., Network]]:
    """Factory for started relays on 127.0.0.1; all are closed after the test."""
    relays: List[Network] = []

    def factory(address="127.0.0.1:0", **kwargs) -> Network:
        net = Network(**kwargs)
        relays.append(net)
        net.start(address)
        return net

    yield factory

    for net in relays:
        net.close()


@pytest.fixture
def relay(make_relay) -> Network:
    return make_relay()
