"""Message record and address parsing tests."""

import dataclasses

import pytest

from udprelay import Message, Network, parse_address
from udprelay.protocol import format_address


def test_message_accessors():
    msg = Message(("127.0.0.1", 9001), b"ping")
    assert msg.address == ("127.0.0.1", 9001)
    assert msg.payload == b"ping"


def test_message_is_immutable():
    msg = Message(("127.0.0.1", 9001), b"ping")
    with pytest.raises(dataclasses.FrozenInstanceError):
        msg.payload = b"pong"


def test_message_structural_equality():
    assert Message(("127.0.0.1", 1), b"a") == Message(("127.0.0.1", 1), b"a")
    assert Message(("127.0.0.1", 1), b"a") != Message(("127.0.0.1", 2), b"a")


def test_message_copies_mutable_payload():
    buf = bytearray(b"abc")
    msg = Message(("127.0.0.1", 1), buf)
    buf[0] = ord("x")
    assert msg.payload == b"abc"
    assert isinstance(msg.payload, bytes)


def test_message_payload_not_validated():
    msg = Message(("127.0.0.1", 1), b"x" * 10_000)
    assert len(msg.payload) == 10_000


@pytest.mark.parametrize(
    "text, expected",
    [
        ("127.0.0.1:34243", ("127.0.0.1", 34243)),
        ("0.0.0.0:0", ("0.0.0.0", 0)),
        ("[::1]:8080", ("::1", 8080)),
        (" 10.0.0.2:65535 ", ("10.0.0.2", 65535)),
    ],
)
def test_parse_address(text, expected):
    assert parse_address(text) == expected


@pytest.mark.parametrize(
    "text",
    ["", "127.0.0.1", "127.0.0.1:", ":80", "localhost:80", "::1:80",
     "127.0.0.1:port", "127.0.0.1:65536", "127.0.0.1:-1", "[127.0.0.1]:80",
     "127.0.0.1:\u0663"],
)
def test_parse_address_rejects_malformed(text):
    with pytest.raises(ValueError):
        parse_address(text)


def test_parse_socket_addr_alias():
    assert Network.parse_socket_addr("127.0.0.1:34243") == ("127.0.0.1", 34243)


def test_format_address():
    assert format_address(("127.0.0.1", 80)) == "127.0.0.1:80"
    assert format_address(("::1", 80)) == "[::1]:80"


def test_message_keeps_ipv6_scope_id():
    msg = Message(("fe80::1", "8080", 0, 3), b"x")
    assert msg.address == ("fe80::1", 8080, 0, 3)
