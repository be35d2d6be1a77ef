"""UDP Relay – a non-blocking message relay over UDP.

Importing this package exposes :class:`udprelay.Network` (the relay itself),
:class:`udprelay.Message` and the handoff queue used on both directions, so
the relay can be embedded in any application that polls it from its own loop.
"""

# ------------------------ re-exports ------------------------
from .channel import ChannelError, Disconnected, Empty, Full, bounded, unbounded  # noqa: F401
from .network import BindError, Network                                          # noqa: F401
from .protocol import Address, Message, parse_address                            # noqa: F401
from .tasks import Task, TaskPool                                                # noqa: F401

# ------------------------ public API ------------------------
__all__: list[str] = [
    "Address",
    "BindError",
    "ChannelError",
    "Disconnected",
    "Empty",
    "Full",
    "Message",
    "Network",
    "Task",
    "TaskPool",
    "bounded",
    "parse_address",
    "unbounded",
]
