"""In-process message bus.

Every publish is delivered synchronously, in the publishing thread, to all
matching subscriptions within the same process. Useful for embedding a
server and client in one process, and for tests.
"""

from __future__ import annotations

from typing import Optional

from ..protocol.message import Headers, Message
from .base import Bus as _Bus, TransportConnectionError


class Bus(_Bus):
    """A bus with no network underneath it."""

    def publish(
        self,
        subject: str,
        data: bytes = b"",
        headers: Optional[Headers] = None,
        reply: Optional[str] = None,
    ) -> None:
        if self.closed:
            raise TransportConnectionError("bus is closed")

        if not subject:
            raise ValueError("a subject is required to publish")

        self._dispatch(Message(subject, data, headers, reply))
