"""Bus interface.

This is the (small) contract that bus implementations should follow. It
lives outside :mod:`bushttp.protocol` so the protocol remains
transport-agnostic.
"""

from __future__ import annotations

import logging
import queue
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from ..errors import (
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)
from ..protocol.fields import INBOX
from ..protocol.message import Headers, Message

logger = logging.getLogger(__name__)


def match(pattern: str, subject: str) -> bool:
    """Return True if *subject* matches *pattern*.

    Subjects are dot-separated tokens. A ``*`` token in the pattern matches
    exactly one token; a trailing ``>`` matches one or more tokens.
    """

    expected = pattern.split(".")
    actual = subject.split(".")

    for index, token in enumerate(expected):
        if token == ">" and index == len(expected) - 1:
            return len(actual) > index
        if index >= len(actual):
            return False
        if token == "*":
            continue
        if token != actual[index]:
            return False

    return len(actual) == len(expected)


class Subscription:
    """An asynchronous subscription: *callback* is invoked with each
    matching :class:`Message`."""

    def __init__(self, bus: "Bus", pattern: str, callback: Callable[[Message], None]):
        self.bus = bus
        self.pattern = pattern
        self.callback = callback
        self.active = True

    def matches(self, subject: str) -> bool:
        return self.active and match(self.pattern, subject)

    def deliver(self, message: Message) -> None:
        # A failing callback must not take the delivering thread with it.
        try:
            self.callback(message)
        except Exception:
            logger.exception("callback for %r raised", self.pattern)

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self.bus._unsubscribe(self)


class SyncSubscription(Subscription):
    """A synchronous subscription: matching messages are queued until
    retrieved with :meth:`next`."""

    _closed = object()

    def __init__(self, bus: "Bus", pattern: str):
        super().__init__(bus, pattern, None)
        self._queue: "queue.Queue" = queue.Queue()

    def deliver(self, message: Message) -> None:
        self._queue.put(message)

    def next(self, timeout: Optional[float] = None) -> Message:
        """Return the next message, waiting up to *timeout* seconds."""

        if not self.active and self._queue.empty():
            raise TransportConnectionError(f"subscription to {self.pattern!r} is closed")

        try:
            message = self._queue.get(timeout=timeout)
        except queue.Empty:
            raise TransportTimeout(f"no message on {self.pattern!r} in {timeout} sec") from None

        if message is self._closed:
            raise TransportConnectionError(f"subscription to {self.pattern!r} is closed")

        return message

    def unsubscribe(self) -> None:
        if not self.active:
            return
        super().unsubscribe()
        self._queue.put(self._closed)


class Bus(ABC):
    """Minimal contract for a publish/subscribe message bus."""

    def __init__(self) -> None:
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()
        self.closed = False

    def __enter__(self) -> "Bus":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @abstractmethod
    def publish(
        self,
        subject: str,
        data: bytes = b"",
        headers: Optional[Headers] = None,
        reply: Optional[str] = None,
    ) -> None:
        """Publish *data* on *subject*; errors propagate to the caller."""

    def close(self) -> None:
        """Tear down the bus; outstanding synchronous subscriptions wake up."""

        with self._lock:
            self.closed = True
            subscriptions = list(self._subscriptions)

        for subscription in subscriptions:
            subscription.unsubscribe()

    def new_inbox(self) -> str:
        """Return a fresh, unique reply subject."""
        return f"{INBOX}.{uuid.uuid4().hex}"

    def subscribe(self, pattern: str, callback: Callable[[Message], None]) -> Subscription:
        """Invoke *callback* for every message matching *pattern*."""

        if not callable(callback):
            raise TypeError("callback must be callable")

        subscription = Subscription(self, pattern, callback)
        self._add(subscription)
        return subscription

    def subscribe_sync(self, pattern: str) -> SyncSubscription:
        """Queue every message matching *pattern* for :meth:`SyncSubscription.next`."""

        subscription = SyncSubscription(self, pattern)
        self._add(subscription)
        return subscription

    # --- hooks for implementations ---
    def _add(self, subscription: Subscription) -> None:
        with self._lock:
            if self.closed:
                raise TransportConnectionError("bus is closed")
            self._subscriptions.append(subscription)

    def _unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            try:
                self._subscriptions.remove(subscription)
            except ValueError:
                pass

    def _dispatch(self, message: Message) -> None:
        """Hand *message* to every matching subscription."""

        with self._lock:
            subscriptions = [s for s in self._subscriptions if s.matches(message.subject)]

        for subscription in subscriptions:
            copy = Message(message.subject, message.data, message.headers.copy(), message.reply, bus=self)
            subscription.deliver(copy)


__all__ = [
    "Bus",
    "Subscription",
    "SyncSubscription",
    "TransportError",
    "TransportTimeout",
    "TransportConnectionError",
    "match",
]
