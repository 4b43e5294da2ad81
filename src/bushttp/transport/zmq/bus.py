"""ZeroMQ bus client.

A :class:`Bus` holds a PUB socket connected to the broker's publisher side
and a SUB socket connected to its subscriber side. ZeroMQ sockets are not
thread-safe, so every socket operation happens on a single background
thread; other threads queue their work and signal the thread through an
inproc PAIR socket.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Callable, Dict, Optional

import zmq

from ... import config as _config
from ...protocol.message import Headers, Message
from ..base import Bus as _Bus, Subscription, SyncSubscription, TransportConnectionError
from .framing import from_frames, parse_url, to_frames, topic_filter

logger = logging.getLogger(__name__)

zmq_context = zmq.Context()


class Bus(_Bus):
    """Publish and subscribe through a :class:`~bushttp.transport.zmq.broker.Broker`."""

    def __init__(self, url: Optional[str] = None, config: Optional[_config.Config] = None):
        super().__init__()

        if config is None:
            config = _config.default()
        if url is None:
            url = config.url

        self.config = config
        self.url = url

        try:
            address, port = parse_url(url)
        except ValueError as exc:
            raise TransportConnectionError(str(exc)) from exc

        self.address = address
        self.port = port

        self._pub = zmq_context.socket(zmq.PUB)
        self._pub.setsockopt(zmq.LINGER, 0)
        self._sub = zmq_context.socket(zmq.SUB)
        self._sub.setsockopt(zmq.LINGER, 0)

        try:
            self._pub.connect(f"tcp://{address}:{port}")
            self._sub.connect(f"tcp://{address}:{port + 1}")
        except zmq.ZMQError as exc:
            self._pub.close()
            self._sub.close()
            raise TransportConnectionError(f"cannot connect to {url}: {exc}") from exc

        # Outbound work for the I/O thread: ('pub', frames), ('sub', filter),
        # or ('unsub', filter).

        self._outbox: "queue.SimpleQueue" = queue.SimpleQueue()

        internal = f"inproc://bushttp.Bus:signal:{id(self)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)
        self._signal_lock = threading.Lock()

        # ZeroMQ subscription filters are reference counted; several
        # subscriptions can share one prefix.

        self._filters: Dict[bytes, int] = {}

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, name=f"bushttp.Bus:{url}", daemon=True)
        self.thread.start()

    # --- public interface ---
    def publish(
        self,
        subject: str,
        data: bytes = b"",
        headers: Optional[Headers] = None,
        reply: Optional[str] = None,
    ) -> None:
        if not subject:
            raise ValueError("a subject is required to publish")

        frames = to_frames(subject, data, headers, reply)
        self._queue(("pub", frames))

    def subscribe(self, pattern: str, callback: Callable[[Message], None]) -> Subscription:
        subscription = super().subscribe(pattern, callback)
        self._filter_add(pattern)
        return subscription

    def subscribe_sync(self, pattern: str) -> SyncSubscription:
        subscription = super().subscribe_sync(pattern)
        self._filter_add(pattern)
        return subscription

    def close(self) -> None:
        if self.closed:
            return

        super().close()
        self.shutdown = True

        with self._signal_lock:
            self._signal_tx.send(b"")

        if threading.current_thread() is not self.thread:
            self.thread.join(1)

    # --- internal ---
    def _queue(self, work) -> None:
        if self.closed:
            raise TransportConnectionError("bus is closed")

        self._outbox.put(work)

        with self._signal_lock:
            self._signal_tx.send(b"")

    def _filter_add(self, pattern: str) -> None:
        prefix = topic_filter(pattern)

        with self._lock:
            count = self._filters.get(prefix, 0)
            self._filters[prefix] = count + 1

        if count == 0:
            self._queue(("sub", prefix))

            # Subscriptions propagate through the broker asynchronously.
            # This is not deterministic, but without a brief pause the first
            # replies to a fresh inbox are routinely missed.

            if self.config.settle:
                time.sleep(self.config.settle)

    def _unsubscribe(self, subscription: Subscription) -> None:
        super()._unsubscribe(subscription)

        prefix = topic_filter(subscription.pattern)

        with self._lock:
            count = self._filters.get(prefix, 0) - 1
            if count > 0:
                self._filters[prefix] = count
            else:
                self._filters.pop(prefix, None)

        if count == 0 and not self.closed:
            self._queue(("unsub", prefix))

    def _outgoing(self) -> None:
        # Clear one signal and handle one piece of queued work.
        self._signal_rx.recv(flags=zmq.NOBLOCK)

        try:
            kind, value = self._outbox.get(block=False)
        except queue.Empty:
            return

        if kind == "pub":
            self._pub.send_multipart(value)
        elif kind == "sub":
            self._sub.setsockopt(zmq.SUBSCRIBE, value)
        elif kind == "unsub":
            self._sub.setsockopt(zmq.UNSUBSCRIBE, value)

    def _incoming(self, parts) -> None:
        try:
            message = from_frames(parts)
        except (ValueError, UnicodeDecodeError) as exc:
            logger.warning("dropping message: %s", exc)
            return

        self._dispatch(message)

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self._sub, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        while not self.shutdown:
            for active, _flag in poller.poll(1000):
                if active == self._signal_rx:
                    try:
                        self._outgoing()
                    except zmq.ZMQError:
                        logger.exception("send failed on %s", self.url)
                elif active == self._sub:
                    parts = self._sub.recv_multipart()
                    self._incoming(parts)

        for socket in (self._pub, self._sub, self._signal_rx, self._signal_tx):
            socket.close()
