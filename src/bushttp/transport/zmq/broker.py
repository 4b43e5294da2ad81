"""ZeroMQ forwarding broker.

Publishers connect to the XSUB side on *port*; subscribers connect to the
XPUB side on *port* + 1. Subscription requests flow upstream from XPUB to
XSUB, messages flow downstream; the forwarding itself is :func:`zmq.proxy`.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import zmq

from ...errors import TransportConnectionError
from .bus import zmq_context

logger = logging.getLogger(__name__)

minimum_port = 10139
maximum_port = 13679


class Broker:
    """Bind the broker sockets and forward traffic on a background thread."""

    def __init__(self, address: str = "*", port: Optional[int] = None, avoid: Optional[set] = None):
        self.address = address
        self.avoid = set(avoid or set())

        self.xsub = zmq_context.socket(zmq.XSUB)
        self.xsub.setsockopt(zmq.LINGER, 0)
        self.xpub = zmq_context.socket(zmq.XPUB)
        self.xpub.setsockopt(zmq.LINGER, 0)

        if port is None:
            self.port = self._bind_any()
        else:
            self.port = int(port)
            try:
                self._bind(self.port)
            except zmq.ZMQError as exc:
                self._close_sockets()
                raise TransportConnectionError(
                    f"ports already in use: {self.port}, {self.port + 1}"
                ) from exc

        internal = f"inproc://bushttp.Broker:control:{id(self)}"
        self._control_rx = zmq_context.socket(zmq.PAIR)
        self._control_rx.bind(internal)
        self._control_tx = zmq_context.socket(zmq.PAIR)
        self._control_tx.connect(internal)

        self.thread = threading.Thread(target=self.run, name=f"bushttp.Broker:{self.port}", daemon=True)
        self.thread.start()

    @property
    def url(self) -> str:
        address = self.address
        if address in ("*", "0.0.0.0"):
            address = "127.0.0.1"
        return f"tcp://{address}:{self.port}"

    def _bind(self, port: int) -> None:
        self.xsub.bind(f"tcp://{self.address}:{port}")
        try:
            self.xpub.bind(f"tcp://{self.address}:{port + 1}")
        except zmq.ZMQError:
            self.xsub.unbind(f"tcp://{self.address}:{port}")
            raise

    def _bind_any(self) -> int:
        for port in range(minimum_port, maximum_port):
            if port in self.avoid or port + 1 in self.avoid:
                continue
            try:
                self._bind(port)
                return port
            except zmq.ZMQError:
                continue

        self._close_sockets()
        raise TransportConnectionError(
            f"no ports available in range {minimum_port}:{maximum_port}"
        )

    def _close_sockets(self) -> None:
        self.xsub.close()
        self.xpub.close()

    def run(self) -> None:
        logger.info("broker forwarding on %s", self.url)

        try:
            zmq.proxy_steerable(self.xsub, self.xpub, None, self._control_rx)
        except zmq.ZMQError:
            logger.exception("broker on port %d stopped", self.port)

        self._close_sockets()
        self._control_rx.close()

    def stop(self) -> None:
        """Stop forwarding and release the ports."""

        if not self.thread.is_alive():
            return

        self._control_tx.send(b"TERMINATE")
        self.thread.join(1)
        self._control_tx.close()

    def wait(self, timeout: Optional[float] = None) -> None:
        self.thread.join(timeout)
