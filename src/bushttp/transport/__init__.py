"""Bus implementations.

:mod:`.local` delivers within a single process; :mod:`.zmq` connects
processes through a ZeroMQ broker, and is what :func:`connect` returns.
"""

from .base import (
    Bus,
    Subscription,
    SyncSubscription,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
    match,
)
from . import local
from . import zmq


def connect(url=None, config=None):
    """Return a bus connected to the broker at *url*."""

    return zmq.Bus(url, config)
