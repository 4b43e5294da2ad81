"""ZeroMQ bus implementation: a forwarding broker and its clients."""

from . import framing
from .bus import Bus
from .broker import Broker
