from . import fields
from . import message
from . import request
from . import flow

from .message import Headers, Message
from .request import Envelope, Request
from .flow import ResponseWriter, Window


"""
bushttp Protocol Layer
======================

This package defines how an HTTP-style GET exchange is expressed as a
sequence of bus messages. It MUST NOT depend on any particular transport
implementation (e.g. ZeroMQ); it only relies on the bus contract in
:mod:`bushttp.transport.base`.

---------------------------------------------------------------------

Message sequence
----------------

Client                                  Server
    │  request: Method, URL, Accept,        │
    │  User-Agent; reply=<client inbox>     │
    │ ────────────────────────────────────▶ │
    │                                       │
    │  header: Status, Content-Length       │
    │ ◀──────────────────────────────────── │
    │                                       │
    │  chunk: raw bytes;                    │
    │  reply=<server inbox>.<size>          │
    │ ◀──────────────────────────────────── │
    │  ack: empty, to <server inbox>.<size> │
    │ ────────────────────────────────────▶ │
    │              ...                      │

The stream ends when Content-Length bytes have arrived, when an empty
chunk arrives, or when the client times out waiting for the next chunk.

---------------------------------------------------------------------

Modules
-------

fields.py
    Canonical header names and defaults.

message.py
    Message and multi-valued Headers.

request.py
    Request envelope encoding (client) and decoding (server).

flow.py
    Response writer with a bounded window of unacknowledged bytes.

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
