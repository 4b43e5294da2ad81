"""Exception hierarchy.

Transport errors are re-exported by :mod:`bushttp.transport` so transport
implementations can raise them without reaching above their own layer.
"""

from __future__ import annotations


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """A receive did not complete in time."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


# Request exceptions

class RequestError(Exception):
    """Base class for failures of a single request/response exchange."""


class RequestTimeout(RequestError, TransportTimeout):
    """No response header arrived within the per-message timeout."""


class StatusError(RequestError):
    """The response header carried a status other than 200."""

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"error retrieving resource {status!r}")


class ProtocolError(RequestError):
    """A message did not follow the request/response protocol."""


class ClassificationRefusal(RequestError):
    """Binary data arrived and there is no file sink to receive it."""

    def __init__(self, message: str = "data received is binary, consider using --output FILE"):
        super().__init__(message)


class WriterClosed(Exception):
    """A response writer was used after it was closed."""
