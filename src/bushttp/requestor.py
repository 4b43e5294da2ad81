""" Client side of the protocol: publish one request, drain the chunked
    response, and acknowledge every chunk so the server keeps sending.
"""

import codecs
import logging

from . import classify
from . import config as _config
from .errors import (
    ClassificationRefusal,
    ProtocolError,
    RequestTimeout,
    StatusError,
    TransportError,
    TransportTimeout,
)
from .protocol import fields
from .protocol import request

logger = logging.getLogger(__name__)


class Response:
    """ The outcome of a completed request.

        :ivar status: The Status header, for example '200 OK'.
        :ivar headers: All headers of the response header message.
        :ivar content_length: The declared Content-Length.
        :ivar received: Bytes of body actually received.
        :ivar text: The decoded body, if it was not sent to a sink.
    """

    def __init__(self, status, headers, content_length):

        self.status = status
        self.headers = headers
        self.content_length = content_length
        self.received = 0
        self.text = ''


    def __repr__(self):
        return 'Response(%r, %d/%d bytes)' % (self.status, self.received, self.content_length)


    @property
    def complete(self):
        """ True if the full declared Content-Length arrived.
        """

        return self.received >= self.content_length


# end of class Response



class Requestor:
    """ Issue GET requests over *bus*. The per-message timeout and the
        User-Agent header come from *config*.
    """

    def __init__(self, bus, config=None):

        if config is None:
            config = _config.default()

        self.bus = bus
        self.config = config


    def get(self, subject, target=None, sink=None, echo=None, on_header=None, method=fields.GET):
        """ Request *target* from the server listening on *subject*, and
            return a :class:`Response` once the body has been drained.

            If a *sink* is provided, each chunk is written to it as raw bytes
            via ``sink.write()``. Otherwise the body must be text: the first
            chunk is checked with :func:`bushttp.classify.printable`, and
            :class:`ClassificationRefusal` is raised before anything is
            surfaced if it looks binary. Text is accumulated in
            :attr:`Response.text`, and each decoded piece is also passed to
            *echo*, if provided. *on_header* is called with the response
            header message once it has been validated.

            The body loop ends without error when Content-Length bytes have
            arrived, when an empty chunk arrives, or when no chunk arrives
            within the timeout; check :attr:`Response.complete` to tell
            these apart.
        """

        timeout = self.config.timeout
        inbox = self.bus.new_inbox()
        subscription = self.bus.subscribe_sync(inbox)

        try:
            outbound = request.encode(subject, inbox, target, method, self.config.user_agent)
            self.bus.publish(outbound.subject, outbound.data, headers=outbound.headers, reply=outbound.reply)

            try:
                header = subscription.next(timeout)
            except TransportTimeout:
                raise RequestTimeout('no response on %r within %.1f seconds' % (subject, timeout)) from None

            response = self._validate(header)

            if on_header is not None:
                on_header(header)

            self._drain(subscription, response, sink, echo)

        finally:
            subscription.unsubscribe()

        return response


    def _validate(self, header):
        """ Check the status of the *header* message, and build the
            :class:`Response` from it.
        """

        headers = header.headers
        status = headers.get(fields.STATUS, '')

        if not status.startswith('200'):
            raise StatusError(status)

        raw = headers.get(fields.CONTENT_LENGTH)

        try:
            length = int(raw)
        except (TypeError, ValueError):
            raise ProtocolError('expected a Content-Length, received %r' % (raw,)) from None

        if length < 0:
            raise ProtocolError('expected a Content-Length, received %r' % (raw,))

        return Response(status, headers, length)


    def _drain(self, subscription, response, sink, echo):

        timeout = self.config.timeout
        checked = False

        if sink is None:
            decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
            pieces = list()

        while response.received < response.content_length:

            try:
                chunk = subscription.next(timeout)
            except TransportError as e:
                # A short stream is not an error; the caller can compare
                # received against content_length.
                logger.debug('body ended after %d bytes: %s', response.received, e)
                break

            data = chunk.data

            if len(data) == 0:
                break

            if sink is None and checked == False:
                if classify.printable(data):
                    checked = True
                else:
                    raise ClassificationRefusal()

            # The acknowledgement goes out even if the local write fails,
            # otherwise the sender stalls on a full window. The local
            # failure is the one reported.

            try:
                if sink is None:
                    text = decoder.decode(data)
                    pieces.append(text)
                    if echo is not None:
                        echo(text)
                else:
                    sink.write(data)
            except Exception:
                try:
                    self._ack(chunk)
                except TransportError as e:
                    logger.warning('acknowledgement failed after a write error: %s', e)
                raise

            self._ack(chunk)

            response.received += len(data)

        if sink is None:
            tail = decoder.decode(b'', final=True)
            if tail:
                pieces.append(tail)
                if echo is not None:
                    echo(tail)
            response.text = ''.join(pieces)


    def _ack(self, chunk):
        if chunk.reply:
            self.bus.publish(chunk.reply)


# end of class Requestor



def get(bus, subject, target=None, sink=None, echo=None, config=None):
    """ Convenience wrapper around :func:`Requestor.get`.
    """

    requestor = Requestor(bus, config)
    return requestor.get(subject, target, sink=sink, echo=echo)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
