""" Flow-controlled streaming of a response body. The :class:`ResponseWriter`
    publishes each write as one chunk message, and counts the bytes that
    have not yet been acknowledged in a :class:`Window`. The recipient
    acknowledges a chunk by publishing an empty message to the chunk's reply
    subject, which is ``<inbox>.<size>``; the trailing token tells the
    writer how many bytes to release.
"""

import http
import logging
import re
import threading

from .. import config
from ..errors import WriterClosed
from . import fields
from .message import Headers

logger = logging.getLogger(__name__)

UNINITIALIZED = 'UNINITIALIZED'
STREAMING = 'STREAMING'
CLOSED = 'CLOSED'

_decimal = re.compile(r'[0-9]+\Z')


class Window:
    """ The count of outstanding, unacknowledged bytes for one transfer.
        The counter is only touched while holding the lock, and the lock is
        only held for the read or update itself. Acknowledgements also set a
        single-slot gate, which a writer waiting on a full window can block
        on with :func:`wait`.

        The pending count never goes negative; an acknowledgement for more
        bytes than are outstanding releases what is there and no more.
    """

    def __init__(self, ceiling=config.window):

        self.ceiling = int(ceiling)
        self._lock = threading.Lock()
        self._gate = threading.Event()
        self._pending = 0


    @property
    def pending(self):
        with self._lock:
            return self._pending


    def add(self, size):
        """ Account for *size* newly sent bytes.
        """

        with self._lock:
            self._pending += size


    def apply_ack(self, size):
        """ Release *size* acknowledged bytes and signal the gate. Returns
            False if the acknowledgement exceeded the outstanding count and
            had to be clamped, otherwise True.
        """

        with self._lock:
            remaining = self._pending - size
            if remaining < 0:
                clamped = True
                remaining = 0
            else:
                clamped = False
            self._pending = remaining

        self._gate.set()
        return not clamped


    def full(self):
        with self._lock:
            return self._pending > self.ceiling


    def wait(self, timeout):
        """ Block until an acknowledgement arrives, or *timeout* seconds
            elapse, whichever comes first. An acknowledgement that arrived
            since the last wait satisfies this one immediately. Returns True
            if the gate was open.
        """

        opened = self._gate.wait(timeout)
        self._gate.clear()
        return opened


# end of class Window



class ResponseWriter:
    """ The response half of a bridged request. A content handler populates
        :attr:`headers`, calls :func:`write_header` once with a status code,
        and calls :func:`write` with successive pieces of the body.

        Nothing is allocated on the bus until the first write: at that point
        a per-transfer inbox is created and an acknowledgement subscription
        is made against ``<inbox>.*``. :func:`close` releases that
        subscription, after which further writes raise :class:`WriterClosed`.

        The writer pauses when the outstanding byte count exceeds the window
        ceiling, but only for ``config.window_wait`` seconds at a time; if no
        acknowledgement arrives in that span the write proceeds anyway.
    """

    def __init__(self, bus, reply, config=None):

        if config is None:
            config = _default()

        self.bus = bus
        self.reply = reply
        self.config = config
        self.headers = Headers()
        self.window = Window(config.window)
        self.inbox = None
        self.state = UNINITIALIZED
        self.status = None
        self.subscription = None

        self._lock = threading.Lock()


    def __enter__(self):
        return self


    def __exit__(self, *exc):
        self.close()


    def _ack(self, message):
        """ Callback for acknowledgement messages. The last token of the
            subject is the size of the acknowledged chunk.
        """

        tokens = message.subject.split('.')

        if len(tokens) < 2 or _decimal.match(tokens[-1]) is None:
            logger.warning('bad ack subject %r', message.subject)
            return

        size = int(tokens[-1])

        if self.window.apply_ack(size):
            pass
        else:
            logger.warning('ack for %d bytes exceeds the outstanding count', size)


    def _open(self):
        """ Allocate the per-transfer inbox and subscribe to acknowledgements.
        """

        with self._lock:
            if self.state != UNINITIALIZED:
                return

            inbox = self.bus.new_inbox()
            self.subscription = self.bus.subscribe(inbox + '.*', self._ack)
            self.inbox = inbox
            self.state = STREAMING


    def close(self):
        """ Release the acknowledgement subscription. Calling :func:`close`
            more than once is harmless.
        """

        with self._lock:
            if self.state == CLOSED:
                return

            subscription = self.subscription
            self.subscription = None
            self.state = CLOSED

        if subscription is not None:
            subscription.unsubscribe()


    def write(self, data):
        """ Publish *data* as one chunk of the response body, and return the
            number of bytes written. A 200 status is sent first if the
            handler did not call :func:`write_header`. Any error from the bus
            propagates to the caller; nothing is retried. Empty writes are
            not published, as an empty chunk ends the stream.
        """

        if self.state == CLOSED:
            raise WriterClosed('write on a closed response writer')

        data = bytes(data)
        size = len(data)

        if self.status is None:
            self.write_header(http.HTTPStatus.OK)

        if size == 0:
            return 0

        if self.state == UNINITIALIZED:
            self._open()

        if self.window.full():
            self.window.wait(self.config.window_wait)

        # The bytes are counted before the publish, an acknowledgement can
        # arrive before publish() even returns.

        self.window.add(size)
        ack = '%s.%d' % (self.inbox, size)

        try:
            self.bus.publish(self.reply, data, reply=ack)
        except Exception:
            self.window.apply_ack(size)
            raise

        return size


    def write_header(self, status):
        """ Publish the response header message with the given *status*
            code, along with any values set in :attr:`headers`. Only the
            first call has any effect.
        """

        with self._lock:
            if self.state == CLOSED:
                raise WriterClosed('write_header on a closed response writer')

            if self.status is not None:
                logger.debug('duplicate write_header(%s) ignored, already sent %s', status, self.status)
                return

            self.status = int(status)

        headers = self.headers.copy()
        headers.set(fields.STATUS, status_line(status))

        self.bus.publish(self.reply, b'', headers=headers)


# end of class ResponseWriter



def status_line(status):
    """ Return the Status header value for an integer *status* code, for
        example '404 Not Found'. Unknown codes have no reason phrase.
    """

    status = int(status)

    try:
        reason = http.HTTPStatus(status).phrase
    except ValueError:
        return str(status)

    return '%d %s' % (status, reason)



def _default():
    return config.default()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
