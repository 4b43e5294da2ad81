""" Server side of the protocol: turn inbound request messages into calls
    to a content handler, with the handler's output streamed back through a
    flow-controlled :class:`~bushttp.protocol.flow.ResponseWriter`.
"""

import logging
import threading

from . import config as _config
from .errors import ProtocolError
from .protocol import flow
from .protocol import request

logger = logging.getLogger(__name__)


class Bridge:
    """ Listen for requests on *subject* and serve each one by calling
        ``handler(writer, request)``, where *writer* is a
        :class:`~bushttp.protocol.flow.ResponseWriter` and *request* is a
        :class:`~bushttp.protocol.request.Request`.

        Every request is handled on its own thread, so a slow consumer
        does not hold up the next request. When the handler returns the
        writer is closed, releasing its acknowledgement subscription.
        Exceptions raised by the handler are logged and stop there.
    """

    def __init__(self, bus, subject, handler, config=None):

        if callable(handler):
            pass
        else:
            raise TypeError('handler must be callable')

        if config is None:
            config = _config.default()

        self.bus = bus
        self.subject = subject
        self.handler = handler
        self.config = config

        self._threads = set()
        self._threads_lock = threading.Lock()

        self.subscription = bus.subscribe(subject, self._incoming)


    def _incoming(self, message):
        """ Callback for request messages; this runs on the bus delivery
            thread, and must not block.
        """

        try:
            inbound = request.decode(message)
        except ProtocolError as e:
            logger.warning('dropping request: %s', e)
            return

        writer = flow.ResponseWriter(self.bus, inbound.reply, self.config)

        thread = threading.Thread(target=self._serve, args=(writer, inbound))
        thread.name = 'bushttp.Bridge:%s %s' % (inbound.method, inbound.path)
        thread.daemon = True

        with self._threads_lock:
            self._threads.add(thread)

        thread.start()


    def _serve(self, writer, inbound):

        logger.info('%s %s', inbound.method, inbound.path)

        try:
            self.handler(writer, inbound)
        except Exception:
            logger.exception('handler failed for %s %s', inbound.method, inbound.path)
        finally:
            writer.close()

            with self._threads_lock:
                self._threads.discard(threading.current_thread())


    def close(self):
        """ Stop accepting new requests. Transfers already in progress are
            allowed to finish; use :func:`join` to wait for them.
        """

        self.subscription.unsubscribe()


    def join(self, timeout=None):
        """ Wait for in-flight transfers to finish. Returns True if none
            remain.
        """

        with self._threads_lock:
            threads = list(self._threads)

        for thread in threads:
            thread.join(timeout)

        with self._threads_lock:
            return len(self._threads) == 0


# end of class Bridge



def handle(bus, subject, handler, config=None):
    """ Serve *handler* on *subject*; returns the :class:`Bridge`.
    """

    return Bridge(bus, subject, handler, config)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
