""" Settings shared by the requestor, the response writer, and the bus
    implementations. Nothing here is process-wide state: every transfer is
    handed a :class:`Config` instance, which allows concurrent transfers
    (and unit tests) to run with independent values.
"""

import os

from . import __version__


url = 'tcp://127.0.0.1:10139'
window = 32 * 1024 * 1024
window_wait = 0.001
timeout = 2.0
chunk_size = 1024 * 1024
settle = 0.05
user_agent = 'bushttp/' + __version__


class Config:
    """ A plain container for the tunable values of a bushttp session.

        :ivar url: Location of the message bus, ``tcp://host:port``.
        :ivar window: Ceiling, in bytes, of unacknowledged data a response
            writer allows before it pauses.
        :ivar window_wait: Seconds a writer pauses when the window is full.
            The pause is bounded; the write proceeds when it expires.
        :ivar timeout: Seconds a requestor waits for each message.
        :ivar chunk_size: Bytes read from a file per response chunk.
        :ivar user_agent: Value of the User-Agent request header.
        :ivar settle: Seconds to wait after a ZeroMQ subscription is made,
            allowing it to propagate through the broker.
    """

    _fields = ('url', 'window', 'window_wait', 'timeout', 'chunk_size', 'user_agent', 'settle')

    def __init__(self, url=url, window=window, window_wait=window_wait, timeout=timeout,
                 chunk_size=chunk_size, user_agent=user_agent, settle=settle):

        if window < 0:
            raise ValueError('window must be non-negative')

        if chunk_size <= 0:
            raise ValueError('chunk_size must be positive')

        self.url = url
        self.window = int(window)
        self.window_wait = float(window_wait)
        self.timeout = float(timeout)
        self.chunk_size = int(chunk_size)
        self.user_agent = user_agent
        self.settle = float(settle)


    def __repr__(self):
        values = ', '.join('%s=%r' % (field, getattr(self, field)) for field in self._fields)
        return 'Config(' + values + ')'


    def __eq__(self, other):
        if not isinstance(other, Config):
            return NotImplemented

        for field in self._fields:
            if getattr(self, field) != getattr(other, field):
                return False

        return True


    def copy(self, **overrides):
        """ Return a new :class:`Config` with the same values as this one,
            except for any fields named in *overrides*. An override of None
            is ignored, which lets command-line options pass through their
            defaults untouched.
        """

        values = dict()

        for field in self._fields:
            values[field] = getattr(self, field)

        for field, value in overrides.items():
            if field not in values:
                raise TypeError('unknown configuration field: ' + field)
            if value is None:
                continue
            values[field] = value

        return Config(**values)


    @classmethod
    def from_environ(cls, environ=None):
        """ Build a :class:`Config` from the ``BUSHTTP_*`` environment
            variables, falling back to the defaults for anything not set.
        """

        if environ is None:
            environ = os.environ

        values = dict()

        try:
            values['url'] = environ['BUSHTTP_URL']
        except KeyError:
            pass

        numeric = (
            ('BUSHTTP_WINDOW', 'window', int),
            ('BUSHTTP_TIMEOUT', 'timeout', float),
            ('BUSHTTP_CHUNK_SIZE', 'chunk_size', int),
        )

        for variable, field, convert in numeric:
            try:
                raw = environ[variable]
            except KeyError:
                continue

            try:
                values[field] = convert(raw)
            except ValueError:
                raise ValueError('invalid value for %s: %r' % (variable, raw))

        return cls(**values)


# end of class Config



def default():
    """ Return the environment-derived :class:`Config`. The environment is
        only inspected the first time this method is called.
    """

    found = default.found

    if found is None:
        found = Config.from_environ()
        default.found = found

    return found

default.found = None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
