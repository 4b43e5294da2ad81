""" A class representation of a bus message, and of the multi-valued header
    mapping carried with it.
"""


class Headers:
    """ An ordered mapping from a header name to a list of values. Header
        names are kept exactly as given; no case folding is applied, the
        names travel across the bus untouched. Iterating over a
        :class:`Headers` instance yields the header names.
    """

    def __init__(self, initial=None):

        self._values = dict()

        if initial is None:
            return

        try:
            items = initial.items()
        except AttributeError:
            items = initial

        for name, values in items:
            if isinstance(values, (str, bytes)):
                values = (values,)

            for value in values:
                self.add(name, value)


    def __contains__(self, name):
        return name in self._values


    def __eq__(self, other):
        if isinstance(other, Headers):
            return self._values == other._values
        return NotImplemented


    def __iter__(self):
        return iter(list(self._values))


    def __len__(self):
        return len(self._values)


    def __repr__(self):
        return 'Headers(' + repr(self._values) + ')'


    def add(self, name, value):
        """ Append *value* to the list of values for *name*.
        """

        name = str(name)

        if isinstance(value, bytes):
            value = value.decode()
        else:
            value = str(value)

        try:
            values = self._values[name]
        except KeyError:
            values = list()
            self._values[name] = values

        values.append(value)


    def copy(self):
        return Headers(self._values)


    def get(self, name, default=None):
        """ Return the first value for *name*, or *default* if the header
            is not present.
        """

        try:
            values = self._values[name]
        except KeyError:
            return default

        if values:
            return values[0]

        return default


    def get_all(self, name):
        return list(self._values.get(name, ()))


    def items(self):
        for name, values in self._values.items():
            yield name, list(values)


    def remove(self, name):
        self._values.pop(name, None)


    def set(self, name, value):
        """ Replace any existing values for *name* with the single *value*.
        """

        self.remove(name)
        self.add(name, value)


    def to_dict(self):
        values = dict()
        for name, listed in self._values.items():
            values[name] = list(listed)
        return values


    @classmethod
    def from_dict(cls, values):
        return cls(values)


# end of class Headers



class Message:
    """ The :class:`Message` provides a very thin encapsulation of what it
        means to be a message on the bus: the *subject* it was published on,
        the raw *data* payload, the *headers*, and an optional *reply*
        subject where the recipient is expected to send any response.

        A message delivered by a bus is bound to that bus, which allows
        :func:`respond` to be used without knowing which bus it came from.
    """

    def __init__(self, subject, data=b'', headers=None, reply=None, bus=None):

        if data is None:
            data = b''

        if headers is None:
            headers = Headers()
        elif isinstance(headers, Headers):
            pass
        else:
            headers = Headers(headers)

        if reply == '':
            reply = None

        self.subject = subject
        self.data = bytes(data)
        self.headers = headers
        self.reply = reply
        self.bus = bus


    def __repr__(self):
        return 'Message(subject=%r, reply=%r, headers=%r, data=%d bytes)' % (self.subject, self.reply, self.headers, len(self.data))


    def respond(self, data=b'', headers=None):
        """ Publish *data* to the reply subject of this message, using the
            bus that delivered it.
        """

        if self.reply is None:
            raise ValueError('message on %r has no reply subject' % (self.subject))

        if self.bus is None:
            raise RuntimeError('message is not bound to a bus')

        self.bus.publish(self.reply, data, headers=headers)


# end of class Message


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
