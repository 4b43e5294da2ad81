""" Encoding and decoding of the request envelope: the single message a
    client publishes to ask for a resource, and the synthetic request the
    server reconstructs from it.
"""

from .. import config
from ..errors import ProtocolError
from . import fields
from .message import Headers, Message


class Envelope:
    """ An outbound request. The *subject* is where the server listens,
        *reply* is the ephemeral inbox the response will be sent to, and the
        optional *target* is the path of the requested resource. The header
        mapping is assembled once, here, and the envelope is not modified
        afterwards.
    """

    __slots__ = ('subject', 'reply', 'target', 'method', 'headers')

    def __init__(self, subject, reply, target=None, method=fields.GET, user_agent=None):

        if not reply:
            raise ValueError('a request envelope requires a reply subject')

        if user_agent is None:
            user_agent = config.user_agent

        headers = Headers()
        headers.add(fields.ACCEPT, fields.DEFAULT_ACCEPT)
        headers.add(fields.USER_AGENT, user_agent)
        headers.add(fields.METHOD, method)

        if target:
            headers.add(fields.URL, target)

        setter = object.__setattr__
        setter(self, 'subject', subject)
        setter(self, 'reply', reply)
        setter(self, 'target', target)
        setter(self, 'method', method)
        setter(self, 'headers', headers)


    def __setattr__(self, name, value):
        raise AttributeError('Envelope is immutable')


    def __repr__(self):
        return 'Envelope(%r, %r, target=%r, method=%r)' % (self.subject, self.reply, self.target, self.method)


    def message(self):
        """ Return the :class:`Message` to publish for this request; the
            body is always empty.
        """

        return Message(self.subject, b'', self.headers.copy(), self.reply)


# end of class Envelope



class Request:
    """ The server-side view of an inbound request. *headers* holds every
        header of the request message, including Method and URL, verbatim.
        The *body* is the payload of the request message, and *reply* is
        the subject the response must be sent to.
    """

    def __init__(self, method, path, headers, body=b'', reply=None, subject=None):

        self.method = method
        self.path = path
        self.headers = headers
        self.body = body
        self.reply = reply
        self.subject = subject


    def __repr__(self):
        return 'Request(%r, %r)' % (self.method, self.path)


# end of class Request



def encode(subject, reply, target=None, method=fields.GET, user_agent=None):
    """ Build the request :class:`Message` for *target* on *subject*.
    """

    envelope = Envelope(subject, reply, target, method, user_agent)
    return envelope.message()



def decode(message):
    """ Reconstruct a :class:`Request` from an inbound request *message*.
        The method defaults to GET and the path to '/' when the message does
        not carry them. A :class:`ProtocolError` is raised if the message
        has no reply subject, since there would be nowhere to send the
        response.
    """

    if not message.reply:
        raise ProtocolError('request on %r has no reply subject' % (message.subject))

    headers = message.headers

    method = headers.get(fields.METHOD)
    if not method:
        method = fields.GET

    path = headers.get(fields.URL)
    if not path:
        path = fields.DEFAULT_PATH

    return Request(method, path, headers.copy(), message.data, message.reply, message.subject)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
