import pytest
import bushttp

Headers = bushttp.protocol.Headers
Message = bushttp.protocol.Message


def test_headers_multivalued():

    headers = Headers()
    headers.add('Accept', '*/*')
    headers.add('X-Trace', 'one')
    headers.add('X-Trace', 'two')

    assert headers.get('Accept') == '*/*'
    assert headers.get('X-Trace') == 'one'
    assert headers.get_all('X-Trace') == ['one', 'two']
    assert headers.get('Missing') is None
    assert headers.get('Missing', 'fallback') == 'fallback'
    assert headers.get_all('Missing') == []
    assert list(headers) == ['Accept', 'X-Trace']
    assert len(headers) == 2
    assert 'Accept' in headers


def test_headers_names_are_exact():

    headers = Headers()
    headers.add('Content-Length', 11)

    assert headers.get('Content-Length') == '11'
    assert headers.get('content-length') is None


def test_headers_set_and_remove():

    headers = Headers({'Status': ['500 Internal Server Error', 'stale']})
    headers.set('Status', '200 OK')
    assert headers.get_all('Status') == ['200 OK']

    headers.remove('Status')
    headers.remove('Status')
    assert 'Status' not in headers


def test_headers_copy_is_independent():

    headers = Headers({'URL': '/foo.txt'})
    copy = headers.copy()
    copy.add('URL', '/bar.txt')

    assert headers.get_all('URL') == ['/foo.txt']
    assert copy.get_all('URL') == ['/foo.txt', '/bar.txt']
    assert Headers.from_dict(headers.to_dict()) == headers


def test_message_defaults():

    message = Message('foo')
    assert message.data == b''
    assert message.reply is None
    assert len(message.headers) == 0

    message = Message('foo', None, {'A': 'b'}, '')
    assert message.data == b''
    assert message.reply is None
    assert message.headers.get('A') == 'b'


def test_respond(bus, recorder):

    record = recorder(bus, 'inbox.reply')

    bus.subscribe('question', lambda message: message.respond(b'answer'))
    bus.publish('question', b'?', reply='inbox.reply')

    assert len(record.messages) == 1
    assert record.messages[0].data == b'answer'


def test_respond_requires_reply():

    message = Message('foo')

    with pytest.raises(ValueError):
        message.respond()

    message = Message('foo', reply='bar')

    with pytest.raises(RuntimeError):
        message.respond()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
