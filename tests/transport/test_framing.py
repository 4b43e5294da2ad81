import pytest
import bushttp

framing = bushttp.transport.zmq.framing
Headers = bushttp.protocol.Headers


def test_frames():

    headers = Headers()
    headers.add('Status', '200 OK')
    headers.add('Content-Length', '11')

    frames = framing.to_frames('_INBOX.abc', b'', headers)

    assert frames[0] == b'_INBOX.abc.'
    assert frames[1] == framing.VERSION
    assert frames[2] == b''

    message = framing.from_frames(frames)

    assert message.subject == '_INBOX.abc'
    assert message.reply is None
    assert message.data == b''
    assert message.headers == headers


def test_chunk_frames():

    frames = framing.to_frames('_INBOX.abc', b'\x00\x01binary', reply='_INBOX.def.8')

    assert frames[3] == b''

    message = framing.from_frames(frames)
    assert message.data == b'\x00\x01binary'
    assert message.reply == '_INBOX.def.8'
    assert len(message.headers) == 0


def test_bad_frames():

    with pytest.raises(ValueError):
        framing.from_frames((b'foo.', framing.VERSION, b''))

    frames = list(framing.to_frames('foo', b'data'))
    frames[1] = b'z'

    with pytest.raises(ValueError):
        framing.from_frames(frames)


@pytest.mark.parametrize('headers_b', (b'5', b'[]', b'{"a": 5}', b'{"a": [1]}'))
def test_non_mapping_headers(headers_b):

    frames = (b'foo.', framing.VERSION, b'', headers_b, b'data')

    with pytest.raises(ValueError):
        framing.from_frames(frames)


def test_topic_filter():

    assert framing.topic_filter('foo') == b'foo.'
    assert framing.topic_filter('_INBOX.abc.*') == b'_INBOX.abc.'
    assert framing.topic_filter('foo.>') == b'foo.'
    assert framing.topic_filter('*.bar') == b''


def test_parse_url():

    assert framing.parse_url('tcp://127.0.0.1:4000') == ('127.0.0.1', 4000)
    assert framing.parse_url('tcp://localhost') == ('localhost', framing.default_port)
    assert framing.parse_url('bus.example:4000') == ('bus.example', 4000)

    with pytest.raises(ValueError):
        framing.parse_url('udp://127.0.0.1:4000')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
