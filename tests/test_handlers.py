import bushttp

ResponseWriter = bushttp.protocol.ResponseWriter
Request = bushttp.protocol.Request
Headers = bushttp.protocol.Headers


def serve(handler, bus, recorder, settings, method='GET'):

    record = recorder(bus, 'client.inbox')
    request = Request(method, '/anything', Headers(), reply='client.inbox')

    with ResponseWriter(bus, 'client.inbox', settings) as writer:
        handler(writer, request)

    return record.messages


def test_chunks(bus, recorder, settings, tmp_path):

    path = tmp_path / 'data.bin'
    path.write_bytes(b'0123456789')

    handler = bushttp.FileHandler(path, chunk_size=4)
    messages = serve(handler, bus, recorder, settings)

    header = messages[0]
    assert header.headers.get('Status') == '200 OK'
    assert header.headers.get('Content-Length') == '10'
    assert header.headers.get('Content-Type') == 'application/octet-stream'

    assert [message.data for message in messages[1:]] == [b'0123', b'4567', b'89']


def test_head(bus, recorder, settings, tmp_path):

    path = tmp_path / 'page.html'
    path.write_bytes(b'<html></html>')

    messages = serve(bushttp.FileHandler(path), bus, recorder, settings, method='HEAD')

    assert len(messages) == 1
    assert messages[0].headers.get('Content-Length') == '13'
    assert messages[0].headers.get('Content-Type') == 'text/html'


def test_not_found(bus, recorder, settings, tmp_path):

    handler = bushttp.FileHandler(tmp_path / 'missing.txt')
    messages = serve(handler, bus, recorder, settings)

    assert len(messages) == 1
    assert messages[0].headers.get('Status') == '404 Not Found'
    assert messages[0].headers.get('Content-Length') == '0'


def test_directory(bus, recorder, settings, tmp_path):

    messages = serve(bushttp.FileHandler(tmp_path), bus, recorder, settings)
    assert messages[0].headers.get('Status') == '404 Not Found'


def test_method_not_allowed(bus, recorder, settings, tmp_path):

    path = tmp_path / 'foo.txt'
    path.write_bytes(b'foo')

    messages = serve(bushttp.FileHandler(path), bus, recorder, settings, method='POST')

    assert len(messages) == 1
    assert messages[0].headers.get('Status') == '405 Method Not Allowed'
    assert messages[0].headers.get('Allow') == 'GET, HEAD'


def test_reread_each_request(bus, recorder, settings, tmp_path):

    path = tmp_path / 'foo.txt'
    path.write_bytes(b'first')
    handler = bushttp.FileHandler(path)

    messages = serve(handler, bus, recorder, settings)
    assert messages[-1].data == b'first'

    path.write_bytes(b'second')
    messages = serve(handler, bus, recorder, settings)
    assert messages[-1].data == b'second'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
