import pytest
import bushttp

Headers = bushttp.protocol.Headers


def test_header_frame():

    headers = Headers()
    headers.add('Status', '200 OK')
    headers.add('Set-Cookie', 'a=1')
    headers.add('Set-Cookie', 'b=2')
    headers.add('X-Unicode', 'café')

    frame = bushttp.json.dumps_headers(headers)
    assert isinstance(frame, bytes)

    decoded = bushttp.json.loads_headers(frame)

    assert decoded == headers
    assert decoded.get_all('Set-Cookie') == ['a=1', 'b=2']
    assert decoded.get('X-Unicode') == 'café'


def test_empty_frame():

    assert bushttp.json.dumps_headers(None) == b''
    assert bushttp.json.dumps_headers(Headers()) == b''
    assert len(bushttp.json.loads_headers(b'')) == 0


def test_single_string_value():

    decoded = bushttp.json.loads_headers(b'{"Status": "200 OK", "Empty": []}')

    assert decoded.get_all('Status') == ['200 OK']
    assert decoded.get('Empty') is None


@pytest.mark.parametrize('frame', (
    b'5',
    b'"Status"',
    b'[["Status", "200 OK"]]',
    b'{"Content-Length": 5}',
    b'{"Status": [200]}',
    b'{"Status": {"code": 200}}',
    b'{not json',
    b'\xff\xfe',
))
def test_bad_frame(frame):

    with pytest.raises(ValueError):
        bushttp.json.loads_headers(frame)


def test_check_shape():

    bushttp.json.check_shape({'Accept': ['*/*'], 'URL': '/foo.txt'})

    with pytest.raises(ValueError):
        bushttp.json.check_shape(None)

    with pytest.raises(ValueError):
        bushttp.json.check_shape({'Accept': ['*/*', None]})


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
