''' Encoding and decoding of the header frame, for transports that carry
    the headers of a message apart from its payload. The frame is a JSON
    object mapping each header name to a list of string values; a lone
    string is accepted in place of a one-element list. An absent or empty
    frame means no headers.

    The fastest available JSON library is used: msgspec, then orjson, then
    the standard library. Whichever is in use, a frame that does not decode
    to the shape described above raises :class:`ValueError`.
'''

from typing import Dict, List, Union

from .protocol.message import Headers

# Only the first library found is imported.

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


HeaderFrame = Dict[str, Union[str, List[str]]]


def _stdlib_encode(values):
    return json.dumps(values, separators=(',', ':')).encode()


if msgspec is not None:
    # The typed decoder rejects any other shape with a ValidationError,
    # which is a ValueError.
    _encode = msgspec.json.Encoder().encode
    _decode = msgspec.json.Decoder(HeaderFrame).decode
elif orjson is not None:
    _encode = orjson.dumps
    _decode = orjson.loads
else:
    _encode = _stdlib_encode
    _decode = json.loads



def dumps_headers(headers):
    """ Return the header frame for a :class:`~bushttp.protocol.message.Headers`
        instance, as bytes. No headers at all encode as an empty frame.
    """

    if headers is None or len(headers) == 0:
        return b''

    return _encode(headers.to_dict())



def loads_headers(frame):
    """ Return the :class:`~bushttp.protocol.message.Headers` encoded in
        *frame*.
    """

    if not frame:
        return Headers()

    decoded = _decode(bytes(frame))
    check_shape(decoded)

    return Headers.from_dict(decoded)



def check_shape(decoded):
    """ Raise ValueError unless *decoded* is a mapping of header names to
        a string or a list of strings.
    """

    if isinstance(decoded, dict):
        pass
    else:
        raise ValueError('header frame is a JSON %s, not an object' % (type(decoded).__name__))

    for name, values in decoded.items():
        if isinstance(values, str):
            continue

        if isinstance(values, list):
            if all(isinstance(value, str) for value in values):
                continue

        raise ValueError('header %r has values %r, expected strings' % (name, values))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
