import bushttp

printable = bushttp.classify.printable


def test_text():

    assert printable(b'hello world') == True
    assert printable(b'') == True
    assert printable('café über'.encode()) == True


def test_control_characters():

    assert printable(b'\x00hello') == False
    assert printable(b'hello\x07') == False

    # Whitespace other than a plain space is a control character.
    assert printable(b'hello\nworld') == False
    assert printable(b'hello\tworld') == False


def test_sample_size():
    """ Only the leading 32 bytes are inspected, however large the payload.
    """

    text = b'a' * 32

    assert printable(text + b'\x00') == True
    assert printable(text + b'\x00' * 1000000) == True
    assert printable(text[:31] + b'\x00') == False

    assert printable(b'abc\x00', size=3) == True
    assert printable(b'abc\x00', size=4) == False


def test_split_character():
    """ A multi-byte character cut by the sample boundary decodes as a
        replacement character, which is printable.
    """

    data = b'a' * 31 + 'é'.encode()
    assert len(data) == 33
    assert printable(data) == True


def test_format_characters():

    # U+200B ZERO WIDTH SPACE is a format character.
    assert printable('abc\u200b'.encode()) == False


def test_undecodable():

    assert printable(b'abc\xff\xfe') == True


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
