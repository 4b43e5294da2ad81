""" Decide whether a received payload is fit to be shown on a terminal.
"""

snippet_size = 32


def printable(data, size=snippet_size):
    """ Return True if the leading portion of *data* is printable text. Only
        the first *size* bytes are inspected, regardless of how large the
        payload is. The sample is decoded as UTF-8; a multi-byte character
        cut in half by the sample boundary, or any other undecodable byte,
        decodes as U+FFFD, which is itself printable. Control and format
        characters, including newline and tab, are not printable; a plain
        space is.
    """

    snippet = bytes(data[:size])
    snippet = snippet.decode('utf-8', errors='replace')

    for character in snippet:
        if character.isprintable():
            continue
        return False

    return True


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
