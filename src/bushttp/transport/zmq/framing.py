"""ZMQ multipart framing for bus messages.

Every message crosses the broker as a PUB/SUB multipart sequence:

    topic_with_trailing_dot, version, reply, headers_json, data

The trailing dot on the topic keeps a ZeroMQ prefix subscription for
``foo.`` from also receiving ``foobar``; the subscriber still applies the
full subject match locally.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple
from urllib.parse import urlsplit

from ... import json
from ...protocol.message import Headers, Message


# This is the version of the on-the-wire framing implemented here; it is
# identified by a single byte.

VERSION = b"a"

default_port = 10139


def to_frames(
    subject: str,
    data: bytes = b"",
    headers: Optional[Headers] = None,
    reply: Optional[str] = None,
) -> Tuple[bytes, ...]:
    """Encode one message as ZMQ multipart frames."""

    topic = (subject + ".").encode()
    reply_b = (reply or "").encode()

    headers_b = json.dumps_headers(headers)

    return (topic, VERSION, reply_b, headers_b, bytes(data))


def from_frames(parts: Sequence[bytes]) -> Message:
    """Decode ZMQ multipart frames into a :class:`Message`.

    A ValueError is raised for malformed frames, for a header frame that is
    not a JSON object of strings, and for frames from a different framing
    version.
    """

    if len(parts) != 5:
        raise ValueError(f"expected 5 frames, received {len(parts)}")

    topic, their_version, reply_b, headers_b, data = parts

    if their_version != VERSION:
        raise ValueError(f"message is framing version {their_version!r}, recipient expects {VERSION!r}")

    subject = topic.decode()
    if subject.endswith("."):
        subject = subject[:-1]

    reply = reply_b.decode() or None

    headers = json.loads_headers(headers_b)

    return Message(subject, data, headers, reply)


def topic_filter(pattern: str) -> bytes:
    """Return the ZeroMQ subscription prefix for a subject *pattern*.

    The prefix covers the literal tokens ahead of the first wildcard; an
    exact subject yields the full subject with its trailing dot.
    """

    literal = []
    for token in pattern.split("."):
        if token in ("*", ">"):
            break
        literal.append(token)

    if not literal:
        return b""

    return (".".join(literal) + ".").encode()


def parse_url(url: str) -> Tuple[str, int]:
    """Split ``tcp://host:port`` into (host, port); the port defaults to
    :data:`default_port`."""

    if "://" not in url:
        url = "tcp://" + url

    parts = urlsplit(url)

    if parts.scheme != "tcp":
        raise ValueError(f"unsupported bus URL scheme: {url!r}")

    address = parts.hostname
    if not address:
        raise ValueError(f"no host in bus URL: {url!r}")

    port = parts.port
    if port is None:
        port = default_port

    return address, port
