"""
Line framing. A frame is a line of raw bytes followed by SEPARATOR. There is no escaping,
so a line can never contain the separator itself.
"""
from io import IOBase

SEPARATOR = b"\n"

# the longest line accepted, terminator included
MAX_LINE_LENGTH = 64 * 1024


class LineTooLongError(ValueError):
    """ A line exceeded MAX_LINE_LENGTH without a terminator. """


def tobytes(arg):
    """
    Converts a string to bytes
    >>> tobytes("abc")
    b'abc'
    >>> tobytes(b"abc")
    b'abc'
    """
    if isinstance(arg, str):
        arg = arg.encode('utf-8')
    return arg


def encode_line(line) -> bytes:
    """
    Produces the wire form of a line.
    >>> encode_line(b"hello")
    b'hello\\n'
    """
    return tobytes(line) + SEPARATOR


def strip_line(raw: bytes) -> bytes:
    """
    Removes the line terminator, and a carriage return preceding it.
    >>> strip_line(b"abc\\r\\n")
    b'abc'
    >>> strip_line(b"abc")
    b'abc'
    """
    if raw.endswith(SEPARATOR):
        raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
    return raw


def read_line(stream: IOBase, limit=MAX_LINE_LENGTH):
    """
    Reads the next line from a binary stream.
    A final line without a terminator is still returned.
    :return: the line without its terminator, or None at end of stream.
    :raises LineTooLongError: if no terminator is found within limit bytes
    """
    raw = stream.readline(limit)
    if not raw:
        return None
    if len(raw) >= limit and not tobytes(raw).endswith(SEPARATOR):
        raise LineTooLongError("line longer than %d bytes" % limit)
    return strip_line(tobytes(raw))


def write_line(stream: IOBase, line):
    """ writes one frame and flushes it to the underlying stream. """
    stream.write(encode_line(line))
    stream.flush()
