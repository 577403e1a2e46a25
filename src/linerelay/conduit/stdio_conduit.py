"""
Conduit over the process standard streams.

A plain blocking read of standard input cannot be interrupted from another thread. When the
input has a selectable file descriptor, the input is read through a PollingLineReader that
waits for data in short slices and gives up once cancellation is signalled.
"""
import io
import logging
import os
import select
import sys

from linerelay.conduit.base import DefaultConduit
from linerelay.protocol.lines import SEPARATOR

logger = logging.getLogger(__name__)

default_poll_interval = 0.2


class PollingLineReader:
    """
    Reads lines directly from a file descriptor, checking for cancellation while waiting
    for data. Only the readline() and close() methods are provided.

    :param fd: the file descriptor to read
    :param cancelled: a callable returning True once reading should stop
    :param poll_interval: the longest time, in seconds, a wait blocks before checking cancellation
    """

    chunk_size = 4096

    def __init__(self, fd, cancelled, poll_interval=default_poll_interval):
        self.fd = fd
        self.cancelled = cancelled
        self.poll_interval = poll_interval
        self._buffer = bytearray()
        self._eof = False

    def _wait_readable(self):
        while not self.cancelled():
            ready, _, _ = select.select([self.fd], [], [], self.poll_interval)
            if ready:
                return True
        return False

    def readline(self, size=-1) -> bytes:
        """
        :param size: when not negative, at most size bytes are returned, even if no terminator was found
        :return: the next line including its terminator, a final unterminated line, or b"" at
            end of input or once cancelled.
        """
        while True:
            index = self._buffer.find(SEPARATOR)
            end = index + 1 if index >= 0 else -1
            if 0 <= size <= len(self._buffer) and (end < 0 or end > size):
                end = size
            if end >= 0:
                line = bytes(self._buffer[:end])
                del self._buffer[:end]
                return line
            if self._eof:
                line = bytes(self._buffer)
                self._buffer.clear()
                return line
            if not self._wait_readable():
                return b""
            chunk = os.read(self.fd, self.chunk_size)
            if chunk:
                self._buffer += chunk
            else:
                self._eof = True

    def close(self):
        self._buffer.clear()
        self._eof = True


def selectable_fileno(stream):
    """
    :return: the file descriptor of the stream if it can be passed to select(), else None.
    """
    if os.name != 'posix':
        return None
    try:
        return stream.fileno()
    except (AttributeError, ValueError, io.UnsupportedOperation):
        return None


def line_reader(stream, cancelled, poll_interval=default_poll_interval):
    """
    Chooses how the local input is read: polled from the descriptor where possible,
    otherwise the stream's own blocking readline().
    """
    fd = selectable_fileno(stream)
    if fd is None:
        logger.debug("input has no selectable descriptor, reads block until data arrives")
        return stream
    return PollingLineReader(fd, cancelled, poll_interval)


def binary(stream):
    """ the underlying binary stream of a text stream such as sys.stdin """
    return getattr(stream, 'buffer', stream)


class StdioConduit(DefaultConduit):
    """
    Provides the process standard input and output as a conduit.
    Closing the conduit flushes the output but leaves the process streams open.

    :param cancelled: a callable returning True once reading the input should stop
    """

    def __init__(self, stdin=None, stdout=None, cancelled=lambda: False,
                 poll_interval=default_poll_interval):
        stdin = binary(stdin if stdin is not None else sys.stdin)
        stdout = binary(stdout if stdout is not None else sys.stdout)
        super().__init__(line_reader(stdin, cancelled, poll_interval), stdout)

    def close(self):
        if self._closed:
            return
        self._closed = True
        try:
            self._write.flush()
        except (OSError, ValueError) as e:
            logger.debug("unable to flush output: %s" % e)
