import logging
import socket

from linerelay.conduit import base

logger = logging.getLogger(__name__)


class SocketConduit(base.Conduit):
    """
    A conduit that provides communication via a socket.
    The input and output are separate buffered file objects over the same socket, so one
    thread can block reading while another writes.
    :param sock The open, connected socket
    """
    def __init__(self, sock: socket.socket):
        """
        :param sock: the client socket that represents the connection
        :type sock: socket
        """
        self.sock = sock
        self.read = sock.makefile('rb')
        self.write = sock.makefile('wb')
        self._closed = False

    @property
    def open(self) -> bool:
        return not self._closed and self.sock.fileno() >= 0

    @property
    def output(self):
        return self.write

    @property
    def input(self):
        return self.read

    def interrupt(self):
        """
        Shuts down both directions of the socket. A thread blocked reading sees end of stream,
        later writes fail. The socket itself stays allocated until close().
        """
        if self._closed:
            return
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            # the peer may have already closed the socket
            logger.debug("socket shutdown failed: %s" % e)

    def close(self):
        if self._closed:
            return
        self._closed = True
        try:
            self.read.close()
            self.write.close()
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug("error closing socket: %s" % e)
        finally:
            self.sock.close()
