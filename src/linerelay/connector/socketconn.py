import logging
import socket
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError

from linerelay.conduit.base import Conduit
from linerelay.conduit.socket_conduit import SocketConduit
from linerelay.connector.base import AbstractConnector, ConnectNetworkError, ConnectTimeoutError

logger = logging.getLogger(__name__)

# network kind -> address family used to resolve the host
networks = {
    'tcp': socket.AF_UNSPEC,
    'tcp4': socket.AF_INET,
    'tcp6': socket.AF_INET6,
}


class Endpoint:
    """
    Describes a TCP server endpoint: the network kind, the host name or address, and the port.
    The port is kept as given, so service names such as "http" are allowed.
    """
    def __init__(self, network, host, port):
        if network not in networks:
            raise ValueError("unsupported network %r, expected one of %s" % (network, ", ".join(sorted(networks))))
        if not host:
            raise ValueError("host must not be empty")
        port = str(port) if port is not None else ''
        if not port:
            raise ValueError("port must not be empty")
        self._network = network
        self._host = host
        self._port = port

    @property
    def network(self):
        return self._network

    @property
    def host(self):
        return self._host

    @property
    def port(self):
        return self._port

    @property
    def family(self):
        return networks[self._network]

    def key(self):
        """
        >>> Endpoint('tcp', 'localhost', 23).key()
        'localhost:23'
        """
        return "%s:%s" % (self._host, self._port)

    def __str__(self):
        return self.key()

    def __repr__(self):
        return "Endpoint(%r, %r, %r)" % (self._network, self._host, self._port)

    def __eq__(self, other):
        return isinstance(other, Endpoint) and \
            (self._network, self._host, self._port) == (other._network, other._host, other._port)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((self._network, self._host, self._port))


def resolve(endpoint: Endpoint, timeout):
    """
    Resolves the endpoint to stream socket addresses, giving up after timeout seconds.
    The lookup runs on a worker thread since getaddrinfo() itself cannot be given a timeout;
    a lookup that is abandoned finishes in the background.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="resolve")
    try:
        future = executor.submit(socket.getaddrinfo, endpoint.host, endpoint.port, endpoint.family,
                                 socket.SOCK_STREAM)
        return future.result(timeout=timeout)
    except FutureTimeoutError as e:
        raise ConnectTimeoutError("timed out resolving %s after %ss" % (endpoint, timeout)) from e
    except socket.gaierror as e:
        raise ConnectNetworkError("unable to resolve %s: %s" % (endpoint, e)) from e
    finally:
        executor.shutdown(wait=False)


def open_socket(endpoint: Endpoint, timeout) -> socket.socket:
    """
    Makes a single attempt to connect a stream socket to the endpoint. The host is resolved and each
    resolved address is tried in turn until one connects, all within the timeout.
    :param timeout: the overall connect timeout, in seconds. Must be positive.
    :return: the connected socket, in blocking mode with no timeout.
    :raises ConnectTimeoutError: if no connection was established within the timeout
    :raises ConnectNetworkError: for resolution failures, refused connections and other socket errors
    """
    if timeout is None or timeout <= 0:
        raise ValueError("connect timeout must be positive, got %s" % timeout)
    deadline = time.monotonic() + timeout
    addresses = resolve(endpoint, timeout)

    error = None
    for family, type_, proto, _, address in addresses:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        sock = socket.socket(family, type_, proto)
        try:
            sock.settimeout(remaining)
            sock.connect(address)
            sock.settimeout(None)
            return sock
        except OSError as e:
            sock.close()
            error = e

    if error is None or isinstance(error, socket.timeout):
        raise ConnectTimeoutError("timed out connecting to %s after %ss" % (endpoint, timeout)) from error
    raise ConnectNetworkError("unable to connect to %s: %s" % (endpoint, error)) from error


class SocketConnector(AbstractConnector):
    """
    A connector that communicates data via a TCP socket.
    """
    def __init__(self, endpoint: Endpoint, timeout):
        """
        :param endpoint: the server to connect to
        :param timeout: the connect timeout in seconds
        """
        super().__init__()
        self._endpoint = endpoint
        self._timeout = timeout

    @property
    def endpoint(self):
        return self._endpoint

    @property
    def timeout(self):
        return self._timeout

    def _connect(self) -> Conduit:
        try:
            sock = open_socket(self._endpoint, self._timeout)
        except (ConnectTimeoutError, ConnectNetworkError) as e:
            logger.warning("error opening socket to %s: %s" % (self._endpoint, e))
            raise
        logger.info("opened socket to %s" % self._endpoint)
        return SocketConduit(sock)

    def _disconnect(self):
        logger.debug("closing socket to %s" % self._endpoint)

