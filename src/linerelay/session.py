import enum
import logging

from linerelay import relay
from linerelay.conduit.base import Conduit
from linerelay.connector.base import Connector, ConnectorError, ConnectorConnectedEvent, ConnectorDisconnectedEvent, \
    ConnectionNotConnectedError
from linerelay.support.cancellation import CancellationSignal

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    UNOPENED = 'unopened'
    OPEN = 'open'
    CLOSED = 'closed'


class SessionClosedError(ConnectorError):
    """ A closed session cannot be opened again. """


class Session:
    """
    Owns one connection and the cancellation signal shared by the two relays over it.

    The session moves from UNOPENED to OPEN to CLOSED and never back. When the signal is set
    the connection is interrupted, so a relay blocked reading from it returns; the connection
    is only closed by close().

    :param connector: the connector that provides the connection
    """

    def __init__(self, connector: Connector):
        self.connector = connector
        self.cancellation = CancellationSignal()
        self.cancellation.events += self._cancelled
        self.connector.events += self._connector_events
        self._state = SessionState.UNOPENED
        self._connection = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def endpoint(self):
        return self.connector.endpoint

    @property
    def timeout(self):
        return self.connector.timeout

    @property
    def connection(self) -> Conduit:
        if self._connection is None or self._state is not SessionState.OPEN:
            raise ConnectionNotConnectedError("session to %s is %s" % (self.endpoint, self._state.value))
        return self._connection

    def open(self):
        """
        Establishes the connection. Opening an open session does nothing.
        :raises ConnectorError: if the connection could not be established
        """
        if self._state is SessionState.CLOSED:
            raise SessionClosedError("session to %s is closed" % self.endpoint)
        if self._state is SessionState.OPEN:
            return
        self.connector.connect()
        self._connection = self.connector.conduit
        self._state = SessionState.OPEN

    def send(self, source) -> relay.RelayOutcome:
        """ relays lines from source to the connection. """
        return relay.send(source, self.connection.output, self.cancellation)

    def read(self, sink) -> relay.RelayOutcome:
        """ relays lines from the connection to sink. """
        return relay.read(self.connection.input, sink, self.cancellation)

    def cancel(self) -> bool:
        return self.cancellation.cancel()

    def close(self):
        """
        Closes the connection. Closing a closed or never opened session does nothing.
        """
        if self._state is SessionState.CLOSED:
            return
        was_open = self._state is SessionState.OPEN
        self._state = SessionState.CLOSED
        self._connection = None
        if was_open:
            try:
                self.connector.disconnect()
            except OSError as e:
                logger.warning("error closing connection to %s: %s" % (self.endpoint, e))

    def _cancelled(self, signal):
        connection = self._connection
        if connection is not None and self._state is SessionState.OPEN:
            logger.debug("interrupting connection to %s" % self.endpoint)
            connection.interrupt()

    def _connector_events(self, event):
        if isinstance(event, ConnectorConnectedEvent):
            logger.debug("connected to %s" % self.endpoint)
        elif isinstance(event, ConnectorDisconnectedEvent):
            logger.debug("disconnected from %s" % self.endpoint)

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
