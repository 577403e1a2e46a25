"""
The two directions of a session, each a sequential line-copy loop.

    send: local input  -> connection
    read: connection   -> local output

Both loops share one CancellationSignal. A loop that reaches end of its source cancels the signal;
the first loop to do so is the one that initiated the shutdown. A loop that finds the signal already
set stops without reading further. Write failures are not shutdown paths: they raise RelayWriteError.
"""
import enum
import logging

from linerelay.protocol.lines import read_line, write_line
from linerelay.support.cancellation import CancellationSignal

logger = logging.getLogger(__name__)

SEND = 'send'
READ = 'read'


class Termination(enum.Enum):
    """ why a relay stopped. The value is the message reported to the operator. """
    FORCE_INTERRUPT = "close connection intentionally"
    CONNECTION_LOST = "connection closed by peer"

    def __str__(self):
        return self.value


class RelayWriteError(IOError):
    """ Writing a line to the relay's destination failed. """

    def __init__(self, direction, cause):
        super().__init__("%s: write failed: %s" % (direction, cause))
        self.direction = direction
        self.cause = cause


class RelayOutcome:
    """
    How a relay ended without a write error.
    :param direction: SEND or READ
    :param termination: the Termination reason
    :param initiated: True if this relay detected the end itself and set the cancellation signal
    """

    def __init__(self, direction, termination: Termination, initiated: bool):
        self.direction = direction
        self.termination = termination
        self.initiated = initiated

    def __eq__(self, other):
        return isinstance(other, RelayOutcome) and self.__dict__ == other.__dict__

    def __repr__(self):
        return "RelayOutcome(%s, %s, initiated=%s)" % (self.direction, self.termination.name, self.initiated)

    def __str__(self):
        return "%s: %s" % (self.direction, self.termination)


def _read(source, direction):
    """ reads the next line. Read errors end the stream, as a closed stream would. """
    try:
        return read_line(source)
    except (OSError, ValueError) as e:
        logger.debug("%s: read failed, treating as end of stream: %s" % (direction, e))
        return None


def relay(source, sink, cancel: CancellationSignal, direction, on_end: Termination, on_cancelled: Termination):
    """
    Copies lines from source to sink until the source ends or the signal is set.

    :param on_end: the reason reported when this relay reaches end of its source first
    :param on_cancelled: the reason reported when the other relay stopped first
    :return: a RelayOutcome
    :raises RelayWriteError: if writing to the sink fails
    """
    count = 0
    while True:
        if cancel.cancelled:
            logger.debug("%s: cancelled after %d lines" % (direction, count))
            return RelayOutcome(direction, on_cancelled, False)

        line = _read(source, direction)
        if line is None:
            initiated = cancel.cancel()
            logger.debug("%s: end of stream after %d lines" % (direction, count))
            return RelayOutcome(direction, on_end if initiated else on_cancelled, initiated)

        try:
            write_line(sink, line)
        except (OSError, ValueError) as e:
            raise RelayWriteError(direction, e) from e
        count += 1
        logger.debug("%s: %r" % (direction, line))


def send(source, connection, cancel: CancellationSignal) -> RelayOutcome:
    """
    Uplink: relays lines from the local input to the connection.
    The end of local input is a deliberate request to tear down the session.
    """
    return relay(source, connection, cancel, SEND,
                 on_end=Termination.FORCE_INTERRUPT, on_cancelled=Termination.CONNECTION_LOST)


def read(connection, sink, cancel: CancellationSignal) -> RelayOutcome:
    """
    Downlink: relays lines from the connection to the local output.
    """
    return relay(connection, sink, cancel, READ,
                 on_end=Termination.CONNECTION_LOST, on_cancelled=Termination.FORCE_INTERRUPT)
