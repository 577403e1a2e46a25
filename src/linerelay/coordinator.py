"""
Runs a session: connect, relay both directions concurrently, wait for both, close.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from linerelay.conduit.stdio_conduit import StdioConduit
from linerelay.config.config import RelayConfig
from linerelay.connector.base import ConnectorError
from linerelay.connector.socketconn import SocketConnector
from linerelay.relay import RelayWriteError
from linerelay.session import Session

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


class Coordinator:
    """
    Owns the lifecycle of one session.

    The uplink and downlink relays run on two worker threads and the calling thread waits for both
    to finish, whichever ends first. The connection is closed once, after both have finished.

    A relay that fails with a write error cancels the session so that the other relay also stops.

    :param config: the RelayConfig for the run
    :param connector_factory: called with the endpoint and timeout to create the connector
    """

    def __init__(self, config: RelayConfig, connector_factory=SocketConnector):
        self.config = config
        self.connector_factory = connector_factory

    def run(self, stdin=None, stdout=None) -> int:
        """
        :param stdin: the local input, by default the process standard input
        :param stdout: the local output, by default the process standard output
        :return: the process exit status
        """
        config = self.config
        session = Session(self.connector_factory(config.endpoint, config.timeout))
        try:
            session.open()
        except ConnectorError as e:
            logger.error("unable to connect to %s: %s" % (config.endpoint, e))
            return EXIT_FAILURE

        local = StdioConduit(stdin, stdout, lambda: session.cancellation.cancelled, config.poll_interval)
        try:
            completed, interrupted = self._relay(session, local)
        finally:
            session.close()
            local.close()
        return self._exit_status(completed, interrupted)

    def _relay(self, session, local):
        """
        Starts both relays and waits for both to complete.
        :return: the futures in completion order, and whether the wait was interrupted from the keyboard
        """
        completed = []
        interrupted = False
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix='relay') as executor:
            pending = {
                executor.submit(self._guard, session, session.send, local.input),
                executor.submit(self._guard, session, session.read, local.output),
            }
            while pending:
                try:
                    for future in as_completed(pending):
                        pending.discard(future)
                        completed.append(future)
                except KeyboardInterrupt:
                    logger.info("interrupted, closing connection to %s" % session.endpoint)
                    interrupted = True
                    session.cancel()
        return completed, interrupted

    @staticmethod
    def _guard(session, relay, stream):
        try:
            return relay(stream)
        except RelayWriteError:
            session.cancel()
            raise

    def _exit_status(self, completed, interrupted):
        outcomes = []
        for future in completed:
            error = future.exception()
            if isinstance(error, RelayWriteError):
                logger.error(str(error))
                return EXIT_FAILURE
            outcomes.append(future.result())

        if interrupted:
            return EXIT_INTERRUPTED

        reason = next((o for o in outcomes if o.initiated), outcomes[0] if outcomes else None)
        if self.config.fatal_on_close:
            logger.error(str(reason))
            return EXIT_FAILURE
        logger.info(str(reason))
        return EXIT_OK


def run(config: RelayConfig, stdin=None, stdout=None) -> int:
    """ connects to the configured endpoint and relays stdin and stdout until either side closes. """
    return Coordinator(config).run(stdin, stdout)
