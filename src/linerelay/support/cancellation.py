"""
A one-shot, broadcast cancellation flag shared by cooperating threads.
"""
import logging
import threading

from linerelay.support.events import EventSource

logger = logging.getLogger(__name__)


class CancellationSignal:
    """
    Starts unset and transitions to set exactly once. Any number of threads may
    call cancel() concurrently; only the call that performs the transition gets
    True back, and only that call notifies the handlers registered on `events`.

    Waiters blocked in wait() all observe the same transition.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self.events = EventSource()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """
        Sets the signal.
        :return: True if this call set the signal, False if it was already set.
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
        logger.debug("cancellation signalled")
        self.events.fire(self)
        return True

    def wait(self, timeout=None) -> bool:
        """
        Blocks until the signal is set or the timeout elapses.
        :return: True if the signal is set.
        """
        return self._event.wait(timeout)

    def __repr__(self):
        return "CancellationSignal(cancelled=%s)" % self.cancelled
