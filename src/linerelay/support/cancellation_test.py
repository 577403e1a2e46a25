import threading
import unittest
from unittest.mock import Mock

from hamcrest import assert_that, is_, equal_to

from linerelay.support.cancellation import CancellationSignal


class CancellationSignalTest(unittest.TestCase):

    def test_starts_unset(self):
        sut = CancellationSignal()
        assert_that(sut.cancelled, is_(False))
        assert_that(sut.wait(0), is_(False))

    def test_first_cancel_wins(self):
        sut = CancellationSignal()
        assert_that(sut.cancel(), is_(True))
        assert_that(sut.cancel(), is_(False))
        assert_that(sut.cancelled, is_(True))
        assert_that(sut.wait(0), is_(True))

    def test_handlers_notified_once(self):
        sut = CancellationSignal()
        handler = Mock()
        sut.events += handler
        sut.cancel()
        sut.cancel()
        handler.assert_called_once_with(sut)

    def test_handler_added_after_cancel_is_not_called(self):
        sut = CancellationSignal()
        sut.cancel()
        handler = Mock()
        sut.events += handler
        sut.cancel()
        handler.assert_not_called()

    def test_concurrent_cancel_sets_once(self):
        sut = CancellationSignal()
        handler = Mock()
        sut.events += handler
        start = threading.Barrier(8)
        results = []
        lock = threading.Lock()

        def contend():
            start.wait()
            won = sut.cancel()
            with lock:
                results.append(won)

        threads = [threading.Thread(target=contend) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert_that(results.count(True), is_(equal_to(1)))
        assert_that(len(results), is_(8))
        handler.assert_called_once_with(sut)

    def test_all_waiters_released(self):
        sut = CancellationSignal()
        released = []

        def waiter():
            released.append(sut.wait(5))

        threads = [threading.Thread(target=waiter) for _ in range(3)]
        for t in threads:
            t.start()
        sut.cancel()
        for t in threads:
            t.join()
        assert_that(released, is_([True, True, True]))


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
