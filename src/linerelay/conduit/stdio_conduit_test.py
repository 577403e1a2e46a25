import os
import threading
import unittest
from io import BytesIO, StringIO
from unittest.mock import Mock

import timeout_decorator
from hamcrest import assert_that, is_, instance_of, none

from linerelay.conduit.stdio_conduit import PollingLineReader, StdioConduit, line_reader, selectable_fileno


@unittest.skipUnless(os.name == 'posix', "select() on pipes needs posix")
class PollingLineReaderTest(unittest.TestCase):

    def setUp(self):
        self.read_fd, self.write_fd = os.pipe()
        self.cancelled = threading.Event()
        self.sut = PollingLineReader(self.read_fd, self.cancelled.is_set, 0.05)

    def tearDown(self):
        os.close(self.read_fd)
        if self.write_fd is not None:
            os.close(self.write_fd)

    def close_writer(self):
        os.close(self.write_fd)
        self.write_fd = None

    def test_reads_whole_lines(self):
        os.write(self.write_fd, b"one\ntwo\nthr")
        assert_that(self.sut.readline(), is_(b"one\n"))
        assert_that(self.sut.readline(), is_(b"two\n"))
        os.write(self.write_fd, b"ee\n")
        assert_that(self.sut.readline(), is_(b"three\n"))

    def test_size_limits_line(self):
        os.write(self.write_fd, b"abcdef\nxy\n")
        assert_that(self.sut.readline(4), is_(b"abcd"))
        assert_that(self.sut.readline(4), is_(b"ef\n"))
        assert_that(self.sut.readline(3), is_(b"xy\n"))

    def test_final_partial_line_then_eof(self):
        os.write(self.write_fd, b"tail")
        self.close_writer()
        assert_that(self.sut.readline(), is_(b"tail"))
        assert_that(self.sut.readline(), is_(b""))

    @timeout_decorator.timeout(5)
    def test_cancel_unblocks_waiting_read(self):
        result = []
        reader = threading.Thread(target=lambda: result.append(self.sut.readline()))
        reader.start()
        self.cancelled.set()
        reader.join()
        assert_that(result, is_([b""]))

    def test_buffered_lines_returned_after_cancel(self):
        os.write(self.write_fd, b"a\nb\n")
        assert_that(self.sut.readline(), is_(b"a\n"))
        self.cancelled.set()
        assert_that(self.sut.readline(), is_(b"b\n"))
        assert_that(self.sut.readline(), is_(b""))


class LineReaderSelectionTest(unittest.TestCase):

    def test_in_memory_stream_used_directly(self):
        stream = BytesIO(b"x\n")
        assert_that(selectable_fileno(stream), is_(none()))
        assert_that(line_reader(stream, lambda: False), is_(stream))

    @unittest.skipUnless(os.name == 'posix', "posix only")
    def test_descriptor_is_polled(self):
        stream = Mock()
        stream.fileno.return_value = 7
        reader = line_reader(stream, lambda: False, 0.5)
        assert_that(reader, is_(instance_of(PollingLineReader)))
        assert_that(reader.fd, is_(7))
        assert_that(reader.poll_interval, is_(0.5))


class StdioConduitTest(unittest.TestCase):

    def test_uses_binary_buffers_of_text_streams(self):
        stdin = Mock(spec=['buffer'])
        stdin.buffer = BytesIO(b"in\n")
        stdout = Mock(spec=['buffer'])
        stdout.buffer = BytesIO()
        sut = StdioConduit(stdin, stdout)
        assert_that(sut.input, is_(stdin.buffer))
        assert_that(sut.output, is_(stdout.buffer))

    def test_close_flushes_but_keeps_streams_open(self):
        stdout = Mock()
        stdout.buffer = stdout
        sut = StdioConduit(BytesIO(), stdout)
        sut.close()
        sut.close()
        stdout.flush.assert_called_once_with()
        stdout.close.assert_not_called()
        assert_that(sut.open, is_(False))

    def test_close_tolerates_broken_output(self):
        stdout = Mock()
        stdout.buffer = stdout
        stdout.flush.side_effect = BrokenPipeError()
        StdioConduit(BytesIO(), stdout).close()

    def test_text_stream_without_buffer(self):
        out = StringIO()
        sut = StdioConduit(BytesIO(), out)
        assert_that(sut.output, is_(out))


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
