import unittest

from hamcrest import assert_that, is_, close_to, calling, raises

from linerelay.support.duration import parse_duration


class ParseDurationTest(unittest.TestCase):

    def test_seconds(self):
        assert_that(parse_duration("10s"), is_(10.0))

    def test_compound(self):
        assert_that(parse_duration("1h2m3s"), is_(3723.0))

    def test_fractions(self):
        assert_that(parse_duration("1.5s"), is_(1.5))
        assert_that(parse_duration(".5m"), is_(30.0))

    def test_sub_second_units(self):
        assert_that(parse_duration("250ms"), close_to(0.25, 1e-9))
        assert_that(parse_duration("10us"), close_to(1e-5, 1e-12))
        assert_that(parse_duration("10µs"), close_to(1e-5, 1e-12))
        assert_that(parse_duration("7ns"), close_to(7e-9, 1e-15))

    def test_zero_without_unit(self):
        assert_that(parse_duration("0"), is_(0.0))

    def test_sign(self):
        assert_that(parse_duration("-2s"), is_(-2.0))
        assert_that(parse_duration("+2s"), is_(2.0))

    def test_surrounding_space_ignored(self):
        assert_that(parse_duration(" 3s "), is_(3.0))

    def test_invalid(self):
        for text in ("", "10", "s", "10x", "1s2", "abc", "-", "1..2s"):
            assert_that(calling(parse_duration).with_args(text), raises(ValueError, "invalid duration"))

    def test_none(self):
        assert_that(calling(parse_duration).with_args(None), raises(ValueError))


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
