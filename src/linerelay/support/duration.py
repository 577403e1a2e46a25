"""
Parses duration strings such as "10s", "1m30s", "250ms" or "1.5h" into seconds.
"""
import re

_UNITS = {
    'ns': 1e-9,
    'us': 1e-6,
    'µs': 1e-6,     # micro sign
    'μs': 1e-6,     # greek mu
    'ms': 1e-3,
    's': 1.0,
    'm': 60.0,
    'h': 3600.0,
}

_component = re.compile(r'(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)')


def parse_duration(text) -> float:
    """
    Converts a duration string to a number of seconds.

    A duration is an optionally signed sequence of decimal numbers, each with an optional
    fraction and a unit suffix. "0" is accepted without a unit.

    >>> parse_duration("10s")
    10.0
    >>> parse_duration("1m30s")
    90.0
    >>> parse_duration("-1.5h")
    -5400.0
    """
    if text is None:
        raise ValueError("invalid duration None")
    s = text.strip()
    original = s
    sign = 1.0
    if s[:1] in ('-', '+'):
        sign = -1.0 if s[0] == '-' else 1.0
        s = s[1:]
    if s == '0':
        return 0.0
    if not s:
        raise ValueError("invalid duration %r" % original)

    total = 0.0
    pos = 0
    while pos < len(s):
        m = _component.match(s, pos)
        if not m:
            raise ValueError("invalid duration %r" % original)
        value, unit = m.groups()
        total += float(value) * _UNITS[unit]
        pos = m.end()
    return sign * total
