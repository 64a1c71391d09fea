from datetime import timedelta
import pytest

from keymacros.durations import format_duration, parse_duration, to_timedelta


@pytest.mark.parametrize(
    "delta,expected",
    (
        (timedelta(), "0"),
        (timedelta(microseconds=1), "1us"),
        (timedelta(milliseconds=1), "1ms"),
        (timedelta(milliseconds=1500), "1.5s"),
        (timedelta(seconds=2), "2s"),
        (timedelta(minutes=1, seconds=1), "1m1s"),
        (timedelta(seconds=90), "1m30s"),
        (timedelta(hours=1, milliseconds=250), "60m0.25s"),
        (timedelta(milliseconds=1, microseconds=200), "1.2ms"),
        (timedelta(milliseconds=-1), "-1ms"),
        (-timedelta(minutes=1, milliseconds=250), "-1m0.25s"),
    ),
)
def test_format_duration(delta: timedelta, expected: str):
    actual = format_duration(delta)
    assert actual == expected


@pytest.mark.parametrize(
    "duration,expected",
    (
        ("0", timedelta()),
        ("+0", timedelta()),
        ("1us", timedelta(microseconds=1)),
        ("1500ms", timedelta(milliseconds=1500)),
        ("2s", timedelta(seconds=2)),
        ("3m4s5us", timedelta(minutes=3, seconds=4, microseconds=5)),
        ("1.5s", timedelta(seconds=1, milliseconds=500)),
        ("0.429496s", timedelta(microseconds=429496)),
        ("-3h2s", -timedelta(hours=3, seconds=2)),
    ),
)
def test_parse_duration(duration: str, expected: timedelta):
    actual = parse_duration(duration)
    assert actual == expected


@pytest.mark.parametrize(
    "duration,msg",
    (
        ("", "Empty duration string"),
        ("0.0", "Invalid duration string; expected unit"),
        (".0", "Invalid duration string; expected leading digit"),
        ("2x", "Invalid duration string; expected unit"),
        ("s", "Invalid duration string; expected number"),
    ),
)
def test_parse_duration_invalid(duration: str, msg: str):
    with pytest.raises(ValueError) as excinfo:
        parse_duration(duration)
    e = excinfo.value
    assert e.args[0] == msg


@pytest.mark.parametrize(
    "value,expected",
    (
        (timedelta(seconds=3), timedelta(seconds=3)),
        (2, timedelta(seconds=2)),
        (0.25, timedelta(milliseconds=250)),
        ("1.5", timedelta(seconds=1.5)),
        ("3", timedelta(seconds=3)),
        ("750ms", timedelta(milliseconds=750)),
        ("1m30s", timedelta(seconds=90)),
    ),
)
def test_to_timedelta(value, expected: timedelta):
    assert to_timedelta(value) == expected


@pytest.mark.parametrize("value", (True, "", "soon", "5 seconds", 1.0e20, float("inf"), "inf", "-inf", "99999999999h"))
def test_to_timedelta_invalid(value):
    with pytest.raises(ValueError):
        to_timedelta(value)


@pytest.mark.parametrize("delta", (timedelta(milliseconds=1500), timedelta(minutes=2, milliseconds=5), timedelta(milliseconds=-250)))
def test_formatted_durations_parse_back(delta: timedelta):
    assert parse_duration(format_duration(delta)) == delta
