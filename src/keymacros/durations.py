"""Convert between timedeltas and strings, using a string format based on Go's Duration format."""
import datetime
import decimal

PARSE_UNITS = {
    "s": datetime.timedelta(seconds=1),
    "ms": datetime.timedelta(milliseconds=1),
    "us": datetime.timedelta(microseconds=1),
    "m": datetime.timedelta(minutes=1),
    "h": datetime.timedelta(hours=1),
}


def _maybe_int(val: float):
    return int(val) if val.is_integer() else val


def format_duration(val: datetime.timedelta) -> str:
    "Render a timedelta in the notation parse_duration reads, e.g. 1500ms or 1m30s."
    if val < datetime.timedelta():
        return "-" + format_duration(-val)
    if val == datetime.timedelta():
        return "0"
    # below a second, a single unit
    if val < PARSE_UNITS["ms"]:
        return f"{val.microseconds}us"
    if val < PARSE_UNITS["s"]:
        return f"{_maybe_int(val / PARSE_UNITS['ms'])}ms"
    minutes, rest = divmod(val, PARSE_UNITS["m"])
    parts = [f"{minutes}m"] if minutes else []
    if rest:
        parts.append(f"{_maybe_int(rest.total_seconds())}s")
    return "".join(parts)


def parse_duration(val: str) -> datetime.timedelta:
    sign = 1
    if val.startswith("-"):
        sign = -1
        val = val[1:]
    elif val.startswith("+"):
        val = val[1:]
    if len(val) == 0:
        raise ValueError("Empty duration string")
    if val == "0":
        return datetime.timedelta()

    accum = datetime.timedelta()
    while len(val) > 0:
        numberpart = ""
        while len(val) > 0 and (val[0].isdigit() or val[0] == "."):
            numberpart += val[0]
            val = val[1:]
        if len(numberpart) == 0:
            raise ValueError("Invalid duration string; expected number")
        if not numberpart[0].isdigit():
            raise ValueError("Invalid duration string; expected leading digit")
        number = decimal.Decimal(numberpart)
        if len(val) == 0:
            raise ValueError("Invalid duration string; expected unit")
        unit = None
        for unitstr in PARSE_UNITS.keys():
            if val.startswith(unitstr):
                unit = PARSE_UNITS[unitstr]
                val = val[len(unitstr) :]
                break
        if unit is None:
            raise ValueError("Invalid duration string; expected unit")

        intpart = number // 1
        fracpart = number % 1
        if intpart != 0:
            accum += sign * int(intpart) * unit
        if fracpart != 0:
            num, denom = fracpart.as_integer_ratio()
            accum += sign * num * unit / denom

    return accum


def to_timedelta(value: datetime.timedelta | int | float | str) -> datetime.timedelta:
    "Accept a timedelta, a number of seconds, or a duration string such as 1500ms."
    if isinstance(value, datetime.timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Expected a duration, got {value!r}")
    try:
        if isinstance(value, (int, float)):
            return datetime.timedelta(seconds=value)
        try:
            return datetime.timedelta(seconds=float(value))
        except ValueError:
            return parse_duration(value)
    except OverflowError as exc:
        raise ValueError(f"Duration out of range: {value!r}") from exc
