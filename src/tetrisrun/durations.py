# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""Convert timedeltas to and from strings in Go's Duration format, such as "1s", "100ms" or "1m30s"."""
import datetime
import decimal
import re

# longest suffixes first, so "ms" wins over "m"
UNITS = {
    "us": datetime.timedelta(microseconds=1),
    "µs": datetime.timedelta(microseconds=1),
    "ms": datetime.timedelta(milliseconds=1),
    "s": datetime.timedelta(seconds=1),
    "m": datetime.timedelta(minutes=1),
    "h": datetime.timedelta(hours=1),
}

_COMPONENT = re.compile(r"(?P<number>[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?P<unit>us|µs|ms|s|m|h)")


def _trimmed(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


def parse_duration(val: str) -> datetime.timedelta:
    text = val.strip()
    sign = 1
    if text[:1] in ("-", "+"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if not text:
        raise ValueError(f"Invalid duration {val!r}: empty")
    if text == "0":
        return datetime.timedelta()

    total = datetime.timedelta()
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if match is None:
            raise ValueError(f"Invalid duration {val!r}: expected number and unit at offset {pos}")
        number = decimal.Decimal(match["number"])
        unit = UNITS[match["unit"]]
        whole, fraction = divmod(number, 1)
        total += int(whole) * unit
        if fraction:
            numerator, denominator = fraction.as_integer_ratio()
            total += numerator * unit / denominator
        pos = match.end()
    return sign * total


def format_duration(val: datetime.timedelta) -> str:
    if not val:
        return "0"
    if val < datetime.timedelta():
        return "-" + format_duration(-val)

    if val < UNITS["ms"]:
        return f"{val.microseconds}us"
    if val < UNITS["s"]:
        return f"{_trimmed(val / UNITS['ms'])}ms"

    hours, remainder = divmod(val, UNITS["h"])
    minutes, remainder = divmod(remainder, UNITS["m"])
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if remainder:
        parts.append(f"{_trimmed(remainder.total_seconds())}s")
    return "".join(parts)
