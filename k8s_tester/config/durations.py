"""Parse duration literals such as ``"5m"``, ``"1h30m"`` or ``"-1.5s"``.

The accepted syntax is a possibly signed sequence of decimal numbers, each
with an optional fraction and a mandatory unit suffix. Valid units are
``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``. The bare literal
``"0"`` is also accepted.
"""

from __future__ import annotations

import datetime as dt
import re

_UNIT_MICROSECONDS: dict[str, float] = {
    "ns": 1e-3,
    "us": 1.0,
    "µs": 1.0,  # noqa: RUF001 - micro sign is a valid unit
    "μs": 1.0,  # noqa: RUF001 - Greek mu is a valid unit
    "ms": 1e3,
    "s": 1e6,
    "m": 60e6,
    "h": 3600e6,
}

_COMPONENT = re.compile(r"([0-9]*(?:\.[0-9]*)?)([a-zµμ]+)")  # noqa: RUF001


def parse_duration(text: str) -> dt.timedelta:
    """Parse a duration literal into a :class:`datetime.timedelta`.

    Parameters
    ----------
    text : str
        Duration literal, for example ``"90s"`` or ``"1h15m30.5s"``.

    Returns
    -------
    datetime.timedelta
        The parsed duration. Sub-microsecond remainders are rounded.

    Raises
    ------
    ValueError
        If ``text`` is not a valid duration literal.

    """
    literal = text
    sign = 1
    if literal[:1] in {"+", "-"}:
        sign = -1 if literal[0] == "-" else 1
        literal = literal[1:]

    if literal == "0":
        return dt.timedelta(0)
    if not literal:
        msg = f"invalid duration {text!r}"
        raise ValueError(msg)

    total_us = 0.0
    pos = 0
    while pos < len(literal):
        match = _COMPONENT.match(literal, pos)
        if match is None:
            msg = f"invalid duration {text!r}"
            raise ValueError(msg)
        number, unit = match.groups()
        if number in {"", "."}:
            msg = f"invalid duration {text!r}"
            raise ValueError(msg)
        if unit not in _UNIT_MICROSECONDS:
            msg = f"unknown unit {unit!r} in duration {text!r}"
            raise ValueError(msg)
        total_us += float(number) * _UNIT_MICROSECONDS[unit]
        pos = match.end()

    return dt.timedelta(microseconds=sign * round(total_us))


__all__ = ["parse_duration"]
