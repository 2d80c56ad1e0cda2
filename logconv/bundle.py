"""
Bundle decoding.

A bundle is three consecutive lines:

    E004:<sensorId>
    <any>:<yyyyMMddHHmm>[-<end>]:<H|M>
    <any>:<unused>:<v1>:<v2>:<v1>:<v2>...

The parser walks the window with an explicit state machine so that a short
or truncated window becomes a typed MalformedBundle instead of an index error.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence

from .classify import classify
from .errors import InvalidTimestamp, MalformedBundle, UnrecognizedTimeUnit
from .models import Bundle, RecordTag, TimeUnit, ValuePair
from .rules import DATE_RANGE_DELIMITER, FIELD_DELIMITER, TIMESTAMP_DIGITS, VALUE_FIELDS_START

_TIMESTAMP_RE = re.compile(r"(\d{4})(\d{2})(\d{2})(\d{2})(\d{2})", re.ASCII)


class BundleState(Enum):
    EXPECT_TAG = "expect_tag"
    EXPECT_DATE_LINE = "expect_date_line"
    EXPECT_VALUE_LINE = "expect_value_line"


def parse_timestamp(token: str, line_index: Optional[int] = None, line: Optional[str] = None) -> datetime:
    """Parse a fixed-format yyyyMMddHHmm token; seconds are 0."""
    m = _TIMESTAMP_RE.fullmatch(token)
    if m is None:
        raise InvalidTimestamp(
            f"expected {TIMESTAMP_DIGITS} digits yyyyMMddHHmm, got {token!r}",
            line_index, line,
        )
    year, month, day, hour, minute = (int(g) for g in m.groups())
    try:
        return datetime(year, month, day, hour, minute, 0)
    except ValueError as e:
        raise InvalidTimestamp(f"{token!r} is not a valid date/time ({e})", line_index, line) from e


def parse_time_unit(token: str, line_index: Optional[int] = None, line: Optional[str] = None) -> TimeUnit:
    try:
        return TimeUnit(token)
    except ValueError:
        raise UnrecognizedTimeUnit(
            f"time unit must be 'H' or 'M', got {token!r}", line_index, line
        ) from None


def pair_values(fields: Sequence[str]) -> List[ValuePair]:
    """Pair fields two at a time; a trailing unpaired field is dropped."""
    usable = len(fields) - len(fields) % 2
    return [ValuePair(value1=fields[i], value2=fields[i + 1]) for i in range(0, usable, 2)]


def parse_bundle(lines: Sequence[str], start_index: int) -> Bundle:
    """
    Decode the bundle whose start line is lines[start_index].

    Consumes exactly three lines. Raises a FormatError subclass naming the
    line index at fault.
    """
    state = BundleState.EXPECT_TAG
    index = start_index
    sensor_id = start_timestamp = time_unit = None
    values: List[ValuePair] = []

    while True:
        if index >= len(lines):
            raise MalformedBundle(
                f"bundle starting at line {start_index} needs 3 lines, input ends at line {len(lines) - 1}",
                index, None,
            )
        line = lines[index]
        fields = line.split(FIELD_DELIMITER)

        if state is BundleState.EXPECT_TAG:
            if classify(line) is not RecordTag.BUNDLE_START:
                raise MalformedBundle("not a bundle start line", index, line)
            if len(fields) < 2:
                raise MalformedBundle("bundle start line has no sensor id field", index, line)
            sensor_id = fields[1]
            state = BundleState.EXPECT_DATE_LINE

        elif state is BundleState.EXPECT_DATE_LINE:
            if len(fields) < 3:
                raise MalformedBundle(
                    f"date line needs 3 fields, got {len(fields)}", index, line
                )
            date_token = fields[1].split(DATE_RANGE_DELIMITER)[0]
            start_timestamp = parse_timestamp(date_token, index, line)
            time_unit = parse_time_unit(fields[2], index, line)
            state = BundleState.EXPECT_VALUE_LINE

        elif state is BundleState.EXPECT_VALUE_LINE:
            values = pair_values(fields[VALUE_FIELDS_START:])
            break

        index += 1

    return Bundle(
        start_index=start_index,
        sensor_id=sensor_id,
        start_timestamp=start_timestamp,
        time_unit=time_unit,
        values=values,
    )
