from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterator

from dateutil.relativedelta import relativedelta

from .errors import InvalidTimestamp
from .models import Bundle, OutputRow, TimeUnit


def step_timestamp(start: datetime, unit: TimeUnit, steps: int) -> datetime:
    """
    Return start advanced by `steps` units.

    Months are calendar-aware and always computed from `start`, so
    2017-01-31 + 1 month is 2017-02-28 and + 2 months is 2017-03-31.
    """
    if unit is TimeUnit.HOUR:
        return start + timedelta(hours=steps)
    if unit is TimeUnit.MONTH:
        return start + relativedelta(months=steps)
    raise ValueError(f"Unsupported time unit {unit!r}")


class TimeSeries:
    """Lazy, restartable sequence of the output rows of one bundle."""

    def __init__(self, bundle: Bundle):
        self.bundle = bundle

    def __len__(self) -> int:
        return len(self.bundle.values)

    def __iter__(self) -> Iterator[OutputRow]:
        b = self.bundle
        for x, pair in enumerate(b.values):
            try:
                ts = step_timestamp(b.start_timestamp, b.time_unit, x)
            except (OverflowError, ValueError) as e:
                # the date line follows the start line
                raise InvalidTimestamp(
                    f"value pair {x} steps past the last representable date ({e})",
                    b.start_index + 1,
                ) from e
            yield OutputRow(
                timestamp=ts,
                sensor_id=b.sensor_id,
                value1=pair.value1,
                value2=pair.value2,
            )


def expand(bundle: Bundle) -> TimeSeries:
    return TimeSeries(bundle)
