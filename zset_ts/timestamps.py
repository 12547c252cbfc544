"""
Timestamps and timestamped values.

A Timestamp is an absolute time point stored as floating point seconds
since the Unix epoch. Values built from the clock or from a datetime are
quantized to a resolution (1 microsecond by default) so that the same
instant always maps to the same score in the store.

Precision bound: a float64 holds ~15-16 significant digits, so for
present-day epoch values sub-microsecond error is possible when converting
to and from datetime. This is inherent to the representation.
"""

import math
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Generic, Tuple, TypeVar, Union

DEFAULT_RESOLUTION = 1.0e-6

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

T = TypeVar("T")

Duration = Union[timedelta, int, float]


def to_seconds(dur: Duration) -> float:
    """Convert a duration (timedelta or number of seconds) to float seconds."""
    if isinstance(dur, timedelta):
        return dur.total_seconds()
    if isinstance(dur, (int, float)) and not isinstance(dur, bool):
        return float(dur)
    raise TypeError(f"Expected timedelta or seconds, got {type(dur).__name__}")


def quantize(seconds: float, resolution: float = DEFAULT_RESOLUTION) -> float:
    """
    Round `seconds` to the nearest multiple of `resolution`.

    Halves are rounded away from zero. Applying it twice with the same
    resolution gives the same result as applying it once.
    """
    if resolution <= 0:
        raise ValueError(f"Resolution must be positive, got {resolution}")
    steps = seconds / resolution
    magnitude = abs(steps)
    rounded = math.floor(magnitude)
    # floor(x + 0.5) would round 0.49999999999999994 up
    if magnitude - rounded >= 0.5:
        rounded += 1
    return resolution * math.copysign(rounded, steps)


def _datetime_seconds(dt: datetime) -> float:
    # Naive datetimes are taken as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - EPOCH).total_seconds()


def as_timestamp(dt: datetime) -> float:
    """Seconds since the epoch for `dt`, with microsecond resolution."""
    return quantize(_datetime_seconds(dt))


def timestamp() -> float:
    """The current time as seconds since the epoch, with microsecond resolution."""
    return quantize(time.time())


@dataclass(frozen=True, order=True)
class Timestamp:
    """
    The timestamp for values in the database.

    Constructing directly from a number does not quantize; use `now()`,
    `from_datetime()` or `with_resolution()` for clock-derived values.
    """
    seconds: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "seconds", float(self.seconds))

    @classmethod
    def now(cls, resolution: float = DEFAULT_RESOLUTION) -> "Timestamp":
        """Current time, quantized to `resolution` seconds."""
        return cls(quantize(time.time(), resolution))

    @classmethod
    def from_raw(cls, seconds: float) -> "Timestamp":
        """Wrap an exact seconds value without quantization."""
        return cls(seconds)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "Timestamp":
        return cls.with_resolution(dt, DEFAULT_RESOLUTION)

    @classmethod
    def with_resolution(cls, dt: datetime, resolution: Duration) -> "Timestamp":
        """
        Create a timestamp from a datetime with a specific resolution.

        Args:
            dt: The time point. Naive values are interpreted as UTC.
            resolution: Seconds as a float (1.0e-3 for milliseconds) or a timedelta.
        """
        return cls(quantize(_datetime_seconds(dt), to_seconds(resolution)))

    def as_raw(self) -> float:
        """The time stamp as a floating-point time_t value."""
        return self.seconds

    def to_datetime(self) -> datetime:
        """Convert to an aware UTC datetime (microsecond precision)."""
        return EPOCH + timedelta(seconds=self.seconds)

    def offset(self, delta: Duration) -> "Timestamp":
        return Timestamp(self.seconds + to_seconds(delta))

    def __add__(self, other: Duration) -> "Timestamp":
        try:
            return self.offset(other)
        except TypeError:
            return NotImplemented

    def __sub__(self, other: Any):
        if isinstance(other, Timestamp):
            return self.seconds - other.seconds
        try:
            return Timestamp(self.seconds - to_seconds(other))
        except TypeError:
            return NotImplemented

    def __float__(self) -> float:
        return self.seconds

    def __str__(self) -> str:
        return repr(self.seconds)


TimestampLike = Union[Timestamp, int, float, datetime]


def to_timestamp(ts: TimestampLike) -> Timestamp:
    """
    Coerce a timestamp-like value into a Timestamp.

    Numbers are taken as exact seconds, datetimes are quantized to the
    default resolution.
    """
    if isinstance(ts, Timestamp):
        return ts
    if isinstance(ts, datetime):
        return Timestamp.from_datetime(ts)
    if isinstance(ts, (int, float)) and not isinstance(ts, bool):
        return Timestamp(ts)
    raise TypeError(f"Cannot convert {type(ts).__name__} to Timestamp")


@dataclass(frozen=True)
class TimeValue(Generic[T]):
    """A data value along with the time at which it was created/collected."""
    timestamp: Timestamp
    value: T

    @classmethod
    def new(cls, value: T) -> "TimeValue[T]":
        """Create a value stamped with the current time."""
        return cls(Timestamp.now(), value)

    @classmethod
    def with_timestamp(cls, ts: TimestampLike, value: T) -> "TimeValue[T]":
        return cls(to_timestamp(ts), value)

    @classmethod
    def from_tuple(cls, pair: Tuple[TimestampLike, T]) -> "TimeValue[T]":
        ts, value = pair
        return cls(to_timestamp(ts), value)

    def into_tuple(self) -> Tuple[Timestamp, T]:
        return (self.timestamp, self.value)

    def into_tuple_raw(self) -> Tuple[float, T]:
        return (self.timestamp.seconds, self.value)
