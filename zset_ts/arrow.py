"""
Bridge between time series points and Arrow record batches.
"""

from typing import Any, List, Sequence

import pyarrow as pa

from .timestamps import TimeValue, to_timestamp

TIME_TYPE = pa.timestamp('us', tz='UTC')


def to_record_batch(points: Sequence[TimeValue], time_column: str = "timestamp",
                    value_column: str = "value") -> pa.RecordBatch:
    """
    Convert points into a record batch.

    The batch has three columns: the time column as a UTC timestamp, a
    "seconds" column holding the exact float64 score, and the value column
    with a type inferred by Arrow.
    """
    times = pa.array([p.timestamp.to_datetime() for p in points], type=TIME_TYPE)
    seconds = pa.array([p.timestamp.as_raw() for p in points], type=pa.float64())
    values = pa.array([p.value for p in points])
    return pa.RecordBatch.from_arrays(
        [times, seconds, values],
        names=[time_column, "seconds", value_column]
    )


def from_record_batch(batch: pa.RecordBatch, time_column: str = "timestamp",
                      value_column: str = "value") -> List[TimeValue[Any]]:
    """
    Convert a record batch into points.

    The time column may hold Arrow timestamps (naive ones are taken as UTC)
    or numeric seconds since the epoch. A float64 "seconds" column, as
    written by to_record_batch(), takes precedence since it holds the exact
    score rather than a microsecond timestamp.
    """
    names = batch.schema.names
    for column in (time_column, value_column):
        if column not in names:
            raise KeyError(f"Record batch has no column {column!r} (columns: {names})")

    times = batch.column(time_column)
    if not (pa.types.is_timestamp(times.type) or pa.types.is_integer(times.type)
            or pa.types.is_floating(times.type)):
        raise TypeError(f"Column {time_column!r} has unsupported type {times.type}")

    seconds = batch.column("seconds") if "seconds" in names else None
    if seconds is not None and pa.types.is_floating(seconds.type):
        raw_times = seconds.to_pylist()
    else:
        raw_times = times.to_pylist()

    values = batch.column(value_column).to_pylist()
    return [TimeValue(to_timestamp(ts), value) for ts, value in zip(raw_times, values)]
