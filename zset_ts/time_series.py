"""
Time series client on top of a scored set.

Each point is stored as one member whose score is its timestamp. Range
requests in the time domain are translated into score ranges:

    get_range(a, b)   ->  [a, (b]      half-open, a included, b excluded
    get_from(a)       ->  [a, +inf]
    get_all()         ->  [-inf, +inf]
    purge_before(a)   ->  remove [-inf, (a]   (the point exactly at a stays)
"""

from datetime import datetime
from typing import Any, Generic, Iterable, List, Optional, Tuple, TypeVar, Union

import pyarrow as pa

from .arrow import from_record_batch, to_record_batch
from .codec import get_codec
from .config import ZsetTSConfig, get_config
from .errors import ClientClosedError, DecodeError, EncodeError
from .interfaces import Bound, EntryCodec, ScoredSetStore
from .logger import ZsetTSLogger, get_logger
from .store import NEG_INF, POS_INF, RedisScoredSet, exclusive, inclusive
from .timestamps import (Duration, Timestamp, TimestampLike, TimeValue, to_seconds,
                        to_timestamp)

T = TypeVar("T")

PointLike = Union[TimeValue, Tuple[TimestampLike, Any]]


def series_key(namespace: str, name: str) -> str:
    """The store key for a series: 'namespace:name', or just 'name' without a namespace."""
    return f"{namespace}:{name}" if namespace else name


class TimeSeries(Generic[T]):
    """
    Connection to a single time series.

    The client opens one store connection at construction and holds it until
    close(). All calls are synchronous; there are no retries, and every
    failure is raised as a ZsetTSError subclass.

    Values of type T must be supported by the entry codec, and a series
    must be read with the same value type it was written with.
    """

    def __init__(self, namespace: Optional[str], name: str, uri: Optional[str] = None,
                 codec: Optional[EntryCodec] = None, resolution: Optional[float] = None,
                 value_type: Optional[type] = None, store: Optional[ScoredSetStore] = None,
                 config: Optional[ZsetTSConfig] = None):
        """
        Args:
            namespace: Key prefix; None uses the configured namespace, "" means no prefix.
            name: Series name.
            uri: Redis address (redis://host[:port]/[db]); defaults to the configured one.
            codec: Entry codec; defaults to the configured codec.
            resolution: Resolution in seconds for timestamps taken from the clock.
            value_type: If set, values read back must be instances of this type.
            store: An already-open store to use instead of connecting to `uri`.
            config: Configuration object; the global configuration if None.
        """
        self.config = config if config is not None else get_config()
        ZsetTSLogger.setup(
            log_dir=self.config.logging.log_dir,
            log_level=self.config.logging.level,
            console_output=self.config.logging.console_output,
            fmt=self.config.logging.format
        )
        self.logger = get_logger("TimeSeries")

        self._namespace = namespace if namespace is not None else self.config.series.namespace
        self._name = name
        self._key = series_key(self._namespace, name)

        self.codec = codec if codec is not None else get_codec(self.config.series.codec)
        self.resolution = resolution if resolution is not None else self.config.series.resolution
        if self.resolution <= 0:
            raise ValueError(f"Resolution must be positive, got {self.resolution}")
        self.value_type = value_type

        if store is None:
            store = RedisScoredSet.open(
                uri or self.config.redis.uri,
                socket_timeout=self.config.redis.socket_timeout,
                health_check=self.config.redis.health_check
            )
        self.store = store
        self._closed = False

        self.logger.debug(f"Opened series {self._key!r} (codec={self.codec.name})")

    @classmethod
    def with_host(cls, host: str, namespace: Optional[str], name: str, **kwargs) -> "TimeSeries":
        """Connect to the named time series on the specified host."""
        return cls(namespace, name, uri=f"redis://{host}/", **kwargs)

    @classmethod
    def with_uri(cls, uri: str, namespace: Optional[str], name: str, **kwargs) -> "TimeSeries":
        """Connect to the named time series on the server with the specified URI."""
        return cls(namespace, name, uri=uri, **kwargs)

    @property
    def key(self) -> str:
        return self._key

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self):
        if self._closed:
            raise ClientClosedError(f"Time series {self._key!r} is closed")

    def _encode(self, ts: Timestamp, value: Any) -> bytes:
        try:
            return self.codec.encode(ts.as_raw(), value)
        except EncodeError as e:
            self.logger.error(f"Encode failed for series {self._key!r} at {ts}: {e}")
            raise

    def _decode(self, member: bytes) -> TimeValue[T]:
        try:
            ts, value = self.codec.decode(member)
            if self.value_type is not None and not isinstance(value, self.value_type):
                raise DecodeError(
                    f"Expected {self.value_type.__name__} value, got {type(value).__name__}")
        except DecodeError as e:
            self.logger.error(f"Decode failed for series {self._key!r}: {e}")
            raise
        return TimeValue(Timestamp(ts), value)

    # ----- Writing -----

    def add(self, ts: TimestampLike, value: T):
        """Add a point to the time series."""
        self._check_open()
        ts = to_timestamp(ts)
        member = self._encode(ts, value)
        self.store.add(self._key, ts.as_raw(), member)
        self.logger.debug(f"Added point at {ts} to {self._key!r}")

    def add_now(self, value: T):
        """Add a point stamped with the current time."""
        self.add(Timestamp.now(self.resolution), value)

    def add_value(self, point: PointLike):
        """Add a point given as a TimeValue or a (timestamp, value) tuple."""
        if not isinstance(point, TimeValue):
            point = TimeValue.from_tuple(point)
        self.add(point.timestamp, point.value)

    def add_many(self, points: Iterable[PointLike]):
        """
        Add several points with a single store call.

        Every point is encoded before anything is sent, so an EncodeError
        leaves the series untouched. The batch is one ZADD: Redis applies it
        as a whole, but if the connection fails while the command is in
        flight the caller cannot tell whether it was applied. No stronger
        guarantee is made. Points with identical timestamp and value collapse
        into one.
        """
        self._check_open()
        pairs = []
        for point in points:
            if not isinstance(point, TimeValue):
                point = TimeValue.from_tuple(point)
            pairs.append((point.timestamp.as_raw(), self._encode(point.timestamp, point.value)))

        if not pairs:
            return
        self.store.add_many(self._key, pairs)
        self.logger.debug(f"Added {len(pairs)} points to {self._key!r}")

    def add_multiple_values(self, values: Iterable[Tuple[TimestampLike, T]]):
        """Add multiple points from (timestamp, value) tuples."""
        self.add_many(values)

    def add_batch(self, batch: pa.RecordBatch):
        """Add every row of an Arrow record batch, using the configured column names."""
        self.add_many(from_record_batch(
            batch,
            time_column=self.config.schema.time_column,
            value_column=self.config.schema.value_column
        ))

    # ----- Reading -----

    @staticmethod
    def _bound(bound: Union[Bound, Timestamp, datetime]) -> Bound:
        if isinstance(bound, (Timestamp, datetime)):
            return to_timestamp(bound).as_raw()
        return bound

    def get_range_raw(self, lower: Union[Bound, Timestamp, datetime],
                      upper: Union[Bound, Timestamp, datetime]) -> List[TimeValue[T]]:
        """
        Get the points between two raw score boundaries.

        A boundary may be a number or Timestamp (inclusive), NEG_INF or
        POS_INF, or an exclusive(...) expression such as '(2.0'. Points come
        back in ascending time order. If any entry cannot be decoded the
        whole call fails with DecodeError.
        """
        self._check_open()
        lower, upper = self._bound(lower), self._bound(upper)
        members = self.store.range_by_score(self._key, lower, upper)
        points = [self._decode(member) for member in members]
        self.logger.debug(f"Read {len(points)} points from {self._key!r} in [{lower}, {upper}]")
        return points

    def get_range(self, ts1: TimestampLike, ts2: TimestampLike) -> List[TimeValue[T]]:
        """Get the points from `ts1` up to, but not including, `ts2`."""
        return self.get_range_raw(
            inclusive(to_timestamp(ts1).as_raw()),
            exclusive(to_timestamp(ts2).as_raw())
        )

    def get_from(self, ts: TimestampLike) -> List[TimeValue[T]]:
        """Get the points from `ts` up to the latest one."""
        return self.get_range_raw(inclusive(to_timestamp(ts).as_raw()), POS_INF)

    def get_last(self, dur: Duration) -> List[TimeValue[T]]:
        """Get the points from the most recent `dur` (timedelta or seconds)."""
        return self.get_from(Timestamp.now(self.resolution) - to_seconds(dur))

    def get_all(self) -> List[TimeValue[T]]:
        """Get every point in the series. Use with caution on large series."""
        return self.get_range_raw(NEG_INF, POS_INF)

    def get_range_batch(self, ts1: TimestampLike, ts2: TimestampLike) -> pa.RecordBatch:
        """Same window as get_range(), returned as an Arrow record batch."""
        return to_record_batch(
            self.get_range(ts1, ts2),
            time_column=self.config.schema.time_column,
            value_column=self.config.schema.value_column
        )

    # ----- Removing -----

    def purge_before(self, ts: TimestampLike) -> int:
        """
        Delete every point strictly before `ts`; a point exactly at `ts` is kept.
        Returns the number of points removed.
        """
        self._check_open()
        ts = to_timestamp(ts)
        removed = self.store.remove_by_score(self._key, NEG_INF, exclusive(ts.as_raw()))
        self.logger.info(f"Purged {removed} points before {ts} from {self._key!r}")
        return removed

    def purge_older_than(self, dur: Duration) -> int:
        """Delete all points except those within the most recent `dur`."""
        return self.purge_before(Timestamp.now(self.resolution) - to_seconds(dur))

    def delete(self) -> bool:
        """Remove the entire series from the store. Returns True if it existed."""
        self._check_open()
        existed = bool(self.store.delete(self._key))
        self.logger.info(f"Deleted series {self._key!r} (existed={existed})")
        return existed

    # ----- Lifecycle -----

    def close(self):
        """Release the store connection. Closing twice is an error."""
        self._check_open()
        self._closed = True
        self.store.close()
        self.logger.debug(f"Closed series {self._key!r}")

    def __enter__(self) -> "TimeSeries[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self._closed:
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"TimeSeries(key={self._key!r}, codec={self.codec.name}, {state})"
