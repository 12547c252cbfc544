"""
zset_ts - Time Series on Redis Sorted Sets

A small time-series layer over a scored set:
- Timestamp / TimeValue: quantized time points and timestamped values
- TimeSeries: add, range, purge and delete operations on one series
- Codecs: MessagePack (default) and JSON entry encodings

Each point is a sorted-set member holding the encoded (timestamp, value)
pair, scored by its timestamp.
"""

from .timestamps import Timestamp, TimeValue, as_timestamp, timestamp, quantize, DEFAULT_RESOLUTION
from .interfaces import EntryCodec, ScoredSetStore
from .codec import MsgPackCodec, JsonCodec, get_codec
from .store import RedisScoredSet, NEG_INF, POS_INF, exclusive, inclusive
from .time_series import TimeSeries, series_key
from .errors import (
    ZsetTSError,
    StoreConnectionError,
    StoreCommandError,
    CodecError,
    EncodeError,
    DecodeError,
    ClientClosedError
)

__version__ = "0.1.0"

__all__ = [
    'Timestamp',
    'TimeValue',
    'as_timestamp',
    'timestamp',
    'quantize',
    'DEFAULT_RESOLUTION',
    'EntryCodec',
    'ScoredSetStore',
    'MsgPackCodec',
    'JsonCodec',
    'get_codec',
    'RedisScoredSet',
    'NEG_INF',
    'POS_INF',
    'exclusive',
    'inclusive',
    'TimeSeries',
    'series_key',
    'ZsetTSError',
    'StoreConnectionError',
    'StoreCommandError',
    'CodecError',
    'EncodeError',
    'DecodeError',
    'ClientClosedError'
]
