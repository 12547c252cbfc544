"""
Exception hierarchy for zset_ts.

Every failure surfaced by a TimeSeries operation is one of these types.
Library exceptions (redis, msgpack, json) are chained as the cause.
"""


class ZsetTSError(Exception):
    """Base class for all zset_ts errors."""


class StoreConnectionError(ZsetTSError):
    """The store is unreachable, the address is invalid, or the connection dropped."""


class StoreCommandError(ZsetTSError):
    """The store rejected a command (e.g. the key holds a different data type)."""


class CodecError(ZsetTSError):
    """Base class for entry encoding/decoding failures."""


class EncodeError(CodecError):
    """A value could not be serialized by the entry codec."""


class DecodeError(CodecError):
    """Stored bytes could not be deserialized into a (timestamp, value) pair."""


class ClientClosedError(ZsetTSError):
    """The client was used after close(), or closed twice."""
