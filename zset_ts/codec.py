"""
Entry codecs.

A stored member is the encoding of the 2-element array [timestamp, value].
The timestamp is kept inside the payload so that readers recover it from
the data itself; the store score is only used for ordering and ranges.
"""

import json
from typing import Any, Callable, Optional, Tuple

import msgpack

from .errors import DecodeError, EncodeError
from .interfaces import EntryCodec


def _check_pair(obj: Any) -> Tuple[float, Any]:
    """Validate a decoded object as a [timestamp, value] pair."""
    if not isinstance(obj, (list, tuple)) or len(obj) != 2:
        raise DecodeError(f"Expected a [timestamp, value] pair, got {type(obj).__name__}")
    ts, value = obj
    if isinstance(ts, bool) or not isinstance(ts, (int, float)):
        raise DecodeError(f"Entry timestamp is not a number: {ts!r}")
    return float(ts), value


class MsgPackCodec(EntryCodec):
    """
    MessagePack codec. The timestamp is always written as a float64, so
    timestamps round-trip exactly.

    Args:
        default: Optional hook to convert otherwise unsupported objects, as
            accepted by msgpack.packb.
    """

    name = "msgpack"

    def __init__(self, default: Optional[Callable[[Any], Any]] = None):
        self.default = default

    def encode(self, ts: float, value: Any) -> bytes:
        try:
            return msgpack.packb([float(ts), value], use_bin_type=True, default=self.default)
        except (TypeError, ValueError, OverflowError) as e:
            raise EncodeError(f"Cannot encode {type(value).__name__} value: {e}") from e

    def decode(self, data: bytes) -> Tuple[float, Any]:
        try:
            obj = msgpack.unpackb(data, raw=False, strict_map_key=False)
        except (ValueError, TypeError, msgpack.exceptions.UnpackException) as e:
            raise DecodeError(f"Malformed msgpack entry: {e}") from e
        return _check_pair(obj)


class JsonCodec(EntryCodec):
    """Compact JSON codec. Values must be JSON-serializable; NaN/Infinity are rejected."""

    name = "json"

    def encode(self, ts: float, value: Any) -> bytes:
        try:
            text = json.dumps([float(ts), value], separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise EncodeError(f"Cannot encode {type(value).__name__} value: {e}") from e
        return text.encode("utf-8")

    def decode(self, data: bytes) -> Tuple[float, Any]:
        try:
            obj = json.loads(data)
        except (ValueError, TypeError) as e:
            raise DecodeError(f"Malformed JSON entry: {e}") from e
        return _check_pair(obj)


_CODECS = {
    MsgPackCodec.name: MsgPackCodec,
    JsonCodec.name: JsonCodec,
}


def get_codec(name: str) -> EntryCodec:
    """Create a codec from its configured name ("msgpack" or "json")."""
    try:
        return _CODECS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown codec: {name!r} (expected one of {sorted(_CODECS)})") from None
