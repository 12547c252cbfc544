"""
Interfaces for the two collaborators a TimeSeries is built on:
the entry codec and the scored-set store.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Tuple, Union

# A score boundary: a number (inclusive), "-inf", "+inf", or "(<number>" (exclusive)
Bound = Union[float, int, str]


class EntryCodec(ABC):
    """Converts (timestamp, value) pairs to and from their stored bytes."""

    name = "abstract"

    @abstractmethod
    def encode(self, ts: float, value: Any) -> bytes:
        """
        Encode a raw timestamp and a value into a single member.
        Raises EncodeError if the value cannot be serialized.
        """
        pass

    @abstractmethod
    def decode(self, data: bytes) -> Tuple[float, Any]:
        """
        Decode a member back into (timestamp, value).
        Raises DecodeError for malformed or foreign data.
        """
        pass


class ScoredSetStore(ABC):
    """A persistent set of byte members ordered by a numeric score, keyed by name."""

    @abstractmethod
    def add(self, key: str, score: float, member: bytes) -> None:
        """Add one member with its score."""
        pass

    @abstractmethod
    def add_many(self, key: str, pairs: Iterable[Tuple[float, bytes]]) -> None:
        """Add several (score, member) pairs in one store-level call."""
        pass

    @abstractmethod
    def range_by_score(self, key: str, lower: Bound, upper: Bound) -> List[bytes]:
        """Members with lower <= score <= upper (subject to exclusive bounds), ascending."""
        pass

    @abstractmethod
    def remove_by_score(self, key: str, lower: Bound, upper: Bound) -> int:
        """Remove members within the score range. Returns the number removed."""
        pass

    @abstractmethod
    def delete(self, key: str) -> int:
        """Remove the whole key. Returns the number of keys removed."""
        pass

    def close(self):
        """Release the underlying connection. Default implementation does nothing."""
        pass
