"""
Redis implementation of the scored-set store, plus the score boundary
expressions understood by ZRANGEBYSCORE / ZREMRANGEBYSCORE.
"""

from typing import Iterable, List, Optional, Tuple

import redis

from .errors import StoreCommandError, StoreConnectionError
from .interfaces import Bound, ScoredSetStore
from .logger import get_logger

NEG_INF = "-inf"
POS_INF = "+inf"


def inclusive(score: float) -> float:
    """A boundary that includes `score` itself."""
    return float(score)


def exclusive(score: float) -> str:
    """A boundary that excludes `score` itself, e.g. '(3.0'."""
    return f"({float(score)!r}"


class RedisScoredSet(ScoredSetStore):
    """Scored-set store backed by a Redis sorted set (ZADD and friends)."""

    def __init__(self, client: redis.Redis):
        self.client = client
        self.logger = get_logger("RedisScoredSet")

    @classmethod
    def open(cls, uri: str, socket_timeout: Optional[float] = None,
             health_check: bool = True) -> "RedisScoredSet":
        """
        Connect to the Redis server at `uri` (redis://host[:port]/[db]).

        With `health_check`, the server is pinged so that an unreachable
        server fails here rather than on the first command.
        """
        logger = get_logger("RedisScoredSet")
        try:
            client = redis.Redis.from_url(uri, socket_timeout=socket_timeout)
        except ValueError as e:
            logger.error(f"Invalid store address {uri!r}: {e}")
            raise StoreConnectionError(f"Invalid store address {uri!r}: {e}") from e

        store = cls(client)
        if health_check:
            try:
                store._run("PING", client.ping)
            except StoreConnectionError:
                client.close()
                raise
        logger.info(f"Connected to {uri}")
        return store

    def _run(self, command: str, func, *args, **kwargs):
        """Execute one redis command, translating redis errors."""
        try:
            return func(*args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            self.logger.error(f"{command} failed, store unreachable: {e}")
            raise StoreConnectionError(f"{command} failed: {e}") from e
        except redis.exceptions.RedisError as e:
            self.logger.error(f"{command} rejected by store: {e}")
            raise StoreCommandError(f"{command} failed: {e}") from e

    def add(self, key: str, score: float, member: bytes) -> None:
        self._run("ZADD", self.client.zadd, key, {member: score})

    def add_many(self, key: str, pairs: Iterable[Tuple[float, bytes]]) -> None:
        # Duplicate members collapse into one, the last score wins
        mapping = {member: score for score, member in pairs}
        if not mapping:
            return
        self._run("ZADD", self.client.zadd, key, mapping)

    def range_by_score(self, key: str, lower: Bound, upper: Bound) -> List[bytes]:
        return self._run("ZRANGEBYSCORE", self.client.zrangebyscore, key, lower, upper)

    def remove_by_score(self, key: str, lower: Bound, upper: Bound) -> int:
        return self._run("ZREMRANGEBYSCORE", self.client.zremrangebyscore, key, lower, upper)

    def delete(self, key: str) -> int:
        return self._run("DEL", self.client.delete, key)

    def close(self):
        self.client.close()
