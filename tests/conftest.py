"""Shared fixtures: an in-process fake Redis server per test, and series factories."""
import fakeredis
import pytest

from zset_ts import RedisScoredSet, TimeSeries
from zset_ts.config import ZsetTSConfig, reset_config
from zset_ts.logger import ZsetTSLogger

NAMESPACE = "zset-ts-test"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Each test starts from the packaged defaults with fresh logging."""
    for env_var in ZsetTSConfig.ENV_MAPPINGS:
        monkeypatch.delenv(env_var, raising=False)
    reset_config()
    ZsetTSLogger.reset()
    yield
    reset_config()
    ZsetTSLogger.reset()


@pytest.fixture
def server():
    return fakeredis.FakeServer()


@pytest.fixture
def redis_client(server):
    return fakeredis.FakeRedis(server=server)


@pytest.fixture
def store(redis_client):
    return RedisScoredSet(redis_client)


@pytest.fixture
def make_series(server):
    """Build TimeSeries clients that all talk to the same fake server."""
    created = []

    def _make(name, namespace=NAMESPACE, **kwargs):
        store = RedisScoredSet(fakeredis.FakeRedis(server=server))
        series = TimeSeries(namespace, name, store=store, **kwargs)
        created.append(series)
        return series

    yield _make

    for series in created:
        if not series.closed:
            series.close()


@pytest.fixture
def series(make_series):
    return make_series("get")


@pytest.fixture
def populated(series):
    """Series holding 42 @ 2.0, 99 @ 3.0 and 13 @ 4.0."""
    series.add(2.0, 42)
    series.add(3.0, 99)
    series.add_value((4.0, 13))
    return series

