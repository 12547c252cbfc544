"""Tests for configuration loading and the logging setup."""
import json
import logging

import pytest

from zset_ts import JsonCodec, TimeSeries
from zset_ts.config import ZsetTSConfig, get_config, reset_config
from zset_ts.logger import ZsetTSLogger, get_logger


def test_packaged_defaults():
    config = ZsetTSConfig()
    assert config.redis.uri == "redis://localhost/"
    assert config.redis.socket_timeout is None
    assert config.redis.health_check is True
    assert config.series.namespace == ""
    assert config.series.resolution == 1e-6
    assert config.series.codec == "msgpack"
    assert config.schema.time_column == "timestamp"
    assert config.logging.log_dir is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ZSET_TS_REDIS_URI", "redis://cache:6380/1")
    monkeypatch.setenv("ZSET_TS_SOCKET_TIMEOUT", "2.5")
    monkeypatch.setenv("ZSET_TS_RESOLUTION", "0.001")
    monkeypatch.setenv("ZSET_TS_CODEC", "json")
    monkeypatch.setenv("ZSET_TS_CONSOLE", "yes")
    config = ZsetTSConfig()
    assert config.redis.uri == "redis://cache:6380/1"
    assert config.redis.socket_timeout == 2.5
    assert config.series.resolution == 0.001
    assert config.series.codec == "json"
    assert config.logging.console_output is True


def test_empty_log_dir_env_disables_file_logging(monkeypatch):
    monkeypatch.setenv("ZSET_TS_LOG_DIR", "")
    assert ZsetTSConfig().logging.log_dir is None


def test_invalid_resolution(monkeypatch):
    monkeypatch.setenv("ZSET_TS_RESOLUTION", "0")
    with pytest.raises(ValueError, match="resolution"):
        ZsetTSConfig()


def test_custom_file_is_merged(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"series": {"namespace": "metrics"}}))
    config = ZsetTSConfig(str(path))
    assert config.series.namespace == "metrics"
    assert config.series.codec == "msgpack"


def test_missing_custom_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ZsetTSConfig(str(tmp_path / "nope.json"))


def test_save_and_reload(tmp_path, monkeypatch):
    monkeypatch.setenv("ZSET_TS_NAMESPACE", "saved")
    path = tmp_path / "saved.json"
    ZsetTSConfig().save_to_file(str(path))
    monkeypatch.delenv("ZSET_TS_NAMESPACE")
    assert ZsetTSConfig(str(path)).series.namespace == "saved"


def test_to_dict_is_a_copy():
    config = ZsetTSConfig()
    data = config.to_dict()
    data["series"]["namespace"] = "changed"
    assert config.to_dict()["series"]["namespace"] == ""


def test_global_config():
    first = get_config()
    assert get_config() is first
    reset_config()
    assert get_config() is not first


def test_series_uses_config(monkeypatch, make_series):
    monkeypatch.setenv("ZSET_TS_CODEC", "json")
    monkeypatch.setenv("ZSET_TS_NAMESPACE", "env")
    series = make_series("cpu", namespace=None)
    assert isinstance(series.codec, JsonCodec)
    assert series.key == "env:cpu"


class TestLogger:

    def test_loggers_live_under_package(self):
        assert get_logger("TimeSeries").name == "zset_ts.TimeSeries"
        assert get_logger("TimeSeries") is get_logger("TimeSeries")

    def test_no_log_file_by_default(self):
        get_logger("Anything")
        assert ZsetTSLogger.get_log_file() is None

    def test_file_logging(self, tmp_path):
        ZsetTSLogger.setup(log_dir=str(tmp_path), log_level="DEBUG")
        get_logger("Test").debug("hello file")
        log_file = ZsetTSLogger.get_log_file()
        assert log_file is not None and log_file.parent == tmp_path
        for handler in logging.getLogger("zset_ts").handlers:
            handler.flush()
        assert "hello file" in log_file.read_text()

    def test_setup_only_applies_once(self, tmp_path):
        ZsetTSLogger.setup(log_level="ERROR")
        ZsetTSLogger.setup(log_dir=str(tmp_path), log_level="DEBUG")
        assert ZsetTSLogger.get_log_file() is None
        assert logging.getLogger("zset_ts").level == logging.ERROR

    def test_set_level(self):
        ZsetTSLogger.setup()
        ZsetTSLogger.set_level("debug")
        assert logging.getLogger("zset_ts").level == logging.DEBUG

    def test_explicit_setup_replaces_implicit_defaults(self, tmp_path):
        get_logger("RedisScoredSet")
        ZsetTSLogger.setup(log_dir=str(tmp_path), log_level="DEBUG")
        assert ZsetTSLogger.get_log_file() is not None
        assert logging.getLogger("zset_ts").level == logging.DEBUG

    def test_series_applies_configured_level_after_store_is_built(self, monkeypatch, store):
        monkeypatch.setenv("ZSET_TS_LOG_LEVEL", "DEBUG")
        TimeSeries("zset-ts-test", "cpu", store=store).close()
        assert logging.getLogger("zset_ts").level == logging.DEBUG
