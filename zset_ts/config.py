"""
zset_ts Configuration Management

Loads settings from the packaged JSON defaults, an optional user JSON file
and environment variables, in that order of precedence (lowest first).
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CONFIG_PATH = Path(__file__).parent / "zset_ts_config.json"


@dataclass
class RedisConfig:
    """Connection settings for the backing Redis server."""
    uri: str
    socket_timeout: Optional[float]
    health_check: bool


@dataclass
class SeriesConfig:
    """Defaults applied to every TimeSeries."""
    namespace: str
    resolution: float
    codec: str


@dataclass
class SchemaConfig:
    """Column names used by the Arrow bridge."""
    time_column: str
    value_column: str


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str
    log_dir: Optional[str]
    console_output: bool
    format: str


class ZsetTSConfig:
    """Main zset_ts configuration manager."""

    ENV_MAPPINGS = {
        'ZSET_TS_REDIS_URI': ('redis', 'uri'),
        'ZSET_TS_SOCKET_TIMEOUT': ('redis', 'socket_timeout'),
        'ZSET_TS_NAMESPACE': ('series', 'namespace'),
        'ZSET_TS_RESOLUTION': ('series', 'resolution'),
        'ZSET_TS_CODEC': ('series', 'codec'),
        'ZSET_TS_LOG_LEVEL': ('logging', 'level'),
        'ZSET_TS_LOG_DIR': ('logging', 'log_dir'),
        'ZSET_TS_CONSOLE': ('logging', 'console_output'),
    }

    FLOAT_KEYS = ('socket_timeout', 'resolution')
    BOOL_KEYS = ('health_check', 'console_output')

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to a JSON config file merged over the defaults.
        """
        self.config_path = config_path
        self._config_data = {}
        self._load_config()
        self._create_config_objects()

    def _load_config(self):
        """Load configuration from JSON files and environment variables."""
        if not DEFAULT_CONFIG_PATH.exists():
            raise FileNotFoundError(f"Default config file not found: {DEFAULT_CONFIG_PATH}")
        with open(DEFAULT_CONFIG_PATH, 'r') as f:
            self._config_data = json.load(f)

        if self.config_path:
            config_path = Path(self.config_path)
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
            with open(config_path, 'r') as f:
                self._merge_configs(self._config_data, json.load(f))

        self._load_env_overrides()

    def _merge_configs(self, default: dict, custom: dict):
        """Recursively merge custom config into default config."""
        for key, value in custom.items():
            if key in default and isinstance(default[key], dict) and isinstance(value, dict):
                self._merge_configs(default[key], value)
            else:
                default[key] = value

    def _load_env_overrides(self):
        """Load configuration overrides from environment variables."""
        for env_var, (section, key) in self.ENV_MAPPINGS.items():
            value = os.getenv(env_var)
            if value is None:
                continue
            if key in self.FLOAT_KEYS:
                value = float(value) if value else None
            elif key in self.BOOL_KEYS:
                value = value.lower() in ('true', '1', 'yes', 'on')
            elif key == 'log_dir' and not value:
                value = None

            self._config_data.setdefault(section, {})[key] = value

    def _create_config_objects(self):
        """Create typed configuration objects from loaded data."""
        self.redis = RedisConfig(**self._config_data['redis'])
        self.series = SeriesConfig(**self._config_data['series'])
        self.schema = SchemaConfig(**self._config_data['schema'])
        self.logging = LoggingConfig(**self._config_data['logging'])

        if self.series.resolution is None or self.series.resolution <= 0:
            raise ValueError(f"series.resolution must be positive, got {self.series.resolution}")

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return json.loads(json.dumps(self._config_data))

    def save_to_file(self, path: str):
        """Save current configuration to JSON file."""
        with open(path, 'w') as f:
            json.dump(self._config_data, f, indent=2)

    def __repr__(self) -> str:
        return f"ZsetTSConfig(config_path={self.config_path})"


# Global configuration instance
_global_config: Optional[ZsetTSConfig] = None


def get_config(config_path: Optional[str] = None) -> ZsetTSConfig:
    """
    Get the global configuration instance.

    Args:
        config_path: Path to config file. Only used on first call.

    Returns:
        ZsetTSConfig instance
    """
    global _global_config
    if _global_config is None:
        _global_config = ZsetTSConfig(config_path)
    return _global_config


def reset_config():
    """Reset the global configuration (mainly for testing)."""
    global _global_config
    _global_config = None
