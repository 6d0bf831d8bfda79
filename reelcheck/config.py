"""
Configuration for reelcheck.

Values come from a flat ``key=value`` file (``config.properties`` by default,
or the path in ``REELCHECK_CONFIG``). Any key can be overridden from the
environment as ``REELCHECK_<KEY>``, with dots replaced by underscores and the
name upper-cased (``api.token`` -> ``REELCHECK_API_TOKEN``).
"""
import os
import threading
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

from .logging_config import get_logger

logger = get_logger("reelcheck.config")

CONFIG_ENV_VAR = "REELCHECK_CONFIG"
DEFAULT_CONFIG_FILE = "config.properties"
ENV_PREFIX = "REELCHECK_"

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


class ConfigError(Exception):
    """Missing or malformed configuration value"""
    pass


def env_key(key: str) -> str:
    return ENV_PREFIX + key.replace(".", "_").replace("-", "_").upper()


class ConfigReader:
    """Read-only key/value store loaded once per process."""

    def __init__(self, path: Optional[Path] = None):
        self._path = path
        self._values: Optional[Dict[str, str]] = None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        if self._path is not None:
            return Path(self._path)
        return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE))

    def _load(self) -> Dict[str, str]:
        with self._lock:
            if self._values is None:
                path = self.path
                if path.is_file():
                    raw = dotenv_values(path)
                    self._values = {k: v.strip() for k, v in raw.items() if v is not None}
                    logger.info(f"Loaded {path} ({len(self._values)} keys)")
                else:
                    self._values = {}
                    logger.warning(f"Config file {path} not found, using environment only")
            return self._values

    def reload(self):
        with self._lock:
            self._values = None
        self._load()

    def _lookup(self, key: str) -> Optional[str]:
        env_value = os.environ.get(env_key(key))
        if env_value is not None:
            return env_value.strip()
        return self._load().get(key)

    def get(self, key: str) -> str:
        """
        Return the value for ``key``.

        Raises:
            ConfigError: when the key is absent from both the file and the environment
        """
        value = self._lookup(key)
        if value is None:
            raise ConfigError(f"Missing config key '{key}' in {self.path} (or ${env_key(key)})")
        return value

    def get_or_default(self, key: str, default: str) -> str:
        value = self._lookup(key)
        return default if value is None else value

    def get_bool(self, key: str, default: Optional[bool] = None) -> bool:
        value = self._lookup(key)
        if value is None:
            if default is None:
                raise ConfigError(f"Missing config key '{key}' in {self.path} (or ${env_key(key)})")
            return default

        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigError(f"Config key '{key}' is not a boolean: {value!r}")

    def as_dict(self) -> Dict[str, str]:
        values = dict(self._load())
        for key in list(values):
            override = os.environ.get(env_key(key))
            if override is not None:
                values[key] = override.strip()
        return values


config = ConfigReader()
