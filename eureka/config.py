"""
Eureka Client Configuration
YAML/JSON/Env configuration with validation
"""

import os
import json
import logging
import math
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union
from urllib.parse import urlparse

import yaml

from .errors import ConfigurationError, InvalidConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8761
DEFAULT_URL = f"http://localhost:{DEFAULT_PORT}/eureka/apps"
DEFAULT_TIMEOUT = 5.0

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "console")


@dataclass
class EurekaConfig:
    """Registry client configuration"""
    url: str = DEFAULT_URL
    connect_timeout: float = DEFAULT_TIMEOUT
    read_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    log_format: str = "console"

    @property
    def timeout(self):
        """(connect, read) tuple in the form requests expects"""
        return (self.connect_timeout, self.read_timeout)

    def validate(self):
        """Validate client configuration"""
        parsed = urlparse(self.url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidConfigurationError(f"Invalid registry url: {self.url}")
        if not self.connect_timeout > 0 or math.isinf(self.connect_timeout):
            raise InvalidConfigurationError(f"Invalid connect_timeout: {self.connect_timeout}")
        if not self.read_timeout > 0 or math.isinf(self.read_timeout):
            raise InvalidConfigurationError(f"Invalid read_timeout: {self.read_timeout}")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise InvalidConfigurationError(f"Invalid log_level: {self.log_level}")
        if self.log_format not in LOG_FORMATS:
            raise InvalidConfigurationError(f"Invalid log_format: {self.log_format}")

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'EurekaConfig':
        """Load configuration from YAML/JSON file"""
        path = Path(path)

        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")

        if path.suffix not in ['.yaml', '.yml', '.json']:
            raise ConfigurationError(f"Unsupported file format: {path.suffix}")

        with open(path, 'r') as f:
            try:
                data = json.load(f) if path.suffix == '.json' else yaml.safe_load(f)
            except (yaml.YAMLError, ValueError) as e:
                raise ConfigurationError(f"Cannot parse {path}: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")

        # allow the settings to sit under a top-level `eureka:` key
        data = data.get('eureka', data)
        if not isinstance(data, dict):
            raise ConfigurationError(f"`eureka` section must be a mapping: {path}")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> 'EurekaConfig':
        """Load configuration from environment variables"""
        config = cls()

        host = os.environ.get('EUREKA_HOST')
        if host:
            config.url = f"http://{host}:{DEFAULT_PORT}/eureka/apps"
        config.url = os.environ.get('EUREKA_URL', config.url)

        try:
            config.connect_timeout = float(
                os.environ.get('EUREKA_CONNECT_TIMEOUT', config.connect_timeout))
            config.read_timeout = float(
                os.environ.get('EUREKA_READ_TIMEOUT', config.read_timeout))
        except ValueError as e:
            raise InvalidConfigurationError(f"Invalid timeout in environment: {e}")

        config.log_level = os.environ.get('EUREKA_LOG_LEVEL', config.log_level)
        config.log_format = os.environ.get('EUREKA_LOG_FORMAT', config.log_format)

        config.validate()
        return config

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EurekaConfig':
        """Load configuration from dictionary"""
        config = cls()
        known = {f.name for f in fields(cls)}

        for key, value in data.items():
            if key in known:
                setattr(config, key, value)
            else:
                logger.debug(f"Ignoring unknown config key: {key}")

        for key in ('connect_timeout', 'read_timeout'):
            try:
                setattr(config, key, float(getattr(config, key)))
            except (TypeError, ValueError):
                raise InvalidConfigurationError(f"Invalid {key}: {getattr(config, key)!r}")

        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return asdict(self)


# Default configuration YAML template
DEFAULT_CONFIG_YAML = """
# Eureka client default configuration
eureka:
  url: http://localhost:8761/eureka/apps
  connect_timeout: 5.0
  read_timeout: 5.0
  log_level: INFO
  log_format: console
"""
