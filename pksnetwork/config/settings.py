"""
YAML configuration for PKSNetwork clients and the CLI.

Values may reference the environment as ``${NAME}`` or ``${NAME:fallback}``;
references are resolved after parsing, before validation.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from pksnetwork.core.request import CachePolicy
from pksnetwork.core.retry import RetryPolicy
from pksnetwork.exceptions import InvalidConfigurationError
from pksnetwork.logging_config import get_logger

logger = get_logger(__name__)

_ENV_REFERENCE = re.compile(r"\$\{(?P<name>[^}:]+)(?::(?P<fallback>[^}]*))?\}")


def _resolve_env(node: Any) -> Any:
    """Substitute ``${NAME[:fallback]}`` references in every string of a parsed YAML tree.

    An unset variable without a fallback resolves to an empty string.
    """
    if isinstance(node, dict):
        return {key: _resolve_env(item) for key, item in node.items()}
    if isinstance(node, list):
        return [_resolve_env(item) for item in node]
    if not isinstance(node, str):
        return node
    return _ENV_REFERENCE.sub(
        lambda m: os.environ.get(m.group("name"), m.group("fallback") or ""),
        node,
    )


@dataclass
class NetworkConfig:
    """HTTP client configuration."""

    base_url: str = "https://jsonplaceholder.typicode.com"
    timeout_interval: float = 30.0
    cache_policy: str = CachePolicy.RELOAD_IGNORING_LOCAL_AND_REMOTE_CACHE_DATA.value
    user_agent: str = "PKSNetwork/1.0.0"
    pool_connections: int = 10
    pool_maxsize: int = 20


@dataclass
class RetryConfig:
    """Backoff schedule used by caller-driven retries."""

    max_retry_count: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    scale_factor: float = 2.0

    def to_policy(self) -> RetryPolicy:
        """Build the equivalent ``RetryPolicy``."""
        return RetryPolicy(
            max_retry_count=self.max_retry_count,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            scale_factor=self.scale_factor,
        )


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: str = ""
    format: str = "console"  # console | json


@dataclass
class PKSNetworkConfig:
    """Root of the configuration tree; one attribute per YAML section."""

    network: NetworkConfig = field(default_factory=NetworkConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_default_config_path() -> str:
    return os.path.join(os.path.expanduser("~"), ".pksnetwork", "config.yaml")


def get_default_config() -> PKSNetworkConfig:
    return PKSNetworkConfig()


def _read_yaml(path: str) -> Any:
    try:
        with open(path, encoding="utf-8") as stream:
            return yaml.safe_load(stream)
    except yaml.YAMLError as e:
        logger.error(f"Could not parse YAML in {path}: {e}")
        raise InvalidConfigurationError(f"Failed to parse YAML configuration file '{path}': {e}") from e
    except OSError as e:
        logger.error(f"Could not read {path}: {e}")
        raise InvalidConfigurationError(f"Failed to read configuration file '{path}': {e}") from e


def load_config(config_path: Optional[str] = None) -> PKSNetworkConfig:
    """
    Read, resolve and validate a configuration file.

    A missing or empty file yields the defaults. Sections and keys that are
    absent fall back to their default values.

    Args:
        config_path: File to read; ``~`` is expanded. Defaults to
            ``get_default_config_path()``.

    Returns:
        PKSNetworkConfig

    Raises:
        InvalidConfigurationError: The file cannot be read or parsed, or a
            value is out of range
    """
    path = os.path.expanduser(config_path or get_default_config_path())

    if not os.path.isfile(path):
        logger.info(f"No configuration at {path}; using defaults")
        return get_default_config()

    raw = _read_yaml(path)
    if raw is None:
        logger.info(f"{path} is empty; using defaults")
        return get_default_config()
    if not isinstance(raw, dict):
        raise InvalidConfigurationError(
            f"Configuration file '{path}' must contain a mapping at the top level"
        )

    try:
        config = _build_config_from_dict(_resolve_env(raw))
        _validate_config(config)
    except (InvalidConfigurationError, TypeError, ValueError) as e:
        logger.error(f"Rejected configuration {path}: {e}")
        raise InvalidConfigurationError(f"Invalid configuration in '{path}': {e}") from e

    logger.debug(f"Configuration loaded from {path}")
    return config


def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_data.get(name) or {}
    if not isinstance(section, dict):
        raise InvalidConfigurationError(f"'{name}' section must be a mapping")
    return section


def _build_config_from_dict(config_data: Dict[str, Any]) -> PKSNetworkConfig:
    """
    Build PKSNetworkConfig from dictionary loaded from YAML.

    Merges user configuration with defaults.
    """
    defaults = get_default_config()

    network_data = _section(config_data, 'network')
    network = NetworkConfig(
        base_url=str(network_data.get('base_url', defaults.network.base_url)),
        timeout_interval=float(network_data.get('timeout_interval', defaults.network.timeout_interval)),
        cache_policy=str(network_data.get('cache_policy', defaults.network.cache_policy)).lower(),
        user_agent=str(network_data.get('user_agent', defaults.network.user_agent)),
        pool_connections=int(network_data.get('pool_connections', defaults.network.pool_connections)),
        pool_maxsize=int(network_data.get('pool_maxsize', defaults.network.pool_maxsize)),
    )

    retry_data = _section(config_data, 'retry')
    retry = RetryConfig(
        max_retry_count=int(retry_data.get('max_retry_count', defaults.retry.max_retry_count)),
        base_delay=float(retry_data.get('base_delay', defaults.retry.base_delay)),
        max_delay=float(retry_data.get('max_delay', defaults.retry.max_delay)),
        scale_factor=float(retry_data.get('scale_factor', defaults.retry.scale_factor)),
    )

    logging_data = _section(config_data, 'logging')
    logging_config = LoggingConfig(
        level=str(logging_data.get('level', defaults.logging.level)),
        file=str(logging_data.get('file', defaults.logging.file) or ""),
        format=str(logging_data.get('format', defaults.logging.format)),
    )

    return PKSNetworkConfig(network=network, retry=retry, logging=logging_config)


def _validate_config(config: PKSNetworkConfig) -> None:
    """
    Validate configuration values.

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    if not config.network.base_url:
        raise InvalidConfigurationError("base_url cannot be empty")
    if not re.match(r'^https?://[^/]+', config.network.base_url):
        raise InvalidConfigurationError(
            f"base_url must be an absolute http(s) URL, got '{config.network.base_url}'"
        )

    if config.network.timeout_interval <= 0:
        raise InvalidConfigurationError(
            f"timeout_interval must be positive, got {config.network.timeout_interval}"
        )

    valid_cache_policies = [policy.value for policy in CachePolicy]
    if config.network.cache_policy not in valid_cache_policies:
        raise InvalidConfigurationError(
            f"cache_policy must be one of {valid_cache_policies}, "
            f"got '{config.network.cache_policy}'"
        )

    if config.network.pool_connections < 1:
        raise InvalidConfigurationError(
            f"pool_connections must be at least 1, got {config.network.pool_connections}"
        )
    if config.network.pool_maxsize < 1:
        raise InvalidConfigurationError(
            f"pool_maxsize must be at least 1, got {config.network.pool_maxsize}"
        )

    if config.retry.max_retry_count < 0:
        raise InvalidConfigurationError(
            f"max_retry_count must be non-negative, got {config.retry.max_retry_count}"
        )
    if config.retry.base_delay < 0:
        raise InvalidConfigurationError(
            f"base_delay must be non-negative, got {config.retry.base_delay}"
        )
    if config.retry.max_delay < config.retry.base_delay:
        raise InvalidConfigurationError(
            f"max_delay ({config.retry.max_delay}) must be >= base_delay ({config.retry.base_delay})"
        )
    if config.retry.scale_factor < 1:
        raise InvalidConfigurationError(
            f"scale_factor must be at least 1, got {config.retry.scale_factor}"
        )

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.logging.level.upper() not in valid_log_levels:
        raise InvalidConfigurationError(
            f"logging level must be one of {valid_log_levels}, "
            f"got '{config.logging.level}'"
        )

    valid_formats = ["console", "json"]
    if config.logging.format not in valid_formats:
        raise InvalidConfigurationError(
            f"logging format must be one of {valid_formats}, got '{config.logging.format}'"
        )
