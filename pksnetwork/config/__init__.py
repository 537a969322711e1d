"""
Configuration management for PKSNetwork.

Handles loading and validation of configuration files.
"""

from pksnetwork.config.settings import (
    LoggingConfig,
    NetworkConfig,
    PKSNetworkConfig,
    RetryConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "LoggingConfig",
    "NetworkConfig",
    "PKSNetworkConfig",
    "RetryConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
