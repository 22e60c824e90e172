"""Configuration management for Bridge Aid."""

from .environment import EnvironmentConfig, load_environment_config, parse_data_source
from .exceptions import ConfigurationError
from .loader import load_config, validate_config_file
from .models import (
    ActionPlanConfig,
    AdvancedConfig,
    AppConfig,
    CatalogConfig,
    DataSourceType,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ServerConfig,
)

__all__ = [
    "load_config",
    "validate_config_file",
    "load_environment_config",
    "parse_data_source",
    "AppConfig",
    "CatalogConfig",
    "ActionPlanConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "ServerConfig",
    "EnvironmentConfig",
    "DataSourceType",
    "LogLevel",
    "LogFormat",
    "ConfigurationError",
]
