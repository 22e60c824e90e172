"""Environment variable loading and validation."""

import os
from typing import Dict, List, Mapping, Optional

from .exceptions import ConfigurationError
from .models import DataSourceType

# Accepted spellings for RESOURCE_DATA_SOURCE
DATA_SOURCE_ALIASES: Dict[str, DataSourceType] = {
    "json": DataSourceType.JSON,
    "file": DataSourceType.JSON,
    "static": DataSourceType.JSON,
    "api": DataSourceType.API,
    "remote": DataSourceType.API,
    "database": DataSourceType.DATABASE,
    "db": DataSourceType.DATABASE,
}

DEFAULT_PORT = 3001


class EnvironmentConfig:
    """Settings that come from the process environment (or a .env file)."""

    def __init__(
        self,
        data_source: DataSourceType = DataSourceType.JSON,
        resource_api_url: Optional[str] = None,
        resource_api_key: Optional[str] = None,
        database_url: Optional[str] = None,
        openai_api_key: Optional[str] = None,
        log_level: Optional[str] = None,
        port: Optional[int] = None,
        environment: str = "local",
    ):
        self.data_source = data_source
        self.resource_api_url = resource_api_url
        self.resource_api_key = resource_api_key
        self.database_url = database_url or "sqlite:///./data/bridge_aid.db"
        self.openai_api_key = openai_api_key
        self.log_level = log_level
        self.port = port
        self.environment = environment

    def resolve_port(self, configured: Optional[int] = None) -> int:
        """PORT from the environment, else the config file value, else 3001."""
        return self.port or configured or DEFAULT_PORT

    def warnings(self) -> List[str]:
        """Recoverable inconsistencies worth telling the operator about."""
        messages = []
        if self.data_source == DataSourceType.API and not self.resource_api_url:
            messages.append(
                "RESOURCE_DATA_SOURCE=api but RESOURCE_API_URL is not set; "
                "the static catalog will be served instead"
            )
        if self.resource_api_key and self.data_source != DataSourceType.API:
            messages.append(
                f"RESOURCE_API_KEY is set but RESOURCE_DATA_SOURCE is '{self.data_source.value}'; "
                "the key is ignored"
            )
        return messages


def parse_data_source(value: Optional[str]) -> DataSourceType:
    """Map a RESOURCE_DATA_SOURCE value (or alias) onto a DataSourceType.

    Raises:
        ValueError: If the value is not a known source name
    """
    if value is None or not value.strip():
        return DataSourceType.JSON
    try:
        return DATA_SOURCE_ALIASES[value.strip().lower()]
    except KeyError:
        valid = ", ".join(sorted(DATA_SOURCE_ALIASES))
        raise ValueError(f"Invalid RESOURCE_DATA_SOURCE: '{value}'. Must be one of: {valid}")


def load_environment_config(environ: Optional[Mapping[str, str]] = None) -> EnvironmentConfig:
    """Read and validate the environment.

    Optional variables:
    - RESOURCE_DATA_SOURCE: json (default), api or database
    - RESOURCE_API_URL / RESOURCE_API_KEY: remote catalog endpoint and credential
    - DATABASE_URL: SQLAlchemy URL for the database source
    - OPENAI_API_KEY: enables LLM-generated action plans
    - LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
    - PORT: HTTP port (unset: server.port from the config file, else 3001)
    - ENVIRONMENT: label attached to log records (default local)

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)

    Raises:
        ConfigurationError: If any value is present but invalid
    """
    env = os.environ if environ is None else environ
    errors = []

    data_source = DataSourceType.JSON
    try:
        data_source = parse_data_source(env.get("RESOURCE_DATA_SOURCE"))
    except ValueError as e:
        errors.append(str(e))

    log_level = env.get("LOG_LEVEL") or None
    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )
        else:
            log_level = log_level.upper()

    port: Optional[int] = None
    port_str = env.get("PORT")
    if port_str:
        try:
            port = int(port_str)
            if not 1 <= port <= 65535:
                errors.append(f"Invalid PORT: {port}. Must be between 1 and 65535.")
        except ValueError:
            errors.append(f"Invalid PORT: '{port_str}'. Must be a valid integer.")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "RESOURCE_DATA_SOURCE accepts json, api or database",
            ],
        )

    return EnvironmentConfig(
        data_source=data_source,
        resource_api_url=env.get("RESOURCE_API_URL") or None,
        resource_api_key=env.get("RESOURCE_API_KEY") or None,
        database_url=env.get("DATABASE_URL") or None,
        openai_api_key=env.get("OPENAI_API_KEY") or None,
        log_level=log_level,
        port=port,
        environment=env.get("ENVIRONMENT") or "local",
    )
