"""Configuration schema models using Pydantic."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class DataSourceType(str, Enum):
    """Where the resource catalog is loaded from."""

    JSON = "json"
    API = "api"
    DATABASE = "database"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class CatalogConfig(BaseModel):
    """Static catalog settings."""

    path: Optional[Path] = Field(
        None, description="Static catalog JSON file (defaults to the bundled catalog)"
    )


class ActionPlanConfig(BaseModel):
    """Settings for LLM-generated action plans."""

    enabled: bool = Field(True, description="Use the LLM when OPENAI_API_KEY is set")
    model: str = Field("gpt-3.5-turbo", min_length=1, description="Chat completion model")
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(200, ge=16, le=4000)
    max_workers: int = Field(
        5, ge=1, le=32, description="Concurrent plan generations per request"
    )

    @field_validator("model")
    @classmethod
    def strip_model(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("model cannot be empty")
        return stripped


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for remote calls (seconds)"
    )
    user_agent: str = Field(
        "BridgeAid/0.1", min_length=1, description="User-Agent string for HTTP requests"
    )
    max_results: int = Field(5, ge=1, le=5, description="Matches returned per request")

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class ServerConfig(BaseModel):
    """HTTP server bind settings. PORT from the environment overrides ``port``."""

    host: str = Field("0.0.0.0", min_length=1)
    port: Optional[int] = Field(None, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class AppConfig(BaseModel):
    """Root configuration object. Every section is optional."""

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    action_plans: ActionPlanConfig = Field(default_factory=ActionPlanConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
