"""Factory function for instantiating the configured catalog source."""

from bridge_aid.config.environment import EnvironmentConfig
from bridge_aid.config.models import AppConfig, DataSourceType
from bridge_aid.logging import get_logger

from .base import ResourceSource
from .database import DatabaseSource
from .exceptions import SourceConfigurationError
from .fallback import FallbackSource
from .remote import RemoteCatalogSource
from .static_file import StaticFileSource

logger = get_logger(__name__, component="source")


def get_source(env_config: EnvironmentConfig, app_config: AppConfig) -> ResourceSource:
    """Build the catalog source for the configured RESOURCE_DATA_SOURCE.

    ``json`` yields the static file source alone. ``api`` and ``database``
    are wrapped in a FallbackSource over the static file. An ``api`` source
    without a URL cannot be built; a stand-in primary that always fails takes
    its place, so every load falls back and reports why.

    Raises:
        SourceConfigurationError: If the source type is not supported

    Example:
        >>> app_config, env_config = load_config()
        >>> source = get_source(env_config, app_config)
        >>> load = source.load()
    """
    static = StaticFileSource(app_config.catalog.path)
    source_type = DataSourceType(env_config.data_source)

    if source_type == DataSourceType.JSON:
        return static

    if source_type == DataSourceType.API:
        try:
            primary: ResourceSource = RemoteCatalogSource(
                env_config.resource_api_url,
                api_key=env_config.resource_api_key,
                timeout=app_config.advanced.http_request_timeout,
                user_agent=app_config.advanced.user_agent,
            )
        except SourceConfigurationError as e:
            logger.warning(
                f"Remote catalog not usable, serving static catalog: {e}",
                extra={"event": "source.factory.misconfigured", "source": "api"},
            )
            return FallbackSource(_UnconfiguredSource("api", str(e)), static)
    elif source_type == DataSourceType.DATABASE:
        primary = DatabaseSource(env_config.database_url)
    else:
        raise SourceConfigurationError(f"Unknown data source: {source_type}")

    logger.debug(
        "Creating catalog source",
        extra={
            "event": "source.factory.created",
            "source": source_type.value,
            "source_class": type(primary).__name__,
        },
    )
    return FallbackSource(primary, static)


class _UnconfiguredSource(ResourceSource):
    """Stand-in primary for a source that could not be configured; always fails."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason

    def fetch_records(self):
        raise SourceConfigurationError(self.reason)
