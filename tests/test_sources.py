"""Unit tests for catalog sources."""

import json
import logging
from unittest.mock import Mock, patch

import pytest
import requests

from bridge_aid.config.environment import EnvironmentConfig
from bridge_aid.config.models import AppConfig, CatalogConfig, DataSourceType
from bridge_aid.domain.models import Resource
from bridge_aid.persistence import ResourceRepository, close_database, get_session, init_database
from bridge_aid.sources import (
    CatalogUnavailableError,
    DatabaseSource,
    FallbackSource,
    RemoteCatalogSource,
    SourceConfigurationError,
    SourceError,
    SourceHTTPError,
    SourceResponseError,
    SourceTimeoutError,
    StaticFileSource,
    bundled_catalog_path,
    extract_records,
    get_source,
)
from bridge_aid.sources.base import ResourceSource


# ============================================================================
# Fixtures
# ============================================================================


class StubSource(ResourceSource):
    """In-memory source returning fixed records or raising a fixed error."""

    def __init__(self, name, records=None, error=None):
        self.name = name
        self.records = records or []
        self.error = error
        self.calls = 0
        self.closed = False

    def fetch_records(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.records

    def close(self):
        self.closed = True


@pytest.fixture
def remote_source():
    source = RemoteCatalogSource("https://catalog.example.org/resources", timeout=10)
    yield source
    source.close()


def _response(status_code=200, payload=None, reason="OK"):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def db_url(tmp_path):
    yield f"sqlite:///{tmp_path / 'catalog.db'}"
    close_database()


# ============================================================================
# extract_records
# ============================================================================


class TestExtractRecords:
    """Tests for pulling record lists out of payloads."""

    def test_bare_list(self):
        """Test a JSON array is returned as-is."""
        assert extract_records([{"id": 1}], origin="test") == [{"id": 1}]

    @pytest.mark.parametrize("key", ["resources", "data", "results", "organizations"])
    def test_envelope_keys(self, key):
        """Test each known envelope key is unwrapped."""
        assert extract_records({key: [{"id": 1}]}, origin="test") == [{"id": 1}]

    def test_envelope_key_order(self):
        """Test resources wins over data when both are present."""
        payload = {"data": [{"id": 2}], "resources": [{"id": 1}]}

        assert extract_records(payload, origin="test") == [{"id": 1}]

    def test_unknown_object_yields_empty(self, caplog):
        """Test an object without envelope keys yields no records and a warning."""
        with caplog.at_level(logging.WARNING):
            assert extract_records({"items": [{"id": 1}]}, origin="test") == []

        assert any(
            getattr(r, "event", None) == "source.fetch.unexpected_structure" for r in caplog.records
        )

    def test_envelope_not_a_list(self):
        """Test a non-array envelope value is rejected."""
        with pytest.raises(SourceResponseError):
            extract_records({"resources": {"id": 1}}, origin="test")

    def test_scalar_payload(self):
        """Test scalars are rejected."""
        with pytest.raises(SourceResponseError):
            extract_records("nope", origin="test")


# ============================================================================
# Static file
# ============================================================================


class TestStaticFileSource:
    """Tests for the JSON file source."""

    def test_reads_catalog_file(self, catalog_file, sample_records):
        """Test records are read in file order."""
        source = StaticFileSource(catalog_file)

        load = source.load()

        assert load.records == sample_records
        assert load.served_by == "json"
        assert load.fell_back is False

    def test_wrapped_catalog_accepted(self, tmp_path):
        """Test an object wrapping the array under resources is accepted."""
        path = tmp_path / "wrapped.json"
        path.write_text(json.dumps({"resources": [{"id": 1, "name": "A", "category": "food"}]}))

        assert len(StaticFileSource(path).fetch_records()) == 1

    def test_missing_file(self, tmp_path):
        """Test a missing file raises CatalogUnavailableError with the path."""
        path = tmp_path / "absent.json"

        with pytest.raises(CatalogUnavailableError) as exc_info:
            StaticFileSource(path).fetch_records()

        assert exc_info.value.path == str(path)

    def test_malformed_file(self, tmp_path):
        """Test invalid JSON raises CatalogUnavailableError."""
        path = tmp_path / "broken.json"
        path.write_text("[{not json")

        with pytest.raises(CatalogUnavailableError):
            StaticFileSource(path).fetch_records()

    def test_default_is_bundled_catalog(self):
        """Test the bundled catalog loads and is well formed."""
        source = StaticFileSource()

        records = source.fetch_records()

        assert source.path == bundled_catalog_path()
        assert len(records) >= 15
        categories = {r["category"] for r in records}
        assert {"food", "housing", "mental_health", "legal", "jobs"} <= categories


# ============================================================================
# Remote catalog
# ============================================================================


class TestRemoteCatalogSource:
    """Tests for the HTTP catalog source."""

    def test_requires_url(self):
        """Test a missing URL is a configuration error."""
        with pytest.raises(SourceConfigurationError, match="RESOURCE_API_URL"):
            RemoteCatalogSource(None)
        with pytest.raises(SourceConfigurationError):
            RemoteCatalogSource("   ")

    def test_invalid_timeout(self):
        """Test timeouts outside 5-300 seconds are rejected."""
        with pytest.raises(SourceConfigurationError):
            RemoteCatalogSource("https://catalog.example.org", timeout=1)

    def test_fetch_bare_array(self, remote_source):
        """Test a JSON array response is returned as records."""
        response = _response(payload=[{"id": 1}, {"id": 2}])

        with patch.object(remote_source._session, "request", return_value=response) as request:
            records = remote_source.fetch_records()

        assert records == [{"id": 1}, {"id": 2}]
        kwargs = request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "https://catalog.example.org/resources"
        assert kwargs["timeout"] == 10
        assert kwargs["headers"] == {}

    def test_fetch_enveloped_response(self, remote_source):
        """Test records wrapped under data are unwrapped."""
        response = _response(payload={"data": [{"id": 1}], "total": 1})

        with patch.object(remote_source._session, "request", return_value=response):
            assert remote_source.fetch_records() == [{"id": 1}]

    def test_bearer_auth_header(self):
        """Test an API key is sent as a bearer token."""
        source = RemoteCatalogSource("https://catalog.example.org", api_key="secret")

        with patch.object(source._session, "request", return_value=_response(payload=[])) as request:
            source.fetch_records()

        assert request.call_args.kwargs["headers"] == {"Authorization": "Bearer secret"}

    def test_id_secret_key_also_sent_as_api_key(self):
        """Test id:secret keys are sent in X-API-Key as well."""
        source = RemoteCatalogSource("https://catalog.example.org", api_key="app:secret")

        with patch.object(source._session, "request", return_value=_response(payload=[])) as request:
            source.fetch_records()

        headers = request.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer app:secret"
        assert headers["X-API-Key"] == "app:secret"

    def test_user_agent_on_session(self, remote_source):
        """Test the session carries the configured User-Agent."""
        assert remote_source._session.headers["User-Agent"] == "BridgeAid/0.1"

    @pytest.mark.parametrize("status_code", [401, 404, 500, 503])
    def test_http_error(self, remote_source, status_code):
        """Test 4xx and 5xx statuses raise SourceHTTPError."""
        response = _response(status_code=status_code, reason="Error")

        with patch.object(remote_source._session, "request", return_value=response):
            with pytest.raises(SourceHTTPError) as exc_info:
                remote_source.fetch_records()

        assert exc_info.value.status_code == status_code
        assert exc_info.value.url == remote_source.url

    def test_timeout(self, remote_source):
        """Test request timeouts raise SourceTimeoutError."""
        with patch.object(
            remote_source._session, "request", side_effect=requests.exceptions.Timeout("slow")
        ):
            with pytest.raises(SourceTimeoutError):
                remote_source.fetch_records()

    def test_connection_error(self, remote_source):
        """Test connection failures raise SourceHTTPError with status 0."""
        with patch.object(
            remote_source._session,
            "request",
            side_effect=requests.exceptions.ConnectionError("refused"),
        ):
            with pytest.raises(SourceHTTPError) as exc_info:
                remote_source.fetch_records()

        assert exc_info.value.status_code == 0

    def test_invalid_json(self, remote_source):
        """Test an unparseable body raises SourceResponseError."""
        response = _response(payload=ValueError("Expecting value"))

        with patch.object(remote_source._session, "request", return_value=response):
            with pytest.raises(SourceResponseError):
                remote_source.fetch_records()


# ============================================================================
# Database
# ============================================================================


class TestDatabaseSource:
    """Tests for the database source."""

    def test_reads_seeded_rows(self, db_url, make_resource):
        """Test rows written through the repository come back as records."""
        init_database(db_url)
        with get_session() as session:
            ResourceRepository(session).upsert_many(
                [make_resource(id=1, name="A"), make_resource(id="b-2", name="B", category="legal")]
            )
        close_database()

        records = DatabaseSource(db_url).fetch_records()

        assert [r["id"] for r in records] == [1, "b-2"]
        assert records[1]["category"] == "legal"

    def test_empty_table(self, db_url):
        """Test a fresh database yields no records."""
        assert DatabaseSource(db_url).fetch_records() == []

    def test_unreachable_database_raises_source_error(self):
        """Test persistence failures are wrapped in SourceError."""
        close_database()

        with pytest.raises(SourceError):
            DatabaseSource("notadialect://nowhere").fetch_records()


# ============================================================================
# Fallback
# ============================================================================


class TestFallbackSource:
    """Tests for the primary/fallback composite."""

    def test_primary_success(self):
        """Test primary records are served when available."""
        primary = StubSource("api", records=[{"id": 1}])
        fallback = StubSource("json", records=[{"id": 99}])

        load = FallbackSource(primary, fallback).load()

        assert load.records == [{"id": 1}]
        assert load.served_by == "api"
        assert load.fell_back is False
        assert fallback.calls == 0

    def test_primary_error_falls_back(self, caplog):
        """Test a SourceError switches to the fallback and records the reason."""
        primary = StubSource("api", error=SourceHTTPError("HTTP 503", status_code=503, url="x"))
        fallback = StubSource("json", records=[{"id": 99}])

        with caplog.at_level(logging.WARNING):
            load = FallbackSource(primary, fallback).load()

        assert load.records == [{"id": 99}]
        assert load.served_by == "json"
        assert load.fell_back is True
        assert "HTTP 503" in load.primary_error
        assert any(getattr(r, "event", None) == "source.fallback.activated" for r in caplog.records)

    def test_unexpected_error_falls_back(self):
        """Test non-source exceptions from the primary also fall back."""
        primary = StubSource("database", error=RuntimeError("boom"))
        fallback = StubSource("json", records=[{"id": 99}])

        load = FallbackSource(primary, fallback).load()

        assert load.fell_back is True
        assert "RuntimeError" in load.primary_error

    def test_empty_primary_falls_back(self):
        """Test an empty primary result is treated as a failure."""
        primary = StubSource("api", records=[])
        fallback = StubSource("json", records=[{"id": 99}])

        load = FallbackSource(primary, fallback).load()

        assert load.served_by == "json"
        assert "no records" in load.primary_error

    def test_fallback_error_propagates(self):
        """Test a failing fallback is not swallowed."""
        primary = StubSource("api", error=SourceError("down"))
        fallback = StubSource("json", error=CatalogUnavailableError("missing"))

        with pytest.raises(CatalogUnavailableError):
            FallbackSource(primary, fallback).load()

    def test_name_and_close(self):
        """Test the composite is named after its primary and closes both."""
        primary = StubSource("api", records=[{"id": 1}])
        fallback = StubSource("json")
        source = FallbackSource(primary, fallback)

        source.close()

        assert source.name == "api"
        assert primary.closed and fallback.closed


# ============================================================================
# Factory
# ============================================================================


class TestGetSource:
    """Tests for the source factory."""

    @pytest.fixture
    def app_config(self, catalog_file):
        return AppConfig(catalog=CatalogConfig(path=catalog_file))

    def test_json_source(self, app_config, catalog_file):
        """Test json yields the static file source alone."""
        source = get_source(EnvironmentConfig(), app_config)

        assert isinstance(source, StaticFileSource)
        assert source.path == catalog_file

    def test_api_source(self, app_config):
        """Test api wraps the remote source with a static fallback."""
        env = EnvironmentConfig(
            data_source=DataSourceType.API,
            resource_api_url="https://catalog.example.org",
            resource_api_key="key",
        )

        source = get_source(env, app_config)

        assert isinstance(source, FallbackSource)
        assert isinstance(source.primary, RemoteCatalogSource)
        assert source.primary.api_key == "key"
        assert isinstance(source.fallback, StaticFileSource)
        source.close()

    def test_api_source_without_url_serves_static(self, app_config, sample_records):
        """Test api without a URL still loads, from the static catalog."""
        env = EnvironmentConfig(data_source=DataSourceType.API)

        load = get_source(env, app_config).load()

        assert load.records == sample_records
        assert load.fell_back is True
        assert "RESOURCE_API_URL" in load.primary_error

    def test_database_source(self, app_config, tmp_path):
        """Test database wraps the database source with a static fallback."""
        env = EnvironmentConfig(
            data_source=DataSourceType.DATABASE,
            database_url=f"sqlite:///{tmp_path / 'x.db'}",
        )

        source = get_source(env, app_config)

        assert isinstance(source, FallbackSource)
        assert isinstance(source.primary, DatabaseSource)
        assert source.name == "database"

    def test_database_source_empty_falls_back(self, app_config, db_url, sample_records):
        """Test an empty database table falls back to the static catalog."""
        env = EnvironmentConfig(data_source=DataSourceType.DATABASE, database_url=db_url)

        load = get_source(env, app_config).load()

        assert load.served_by == "json"
        assert load.records == sample_records

    def test_loaded_records_normalize(self, app_config):
        """Test static records are valid input for Resource."""
        records = get_source(EnvironmentConfig(), app_config).fetch_records()

        assert isinstance(Resource.model_validate(records[0]), Resource)
