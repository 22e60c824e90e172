"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest

from bridge_aid.config import (
    ConfigurationError,
    DataSourceType,
    load_config,
    load_environment_config,
    parse_data_source,
    validate_config_file,
)
from bridge_aid.config.environment import EnvironmentConfig

EXAMPLE_CONFIG = Path(__file__).parent.parent / "config.example.yaml"


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every test where no stray config.yaml can be picked up."""
    monkeypatch.chdir(tmp_path)


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


class TestConfigurationLoading:
    """Tests for loading the YAML file."""

    def test_no_file_uses_defaults(self):
        """Test every section has defaults when no file exists."""
        app_config, env_config = load_config(environ={})

        assert app_config.catalog.path is None
        assert app_config.action_plans.model == "gpt-3.5-turbo"
        assert app_config.action_plans.max_workers == 5
        assert app_config.logging.level == "INFO"
        assert app_config.advanced.max_results == 5
        assert app_config.server.cors_origins == ["*"]
        assert env_config.data_source == DataSourceType.JSON

    def test_load_example_config(self):
        """Test the shipped example configuration is valid."""
        app_config, _ = load_config(EXAMPLE_CONFIG, environ={})

        assert app_config.action_plans.temperature == 0.7
        assert app_config.logging.format == "key-value"

    def test_load_full_config(self, tmp_path):
        """Test every section is read."""
        path = _write(
            tmp_path,
            """
catalog:
  path: ./catalog.json
action_plans:
  enabled: false
  model: gpt-4o-mini
logging:
  level: DEBUG
  format: json
advanced:
  http_request_timeout: 15
  max_results: 3
server:
  port: 8080
  cors_origins: ["http://localhost:5173"]
""",
        )

        with pytest.warns(UserWarning, match="disabled"):
            app_config, _ = load_config(path, environ={})

        assert app_config.catalog.path == Path("./catalog.json")
        assert app_config.action_plans.enabled is False
        assert app_config.action_plans.model == "gpt-4o-mini"
        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == "json"
        assert app_config.advanced.max_results == 3
        assert app_config.server.port == 8080

    def test_config_yaml_in_working_directory(self, tmp_path):
        """Test config.yaml in the working directory is found."""
        _write(tmp_path, "advanced:\n  max_results: 2\n")

        app_config, _ = load_config(environ={})

        assert app_config.advanced.max_results == 2

    def test_empty_file(self, tmp_path):
        """Test an empty file means defaults."""
        path = _write(tmp_path, "")

        app_config, _ = load_config(path, environ={})

        assert app_config.advanced.max_results == 5

    def test_config_file_not_found(self, tmp_path):
        """Test an explicit missing path is an error."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "absent.yaml", environ={})

    def test_invalid_yaml_syntax(self, tmp_path):
        """Test unparseable YAML is an error with suggestions."""
        path = _write(tmp_path, "advanced:\n  max_results: [1\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path, environ={})

        assert exc_info.value.suggestions

    def test_top_level_must_be_mapping(self, tmp_path):
        """Test a YAML list at the top level is rejected."""
        path = _write(tmp_path, "- one\n- two\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path, environ={})


class TestConfigurationValidation:
    """Tests for schema validation."""

    def test_max_results_above_five(self, tmp_path):
        """Test the result limit cannot exceed five."""
        path = _write(tmp_path, "advanced:\n  max_results: 10\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path, environ={})

        assert any("max_results" in error for error in exc_info.value.errors)

    def test_invalid_log_level(self, tmp_path):
        """Test unknown log levels are rejected."""
        path = _write(tmp_path, "logging:\n  level: LOUD\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path, environ={})

        assert any("logging -> level" in error for error in exc_info.value.errors)

    def test_blank_model(self, tmp_path):
        """Test a whitespace-only model name is rejected."""
        path = _write(tmp_path, "action_plans:\n  model: '   '\n")

        with pytest.raises(ConfigurationError):
            load_config(path, environ={})

    def test_high_worker_count_warns(self, tmp_path):
        """Test many plan workers is allowed with a warning."""
        path = _write(tmp_path, "action_plans:\n  max_workers: 20\n")

        with pytest.warns(UserWarning, match="rate limits"):
            app_config, _ = load_config(path, environ={})

        assert app_config.action_plans.max_workers == 20

    def test_error_message_lists_errors_and_suggestions(self):
        """Test ConfigurationError renders both lists."""
        error = ConfigurationError("Broken", errors=["a: bad"], suggestions=["fix a"])

        assert "1. a: bad" in str(error)
        assert "- fix a" in str(error)


class TestEnvironmentVariables:
    """Tests for environment variable handling."""

    def test_defaults(self):
        """Test an empty environment."""
        env_config = load_environment_config({})

        assert env_config.data_source == DataSourceType.JSON
        assert env_config.resource_api_url is None
        assert env_config.openai_api_key is None
        assert env_config.port is None
        assert env_config.database_url.startswith("sqlite:///")
        assert env_config.environment == "local"

    def test_full_environment(self):
        """Test every variable is read."""
        env_config = load_environment_config(
            {
                "RESOURCE_DATA_SOURCE": "api",
                "RESOURCE_API_URL": "https://catalog.example.org",
                "RESOURCE_API_KEY": "key",
                "DATABASE_URL": "sqlite:///x.db",
                "OPENAI_API_KEY": "sk-test",
                "LOG_LEVEL": "debug",
                "PORT": "8080",
                "ENVIRONMENT": "production",
            }
        )

        assert env_config.data_source == DataSourceType.API
        assert env_config.resource_api_key == "key"
        assert env_config.database_url == "sqlite:///x.db"
        assert env_config.log_level == "DEBUG"
        assert env_config.port == 8080
        assert env_config.environment == "production"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, DataSourceType.JSON),
            ("", DataSourceType.JSON),
            ("JSON", DataSourceType.JSON),
            ("remote", DataSourceType.API),
            (" db ", DataSourceType.DATABASE),
        ],
    )
    def test_data_source_aliases(self, value, expected):
        """Test accepted spellings of RESOURCE_DATA_SOURCE."""
        assert parse_data_source(value) == expected

    def test_unknown_data_source(self):
        """Test an unknown source is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config({"RESOURCE_DATA_SOURCE": "ftp"})

        assert any("RESOURCE_DATA_SOURCE" in error for error in exc_info.value.errors)

    @pytest.mark.parametrize("port", ["abc", "0", "70000"])
    def test_invalid_port(self, port):
        """Test PORT must be an integer in range."""
        with pytest.raises(ConfigurationError):
            load_environment_config({"PORT": port})

    def test_invalid_log_level(self):
        """Test LOG_LEVEL must be a known level."""
        with pytest.raises(ConfigurationError):
            load_environment_config({"LOG_LEVEL": "verbose"})

    def test_errors_are_collected(self):
        """Test all invalid variables are reported together."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config({"RESOURCE_DATA_SOURCE": "ftp", "PORT": "abc"})

        assert len(exc_info.value.errors) == 2

    def test_api_without_url_warns(self):
        """Test api without a URL loads with a warning."""
        with pytest.warns(UserWarning, match="RESOURCE_API_URL"):
            _, env_config = load_config(environ={"RESOURCE_DATA_SOURCE": "api"})

        assert env_config.data_source == DataSourceType.API

    @pytest.mark.parametrize(
        "env_port,configured,expected",
        [(None, None, 3001), (None, 8000, 8000), (9000, 8000, 9000)],
    )
    def test_resolve_port(self, env_port, configured, expected):
        """Test PORT beats server.port, which beats 3001."""
        assert EnvironmentConfig(port=env_port).resolve_port(configured) == expected


class TestConfigurationHelpers:
    """Tests for helper utilities."""

    def test_validate_config_file_utility(self, capsys):
        """Test validate_config_file accepts the example file."""
        assert validate_config_file(EXAMPLE_CONFIG) is True
        assert "valid" in capsys.readouterr().out

    def test_validate_config_file_invalid(self, tmp_path, capsys):
        """Test validate_config_file reports invalid files."""
        path = _write(tmp_path, "advanced:\n  max_results: 0\n")

        assert validate_config_file(path) is False
        assert "failed" in capsys.readouterr().out
