"""Tests for configuration loading."""

import pytest

from wpgate.config import GatewayConfig, ServerConfig, WordPressConfig, load_config
from wpgate.framework.errors import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep a developer's ./wpgate.yml out of the tests."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestLoadConfig:
    def test_defaults(self) -> None:
        config = load_config(env={})

        assert config.server.port == 3000
        assert config.server.host == "0.0.0.0"
        assert config.server.api_key is None
        assert config.server.sse_path == "/sse"
        assert config.server.message_path == "/messages"
        assert not config.wordpress.has_credentials

    def test_environment(self) -> None:
        env = {
            "WORDPRESS_SITE_URL": "https://blog.example.com/",
            "WORDPRESS_USERNAME": "editor",
            "WORDPRESS_APP_PASSWORD": "abcd efgh",
            "PORT": "8080",
            "API_KEY": "k",
            "WPGATE_LOG_LEVEL": "debug",
            "WPGATE_STRUCTURED_LOGS": "true",
        }

        config = load_config(env=env)

        assert config.wordpress.site_url == "https://blog.example.com"
        assert config.wordpress.has_credentials
        assert config.server.port == 8080
        assert config.server.api_key == "k"
        assert config.server.log_level == "DEBUG"
        assert config.server.structured_logging is True

    def test_env_overrides_yaml(self, isolated_cwd) -> None:
        path = isolated_cwd / "custom.yml"
        path.write_text(
            "wordpress:\n"
            "  site_url: https://file.example.com\n"
            "  username: from-file\n"
            "server:\n"
            "  port: 4000\n"
            "  api_key: file-key\n"
        )

        config = load_config(path, env={"WORDPRESS_USERNAME": "from-env"})

        assert config.wordpress.site_url == "https://file.example.com"
        assert config.wordpress.username == "from-env"
        assert config.server.port == 4000
        assert config.server.api_key == "file-key"
        assert config.config_path == path

    def test_default_file_is_picked_up(self, isolated_cwd) -> None:
        (isolated_cwd / "wpgate.yml").write_text("server:\n  port: 5000\n")
        assert load_config(env={}).server.port == 5000

    def test_explicit_missing_file(self, isolated_cwd) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(isolated_cwd / "missing.yml", env={})

    @pytest.mark.parametrize("port", ["0", "70000", "abc"])
    def test_invalid_port(self, port) -> None:
        with pytest.raises(ConfigurationError):
            load_config(env={"PORT": port})

    def test_empty_api_key_is_open(self) -> None:
        assert load_config(env={"API_KEY": ""}).server.api_key is None


class TestDataclasses:
    def test_credential_names_missing_variable(self) -> None:
        with pytest.raises(ConfigurationError, match="WORDPRESS_SITE_URL"):
            WordPressConfig().credential()
        with pytest.raises(ConfigurationError, match="WORDPRESS_USERNAME"):
            WordPressConfig(site_url="https://x").credential()

    def test_secrets_hidden_from_repr(self) -> None:
        config = GatewayConfig(
            wordpress=WordPressConfig("https://x", "u", "app-pass"),
            server=ServerConfig(api_key="gate-key"),
        )
        text = repr(config)
        assert "app-pass" not in text
        assert "gate-key" not in text
        assert sorted(config.secrets()) == ["app-pass", "gate-key"]

    def test_describe_reports_presence_only(self) -> None:
        config = GatewayConfig(wordpress=WordPressConfig("https://x", "u", "app-pass"))
        summary = config.describe()
        assert summary["WORDPRESS_APP_PASSWORD"] == "Set (hidden)"
        assert summary["API_KEY"] == "Not set (open access)"
        assert "app-pass" not in str(summary)

    def test_paths_must_be_absolute(self) -> None:
        with pytest.raises(ValueError):
            ServerConfig(sse_path="sse")
