"""
Tests for client configuration loading.
"""

import pytest

from client.config import (
    DEFAULT_ACCOUNT,
    DEFAULT_HIVE_NODES,
    ConfigError,
    load_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the user's environment and home directory."""
    for name in ("FLOWERENGINE_ACCOUNT", "HIVE_NODES", "FLOWERENGINE_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, tmp_path):
        config = load_config()

        assert config.account == DEFAULT_ACCOUNT
        assert config.hive_nodes == DEFAULT_HIVE_NODES
        assert config.timeout == 30.0

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "account: mynodes\n"
            "hive_nodes:\n"
            "  - https://api.one\n"
            "  - https://api.two\n"
            "timeout: 5\n"
        )

        config = load_config(path)

        assert config.account == "mynodes"
        assert config.hive_nodes == ["https://api.one", "https://api.two"]
        assert config.timeout == 5.0

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("account: fromfile\n")
        monkeypatch.setenv("FLOWERENGINE_ACCOUNT", "fromenv")
        monkeypatch.setenv("HIVE_NODES", "https://api.one, https://api.two,")
        monkeypatch.setenv("FLOWERENGINE_TIMEOUT", "12.5")

        config = load_config(path)

        assert config.account == "fromenv"
        assert config.hive_nodes == ["https://api.one", "https://api.two"]
        assert config.timeout == 12.5

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.yaml")

    def test_file_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("account: [unclosed\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_timeout_in_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("timeout: abc\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(path)

        assert "timeout" in str(exc_info.value)

    def test_hive_nodes_without_value(self, tmp_path):
        """Test an empty hive_nodes key is rejected rather than ignored."""
        path = tmp_path / "config.yaml"
        path.write_text("hive_nodes:\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(path)

        assert "hive_nodes" in str(exc_info.value)

    def test_invalid_timeout_env(self, monkeypatch):
        monkeypatch.setenv("FLOWERENGINE_TIMEOUT", "soon")

        with pytest.raises(ConfigError):
            load_config()

    def test_default_file_in_home(self, tmp_path):
        """Test ~/.flowerengine/config.yaml is read when present."""
        config_dir = tmp_path / ".flowerengine"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("hive_nodes: https://api.one,https://api.two\n")

        config = load_config()

        assert config.config_dir == config_dir
        assert config.hive_nodes == ["https://api.one", "https://api.two"]
