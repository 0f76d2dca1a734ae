"""
Tests for action configuration loading.
"""

from pathlib import Path

import pytest

from leakskit.config.parser import (
    ActionConfig,
    build_config,
    load_action_config,
    load_config_file,
    read_env_inputs,
    string_to_bool,
)
from leakskit.core.exceptions import ConfigurationError


class TestStringToBool:
    """Test boolean input parsing."""

    @pytest.mark.parametrize("value", ["true", "True", " 1 ", "yes", "OK", True])
    def test_truthy(self, value):
        assert string_to_bool(value) is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "", "maybe", False])
    def test_falsy(self, value):
        assert string_to_bool(value) is False


class TestReadEnvInputs:
    """Test GitHub Actions input variables."""

    def test_hyphenated_names(self):
        environ = {"INPUT_VERSION": "8.18.0", "INPUT_FAIL-ON-ERROR": "true"}

        assert read_env_inputs(environ) == {
            "version": "8.18.0",
            "fail-on-error": "true",
        }

    def test_underscore_names(self):
        environ = {"INPUT_CONFIG_PATH": "gl.toml"}

        assert read_env_inputs(environ) == {"config-path": "gl.toml"}

    def test_unrelated_ignored(self):
        assert read_env_inputs({"INPUT_OTHER": "x", "VERSION": "8"}) == {}


class TestLoadConfigFile:
    """Test leakskit.yaml loading."""

    def test_missing_optional(self, tmp_path):
        assert load_config_file(tmp_path / "leakskit.yaml") == {}

    def test_missing_required(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config_file(tmp_path / "leakskit.yaml", required=True)

    def test_values_stringified(self, tmp_path):
        config_file = tmp_path / "leakskit.yaml"
        config_file.write_text(
            "version: 8.18\n"
            "fail-on-error: true\n"
            "run: no\n"
            "config-path: .github/gitleaks.toml\n"
            "github-token:\n"
        )

        assert load_config_file(config_file) == {
            "version": "8.18",
            "fail-on-error": "true",
            "run": "false",
            "config-path": ".github/gitleaks.toml",
            "github-token": "",
        }

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "leakskit.yaml"
        config_file.write_text("")

        assert load_config_file(config_file) == {}

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "leakskit.yaml"
        config_file.write_text("version: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config_file(config_file)

    def test_not_a_mapping(self, tmp_path):
        config_file = tmp_path / "leakskit.yaml"
        config_file.write_text("- 8.18.0\n")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config_file(config_file)

    def test_unknown_keys(self, tmp_path):
        config_file = tmp_path / "leakskit.yaml"
        config_file.write_text("version: latest\nverbose: true\n")

        with pytest.raises(ConfigurationError, match="Unknown keys.*verbose"):
            load_config_file(config_file)


class TestBuildConfig:
    """Test conversion of raw inputs."""

    def test_defaults(self):
        config = build_config({"version": "latest"})

        assert config == ActionConfig(version="latest")
        assert config.run is True
        assert config.fail_on_error is False
        assert config.cache is True
        assert config.config_path is None

    def test_version_required(self):
        with pytest.raises(ConfigurationError, match="not supplied: version"):
            build_config({"version": "  "})

    def test_blank_values_are_unset(self):
        config = build_config(
            {"version": "8.18.0", "config-path": " ", "path": "", "os": ""}
        )

        assert config.config_path is None
        assert config.path is None
        assert config.os is None

    def test_paths(self, tmp_path):
        config = build_config(
            {
                "version": "8.18.0",
                "path": str(tmp_path),
                "cache-dir": "/var/cache/gl",
                "install-dir": "/opt/gl",
            }
        )

        assert config.path == tmp_path
        assert config.source_path == tmp_path
        assert config.cache_dir == Path("/var/cache/gl")
        assert config.install_dir == Path("/opt/gl")

    def test_source_path_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert build_config({"version": "8.18.0"}).source_path == tmp_path

    def test_frozen(self):
        config = build_config({"version": "8.18.0"})

        with pytest.raises(AttributeError):
            config.version = "7.0.0"


class TestLoadActionConfig:
    """Test layering of all sources."""

    def test_layering(self, tmp_path, monkeypatch):
        """defaults < file < environment < command line."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "leakskit.yaml").write_text(
            "version: 7.6.1\npath: from-file\nfail-on-error: true\nos: linux\n"
        )
        environ = {"INPUT_VERSION": "8.0.0", "INPUT_PATH": "from-env"}

        config = load_action_config({"version": "8.18.0"}, environ=environ)

        assert config.version == "8.18.0"
        assert config.path == Path("from-env")
        assert config.fail_on_error is True
        assert config.os == "linux"
        assert config.run is True

    def test_none_cli_values_ignored(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        config = load_action_config(
            {"version": None, "run": None}, environ={"INPUT_VERSION": "latest"}
        )

        assert config.version == "latest"
        assert config.run is True

    def test_explicit_config_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config_file = tmp_path / "ci" / "gitleaks-action.yaml"
        config_file.parent.mkdir()
        config_file.write_text("version: latest\ncache: false\n")

        config = load_action_config(environ={}, config_file=config_file)

        assert config.version == "latest"
        assert config.cache is False

    def test_explicit_config_file_missing(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_action_config(environ={}, config_file=tmp_path / "missing.yaml")

    def test_missing_version(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigurationError, match="version"):
            load_action_config(environ={})
