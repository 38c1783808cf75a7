"""
Tests for the configuration module.
"""

import tempfile
from pathlib import Path

import pytest

from super_env.config import ConfigurationError, SuperEnvConfig
from super_env.errors import SuperEnvError


class TestSuperEnvConfig:
    """Tests for the SuperEnvConfig class."""

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_default_config(self):
        """Test the default values."""
        config = SuperEnvConfig()

        assert config.key_file == "MASTER_KEY.key"
        assert config.env_file == ".env"
        assert config.encrypted_file == ".env.enc"
        assert config.editor is None

    def test_load_nonexistent_file(self):
        """Test loading a nonexistent file returns the default config."""
        config = SuperEnvConfig.load("/nonexistent/path/config.yaml")

        assert config == SuperEnvConfig()

    def test_load_valid_config(self, temp_dir):
        """Test loading a valid configuration file."""
        config_content = """
key_file: secrets/MASTER_KEY.key
env_file: .env.local
encrypted_file: .env.local.enc
editor: code --wait
"""
        config_path = temp_dir / ".super-env.yaml"
        config_path.write_text(config_content)

        config = SuperEnvConfig.load(str(config_path))

        assert config.key_file == "secrets/MASTER_KEY.key"
        assert config.env_file == ".env.local"
        assert config.encrypted_file == ".env.local.enc"
        assert config.editor == "code --wait"

    def test_unknown_and_null_options_are_ignored(self, temp_dir):
        """Test that unknown keys and null values keep the defaults."""
        config_path = temp_dir / "config.yaml"
        config_path.write_text("key_file: null\nproviders: []\n")

        config = SuperEnvConfig.load(config_path)

        assert config == SuperEnvConfig()

    def test_load_invalid_yaml(self, temp_dir):
        """Test that invalid YAML raises an error."""
        config_path = temp_dir / "invalid.yaml"
        config_path.write_text("invalid: yaml: content: [[[")

        with pytest.raises(ConfigurationError):
            SuperEnvConfig.load(str(config_path))

    def test_load_non_mapping_yaml(self, temp_dir):
        """Test that a YAML list instead of a mapping raises an error."""
        config_path = temp_dir / "list.yaml"
        config_path.write_text("- key_file\n- env_file\n")

        with pytest.raises(ConfigurationError):
            SuperEnvConfig.load(config_path)

    def test_non_string_option_raises_error(self, temp_dir):
        """Test that options must be strings."""
        config_path = temp_dir / "config.yaml"
        config_path.write_text("key_file: 42\n")

        with pytest.raises(ConfigurationError) as exc_info:
            SuperEnvConfig.load(config_path)

        assert "key_file" in str(exc_info.value)

    def test_load_empty_yaml(self, temp_dir):
        """Test loading an empty YAML file."""
        config_path = temp_dir / "empty.yaml"
        config_path.write_text("")

        config = SuperEnvConfig.load(str(config_path))

        assert config == SuperEnvConfig()

    def test_find_config_in_cwd(self, temp_dir, monkeypatch):
        """Test that .super-env.yaml in the working directory is picked up."""
        (temp_dir / ".super-env.yaml").write_text("encrypted_file: secrets.enc\n")
        monkeypatch.chdir(temp_dir)

        config = SuperEnvConfig.load()

        assert config.encrypted_file == "secrets.enc"

    def test_load_utf8_config(self, temp_dir):
        """Test that the config file is read as UTF-8."""
        config_path = temp_dir / ".super-env.yaml"
        config_path.write_bytes("env_file: .env.dév\neditor: éditeur --wait\n".encode("utf-8"))

        config = SuperEnvConfig.load(config_path)

        assert config.env_file == ".env.dév"
        assert config.editor == "éditeur --wait"


class TestConfigurationError:
    """Tests for the ConfigurationError exception."""

    def test_error_message(self):
        """Test error message."""
        error = ConfigurationError("Invalid YAML")

        assert str(error) == "Invalid YAML"
        assert isinstance(error, SuperEnvError)

    def test_error_with_cause(self):
        """Test error with cause exception."""
        original = ValueError("Original error")
        error = ConfigurationError("Config error", from_exception=original)

        assert error.__cause__ == original

    def test_exported_from_package(self):
        """Test that the error can be caught via the package namespace."""
        import super_env

        assert super_env.ConfigurationError is ConfigurationError
        assert "ConfigurationError" in super_env.__all__
