"""
Unit tests for configuration system.
"""

import os
import tempfile
import pytest
from bunnystore.config.settings import StorageConfig
from bunnystore.core.errors import ConfigurationError


class TestStorageConfig:
    """Tests for StorageConfig."""

    def test_default_values(self):
        config = StorageConfig()
        assert config.api_url == "https://storage.bunnycdn.com/"
        assert config.api_key == ""
        assert config.assume_exists is False
        assert config.request_timeout == 30.0
        assert config.upload_timeout == 600.0

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("BUNNY_API_URL", "https://storage.bunnycdn.com/myzone/")
        monkeypatch.setenv("BUNNY_API_KEY", "secret")
        monkeypatch.setenv("BUNNY_MEDIA_URL", "https://myzone.b-cdn.net/")
        monkeypatch.setenv("BUNNYSTORE_ASSUME_EXISTS", "true")
        monkeypatch.setenv("BUNNYSTORE_REQUEST_TIMEOUT", "5")

        config = StorageConfig.from_env()
        assert config.api_url == "https://storage.bunnycdn.com/myzone/"
        assert config.api_key == "secret"
        assert config.media_url == "https://myzone.b-cdn.net/"
        assert config.assume_exists is True
        assert config.request_timeout == 5.0

    def test_from_env_assume_exists_defaults_false(self, monkeypatch):
        monkeypatch.delenv("BUNNYSTORE_ASSUME_EXISTS", raising=False)
        assert StorageConfig.from_env().assume_exists is False

        monkeypatch.setenv("BUNNYSTORE_ASSUME_EXISTS", "no")
        assert StorageConfig.from_env().assume_exists is False

    def test_from_yaml_file(self):
        # Create a temporary YAML file
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("""
api_url: https://storage.bunnycdn.com/yamlzone/
api_key: yamlkey
assume_exists: true
upload_timeout: 120
""")
            yaml_file = f.name

        try:
            config = StorageConfig.from_file(yaml_file)
            assert config.api_url == "https://storage.bunnycdn.com/yamlzone/"
            assert config.api_key == "yamlkey"
            assert config.assume_exists is True
            assert config.upload_timeout == 120
        finally:
            os.unlink(yaml_file)

    def test_from_json_file(self):
        # Create a temporary JSON file
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            f.write("""{
    "api_url": "https://storage.bunnycdn.com/jsonzone/",
    "api_key": "jsonkey",
    "media_url": "https://jsonzone.b-cdn.net/"
}""")
            json_file = f.name

        try:
            config = StorageConfig.from_file(json_file)
            assert config.api_url == "https://storage.bunnycdn.com/jsonzone/"
            assert config.api_key == "jsonkey"
            assert config.media_url == "https://jsonzone.b-cdn.net/"
        finally:
            os.unlink(json_file)

    def test_from_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            StorageConfig.from_file("/nonexistent/config.yaml")

    def test_from_file_unsupported_format(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("api_key = 'x'")
        with pytest.raises(ConfigurationError, match="Unsupported config file format"):
            StorageConfig.from_file(str(path))

    def test_from_file_unknown_keys(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("api_key: x\nbucket: nope\n")
        with pytest.raises(ConfigurationError, match="Unknown configuration keys: bucket"):
            StorageConfig.from_file(str(path))

    def test_load_file_overrides_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BUNNY_API_KEY", "envkey")
        monkeypatch.setenv("BUNNY_MEDIA_URL", "https://env.b-cdn.net/")
        path = tmp_path / "config.yaml"
        path.write_text("api_key: filekey\n")

        config = StorageConfig.load(str(path))
        assert config.api_key == "filekey"
        assert config.media_url == "https://env.b-cdn.net/"

    def test_load_file_default_value_overrides_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BUNNYSTORE_ASSUME_EXISTS", "1")
        monkeypatch.setenv("BUNNYSTORE_REQUEST_TIMEOUT", "5")
        path = tmp_path / "config.yaml"
        path.write_text("assume_exists: false\nrequest_timeout: 30.0\n")

        config = StorageConfig.load(str(path))
        assert config.assume_exists is False
        assert config.request_timeout == 30.0

    def test_load_without_file_uses_env(self, monkeypatch):
        monkeypatch.setenv("BUNNY_API_KEY", "envkey")
        assert StorageConfig.load(None).api_key == "envkey"

    def test_validate_success(self):
        config = StorageConfig(api_key="secret")
        config.validate()  # Should not raise

    def test_validate_missing_api_key(self):
        config = StorageConfig()
        with pytest.raises(ConfigurationError, match="api_key is required"):
            config.validate()

    def test_validate_missing_api_url(self):
        config = StorageConfig(api_url="", api_key="secret")
        with pytest.raises(ConfigurationError, match="api_url is required"):
            config.validate()

    def test_validate_invalid_timeouts(self):
        with pytest.raises(ConfigurationError, match="request_timeout must be positive"):
            StorageConfig(api_key="secret", request_timeout=0).validate()

        with pytest.raises(ConfigurationError, match="upload_timeout must be positive"):
            StorageConfig(api_key="secret", upload_timeout=-1).validate()
