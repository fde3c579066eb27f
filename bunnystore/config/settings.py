"""
BUNNYSTORE - Configuration Management

Handles adapter configuration from environment variables and files.
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional
import yaml
import json

from bunnystore.core.errors import ConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class StorageConfig:
    """Storage zone configuration."""

    # Storage API settings
    api_url: str = "https://storage.bunnycdn.com/"  # Includes the zone name, e.g. .../myzone/
    api_key: str = ""
    media_url: str = ""  # Public pull-zone base URL, e.g. https://myzone.b-cdn.net/

    # Skip existence probes once the host application is fully initialized
    assume_exists: bool = False

    # Existence cache
    cache_dir: str = "/tmp/bunnystore_cache"

    # Request timeouts in seconds
    request_timeout: float = 30.0
    upload_timeout: float = 600.0

    @classmethod
    def from_env(cls) -> "StorageConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - BUNNY_API_URL: Storage API URL including the zone name
        - BUNNY_API_KEY: Storage zone access key
        - BUNNY_MEDIA_URL: Public media base URL
        - BUNNYSTORE_ASSUME_EXISTS: Treat every path as existing (1/true/yes/on)
        - BUNNYSTORE_CACHE_DIR: Directory for the existence cache
        - BUNNYSTORE_REQUEST_TIMEOUT: Timeout for GET/DELETE requests (seconds)
        - BUNNYSTORE_UPLOAD_TIMEOUT: Timeout for uploads (seconds)
        """
        return cls(
            api_url=os.environ.get("BUNNY_API_URL", cls.api_url),
            api_key=os.environ.get("BUNNY_API_KEY", cls.api_key),
            media_url=os.environ.get("BUNNY_MEDIA_URL", cls.media_url),
            assume_exists=os.environ.get("BUNNYSTORE_ASSUME_EXISTS", "").strip().lower() in _TRUTHY,
            cache_dir=os.environ.get("BUNNYSTORE_CACHE_DIR", cls.cache_dir),
            request_timeout=float(os.environ.get("BUNNYSTORE_REQUEST_TIMEOUT", cls.request_timeout)),
            upload_timeout=float(os.environ.get("BUNNYSTORE_UPLOAD_TIMEOUT", cls.upload_timeout)),
        )

    @classmethod
    def from_file(cls, path: str) -> "StorageConfig":
        """
        Load configuration from YAML or JSON file.

        Args:
            path: Path to configuration file (.yaml, .yml, or .json)

        Returns:
            StorageConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config file format or keys are invalid
        """
        return cls(**cls._read_file(path))

    @classmethod
    def _read_file(cls, path: str) -> Dict[str, Any]:
        """Read and check the raw key/value mapping of a configuration file."""
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            if path.endswith((".yaml", ".yml")):
                data = yaml.safe_load(f)
            elif path.endswith(".json"):
                data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported config file format: {path}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {path}")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        return data

    @classmethod
    def load(cls, config_file: Optional[str] = None) -> "StorageConfig":
        """
        Load configuration with priority: file > env > defaults.

        Args:
            config_file: Optional path to configuration file

        Returns:
            StorageConfig instance
        """
        # Start with environment variables
        config = cls.from_env()

        # Override with keys present in the file
        if config_file and os.path.exists(config_file):
            for key, value in cls._read_file(config_file).items():
                setattr(config, key, value)

        return config

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.api_url:
            raise ConfigurationError("api_url is required")

        if not self.api_key:
            raise ConfigurationError("api_key is required")

        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")

        if self.upload_timeout <= 0:
            raise ConfigurationError("upload_timeout must be positive")
