"""
BUNNYSTORE - Adapter Factory

Wires a BunnyCDNAdapter from configuration.
"""

import logging
from typing import Optional

from bunnystore.config.settings import StorageConfig
from bunnystore.infrastructure.cache import FileCache, KeyValueCache
from bunnystore.infrastructure.filesystem import RealFileSystem
from bunnystore.infrastructure.http import HttpClient, RequestsHttpClient
from .adapter import BunnyCDNAdapter
from .client import BunnyStorageClient
from .existence import ExistenceCache

logger = logging.getLogger(__name__)


def create_adapter(
    config: StorageConfig,
    http_client: Optional[HttpClient] = None,
    cache_store: Optional[KeyValueCache] = None,
) -> BunnyCDNAdapter:
    """
    Create a BunnyCDNAdapter from configuration.

    Args:
        config: Storage configuration
        http_client: Override the HTTP client. Defaults to RequestsHttpClient.
        cache_store: Override the existence cache store. Defaults to a
            FileCache in ``config.cache_dir``.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    config.validate()

    client = BunnyStorageClient(
        api_url=config.api_url,
        api_key=config.api_key,
        http_client=http_client or RequestsHttpClient(),
        request_timeout=config.request_timeout,
        upload_timeout=config.upload_timeout,
    )
    store = cache_store if cache_store is not None else FileCache(RealFileSystem(), config.cache_dir)

    logger.info(f"Storage adapter ready for {config.api_url} (assume_exists={config.assume_exists})")
    return BunnyCDNAdapter(
        client=client,
        existence_cache=ExistenceCache(store),
        assume_exists=config.assume_exists,
        media_url=config.media_url,
    )
