"""Engine binary provisioning and embedding."""

from .cache import CacheKey, EngineCache
from .embedder import DATA_LINE_WIDTH, embed, encode_engine
from .fetch import Fetcher, UrlFetcher
from .provisioner import EngineProvisioner

__all__ = [
    "CacheKey",
    "EngineCache",
    "DATA_LINE_WIDTH",
    "embed",
    "encode_engine",
    "Fetcher",
    "UrlFetcher",
    "EngineProvisioner",
]
