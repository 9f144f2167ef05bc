from __future__ import annotations

import gzip
import logging
import os
import shutil
from pathlib import Path
from typing import Mapping, Optional, Protocol
from urllib.request import urlopen

from ..constants import DEFAULT_ENGINES_MIRROR, ENV_ENGINES_MIRROR
from ..platforms import ResolvedPlatform

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 120.0


class Fetcher(Protocol):
    def fetch(self, engine_name: str, platform: ResolvedPlatform, version: str, destination: Path) -> None:
        """Write the raw engine binary to ``destination``."""
        ...  # pragma: no cover - protocol only


class UrlFetcher:
    """Downloads gzip-compressed engines from the distribution mirror."""

    def __init__(
        self,
        mirror: Optional[str] = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        environ: Optional[Mapping[str, str]] = None,
    ):
        env = os.environ if environ is None else environ
        self.mirror = (mirror or env.get(ENV_ENGINES_MIRROR) or DEFAULT_ENGINES_MIRROR).rstrip("/")
        self.timeout = timeout

    def url_for(self, engine_name: str, platform: ResolvedPlatform, version: str) -> str:
        return f"{self.mirror}/all_commits/{version}/{platform.name}/{engine_name}{platform.executable_suffix}.gz"

    def fetch(self, engine_name: str, platform: ResolvedPlatform, version: str, destination: Path) -> None:
        url = self.url_for(engine_name, platform, version)
        logger.info(f"Downloading {engine_name} for {platform.name} from {url}")
        with urlopen(url, timeout=self.timeout) as resp:
            with gzip.GzipFile(fileobj=resp) as compressed, destination.open("wb") as out:
                shutil.copyfileobj(compressed, out)


__all__ = ["Fetcher", "UrlFetcher", "DEFAULT_TIMEOUT_SECONDS"]
