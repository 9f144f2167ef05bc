from __future__ import annotations

import http.client
import logging
import os
import stat
import tempfile
import threading
import zlib
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Optional, Sequence

from ..platforms import ResolvedPlatform
from ..utils.errors import FetchError
from .cache import CacheKey, EngineCache
from .fetch import Fetcher, UrlFetcher

logger = logging.getLogger(__name__)

# transport, decompression and malformed-URL failures raised by fetchers
_FETCH_FAILURES = (OSError, EOFError, ValueError, zlib.error, http.client.HTTPException)


class EngineProvisioner:
    """Ensures engine binaries are present in the shared cache.

    At most one fetch runs per cache key within a process; concurrent
    requesters of the same key wait on its lock and then reuse the file.
    Downloads are staged next to the final path and moved into place with
    ``os.replace`` so other processes never observe a partial entry.
    """

    def __init__(self, cache: EngineCache, fetcher: Optional[Fetcher] = None):
        self.cache = cache
        self.fetcher = fetcher if fetcher is not None else UrlFetcher()
        self.fetch_count = 0
        self._locks: Dict[CacheKey, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, key: CacheKey) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def ensure(self, engine_name: str, platform: ResolvedPlatform, version: str) -> Path:
        key = self.cache.key_for(engine_name, platform, version)
        with self._lock_for(key):
            cached = self.cache.lookup(engine_name, platform, version)
            if cached is not None:
                logger.debug(f"using cached {key} at {cached}")
                return cached
            return self._download(key, platform)

    def _download(self, key: CacheKey, platform: ResolvedPlatform) -> Path:
        target = self.cache.entry_path(key.engine_name, platform, key.version)
        ctx = {"engine": key.engine_name, "platform": key.platform, "version": key.version}
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, staging_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".part")
            os.close(fd)
        except OSError as exc:
            raise FetchError(ctx={**ctx, "path": str(target.parent)}, cause=exc) from exc

        staging = Path(staging_name)
        try:
            self.fetcher.fetch(key.engine_name, platform, key.version, staging)
            with self._guard:
                self.fetch_count += 1
            mode = staging.stat().st_mode
            staging.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            os.replace(staging, target)
        except FetchError:
            raise
        except _FETCH_FAILURES as exc:
            raise FetchError(ctx={**ctx, "error": str(exc)}, cause=exc) from exc
        finally:
            if staging.exists():
                staging.unlink()
        logger.debug(f"cached {key} at {target}")
        return target

    def ensure_all(
        self,
        engine_name: str,
        platforms: Sequence[ResolvedPlatform],
        version: str,
        *,
        max_workers: int = 4,
    ) -> Dict[str, Path]:
        """Ensure every platform is cached; return paths keyed by platform name.

        Distinct keys are fetched concurrently. The error reported is the
        one from the first failing platform in the given order.
        """
        unique: list[ResolvedPlatform] = []
        seen: set[str] = set()
        for platform in platforms:
            if platform.name not in seen:
                seen.add(platform.name)
                unique.append(platform)
        if not unique:
            return {}

        workers = max(1, min(max_workers, len(unique)))
        paths: Dict[str, Path] = {}
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures: list[tuple[ResolvedPlatform, Future[Path]]] = [
                (platform, executor.submit(self.ensure, engine_name, platform, version))
                for platform in unique
            ]
            try:
                for platform, future in futures:
                    paths[platform.name] = future.result()
            except BaseException:
                for _platform, future in futures:
                    future.cancel()
                raise
        return paths


__all__ = ["EngineProvisioner"]
