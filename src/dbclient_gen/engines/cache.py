from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..platforms import ResolvedPlatform


@dataclass(frozen=True)
class CacheKey:
    engine_name: str
    platform: str
    version: str


class EngineCache:
    """Filesystem layout of the shared engine cache.

    Entries live at ``<root>/<version>/<engine>-<platform>[.exe]``; a file
    present at that path is the only signal that an entry is complete.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)

    @staticmethod
    def key_for(engine_name: str, platform: ResolvedPlatform, version: str) -> CacheKey:
        return CacheKey(engine_name=engine_name, platform=platform.name, version=version)

    def entry_path(self, engine_name: str, platform: ResolvedPlatform, version: str) -> Path:
        filename = f"{engine_name}-{platform.name}{platform.executable_suffix}"
        return self.root / version / filename

    def lookup(self, engine_name: str, platform: ResolvedPlatform, version: str) -> Optional[Path]:
        path = self.entry_path(engine_name, platform, version)
        return path if path.is_file() else None


__all__ = ["CacheKey", "EngineCache"]
