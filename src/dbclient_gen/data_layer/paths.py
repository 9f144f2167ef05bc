"""Output directory and engine cache layout helpers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os
import sys

from ..constants import CLIENT_FILENAME, ENV_CACHE_DIR, GENERATED_SUFFIX, IGNORE_FILENAME
from ..utils.errors import ConfigurationError


@dataclass(frozen=True)
class Paths:
    """Generated-package path helper bound to an output directory."""

    output_root: Path

    def __post_init__(self):
        if self.output_root is None or str(self.output_root).strip() == "":
            raise ConfigurationError(ctx={"reason": "paths_missing_output_root"})
        root = Path(self.output_root)
        if root.suffix == ".py":
            raise ConfigurationError(
                ctx={"reason": "output_must_be_directory", "output": str(root)},
            )
        object.__setattr__(self, "output_root", root)

    @property
    def client_file(self) -> Path:
        return self.output_root / CLIENT_FILENAME

    @property
    def ignore_file(self) -> Path:
        return self.output_root / IGNORE_FILENAME

    def engine_filename(self, engine_name: str, platform_name: str) -> str:
        return f"{engine_name}-{platform_name}{GENERATED_SUFFIX}"

    def engine_file(self, engine_name: str, platform_name: str) -> Path:
        return self.output_root / self.engine_filename(engine_name, platform_name)

    @classmethod
    def from_str(cls, output_root: str | os.PathLike[str]) -> "Paths":
        return cls(Path(output_root))


def user_cache_root(
    environ: Optional[Mapping[str, str]] = None,
    *,
    system: Optional[str] = None,
) -> Path:
    env = os.environ if environ is None else environ
    system = system or sys.platform
    if system.startswith("win"):
        local = env.get("LOCALAPPDATA")
        if local:
            return Path(local)
        return Path.home() / "AppData" / "Local"
    if system == "darwin":
        return Path.home() / "Library" / "Caches"
    xdg = env.get("XDG_CACHE_HOME")
    return Path(xdg) if xdg else Path.home() / ".cache"


def default_cache_dir(
    environ: Optional[Mapping[str, str]] = None,
    *,
    system: Optional[str] = None,
) -> Path:
    """Resolve the shared engine cache, honoring PRISMA_ENGINES_CACHE_DIR."""
    env = os.environ if environ is None else environ
    override = env.get(ENV_CACHE_DIR)
    if override:
        return Path(override)
    return user_cache_root(env, system=system) / "prisma" / "binaries" / "engines"


__all__ = [
    "Paths",
    "CLIENT_FILENAME",
    "IGNORE_FILENAME",
    "GENERATED_SUFFIX",
    "default_cache_dir",
    "user_cache_root",
]
