"""Binary target resolution.

Logical targets ("native", "linux", "darwin-arm64", "debian-openssl-3.0.x", ...)
are mapped to concrete platform identities. Generic linux and musl targets
are rewritten to the static-linked build for the host architecture, since
the distro-specific musl builds are not reliable everywhere.
"""

from __future__ import annotations

import logging
import platform as _platform
import sys
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence

from ..types import OsFamily

logger = logging.getLogger(__name__)

NATIVE = "native"
LINUX = "linux"
MUSL_MARKER = "musl"
STATIC_LINUX_PREFIX = "linux-static-"

# Targets whose OS can never execute locally on a linux build host.
_NON_LINUX_PREFIXES = ("darwin", "windows")

_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv8": "arm64",
    "armv8l": "arm64",
}


def normalize_arch(machine: str) -> str:
    key = (machine or "").strip().lower()
    return _ARCH_ALIASES.get(key, key or "x64")


@dataclass(frozen=True)
class HostPlatform:
    os: OsFamily
    arch: str
    libc: Optional[str] = None


@dataclass(frozen=True)
class ResolvedPlatform:
    """Concrete platform identity used for cache lookup and embedding."""

    name: str
    os: OsFamily
    arch: str
    libc: Optional[str] = None

    @property
    def executable_suffix(self) -> str:
        return ".exe" if self.os == "windows" else ""


def detect_host() -> HostPlatform:
    if sys.platform.startswith("win"):
        os_family: OsFamily = "windows"
    elif sys.platform == "darwin":
        os_family = "darwin"
    else:
        os_family = "linux"

    libc: Optional[str] = None
    if os_family == "linux":
        lib, _version = _platform.libc_ver()
        libc = "glibc" if lib == "glibc" else "musl"
    return HostPlatform(os=os_family, arch=normalize_arch(_platform.machine()), libc=libc)


def binary_platform_name_static(host: HostPlatform) -> str:
    if host.os == "windows":
        return "windows"
    if host.os == "darwin":
        return "darwin-arm64" if host.arch == "arm64" else "darwin"
    return STATIC_LINUX_PREFIX + host.arch


def transform_binary_target(name: str, host: HostPlatform) -> str:
    if name == LINUX or MUSL_MARKER in name:
        rewritten = STATIC_LINUX_PREFIX + host.arch
        logger.debug(f"overriding binary name with '{rewritten}' due to linux or musl")
        return rewritten
    return name


def map_binary_target(name: str) -> ResolvedPlatform:
    """Derive OS/arch/libc metadata from a concrete (post-rewrite) target name."""
    if name.startswith(STATIC_LINUX_PREFIX):
        return ResolvedPlatform(name=name, os="linux", arch=normalize_arch(name[len(STATIC_LINUX_PREFIX):]), libc="static")
    if name.startswith("darwin"):
        arch = "arm64" if name.endswith("-arm64") else "x64"
        return ResolvedPlatform(name=name, os="darwin", arch=arch)
    if name.startswith("windows"):
        return ResolvedPlatform(name=name, os="windows", arch="x64")
    arch = "arm64" if "-arm64-" in name or name.endswith("-arm64") else "x64"
    libc = "musl" if MUSL_MARKER in name else "glibc"
    return ResolvedPlatform(name=name, os="linux", arch=arch, libc=libc)


def resolve(target: str, host: HostPlatform) -> ResolvedPlatform:
    name = target.strip()
    if name == NATIVE:
        name = binary_platform_name_static(host)
        logger.debug(f"swapping 'native' binary target with '{name}'")
    return map_binary_target(transform_binary_target(name, host))


def _is_non_linux(target: str) -> bool:
    return target.startswith(_NON_LINUX_PREFIXES)


def apply_native_default(requested: Sequence[str]) -> list[str]:
    """Append "native" when nothing locally runnable was requested."""
    targets = [t for t in (s.strip() for s in requested) if t]
    if not targets or all(_is_non_linux(t) for t in targets):
        targets.append(NATIVE)
    return targets


class TargetSet:
    """Insertion-ordered set of resolved platforms for one generation run."""

    def __init__(self, items: Iterable[ResolvedPlatform] = ()) -> None:
        self._seen: set[str] = set()
        self._items: list[ResolvedPlatform] = []
        for item in items:
            self.add(item)

    def add(self, item: ResolvedPlatform) -> bool:
        if item.name in self._seen:
            return False
        self._seen.add(item.name)
        self._items.append(item)
        return True

    def __contains__(self, item: object) -> bool:
        if isinstance(item, ResolvedPlatform):
            return item.name in self._seen
        return item in self._seen

    def __iter__(self) -> Iterator[ResolvedPlatform]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def as_tuple(self) -> tuple[ResolvedPlatform, ...]:
        return tuple(self._items)


def resolve_targets(
    requested: Sequence[str],
    host: HostPlatform,
    *,
    seen: Optional[TargetSet] = None,
) -> tuple[ResolvedPlatform, ...]:
    """Default, resolve and dedupe the requested targets.

    ``seen`` may be supplied to accumulate across several calls in one run.
    """
    targets = apply_native_default(requested)
    logger.debug(f"final binary targets: {targets}")
    tracker = seen if seen is not None else TargetSet()
    for target in targets:
        if not tracker.add(resolve(target, host)):
            logger.debug(f"skipping duplicate binary target '{target}'")
    return tracker.as_tuple()


__all__ = [
    "HostPlatform",
    "ResolvedPlatform",
    "TargetSet",
    "apply_native_default",
    "binary_platform_name_static",
    "detect_host",
    "map_binary_target",
    "normalize_arch",
    "resolve",
    "resolve_targets",
    "transform_binary_target",
]
