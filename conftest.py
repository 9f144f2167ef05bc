"""
Ensure `src` is on sys.path for local test runs without requiring installation,
and provide shared fixtures for generator tests.
"""
from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import Any, Dict

import pytest

ROOT = Path(__file__).parent.resolve()
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from dbclient_gen.platforms import HostPlatform, ResolvedPlatform  # noqa: E402


class FakeFetcher:
    """Writes a deterministic fake engine instead of downloading one."""

    def __init__(self, *, fail_on: set[str] | None = None, delay: float = 0.0):
        self.fail_on = set(fail_on or ())
        self.delay = delay
        self.calls: list[tuple[str, str, str]] = []
        self._lock = threading.Lock()

    def fetch(self, engine_name: str, platform: ResolvedPlatform, version: str, destination: Path) -> None:
        with self._lock:
            self.calls.append((engine_name, platform.name, version))
        if self.delay:
            threading.Event().wait(self.delay)
        if platform.name in self.fail_on:
            raise OSError(f"simulated download failure for {platform.name}")
        destination.write_bytes(f"{engine_name}:{platform.name}:{version}".encode("utf-8") * 32)


@pytest.fixture
def linux_host() -> HostPlatform:
    return HostPlatform(os="linux", arch="x64", libc="glibc")


@pytest.fixture
def make_fetcher():
    def _make(**kwargs: Any) -> FakeFetcher:
        return FakeFetcher(**kwargs)

    return _make


@pytest.fixture
def sample_request(tmp_path: Path) -> Dict[str, Any]:
    return {
        "version": "",
        "schemaPath": str(tmp_path / "schema.prisma"),
        "generator": {
            "output": {"value": str(tmp_path / "out")},
            "config": {"package": "db"},
            "binaryTargets": [],
        },
        "datasources": [
            {"name": "db", "provider": "sqlite", "url": "file:dev.db"},
        ],
        "datamodel": {
            "enums": [{"name": "Role", "values": [{"name": "USER"}, {"name": "ADMIN"}]}],
            "models": [
                {
                    "name": "User",
                    "fields": [
                        {"name": "id", "type": "String", "isId": True},
                        {"name": "email", "type": "String", "isUnique": True},
                        {"name": "name", "type": "String", "isRequired": False},
                        {"name": "role", "type": "Role", "kind": "enum"},
                        {"name": "posts", "type": "Post", "kind": "object", "isList": True},
                    ],
                },
                {
                    "name": "Post",
                    "fields": [
                        {"name": "id", "type": "String", "isId": True},
                        {"name": "title", "type": "String"},
                        {"name": "published", "type": "Boolean"},
                        {"name": "createdAt", "type": "DateTime"},
                        {"name": "authorId", "type": "String", "isRequired": False},
                    ],
                },
            ],
        },
    }
