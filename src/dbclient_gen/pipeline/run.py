"""Generation run orchestration.

A run moves linearly through DEFAULTING -> CLIENT_GENERATION ->
BINARY_GENERATION -> DONE, with SKIP taking the place of binary
generation when binaries are disabled or a data proxy engine is used.
Any error aborts the run; files already written stay on disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from ..config.defaults import add_defaults
from ..config.models import Configuration
from ..constants import QUERY_ENGINE
from ..data_layer.paths import Paths, default_cache_dir
from ..engines import EngineCache, EngineProvisioner, UrlFetcher, embed
from ..generator import TemplateComposer, write_client
from ..platforms import HostPlatform, ResolvedPlatform, TargetSet, detect_host, resolve_targets
from ..utils.errors import Err, GenError, WriteError

logger = logging.getLogger(__name__)

IGNORE_CONTENT = "# gitignore generated by dbclient-gen. DO NOT EDIT.\n*_gen.py\n"


class RunState(Enum):
    DEFAULTING = "defaulting"
    CLIENT_GENERATION = "client_generation"
    BINARY_GENERATION = "binary_generation"
    SKIP = "skip"
    DONE = "done"


def write_ignore_file(config: Configuration) -> Optional[Path]:
    if config.disable_ignore_file or config.disable_binaries:
        return None
    target = Paths.from_str(config.output).ignore_file
    logger.debug("writing ignore file")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(IGNORE_CONTENT, encoding="utf-8")
    except OSError as exc:
        raise WriteError(ctx={"path": str(target)}, cause=exc) from exc
    return target


def generate_client(config: Configuration, composer: Optional[TemplateComposer] = None) -> Path:
    source = (composer or TemplateComposer()).compose(config)
    return write_client(config, source)


def binaries_skipped(config: Configuration) -> Optional[str]:
    if config.disable_binaries:
        return "binaries disabled"
    if config.resolved_engine_type() == "dataproxy":
        return "using data proxy; not fetching any engines"
    return None


def generate_binaries(
    config: Configuration,
    platforms: Tuple[ResolvedPlatform, ...],
    provisioner: EngineProvisioner,
    *,
    engine_name: str = QUERY_ENGINE,
    max_workers: int = 4,
) -> List[Path]:
    """Fetch every platform's engine first, then write one embedding file each."""
    cached: Dict[str, Path] = provisioner.ensure_all(
        engine_name, platforms, config.version, max_workers=max_workers
    )
    written: List[Path] = []
    for platform in platforms:
        written.append(
            embed(
                platform,
                cached[platform.name],
                config.package,
                config.output,
                engine_name=engine_name,
                version=config.version,
            )
        )
    return written


@dataclass
class GenerationRun:
    config: Configuration
    provisioner: EngineProvisioner
    host: HostPlatform = field(default_factory=detect_host)
    composer: TemplateComposer = field(default_factory=TemplateComposer)
    environ: Optional[Mapping[str, str]] = None
    engine_name: str = QUERY_ENGINE
    max_workers: int = 4
    state: RunState = field(default=RunState.DEFAULTING, init=False)
    history: List[RunState] = field(default_factory=list, init=False)
    written: List[Path] = field(default_factory=list, init=False)
    platforms: Tuple[ResolvedPlatform, ...] = field(default=(), init=False)

    def _enter(self, state: RunState) -> None:
        self.state = state
        self.history.append(state)
        logger.debug(f"generation state: {state.value}")

    def execute(self) -> "GenerationRun":
        try:
            self._enter(RunState.DEFAULTING)
            self.config = add_defaults(self.config, self.environ)
            Paths.from_str(self.config.output)

            self._enter(RunState.CLIENT_GENERATION)
            ignore = write_ignore_file(self.config)
            if ignore is not None:
                self.written.append(ignore)
            self.written.append(generate_client(self.config, self.composer))

            self._enter(RunState.BINARY_GENERATION)
            reason = binaries_skipped(self.config)
            if reason:
                logger.debug(reason)
                self._enter(RunState.SKIP)
            else:
                self.platforms = resolve_targets(self.config.binary_targets, self.host, seen=TargetSet())
                self.written.extend(
                    generate_binaries(
                        self.config,
                        self.platforms,
                        self.provisioner,
                        engine_name=self.engine_name,
                        max_workers=self.max_workers,
                    )
                )
        except GenError as err:
            err.ctx.setdefault("stage", self.state.value)
            raise
        except Exception as exc:
            raise GenError(Err.UNKNOWN, ctx={"stage": self.state.value, "error": str(exc)}, cause=exc) from exc
        self._enter(RunState.DONE)
        return self


def run(
    config: Configuration,
    *,
    provisioner: Optional[EngineProvisioner] = None,
    cache_dir: Optional[Path] = None,
    host: Optional[HostPlatform] = None,
    environ: Optional[Mapping[str, str]] = None,
    max_workers: int = 4,
) -> GenerationRun:
    """Run the generator for ``config`` and return the finished run record."""
    if provisioner is None:
        provisioner = EngineProvisioner(
            EngineCache(cache_dir or default_cache_dir(environ)),
            UrlFetcher(environ=environ),
        )
    generation = GenerationRun(
        config=config,
        provisioner=provisioner,
        host=host or detect_host(),
        environ=environ,
        max_workers=max_workers,
    )
    return generation.execute()


__all__ = [
    "GenerationRun",
    "RunState",
    "binaries_skipped",
    "generate_binaries",
    "generate_client",
    "run",
    "write_ignore_file",
]
