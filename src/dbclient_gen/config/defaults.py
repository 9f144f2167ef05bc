from __future__ import annotations

import dataclasses
import logging
import os
from typing import Mapping, Optional

from ..constants import (
    DEFAULT_PACKAGE_NAME,
    ENGINE_VERSION,
    ENV_BINARY_TARGETS,
    ENV_ENGINE_TYPE,
    PRISMA_VERSION,
)
from ..types import ENGINE_TYPES
from ..utils.errors import ConfigurationError
from .models import Configuration

logger = logging.getLogger(__name__)


def targets_from_env(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def add_defaults(config: Configuration, environ: Optional[Mapping[str, str]] = None) -> Configuration:
    """Return a copy of ``config`` with package, targets, engine type and version defaulted.

    ``PRISMA_CLI_BINARY_TARGETS`` replaces the configured target list
    wholesale when set; ``PRISMA_CLIENT_ENGINE_TYPE`` overrides the engine type.
    """
    env = os.environ if environ is None else environ
    changes: dict = {}

    if not config.package.strip():
        changes["package"] = DEFAULT_PACKAGE_NAME

    raw_targets = env.get(ENV_BINARY_TARGETS)
    if raw_targets:
        targets = targets_from_env(raw_targets)
        changes["binary_targets"] = targets
        logger.debug(f"overriding binary targets: {list(targets)}")

    raw_engine = env.get(ENV_ENGINE_TYPE)
    if raw_engine:
        if raw_engine not in ENGINE_TYPES:
            raise ConfigurationError(
                ctx={"field": ENV_ENGINE_TYPE, "value": raw_engine, "allowed": list(ENGINE_TYPES)},
            )
        changes["engine_type"] = raw_engine

    if not config.version:
        changes["version"] = ENGINE_VERSION
    elif config.version != ENGINE_VERSION:
        logger.warning(
            f"engine version mismatch detected. requested: {config.version}, "
            f"bundled: {ENGINE_VERSION} ({PRISMA_VERSION}); the requested version will be fetched"
        )

    if not changes:
        return config
    return dataclasses.replace(config, **changes)


__all__ = ["add_defaults", "targets_from_env"]
