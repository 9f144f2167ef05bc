from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class Err(Enum):
    INVALID_CONFIG = auto()
    TEMPLATE_FAILURE = auto()
    FETCH_FAILED = auto()
    WRITE_FAILED = auto()
    UNKNOWN = auto()


@dataclass(eq=False)
class GenError(Exception):
    code: Err
    ctx: dict[str, Any] | None = None
    cause: Exception | None = None

    def __post_init__(self) -> None:
        if self.ctx is None:
            self.ctx = {}
        if self.cause is not None:
            self.__cause__ = self.cause
        super().__init__(self.code.name)

    def __str__(self) -> str:
        parts = [self.code.name]
        if self.ctx:
            parts.append(", ".join(f"{k}={v!r}" for k, v in self.ctx.items()))
        return ": ".join(parts)


class ConfigurationError(GenError):
    """Invalid generation request; raised before any filesystem work."""

    def __init__(self, ctx: dict[str, Any] | None = None, cause: Exception | None = None) -> None:
        super().__init__(Err.INVALID_CONFIG, ctx=ctx, cause=cause)


class TemplateError(GenError):
    """A named template failed to render or produced malformed source."""

    def __init__(self, ctx: dict[str, Any] | None = None, cause: Exception | None = None) -> None:
        super().__init__(Err.TEMPLATE_FAILURE, ctx=ctx, cause=cause)


class FetchError(GenError):
    def __init__(self, ctx: dict[str, Any] | None = None, cause: Exception | None = None) -> None:
        super().__init__(Err.FETCH_FAILED, ctx=ctx, cause=cause)


class WriteError(GenError):
    def __init__(self, ctx: dict[str, Any] | None = None, cause: Exception | None = None) -> None:
        super().__init__(Err.WRITE_FAILED, ctx=ctx, cause=cause)


__all__ = [
    "Err",
    "GenError",
    "ConfigurationError",
    "TemplateError",
    "FetchError",
    "WriteError",
]
