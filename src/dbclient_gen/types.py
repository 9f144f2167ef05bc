from typing import Literal, Tuple, get_args, cast

EngineType = Literal["binary", "dataproxy"]

ENGINE_TYPES: Tuple[EngineType, ...] = cast(Tuple[EngineType, ...], get_args(EngineType))

# Operating system families the generated client can dispatch on.
OsFamily = Literal["linux", "darwin", "windows"]

__all__ = ["EngineType", "ENGINE_TYPES", "OsFamily"]
