from .resolver import (
    HostPlatform,
    ResolvedPlatform,
    TargetSet,
    apply_native_default,
    binary_platform_name_static,
    detect_host,
    map_binary_target,
    normalize_arch,
    resolve,
    resolve_targets,
    transform_binary_target,
)

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
