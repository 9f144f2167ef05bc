from .paths import (
    CLIENT_FILENAME,
    GENERATED_SUFFIX,
    IGNORE_FILENAME,
    Paths,
    default_cache_dir,
    user_cache_root,
)

__all__ = [
    "CLIENT_FILENAME",
    "GENERATED_SUFFIX",
    "IGNORE_FILENAME",
    "Paths",
    "default_cache_dir",
    "user_cache_root",
]
