"""Generator for a self-contained Python database client package."""

from .config import Configuration, add_defaults, load_config, parse_config_mapping
from .pipeline import GenerationRun, RunState, run
from .utils.errors import (
    ConfigurationError,
    Err,
    FetchError,
    GenError,
    TemplateError,
    WriteError,
)

__all__ = [
    "Configuration",
    "add_defaults",
    "load_config",
    "parse_config_mapping",
    "GenerationRun",
    "RunState",
    "run",
    "Err",
    "GenError",
    "ConfigurationError",
    "TemplateError",
    "FetchError",
    "WriteError",
]
