"""Generation request model, loading and defaulting."""

from .defaults import add_defaults, targets_from_env
from .loader import load_config, parse_config_mapping
from .models import Configuration, Datasource, DataModel, EnumSpec, FieldSpec, ModelSpec

__all__ = [
    "Configuration",
    "Datasource",
    "DataModel",
    "EnumSpec",
    "FieldSpec",
    "ModelSpec",
    "add_defaults",
    "targets_from_env",
    "load_config",
    "parse_config_mapping",
]
