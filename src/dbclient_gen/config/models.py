"""Data structures describing a resolved generation request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..constants import DATA_PROXY_SCHEME
from ..types import EngineType


@dataclass(frozen=True)
class Datasource:
    name: str
    provider: str
    url: str = ""


@dataclass(frozen=True)
class EnumSpec:
    name: str
    values: Sequence[str]


@dataclass(frozen=True)
class FieldSpec:
    """A single model field as emitted by the schema collaborator."""

    name: str
    type: str
    is_list: bool = False
    is_required: bool = True
    is_id: bool = False
    is_unique: bool = False
    kind: str = "scalar"


@dataclass(frozen=True)
class ModelSpec:
    name: str
    fields: Sequence[FieldSpec]

    @property
    def id_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.is_id)

    @property
    def unique_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.is_id or f.is_unique)

    @property
    def scalar_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.kind in {"scalar", "enum"})


@dataclass(frozen=True)
class DataModel:
    enums: Sequence[EnumSpec] = ()
    models: Sequence[ModelSpec] = ()


@dataclass(frozen=True)
class Configuration:
    """Fully-resolved generation request.

    Instances are immutable; ``add_defaults`` returns a new copy rather
    than patching fields in place.
    """

    output: str
    package: str = ""
    binary_targets: tuple[str, ...] = ()
    disable_binaries: bool = False
    disable_ignore_file: bool = False
    engine_type: Optional[EngineType] = None
    version: str = ""
    schema_path: str = ""
    datasources: tuple[Datasource, ...] = ()
    datamodel: DataModel = field(default_factory=DataModel)

    def resolved_engine_type(self) -> EngineType:
        if self.engine_type:
            return self.engine_type
        for ds in self.datasources:
            if ds.url.startswith(DATA_PROXY_SCHEME):
                return "dataproxy"
        return "binary"


__all__ = [
    "Configuration",
    "Datasource",
    "DataModel",
    "EnumSpec",
    "FieldSpec",
    "ModelSpec",
]
