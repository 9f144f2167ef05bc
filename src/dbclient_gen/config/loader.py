"""Loader turning a generator request mapping into a :class:`Configuration`."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..types import ENGINE_TYPES
from ..utils.errors import ConfigurationError
from .models import Configuration, Datasource, DataModel, EnumSpec, FieldSpec, ModelSpec


def _parse_file(path: Path) -> Mapping[str, Any]:
    suffix = path.suffix.lower()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(ctx={"path": str(path), "error": "unreadable"}, cause=exc) from exc
    if suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(raw)
    elif suffix == ".json":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(ctx={"path": str(path), "error": str(exc)}, cause=exc) from exc
    else:
        raise ConfigurationError(ctx={"path": str(path), "error": "unsupported config extension"})
    if not isinstance(data, Mapping):
        raise ConfigurationError(ctx={"path": str(path), "error": "top-level must be mapping"})
    return data


def load_config(path: Path | str) -> Configuration:
    """Load a generator request file (.json/.yaml) into a Configuration."""

    return parse_config_mapping(_parse_file(Path(path)))


def _flag(value: Any, *, key: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false", ""}:
        return value.strip().lower() == "true"
    raise ConfigurationError(ctx={"field": key, "error": "flag must be boolean or 'true'/'false'"})


def _mapping(value: Any, *, key: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(ctx={"field": key, "error": "must be mapping"})
    return value


def _string(value: Any, *, key: str) -> str:
    if value is None:
        return ""
    # The schema collaborator wraps some values as {"value": ...}
    if isinstance(value, Mapping):
        value = value.get("value")
    if not isinstance(value, str):
        raise ConfigurationError(ctx={"field": key, "error": "must be string"})
    return value


def _binary_targets(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigurationError(ctx={"field": "generator.binaryTargets", "error": "must be list"})
    targets: list[str] = []
    for item in value:
        name = _string(item, key="generator.binaryTargets[]").strip()
        if name:
            targets.append(name)
    return tuple(targets)


def _datasources(value: Any) -> tuple[Datasource, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigurationError(ctx={"field": "datasources", "error": "must be list"})
    out: list[Datasource] = []
    for item in value:
        entry = _mapping(item, key="datasources[]")
        out.append(
            Datasource(
                name=_string(entry.get("name"), key="datasources[].name"),
                provider=_string(entry.get("provider") or entry.get("activeProvider"), key="datasources[].provider"),
                url=_string(entry.get("url"), key="datasources[].url"),
            )
        )
    return tuple(out)


def _field(payload: Any, *, model: str) -> FieldSpec:
    entry = _mapping(payload, key=f"datamodel.models.{model}.fields[]")
    name = entry.get("name")
    type_name = entry.get("type")
    if not isinstance(name, str) or not isinstance(type_name, str):
        raise ConfigurationError(
            ctx={"field": f"datamodel.models.{model}.fields[]", "error": "name and type required"},
        )
    return FieldSpec(
        name=name,
        type=type_name,
        is_list=bool(entry.get("isList", False)),
        is_required=bool(entry.get("isRequired", True)),
        is_id=bool(entry.get("isId", False)),
        is_unique=bool(entry.get("isUnique", False)),
        kind=str(entry.get("kind", "scalar")),
    )


def _datamodel(value: Any) -> DataModel:
    section = _mapping(value, key="datamodel")
    enums: list[EnumSpec] = []
    for item in section.get("enums") or []:
        entry = _mapping(item, key="datamodel.enums[]")
        values = [v.get("name") if isinstance(v, Mapping) else v for v in entry.get("values") or []]
        if not isinstance(entry.get("name"), str) or not all(isinstance(v, str) for v in values):
            raise ConfigurationError(ctx={"field": "datamodel.enums[]", "error": "name and string values required"})
        enums.append(EnumSpec(name=entry["name"], values=tuple(values)))

    models: list[ModelSpec] = []
    for item in section.get("models") or []:
        entry = _mapping(item, key="datamodel.models[]")
        name = entry.get("name")
        if not isinstance(name, str) or not name:
            raise ConfigurationError(ctx={"field": "datamodel.models[]", "error": "name required"})
        fields = tuple(_field(f, model=name) for f in entry.get("fields") or [])
        models.append(ModelSpec(name=name, fields=fields))
    return DataModel(enums=tuple(enums), models=tuple(models))


def parse_config_mapping(data: Mapping[str, Any]) -> Configuration:
    """Build a Configuration from the mapping emitted by the schema collaborator."""

    generator = _mapping(data.get("generator"), key="generator")
    gen_config = _mapping(generator.get("config"), key="generator.config")

    output = _string(generator.get("output"), key="generator.output")
    if not output.strip():
        raise ConfigurationError(ctx={"field": "generator.output", "error": "required"})

    engine_type = gen_config.get("engineType")
    if engine_type is not None and engine_type not in ENGINE_TYPES:
        raise ConfigurationError(
            ctx={"field": "generator.config.engineType", "value": engine_type, "allowed": list(ENGINE_TYPES)},
        )

    return Configuration(
        output=output,
        package=_string(gen_config.get("package"), key="generator.config.package"),
        binary_targets=_binary_targets(generator.get("binaryTargets")),
        disable_binaries=_flag(gen_config.get("disableGoBinaries"), key="generator.config.disableGoBinaries"),
        disable_ignore_file=_flag(gen_config.get("disableGitignore"), key="generator.config.disableGitignore"),
        engine_type=engine_type,
        version=_string(data.get("version"), key="version"),
        schema_path=_string(data.get("schemaPath"), key="schemaPath"),
        datasources=_datasources(data.get("datasources")),
        datamodel=_datamodel(data.get("datamodel")),
    )


__all__ = ["load_config", "parse_config_mapping"]
