from __future__ import annotations

import keyword
import re
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..config.models import FieldSpec

TEMPLATES_ROOT = Path(__file__).parent / "templates"
TEMPLATE_SUFFIX = ".py.jinja"

_SCALAR_TYPES: Dict[str, str] = {
    "String": "str",
    "Int": "int",
    "BigInt": "int",
    "Float": "float",
    "Decimal": "decimal.Decimal",
    "Boolean": "bool",
    "DateTime": "datetime.datetime",
    "Json": "Any",
    "Bytes": "bytes",
}


def identifier(name: str) -> str:
    """Python attribute or class name for a schema name; keywords gain a trailing underscore."""
    return f"{name}_" if keyword.iskeyword(name) else name


def snake_case(name: str) -> str:
    text = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name)
    text = re.sub(r"(?<=[A-Z])([A-Z][a-z])", r"_\1", text)
    return text.lower()


def python_type(field: FieldSpec) -> str:
    base = _SCALAR_TYPES.get(field.type)
    if base is None:
        # enums and relations reference generated classes by name
        name = identifier(field.type)
        base = f"'{name}'" if field.kind == "object" else name
    if field.is_list:
        base = f"List[{base}]"
    if not field.is_required and not field.is_list:
        base = f"Optional[{base}]"
    return base


def dataclass_default(field: FieldSpec) -> str:
    """Assignment suffix for a generated dataclass field; renamed fields record their wire name."""
    optional = not field.is_required or field.is_list or field.kind == "object"
    if identifier(field.name) == field.name:
        return " = None" if optional else ""
    default = "default=None, " if optional else ""
    return f" = dataclasses.field({default}metadata={{'wire': {field.name!r}}})"


def make_environment(root: Optional[Path] = None) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(root or TEMPLATES_ROOT)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=False,
    )
    env.filters["pyrepr"] = repr
    env.filters["pytype"] = python_type
    env.filters["snake"] = snake_case
    env.filters["ident"] = identifier
    env.filters["dataclass_default"] = dataclass_default
    return env


_JINJA = make_environment()


def render_template(name: str, values: Dict[str, Any], *, env: Optional[Environment] = None) -> str:
    tpl = (env or _JINJA).get_template(f"{name}{TEMPLATE_SUFFIX}")
    return tpl.render(**values)


__all__ = [
    "TEMPLATES_ROOT",
    "TEMPLATE_SUFFIX",
    "dataclass_default",
    "identifier",
    "make_environment",
    "python_type",
    "render_template",
    "snake_case",
]
