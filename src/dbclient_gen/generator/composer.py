"""Client source composition.

Templates are rendered in the fixed order of :data:`CLIENT_PLAN` into one
buffer. The buffer is parsed after every stage so a syntax error is
reported against the template that introduced it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import jinja2
from jinja2 import Environment

from ..config.models import Configuration
from ..constants import ENGINE_VERSION, QUERY_ENGINE
from ..data_layer.paths import Paths
from ..utils.errors import TemplateError, WriteError
from .formatting import check_syntax, format_source
from .rendering import make_environment, render_template
from .stages import CLIENT_PLAN, StagePlan

logger = logging.getLogger(__name__)

MARKER_TEMPLATE = "# --- template {name} ---\n"


def stage_marker(name: str) -> str:
    return MARKER_TEMPLATE.format(name=name)


def build_context(config: Configuration, *, engine_name: str = QUERY_ENGINE) -> Dict[str, Any]:
    datasource = config.datasources[0] if config.datasources else None
    return {
        "config": config,
        "package": config.package,
        "engine_name": engine_name,
        "engine_version": config.version or ENGINE_VERSION,
        "schema_path": config.schema_path,
        "datasource_name": datasource.name if datasource else "db",
        "datasource_provider": datasource.provider if datasource else "",
        "datasource_url": datasource.url if datasource else "",
        "enums": list(config.datamodel.enums),
        "models": list(config.datamodel.models),
    }


class TemplateComposer:
    def __init__(self, plan: StagePlan = CLIENT_PLAN, *, env: Optional[Environment] = None):
        self.plan = plan
        self.env = env or make_environment()

    def compose(self, config: Configuration) -> str:
        """Render every stage in order and return the formatted client source."""
        context = build_context(config)
        buf: list[str] = []
        line_count = 0
        for stage in self.plan:
            start_line = line_count + 2  # first line after the marker
            try:
                fragment = render_template(stage.template, context, env=self.env)
            except jinja2.TemplateError as exc:
                raise TemplateError(
                    ctx={"template": stage.name, "error": str(exc), "schema": config.schema_path},
                    cause=exc,
                ) from exc

            if fragment and not fragment.endswith("\n"):
                fragment += "\n"
            chunk = stage_marker(stage.name) + fragment + "\n"
            buf.append(chunk)
            line_count += chunk.count("\n")

            try:
                check_syntax("".join(buf), filename=stage.name)
            except SyntaxError as exc:
                ctx: Dict[str, Any] = {"template": stage.name, "error": exc.msg, "line": exc.lineno}
                if exc.lineno is not None:
                    ctx["template_line"] = exc.lineno - start_line + 1
                raise TemplateError(ctx=ctx, cause=exc) from exc
            logger.debug(f"rendered template {stage.name}")

        return format_source("".join(buf), filename="<client>")


def compose(config: Configuration, *, composer: Optional[TemplateComposer] = None) -> str:
    return (composer or TemplateComposer()).compose(config)


def write_client(config: Configuration, source: str) -> Path:
    paths = Paths.from_str(config.output)
    target = paths.client_file
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(source, encoding="utf-8")
    except OSError as exc:
        raise WriteError(ctx={"path": str(target)}, cause=exc) from exc
    logger.debug(f"write client file at {target}")
    return target


__all__ = ["TemplateComposer", "build_context", "compose", "stage_marker", "write_client"]
