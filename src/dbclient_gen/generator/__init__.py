"""Client source generation from ordered templates."""

from .composer import TemplateComposer, build_context, compose, stage_marker, write_client
from .formatting import check_syntax, format_source
from .stages import CLIENT_PLAN, CLIENT_STAGES, StagePlan, TemplateStage

__all__ = [
    "TemplateComposer",
    "build_context",
    "compose",
    "stage_marker",
    "write_client",
    "check_syntax",
    "format_source",
    "CLIENT_PLAN",
    "CLIENT_STAGES",
    "StagePlan",
    "TemplateStage",
]
