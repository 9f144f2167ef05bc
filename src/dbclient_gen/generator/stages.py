"""Ordered registry of client template stages.

Each stage names the symbols it expects to already be defined when its
output is appended, and the symbols it defines. ``StagePlan`` checks the
ordering once, when the plan is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, Sequence, Tuple

from ..utils.errors import TemplateError


@dataclass(frozen=True)
class TemplateStage:
    name: str
    requires: FrozenSet[str] = field(default_factory=frozenset)
    provides: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def template(self) -> str:
        return self.name


def _stage(name: str, *, requires: Iterable[str] = (), provides: Iterable[str] = ()) -> TemplateStage:
    return TemplateStage(name=name, requires=frozenset(requires), provides=frozenset(provides))


class StagePlan:
    def __init__(self, stages: Sequence[TemplateStage]):
        self._stages: Tuple[TemplateStage, ...] = tuple(stages)
        self._validate()

    def _validate(self) -> None:
        names: set[str] = set()
        in_scope: set[str] = set()
        for stage in self._stages:
            if stage.name in names:
                raise TemplateError(ctx={"template": stage.name, "reason": "duplicate_stage"})
            missing = stage.requires - in_scope
            if missing:
                raise TemplateError(
                    ctx={
                        "template": stage.name,
                        "reason": "unsatisfied_requirements",
                        "missing": sorted(missing),
                    },
                )
            names.add(stage.name)
            in_scope |= stage.provides

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self._stages)

    def __iter__(self) -> Iterator[TemplateStage]:
        return iter(self._stages)

    def __len__(self) -> int:
        return len(self._stages)


CLIENT_STAGES: Tuple[TemplateStage, ...] = (
    _stage("_header", provides={"imports", "PACKAGE", "ENGINE_VERSION"}),
    _stage("client", requires={"imports", "PACKAGE"}, provides={"Client", "Engine", "BinaryEngine", "load_engine_module"}),
    _stage("enums", requires={"imports"}, provides={"enums"}),
    _stage("errors", requires={"imports"}, provides={"ClientError", "NotFoundError", "EngineError"}),
    _stage("fields", requires={"imports", "enums"}, provides={"Field", "fields"}),
    _stage("mock", requires={"Engine", "Client", "ClientError"}, provides={"MockEngine"}),
    _stage("models", requires={"imports", "enums"}, provides={"models"}),
    _stage("query", requires={"Client", "Field", "NotFoundError", "models"}, provides={"Query"}),
    _stage("actions/actions", requires={"Query", "models", "fields"}, provides={"ModelActions", "ACTION_MIXINS"}),
    _stage("actions/create", requires={"ModelActions", "ACTION_MIXINS"}, provides={"CreateActions"}),
    _stage("actions/find", requires={"ModelActions", "ACTION_MIXINS"}, provides={"FindActions"}),
    _stage("actions/transaction", requires={"Query", "Client", "EngineError"}, provides={"Transaction"}),
    _stage("actions/upsert", requires={"ModelActions", "ACTION_MIXINS"}, provides={"UpsertActions"}),
    _stage("actions/raw", requires={"Query", "Client"}, provides={"RawActions"}),
)

CLIENT_PLAN = StagePlan(CLIENT_STAGES)

__all__ = ["TemplateStage", "StagePlan", "CLIENT_STAGES", "CLIENT_PLAN"]
