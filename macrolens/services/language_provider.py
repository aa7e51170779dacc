"""Completion contracts shared by the context detector, providers and ranking.

Providers are plain objects satisfying ``CompletionProvider``; the service
layer receives them as an ordered tuple so a host (or a test) can swap the
set without touching the ranking code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol, Sequence

from macrolens.services.project_model import VbaProcedure

CompletionTrigger = Literal["manual", "dot", "typing"]
CompletionKind = Literal[
    "keyword",
    "type",
    "builtin",
    "variable",
    "procedure",
    "property",
    "constant",
    "module",
]


@dataclass(frozen=True, slots=True)
class CompletionItem:
    label: str
    kind: CompletionKind
    detail: str | None = None
    documentation: str | None = None
    insert_text: str | None = None
    sort_key: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "kind": self.kind,
            "detail": self.detail,
            "documentation": self.documentation,
            "insert_text": self.insert_text,
            "sort_key": self.sort_key,
        }


@dataclass(frozen=True, slots=True)
class CompletionContext:
    trigger: CompletionTrigger
    prefix: str
    prefix_start_offset: int
    line: int
    column: int
    object_name: str | None = None


class CompletionProvider(Protocol):
    name: str

    def provide(
        self,
        context: CompletionContext,
        source: str,
        procedures: Sequence[VbaProcedure],
    ) -> list[CompletionItem]:
        ...
