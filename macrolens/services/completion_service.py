from __future__ import annotations

from typing import Iterable, Sequence

from macrolens.services.completion_providers import (
    BuiltinProvider,
    KeywordProvider,
    ProcedureProvider,
    VariableProvider,
)
from macrolens.services.language_provider import (
    CompletionContext,
    CompletionItem,
    CompletionProvider,
)
from macrolens.services.project_model import VbaProcedure

KIND_PRIORITY: dict[str, int] = {
    "variable": 0,
    "procedure": 1,
    "property": 2,
    "keyword": 3,
    "type": 4,
    "builtin": 5,
    "constant": 6,
    "module": 7,
}
_UNKNOWN_KIND_PRIORITY = 100

DEFAULT_PROVIDERS: tuple[CompletionProvider, ...] = (
    VariableProvider(),
    ProcedureProvider(),
    KeywordProvider(),
    BuiltinProvider(),
)


def _kind_priority(item: CompletionItem) -> int:
    return KIND_PRIORITY.get(item.kind, _UNKNOWN_KIND_PRIORITY)


def _label_key(item: CompletionItem) -> tuple[str, str]:
    return (item.label.lower(), item.label)


def match_score(label: str, prefix: str) -> int:
    """Score ``label`` against a non-empty ``prefix``; 0 means no match."""
    probe = label.lower()
    pfx = prefix.lower()
    if probe == pfx:
        return 1000
    if probe.startswith(pfx):
        return 900 - len(label)
    index = probe.find(pfx)
    if index != -1:
        return 500 - index
    return 0


def filter_and_rank_completions(
    items: Iterable[CompletionItem],
    prefix: str,
    *,
    max_items: int | None = None,
) -> list[CompletionItem]:
    pfx = str(prefix or "")
    if not pfx:
        ranked = sorted(items, key=lambda item: (_kind_priority(item), _label_key(item)))
    else:
        scored: list[tuple[int, CompletionItem]] = []
        for item in items:
            score = match_score(item.label, pfx)
            if score > 0:
                scored.append((score, item))
        scored.sort(key=lambda t: (-t[0], _kind_priority(t[1]), _label_key(t[1])))
        ranked = [item for _, item in scored]
    if max_items is not None:
        return ranked[: max(0, int(max_items))]
    return ranked


def collect_completions(
    context: CompletionContext,
    source: str,
    procedures: Sequence[VbaProcedure],
    providers: Sequence[CompletionProvider] = DEFAULT_PROVIDERS,
    *,
    max_items: int | None = None,
) -> list[CompletionItem]:
    """Gather items from every provider and rank them as one pool."""
    pool: list[CompletionItem] = []
    for provider in providers:
        pool.extend(provider.provide(context, source, procedures))
    return filter_and_rank_completions(pool, context.prefix, max_items=max_items)


def apply_completion(
    source: str,
    context: CompletionContext,
    item: CompletionItem,
) -> tuple[str, int]:
    insert_text = item.insert_text if item.insert_text is not None else item.label
    start = context.prefix_start_offset
    end = start + len(context.prefix)
    new_source = source[:start] + insert_text + source[end:]
    return new_source, start + len(insert_text)
