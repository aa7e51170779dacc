"""In-buffer and project-wide find/replace helpers."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Mapping, Sequence

from macrolens.services.line_index import LineIndex
from macrolens.services.project_model import SourceEntry, VbaModule

logger = logging.getLogger(__name__)

DEFAULT_MAX_MATCHES = 10000


@dataclass(frozen=True, slots=True)
class SearchOptions:
    case_sensitive: bool = False
    use_regex: bool = False
    whole_word: bool = False


@dataclass(frozen=True, slots=True)
class SearchMatch:
    start_offset: int
    end_offset: int
    line: int
    start_column: int
    end_column: int
    text: str
    end_line: int

    def to_dict(self) -> dict:
        return {
            "start_offset": self.start_offset,
            "end_offset": self.end_offset,
            "line": self.line,
            "start_column": self.start_column,
            "end_line": self.end_line,
            "end_column": self.end_column,
            "text": self.text,
        }


@dataclass(frozen=True, slots=True)
class ProjectSearchMatch:
    module_name: str
    match: SearchMatch
    line_text: str

    def to_dict(self) -> dict:
        return {
            "module_name": self.module_name,
            "line_text": self.line_text,
            **self.match.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class ReplaceResult:
    source: str
    matches: tuple[SearchMatch, ...]
    current_index: int
    cursor_offset: int


@dataclass(frozen=True, slots=True)
class ProjectSearchResult:
    matches_by_module: dict[str, tuple[ProjectSearchMatch, ...]]
    total_count: int


def compile_search_pattern(query: str, options: SearchOptions) -> re.Pattern[str] | None:
    """Compile ``query``; invalid regular expressions yield ``None``."""
    pattern_text = query if options.use_regex else re.escape(query)
    if options.whole_word:
        pattern_text = r"\b(?:" + pattern_text + r")\b"
    flags = 0 if options.case_sensitive else re.IGNORECASE
    try:
        return re.compile(pattern_text, flags)
    except re.error as exc:
        logger.debug("Ignoring invalid search pattern %r: %s", query, exc)
        return None


def _match_at(index: LineIndex, start: int, end: int, text: str) -> SearchMatch:
    start_pos = index.offset_to_line_column(start)
    end_pos = index.offset_to_line_column(end)
    return SearchMatch(
        start_offset=start,
        end_offset=end,
        line=start_pos.line,
        start_column=start_pos.column,
        end_column=end_pos.column,
        text=text,
        end_line=end_pos.line,
    )


def find_matches(
    text: str,
    query: str,
    options: SearchOptions = SearchOptions(),
    *,
    max_matches: int = DEFAULT_MAX_MATCHES,
) -> list[SearchMatch]:
    source = str(text or "")
    if not query:
        return []
    pattern = compile_search_pattern(query, options)
    if pattern is None:
        return []

    index = LineIndex.build(source)
    results: list[SearchMatch] = []
    pos = 0
    length = len(source)
    while pos <= length and len(results) < max_matches:
        found = pattern.search(source, pos)
        if found is None:
            break
        start, end = found.start(), found.end()
        if end <= start:
            pos = start + 1
            continue
        results.append(_match_at(index, start, end, found.group(0)))
        pos = end
    return results


def _relocate(matches: Sequence[SearchMatch], source: str) -> tuple[SearchMatch, ...]:
    index = LineIndex.build(source)
    return tuple(_match_at(index, m.start_offset, m.end_offset, m.text) for m in matches)


def replace_current(
    source: str,
    matches: Sequence[SearchMatch],
    index: int,
    replacement: str,
) -> ReplaceResult | None:
    """Replace ``matches[index]`` and rebase the remaining matches.

    Returns ``None`` when ``index`` is out of range.
    """
    if index < 0 or index >= len(matches):
        return None
    target = matches[index]
    new_source = source[: target.start_offset] + replacement + source[target.end_offset:]
    delta = len(replacement) - len(target.text)

    remaining: list[SearchMatch] = []
    for position, match in enumerate(matches):
        if position == index:
            continue
        if match.start_offset > target.start_offset:
            match = replace(
                match,
                start_offset=match.start_offset + delta,
                end_offset=match.end_offset + delta,
            )
        remaining.append(match)

    if not remaining:
        new_index = -1
    elif index >= len(remaining):
        new_index = len(remaining) - 1
    else:
        new_index = index
    return ReplaceResult(
        source=new_source,
        matches=_relocate(remaining, new_source),
        current_index=new_index,
        cursor_offset=target.start_offset + len(replacement),
    )


def replace_all(
    source: str,
    matches: Sequence[SearchMatch],
    replacement: str,
) -> ReplaceResult | None:
    """Replace every match; the cursor lands after the last replacement."""
    if not matches:
        return None
    ordered = sorted(matches, key=lambda m: m.start_offset)
    new_source = source
    for match in reversed(ordered):
        new_source = new_source[: match.start_offset] + replacement + new_source[match.end_offset:]

    shift = sum(len(replacement) - len(m.text) for m in ordered[:-1])
    cursor = ordered[-1].start_offset + shift + len(replacement)
    return ReplaceResult(source=new_source, matches=(), current_index=-1, cursor_offset=cursor)


def module_source(module: VbaModule, overlay: Mapping[str, SourceEntry]) -> str:
    entry = overlay.get(module.name)
    if entry is not None:
        return entry.source
    return module.source_code


def search_project(
    modules: Sequence[VbaModule],
    overlay: Mapping[str, SourceEntry],
    query: str,
    options: SearchOptions = SearchOptions(),
    *,
    max_matches: int = DEFAULT_MAX_MATCHES,
) -> ProjectSearchResult:
    grouped: dict[str, tuple[ProjectSearchMatch, ...]] = {}
    total = 0
    for module in modules:
        remaining = max_matches - total
        if remaining <= 0:
            break
        text = module_source(module, overlay)
        found = find_matches(text, query, options, max_matches=remaining)
        if not found:
            continue
        index = LineIndex.build(text)
        grouped[module.name] = tuple(
            ProjectSearchMatch(module_name=module.name, match=m, line_text=index.line_text(m.line))
            for m in found
        )
        total += len(found)
    return ProjectSearchResult(matches_by_module=grouped, total_count=total)
