from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping

from macrolens.core.history import UndoRedoHistory, can_redo as _can_redo, can_undo as _can_undo, create_history
from macrolens.services.project_model import SourceEntry, VbaModule, VbaProcedure, VbaProgram
from macrolens.services.project_model import find_module as find_program_module
from macrolens.services.text_search_service import ProjectSearchMatch, SearchMatch, SearchOptions

EditorMode = Literal["editing", "readonly"]
SearchMode = Literal["in-file", "project-wide"]

_EMPTY_OVERLAY: Mapping[str, SourceEntry] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class CursorPosition:
    line: int = 1
    column: int = 1


@dataclass(frozen=True, slots=True)
class SelectionRange:
    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass(frozen=True, slots=True)
class SourceSnapshot:
    """One history entry: edited buffers plus the ordered module list."""

    overlay: Mapping[str, SourceEntry] = field(default_factory=lambda: _EMPTY_OVERLAY)
    modules: tuple[VbaModule, ...] = ()

    def with_entry(self, module_name: str, entry: SourceEntry) -> "SourceSnapshot":
        overlay = dict(self.overlay)
        overlay[module_name] = entry
        return SourceSnapshot(overlay=MappingProxyType(overlay), modules=self.modules)

    def with_modules(
        self,
        modules: tuple[VbaModule, ...],
        overlay: Mapping[str, SourceEntry] | None = None,
    ) -> "SourceSnapshot":
        new_overlay = self.overlay if overlay is None else MappingProxyType(dict(overlay))
        return SourceSnapshot(overlay=new_overlay, modules=modules)


@dataclass(frozen=True, slots=True)
class SearchState:
    is_open: bool = False
    mode: SearchMode = "in-file"
    query: str = ""
    replace_text: str = ""
    options: SearchOptions = SearchOptions()
    matches: tuple[SearchMatch, ...] = ()
    current_match_index: int = -1
    project_matches: Mapping[str, tuple[ProjectSearchMatch, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    project_match_count: int = 0


def empty_history(modules: tuple[VbaModule, ...] = ()) -> UndoRedoHistory[SourceSnapshot]:
    return create_history(SourceSnapshot(overlay=_EMPTY_OVERLAY, modules=modules))


@dataclass(frozen=True, slots=True)
class EditorState:
    program: VbaProgram | None = None
    source_history: UndoRedoHistory[SourceSnapshot] = field(default_factory=empty_history)
    active_module_name: str | None = None
    cursor: CursorPosition = CursorPosition()
    selection: SelectionRange | None = None
    mode: EditorMode = "editing"
    selected_procedure_name: str | None = None
    pending_cursor_offset: int | None = None
    search: SearchState = SearchState()


def create_initial_state(
    program: VbaProgram | None = None,
    *,
    mode: EditorMode = "editing",
    search_options: SearchOptions | None = None,
) -> EditorState:
    modules = program.modules if program is not None else ()
    search = SearchState(options=search_options) if search_options is not None else SearchState()
    return EditorState(
        program=program,
        source_history=empty_history(modules),
        active_module_name=modules[0].name if modules else None,
        mode=mode,
        search=search,
    )


# ---------- Selectors ----------


def modules(state: EditorState) -> tuple[VbaModule, ...]:
    return state.source_history.present.modules


def find_module(state: EditorState, module_name: str | None) -> VbaModule | None:
    return find_program_module(modules(state), module_name)


def active_module(state: EditorState) -> VbaModule | None:
    return find_module(state, state.active_module_name)


def module_source(state: EditorState, module_name: str | None) -> str | None:
    module = find_module(state, module_name)
    if module is None:
        return None
    entry = state.source_history.present.overlay.get(module.name)
    if entry is not None:
        return entry.source
    return module.source_code


def active_module_source(state: EditorState) -> str | None:
    return module_source(state, state.active_module_name)


def active_procedures(state: EditorState) -> tuple[VbaProcedure, ...]:
    module = active_module(state)
    return module.procedures if module is not None else ()


def all_procedures(state: EditorState) -> tuple[VbaProcedure, ...]:
    procs: list[VbaProcedure] = []
    for module in modules(state):
        procs.extend(module.procedures)
    return tuple(procs)


def can_undo(state: EditorState) -> bool:
    return _can_undo(state.source_history)


def can_redo(state: EditorState) -> bool:
    return _can_redo(state.source_history)
