"""Editor actions. Each action is an immutable value handed to ``editor_reducer``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

from macrolens.services.project_model import ModuleType, VbaProgram
from macrolens.services.text_search_service import ProjectSearchMatch, SearchMatch


@dataclass(frozen=True, slots=True)
class LoadProgram:
    program: VbaProgram


@dataclass(frozen=True, slots=True)
class ClearProgram:
    pass


@dataclass(frozen=True, slots=True)
class SelectModule:
    module_name: str


@dataclass(frozen=True, slots=True)
class SelectProcedure:
    procedure_name: str | None


@dataclass(frozen=True, slots=True)
class SetCursor:
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class SetSelection:
    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass(frozen=True, slots=True)
class ClearSelection:
    pass


@dataclass(frozen=True, slots=True)
class UpdateModuleSource:
    """First keystroke of an edit batch; pushes a history entry."""

    module_name: str
    source: str
    cursor_offset: int


@dataclass(frozen=True, slots=True)
class ReplaceModuleSource:
    """Later keystroke inside the debounce window; rewrites the present entry."""

    module_name: str
    source: str
    cursor_offset: int


@dataclass(frozen=True, slots=True)
class Undo:
    pass


@dataclass(frozen=True, slots=True)
class Redo:
    pass


@dataclass(frozen=True, slots=True)
class ClearPendingCursor:
    pass


@dataclass(frozen=True, slots=True)
class SetMode:
    mode: Literal["editing", "readonly"]


@dataclass(frozen=True, slots=True)
class CreateModule:
    module_type: ModuleType
    module_name: str


@dataclass(frozen=True, slots=True)
class DeleteModule:
    module_name: str


@dataclass(frozen=True, slots=True)
class RenameModule:
    old_name: str
    new_name: str


@dataclass(frozen=True, slots=True)
class ReorderModules:
    module_names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class OpenSearch:
    mode: Literal["in-file", "project-wide"] | None = None


@dataclass(frozen=True, slots=True)
class CloseSearch:
    pass


@dataclass(frozen=True, slots=True)
class SetSearchQuery:
    query: str


@dataclass(frozen=True, slots=True)
class SetReplaceText:
    replace_text: str


@dataclass(frozen=True, slots=True)
class SetSearchOptions:
    case_sensitive: bool | None = None
    use_regex: bool | None = None
    whole_word: bool | None = None


@dataclass(frozen=True, slots=True)
class SetSearchMode:
    mode: Literal["in-file", "project-wide"]


@dataclass(frozen=True, slots=True)
class UpdateMatches:
    matches: tuple[SearchMatch, ...]


@dataclass(frozen=True, slots=True)
class UpdateProjectMatches:
    project_matches: Mapping[str, tuple[ProjectSearchMatch, ...]] = field(default_factory=dict)
    total_count: int = 0


@dataclass(frozen=True, slots=True)
class NavigateMatch:
    direction: Literal["next", "previous"]


@dataclass(frozen=True, slots=True)
class SelectMatch:
    match_index: int


@dataclass(frozen=True, slots=True)
class ReplaceCurrent:
    pass


@dataclass(frozen=True, slots=True)
class ReplaceAll:
    pass
