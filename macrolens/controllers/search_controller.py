"""Controller keeping search matches in step with the editor buffers."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal

from macrolens.controllers.editor_controller import EditorController
from macrolens.editor import actions as a
from macrolens.editor.state import EditorState, SearchState, active_module_source, modules
from macrolens.services.highlight_ranges import HighlightRange, highlights_for_matches
from macrolens.services.text_search_service import find_matches, search_project

logger = logging.getLogger(__name__)


class SearchController(QObject):
    matchesChanged = Signal(object)

    def __init__(self, editor: EditorController, parent=None):
        super().__init__(parent or editor)
        self.editor = editor
        self._refreshing = False
        self._last_key: tuple | None = None
        self.editor.stateChanged.connect(self._on_state_changed)

    @property
    def search(self) -> SearchState:
        return self.editor.state.search

    # ---------- Public API ----------

    def open(self, mode: str | None = None) -> None:
        self.editor.dispatch(a.OpenSearch(mode=mode))
        self.refresh()

    def close(self) -> None:
        self._last_key = None
        self.editor.dispatch(a.CloseSearch())

    def set_query(self, query: str) -> None:
        self.editor.dispatch(a.SetSearchQuery(query=str(query or "")))

    def set_replace_text(self, text: str) -> None:
        self.editor.dispatch(a.SetReplaceText(replace_text=str(text or "")))

    def set_options(
        self,
        *,
        case_sensitive: bool | None = None,
        use_regex: bool | None = None,
        whole_word: bool | None = None,
    ) -> None:
        self.editor.dispatch(
            a.SetSearchOptions(case_sensitive=case_sensitive, use_regex=use_regex, whole_word=whole_word)
        )

    def set_mode(self, mode: str) -> None:
        self.editor.dispatch(a.SetSearchMode(mode=mode))

    def next_match(self) -> None:
        self.editor.dispatch(a.NavigateMatch(direction="next"))

    def previous_match(self) -> None:
        self.editor.dispatch(a.NavigateMatch(direction="previous"))

    def select_match(self, index: int) -> None:
        self.editor.dispatch(a.SelectMatch(match_index=int(index)))

    def replace_current(self) -> None:
        self.editor.flush()
        self.editor.dispatch(a.ReplaceCurrent())

    def replace_all(self) -> None:
        self.editor.flush()
        self.editor.dispatch(a.ReplaceAll())

    def highlights(self) -> list[HighlightRange]:
        search = self.editor.state.search
        return highlights_for_matches(search.matches, search.current_match_index)

    def refresh(self, *, force: bool = False) -> None:
        state = self.editor.state
        if not state.search.is_open:
            return
        key = self._refresh_key(state)
        if not force and key == self._last_key:
            return
        self._last_key = key
        self._refreshing = True
        try:
            if state.search.mode == "project-wide":
                self._refresh_project(state)
            else:
                self._refresh_in_file(state)
        finally:
            self._refreshing = False
        self.matchesChanged.emit(self.editor.state.search)

    # ---------- Internals ----------

    def _refresh_key(self, state: EditorState) -> tuple:
        search = state.search
        return (
            search.mode,
            search.query,
            search.options,
            state.active_module_name,
            state.source_history.present,
        )

    def _refresh_in_file(self, state: EditorState) -> None:
        source = active_module_source(state) or ""
        matches = find_matches(
            source,
            state.search.query,
            state.search.options,
            max_matches=self.editor.settings.max_matches,
        )
        self.editor.dispatch(a.UpdateMatches(matches=tuple(matches)))

    def _refresh_project(self, state: EditorState) -> None:
        result = search_project(
            modules(state),
            state.source_history.present.overlay,
            state.search.query,
            state.search.options,
            max_matches=self.editor.settings.max_matches,
        )
        logger.debug("Project search for %r found %d match(es)", state.search.query, result.total_count)
        self.editor.dispatch(
            a.UpdateProjectMatches(project_matches=result.matches_by_module, total_count=result.total_count)
        )

    def _on_state_changed(self, state: object) -> None:
        if self._refreshing:
            return
        self.refresh()
