from __future__ import annotations

from dataclasses import replace
from types import MappingProxyType

from macrolens.core.history import push_history
from macrolens.editor import actions as a
from macrolens.editor.state import EditorState, active_module_source
from macrolens.services.project_model import SourceEntry
from macrolens.services import text_search_service


def handle_open_search(state: EditorState, action: a.OpenSearch) -> EditorState:
    mode = action.mode or state.search.mode
    if state.search.is_open and mode == state.search.mode:
        return state
    return replace(state, search=replace(state.search, is_open=True, mode=mode))


def handle_close_search(state: EditorState, action: a.CloseSearch) -> EditorState:
    return replace(
        state,
        search=replace(state.search, is_open=False, matches=(), current_match_index=-1),
    )


def handle_set_search_query(state: EditorState, action: a.SetSearchQuery) -> EditorState:
    return replace(state, search=replace(state.search, query=action.query, current_match_index=-1))


def handle_set_replace_text(state: EditorState, action: a.SetReplaceText) -> EditorState:
    if action.replace_text == state.search.replace_text:
        return state
    return replace(state, search=replace(state.search, replace_text=action.replace_text))


def handle_set_search_options(state: EditorState, action: a.SetSearchOptions) -> EditorState:
    current = state.search.options
    options = replace(
        current,
        case_sensitive=current.case_sensitive if action.case_sensitive is None else bool(action.case_sensitive),
        use_regex=current.use_regex if action.use_regex is None else bool(action.use_regex),
        whole_word=current.whole_word if action.whole_word is None else bool(action.whole_word),
    )
    return replace(state, search=replace(state.search, options=options, current_match_index=-1))


def handle_set_search_mode(state: EditorState, action: a.SetSearchMode) -> EditorState:
    return replace(
        state,
        search=replace(
            state.search,
            mode=action.mode,
            matches=(),
            current_match_index=-1,
            project_matches=MappingProxyType({}),
            project_match_count=0,
        ),
    )


def handle_update_matches(state: EditorState, action: a.UpdateMatches) -> EditorState:
    matches = tuple(action.matches)
    index = state.search.current_match_index
    if matches and index == -1:
        index = 0
    elif index >= len(matches):
        index = len(matches) - 1
    return replace(state, search=replace(state.search, matches=matches, current_match_index=index))


def handle_update_project_matches(state: EditorState, action: a.UpdateProjectMatches) -> EditorState:
    return replace(
        state,
        search=replace(
            state.search,
            project_matches=MappingProxyType(dict(action.project_matches)),
            project_match_count=int(action.total_count),
        ),
    )


def handle_navigate_match(state: EditorState, action: a.NavigateMatch) -> EditorState:
    count = len(state.search.matches)
    if count == 0:
        return state
    index = state.search.current_match_index
    if action.direction == "next":
        index = index + 1 if index < count - 1 else 0
    else:
        index = index - 1 if index > 0 else count - 1
    return replace(state, search=replace(state.search, current_match_index=index))


def handle_select_match(state: EditorState, action: a.SelectMatch) -> EditorState:
    if action.match_index < 0 or action.match_index >= len(state.search.matches):
        return state
    if action.match_index == state.search.current_match_index:
        return state
    return replace(state, search=replace(state.search, current_match_index=action.match_index))


def _apply_replacement(
    state: EditorState,
    result: text_search_service.ReplaceResult,
) -> EditorState:
    module_name = state.active_module_name
    entry = SourceEntry(source=result.source, cursor_offset=result.cursor_offset)
    snapshot = state.source_history.present.with_entry(module_name, entry)
    return replace(
        state,
        source_history=push_history(state.source_history, snapshot),
        search=replace(state.search, matches=result.matches, current_match_index=result.current_index),
        pending_cursor_offset=result.cursor_offset,
    )


def handle_replace_current(state: EditorState, action: a.ReplaceCurrent) -> EditorState:
    if state.mode == "readonly":
        return state
    source = active_module_source(state)
    if source is None:
        return state
    result = text_search_service.replace_current(
        source,
        state.search.matches,
        state.search.current_match_index,
        state.search.replace_text,
    )
    if result is None:
        return state
    return _apply_replacement(state, result)


def handle_replace_all(state: EditorState, action: a.ReplaceAll) -> EditorState:
    if state.mode == "readonly":
        return state
    source = active_module_source(state)
    if source is None:
        return state
    result = text_search_service.replace_all(source, state.search.matches, state.search.replace_text)
    if result is None:
        return state
    return _apply_replacement(state, result)


SEARCH_HANDLERS = {
    a.OpenSearch: handle_open_search,
    a.CloseSearch: handle_close_search,
    a.SetSearchQuery: handle_set_search_query,
    a.SetReplaceText: handle_set_replace_text,
    a.SetSearchOptions: handle_set_search_options,
    a.SetSearchMode: handle_set_search_mode,
    a.UpdateMatches: handle_update_matches,
    a.UpdateProjectMatches: handle_update_project_matches,
    a.NavigateMatch: handle_navigate_match,
    a.SelectMatch: handle_select_match,
    a.ReplaceCurrent: handle_replace_current,
    a.ReplaceAll: handle_replace_all,
}
