"""Handlers for program, navigation, editing, history and module lifecycle actions.

Every handler takes the current state and an action and returns the next
state. A handler that finds nothing to do returns the state it was given.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from types import MappingProxyType

from macrolens.core.history import push_history, redo_history, replace_present, undo_history
from macrolens.editor import actions as a
from macrolens.editor.state import (
    CursorPosition,
    EditorState,
    SearchState,
    SelectionRange,
    SourceSnapshot,
    empty_history,
    find_module,
    modules,
)
from macrolens.services.project_model import SourceEntry, VbaModule

logger = logging.getLogger(__name__)


def _name_taken(state: EditorState, name: str, *, ignore: str | None = None) -> bool:
    key = name.lower()
    for module in modules(state):
        if module.name == ignore:
            continue
        if module.name.lower() == key:
            return True
    return False


def _cleared_search(search: SearchState) -> SearchState:
    return replace(
        search,
        matches=(),
        current_match_index=-1,
        project_matches=MappingProxyType({}),
        project_match_count=0,
    )


# ---------- Program loading ----------


def handle_load_program(state: EditorState, action: a.LoadProgram) -> EditorState:
    program_modules = action.program.modules
    return replace(
        state,
        program=action.program,
        source_history=empty_history(program_modules),
        active_module_name=program_modules[0].name if program_modules else None,
        cursor=CursorPosition(),
        selection=None,
        selected_procedure_name=None,
        pending_cursor_offset=None,
        search=_cleared_search(state.search),
    )


def handle_clear_program(state: EditorState, action: a.ClearProgram) -> EditorState:
    return replace(
        state,
        program=None,
        source_history=empty_history(),
        active_module_name=None,
        cursor=CursorPosition(),
        selection=None,
        selected_procedure_name=None,
        pending_cursor_offset=None,
        search=_cleared_search(state.search),
    )


# ---------- Navigation ----------


def handle_select_module(state: EditorState, action: a.SelectModule) -> EditorState:
    if find_module(state, action.module_name) is None:
        logger.debug("Ignoring selection of unknown module %r", action.module_name)
        return state
    if action.module_name == state.active_module_name:
        return state
    return replace(
        state,
        active_module_name=action.module_name,
        cursor=CursorPosition(),
        selection=None,
        selected_procedure_name=None,
    )


def handle_select_procedure(state: EditorState, action: a.SelectProcedure) -> EditorState:
    if action.procedure_name == state.selected_procedure_name:
        return state
    return replace(state, selected_procedure_name=action.procedure_name)


def handle_set_cursor(state: EditorState, action: a.SetCursor) -> EditorState:
    cursor = CursorPosition(line=max(1, int(action.line)), column=max(1, int(action.column)))
    if cursor == state.cursor and state.selection is None:
        return state
    return replace(state, cursor=cursor, selection=None)


def handle_set_selection(state: EditorState, action: a.SetSelection) -> EditorState:
    selection = SelectionRange(
        start_line=action.start_line,
        start_column=action.start_column,
        end_line=action.end_line,
        end_column=action.end_column,
    )
    if selection == state.selection:
        return state
    return replace(state, selection=selection)


def handle_clear_selection(state: EditorState, action: a.ClearSelection) -> EditorState:
    if state.selection is None:
        return state
    return replace(state, selection=None)


def handle_set_mode(state: EditorState, action: a.SetMode) -> EditorState:
    if action.mode == state.mode:
        return state
    return replace(state, mode=action.mode)


def handle_clear_pending_cursor(state: EditorState, action: a.ClearPendingCursor) -> EditorState:
    if state.pending_cursor_offset is None:
        return state
    return replace(state, pending_cursor_offset=None)


# ---------- Editing ----------


def _edited_snapshot(
    state: EditorState,
    action: a.UpdateModuleSource | a.ReplaceModuleSource,
) -> SourceSnapshot | None:
    if state.mode == "readonly":
        logger.debug("Ignoring edit of %r in readonly mode", action.module_name)
        return None
    if find_module(state, action.module_name) is None:
        logger.debug("Ignoring edit of unknown module %r", action.module_name)
        return None
    entry = SourceEntry(source=action.source, cursor_offset=int(action.cursor_offset))
    return state.source_history.present.with_entry(action.module_name, entry)


def _pending_for_edit(state: EditorState, module_name: str, cursor_offset: int) -> int | None:
    return int(cursor_offset) if module_name == state.active_module_name else None


def handle_update_module_source(state: EditorState, action: a.UpdateModuleSource) -> EditorState:
    snapshot = _edited_snapshot(state, action)
    if snapshot is None:
        return state
    return replace(
        state,
        source_history=push_history(state.source_history, snapshot),
        pending_cursor_offset=_pending_for_edit(state, action.module_name, action.cursor_offset),
    )


def handle_replace_module_source(state: EditorState, action: a.ReplaceModuleSource) -> EditorState:
    snapshot = _edited_snapshot(state, action)
    if snapshot is None:
        return state
    return replace(
        state,
        source_history=replace_present(state.source_history, snapshot),
        pending_cursor_offset=_pending_for_edit(state, action.module_name, action.cursor_offset),
    )


# ---------- History ----------


def _after_history_move(state: EditorState, history) -> EditorState:
    present: SourceSnapshot = history.present
    names = [m.name for m in present.modules]
    active = state.active_module_name
    if active not in names:
        active = names[0] if names else None
    pending: int | None = None
    if active is not None:
        entry = present.overlay.get(active)
        pending = entry.cursor_offset if entry is not None else 0
    return replace(state, source_history=history, active_module_name=active, pending_cursor_offset=pending)


def handle_undo(state: EditorState, action: a.Undo) -> EditorState:
    history = undo_history(state.source_history)
    if history is state.source_history:
        return state
    return _after_history_move(state, history)


def handle_redo(state: EditorState, action: a.Redo) -> EditorState:
    history = redo_history(state.source_history)
    if history is state.source_history:
        return state
    return _after_history_move(state, history)


# ---------- Module lifecycle ----------


def handle_create_module(state: EditorState, action: a.CreateModule) -> EditorState:
    name = str(action.module_name or "").strip()
    if state.program is None or not name:
        return state
    if _name_taken(state, name):
        logger.debug("Ignoring creation of duplicate module %r", name)
        return state
    module = VbaModule(name=name, module_type=action.module_type, source_code="", procedures=())
    present = state.source_history.present
    snapshot = present.with_modules(present.modules + (module,))
    return replace(
        state,
        source_history=push_history(state.source_history, snapshot),
        active_module_name=name,
        cursor=CursorPosition(),
        selection=None,
        selected_procedure_name=None,
    )


def handle_delete_module(state: EditorState, action: a.DeleteModule) -> EditorState:
    target = find_module(state, action.module_name)
    if target is None:
        logger.debug("Ignoring deletion of unknown module %r", action.module_name)
        return state
    if target.module_type == "document":
        logger.debug("Document module %r cannot be deleted", action.module_name)
        return state

    present = state.source_history.present
    position = present.modules.index(target)
    remaining = present.modules[:position] + present.modules[position + 1:]
    overlay = {k: v for k, v in present.overlay.items() if k != target.name}
    snapshot = present.with_modules(remaining, overlay)

    changes: dict = {"source_history": push_history(state.source_history, snapshot)}
    if state.active_module_name == target.name:
        if remaining:
            changes["active_module_name"] = remaining[min(position, len(remaining) - 1)].name
        else:
            changes["active_module_name"] = None
        changes.update(cursor=CursorPosition(), selection=None, selected_procedure_name=None)
    return replace(state, **changes)


def handle_rename_module(state: EditorState, action: a.RenameModule) -> EditorState:
    target = find_module(state, action.old_name)
    new_name = str(action.new_name or "").strip()
    if target is None or not new_name or new_name == target.name:
        return state
    if target.module_type == "document":
        logger.debug("Document module %r cannot be renamed", action.old_name)
        return state
    if _name_taken(state, new_name, ignore=target.name):
        logger.debug("Ignoring rename of %r to duplicate name %r", action.old_name, new_name)
        return state

    present = state.source_history.present
    renamed = replace(target, name=new_name)
    new_modules = tuple(renamed if m is target else m for m in present.modules)
    overlay = {(new_name if k == target.name else k): v for k, v in present.overlay.items()}
    snapshot = present.with_modules(new_modules, overlay)

    active = new_name if state.active_module_name == target.name else state.active_module_name
    return replace(
        state,
        source_history=push_history(state.source_history, snapshot),
        active_module_name=active,
    )


def handle_reorder_modules(state: EditorState, action: a.ReorderModules) -> EditorState:
    present = state.source_history.present
    current = [m.name for m in present.modules]
    wanted = list(action.module_names)
    if sorted(wanted) != sorted(current) or len(set(wanted)) != len(wanted):
        logger.debug("Ignoring reorder that is not a permutation of the modules")
        return state
    if wanted == current:
        return state
    by_name = {m.name: m for m in present.modules}
    snapshot = present.with_modules(tuple(by_name[name] for name in wanted))
    return replace(state, source_history=push_history(state.source_history, snapshot))


HANDLERS = {
    a.LoadProgram: handle_load_program,
    a.ClearProgram: handle_clear_program,
    a.SelectModule: handle_select_module,
    a.SelectProcedure: handle_select_procedure,
    a.SetCursor: handle_set_cursor,
    a.SetSelection: handle_set_selection,
    a.ClearSelection: handle_clear_selection,
    a.UpdateModuleSource: handle_update_module_source,
    a.ReplaceModuleSource: handle_replace_module_source,
    a.Undo: handle_undo,
    a.Redo: handle_redo,
    a.ClearPendingCursor: handle_clear_pending_cursor,
    a.SetMode: handle_set_mode,
    a.CreateModule: handle_create_module,
    a.DeleteModule: handle_delete_module,
    a.RenameModule: handle_rename_module,
    a.ReorderModules: handle_reorder_modules,
}
