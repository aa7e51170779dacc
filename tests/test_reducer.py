from __future__ import annotations

from types import MappingProxyType

import pytest

from macrolens.editor import actions as a
from macrolens.editor.reducer import editor_reducer
from macrolens.editor.state import (
    active_module_source,
    all_procedures,
    can_redo,
    can_undo,
    create_initial_state,
    modules,
    module_source,
)
from macrolens.services.text_search_service import ProjectSearchMatch, find_matches


def _reduce(state, *actions):
    for action in actions:
        state = editor_reducer(state, action)
    return state


def _names(state) -> list[str]:
    return [m.name for m in modules(state)]


@pytest.fixture
def state(program):
    return create_initial_state(program)


# ============================================================================
# Program and navigation
# ============================================================================

class TestProgramAndNavigation:
    def test_initial_state_selects_first_module(self, state):
        assert state.active_module_name == "Module1"
        assert not can_undo(state)
        assert not can_redo(state)

    def test_load_program_resets_history(self, program):
        state = _reduce(
            create_initial_state(),
            a.LoadProgram(program=program),
            a.UpdateModuleSource(module_name="Module1", source="x", cursor_offset=1),
        )
        assert can_undo(state)
        state = editor_reducer(state, a.LoadProgram(program=program))
        assert not can_undo(state)
        assert state.pending_cursor_offset is None
        assert active_module_source(state) == program.modules[0].source_code

    def test_clear_program(self, state):
        state = editor_reducer(state, a.ClearProgram())
        assert state.program is None
        assert state.active_module_name is None
        assert modules(state) == ()

    def test_select_module(self, state):
        state = editor_reducer(state, a.SetCursor(line=3, column=2))
        state = editor_reducer(state, a.SelectModule(module_name="Module2"))
        assert state.active_module_name == "Module2"
        assert (state.cursor.line, state.cursor.column) == (1, 1)

    def test_select_unknown_or_same_module_is_noop(self, state):
        assert editor_reducer(state, a.SelectModule(module_name="Missing")) is state
        assert editor_reducer(state, a.SelectModule(module_name="Module1")) is state

    def test_set_cursor_clamps_and_clears_selection(self, state):
        state = editor_reducer(state, a.SetSelection(1, 1, 2, 3))
        state = editor_reducer(state, a.SetCursor(line=0, column=-4))
        assert (state.cursor.line, state.cursor.column) == (1, 1)
        assert state.selection is None

    def test_clear_selection_without_selection_is_noop(self, state):
        assert editor_reducer(state, a.ClearSelection()) is state

    def test_select_procedure(self, state):
        state = editor_reducer(state, a.SelectProcedure(procedure_name="Main"))
        assert state.selected_procedure_name == "Main"
        assert editor_reducer(state, a.SelectProcedure(procedure_name="Main")) is state

    def test_all_procedures(self, state):
        assert [p.name for p in all_procedures(state)] == ["Main", "Calc"]

    def test_unknown_action_raises(self, state):
        with pytest.raises(TypeError):
            editor_reducer(state, object())


# ============================================================================
# Editing and history
# ============================================================================

class TestEditingAndHistory:
    def test_update_pushes_and_sets_pending_cursor(self, state):
        state = editor_reducer(
            state, a.UpdateModuleSource(module_name="Module1", source="Sub A()", cursor_offset=7)
        )
        assert active_module_source(state) == "Sub A()"
        assert state.pending_cursor_offset == 7
        assert len(state.source_history.past) == 1

    def test_batched_keystrokes_make_one_undo_step(self, state):
        original = active_module_source(state)
        state = _reduce(
            state,
            a.UpdateModuleSource(module_name="Module1", source="a", cursor_offset=1),
            a.ReplaceModuleSource(module_name="Module1", source="ab", cursor_offset=2),
            a.ReplaceModuleSource(module_name="Module1", source="abc", cursor_offset=3),
        )
        assert len(state.source_history.past) == 1
        state = editor_reducer(state, a.Undo())
        assert active_module_source(state) == original
        assert state.pending_cursor_offset == 0
        state = editor_reducer(state, a.Redo())
        assert active_module_source(state) == "abc"
        assert state.pending_cursor_offset == 3

    def test_edit_to_inactive_module_has_no_pending_cursor(self, state):
        state = editor_reducer(
            state, a.UpdateModuleSource(module_name="Module2", source="x", cursor_offset=1)
        )
        assert module_source(state, "Module2") == "x"
        assert state.pending_cursor_offset is None

    def test_history_spans_modules(self, state):
        state = _reduce(
            state,
            a.UpdateModuleSource(module_name="Module1", source="one", cursor_offset=3),
            a.UpdateModuleSource(module_name="Module2", source="two", cursor_offset=3),
            a.Undo(),
        )
        assert module_source(state, "Module1") == "one"
        assert module_source(state, "Module2") == state.program.modules[1].source_code

    def test_readonly_blocks_edits(self, state):
        state = editor_reducer(state, a.SetMode(mode="readonly"))
        action = a.UpdateModuleSource(module_name="Module1", source="x", cursor_offset=1)
        assert editor_reducer(state, action) is state

    def test_edit_unknown_module_is_noop(self, state):
        action = a.UpdateModuleSource(module_name="Nope", source="x", cursor_offset=1)
        assert editor_reducer(state, action) is state

    def test_undo_and_redo_without_history(self, state):
        assert editor_reducer(state, a.Undo()) is state
        assert editor_reducer(state, a.Redo()) is state

    def test_new_edit_discards_redo(self, state):
        state = _reduce(
            state,
            a.UpdateModuleSource(module_name="Module1", source="a", cursor_offset=1),
            a.Undo(),
            a.UpdateModuleSource(module_name="Module1", source="b", cursor_offset=1),
        )
        assert not can_redo(state)

    def test_clear_pending_cursor(self, state):
        state = editor_reducer(
            state, a.UpdateModuleSource(module_name="Module1", source="a", cursor_offset=1)
        )
        state = editor_reducer(state, a.ClearPendingCursor())
        assert state.pending_cursor_offset is None
        assert editor_reducer(state, a.ClearPendingCursor()) is state


# ============================================================================
# Module lifecycle
# ============================================================================

class TestModuleLifecycle:
    def test_create_module(self, state):
        state = editor_reducer(state, a.CreateModule(module_type="class", module_name="Customer"))
        assert _names(state) == ["Module1", "Module2", "ThisWorkbook", "Customer"]
        assert state.active_module_name == "Customer"
        assert active_module_source(state) == ""
        assert modules(state)[-1].module_type == "class"
        assert can_undo(state)

    def test_create_duplicate_ignores_case(self, state):
        assert editor_reducer(state, a.CreateModule(module_type="standard", module_name="module1")) is state

    def test_create_requires_program_and_name(self, state):
        assert editor_reducer(state, a.CreateModule(module_type="standard", module_name="  ")) is state
        empty = create_initial_state()
        assert editor_reducer(empty, a.CreateModule(module_type="standard", module_name="M")) is empty

    def test_delete_active_module_selects_neighbour(self, state):
        state = editor_reducer(state, a.DeleteModule(module_name="Module1"))
        assert _names(state) == ["Module2", "ThisWorkbook"]
        assert state.active_module_name == "Module2"

    def test_delete_last_position_selects_previous(self, state):
        state = _reduce(
            state,
            a.CreateModule(module_type="standard", module_name="Extra"),
            a.DeleteModule(module_name="Extra"),
        )
        assert state.active_module_name == "ThisWorkbook"

    def test_delete_drops_overlay_and_undo_restores(self, state):
        state = _reduce(
            state,
            a.UpdateModuleSource(module_name="Module2", source="edited", cursor_offset=6),
            a.DeleteModule(module_name="Module2"),
        )
        assert "Module2" not in state.source_history.present.overlay
        state = editor_reducer(state, a.Undo())
        assert module_source(state, "Module2") == "edited"

    def test_document_modules_cannot_be_deleted_or_renamed(self, state):
        assert editor_reducer(state, a.DeleteModule(module_name="ThisWorkbook")) is state
        assert editor_reducer(state, a.RenameModule(old_name="ThisWorkbook", new_name="Book")) is state

    def test_delete_unknown_module(self, state):
        assert editor_reducer(state, a.DeleteModule(module_name="Nope")) is state

    def test_rename_moves_overlay_and_active(self, state):
        state = _reduce(
            state,
            a.UpdateModuleSource(module_name="Module1", source="changed", cursor_offset=2),
            a.RenameModule(old_name="Module1", new_name="Main"),
        )
        assert _names(state)[0] == "Main"
        assert state.active_module_name == "Main"
        assert active_module_source(state) == "changed"

    def test_rename_rejects_duplicates_and_blank(self, state):
        assert editor_reducer(state, a.RenameModule(old_name="Module1", new_name="MODULE2")) is state
        assert editor_reducer(state, a.RenameModule(old_name="Module1", new_name="")) is state
        assert editor_reducer(state, a.RenameModule(old_name="Module1", new_name="Module1")) is state

    def test_rename_case_only_change(self, state):
        state = editor_reducer(state, a.RenameModule(old_name="Module1", new_name="MODULE1"))
        assert _names(state)[0] == "MODULE1"

    def test_undo_rename_restores_active_module(self, state):
        state = _reduce(
            state,
            a.RenameModule(old_name="Module1", new_name="Main"),
            a.Undo(),
        )
        assert _names(state)[0] == "Module1"
        assert state.active_module_name == "Module1"

    def test_reorder(self, state):
        order = ("ThisWorkbook", "Module1", "Module2")
        state = editor_reducer(state, a.ReorderModules(module_names=order))
        assert tuple(_names(state)) == order
        assert can_undo(state)

    def test_reorder_rejects_non_permutations(self, state):
        assert editor_reducer(state, a.ReorderModules(module_names=("Module1", "Module2"))) is state
        bad = ("Module1", "Module1", "Module2")
        assert editor_reducer(state, a.ReorderModules(module_names=bad)) is state
        same = ("Module1", "Module2", "ThisWorkbook")
        assert editor_reducer(state, a.ReorderModules(module_names=same)) is state


# ============================================================================
# Search
# ============================================================================

SEARCH_SOURCE = "Dim x\nDim y\nDim z"


@pytest.fixture
def search_state(state):
    state = _reduce(
        state,
        a.UpdateModuleSource(module_name="Module1", source=SEARCH_SOURCE, cursor_offset=0),
        a.OpenSearch(),
        a.SetSearchQuery(query="Dim"),
    )
    return editor_reducer(state, a.UpdateMatches(matches=tuple(find_matches(SEARCH_SOURCE, "Dim"))))


class TestSearchHandlers:
    def test_open_and_close(self, state):
        opened = editor_reducer(state, a.OpenSearch())
        assert opened.search.is_open
        assert editor_reducer(opened, a.OpenSearch()) is opened
        switched = editor_reducer(opened, a.OpenSearch(mode="project-wide"))
        assert switched.search.mode == "project-wide"
        closed = editor_reducer(switched, a.CloseSearch())
        assert not closed.search.is_open

    def test_update_matches_selects_first(self, search_state):
        assert len(search_state.search.matches) == 3
        assert search_state.search.current_match_index == 0

    def test_update_matches_clamps_index(self, search_state):
        state = editor_reducer(search_state, a.SelectMatch(match_index=2))
        state = editor_reducer(state, a.UpdateMatches(matches=search_state.search.matches[:1]))
        assert state.search.current_match_index == 0

    def test_navigation_wraps(self, search_state):
        state = editor_reducer(search_state, a.NavigateMatch(direction="previous"))
        assert state.search.current_match_index == 2
        state = editor_reducer(state, a.NavigateMatch(direction="next"))
        assert state.search.current_match_index == 0

    def test_select_match_out_of_range(self, search_state):
        assert editor_reducer(search_state, a.SelectMatch(match_index=5)) is search_state

    def test_query_and_options_reset_index(self, search_state):
        state = editor_reducer(search_state, a.SetSearchQuery(query="x"))
        assert state.search.current_match_index == -1
        state = editor_reducer(search_state, a.SetSearchOptions(case_sensitive=True))
        assert state.search.options.case_sensitive is True
        assert state.search.options.use_regex is False
        assert state.search.current_match_index == -1

    def test_mode_switch_clears_matches(self, search_state):
        state = editor_reducer(search_state, a.SetSearchMode(mode="project-wide"))
        assert state.search.matches == ()
        assert state.search.project_match_count == 0

    def test_project_matches_are_read_only(self, search_state, program):
        grouped = {"Module1": tuple(ProjectSearchMatch("Module1", m, "Dim x") for m in search_state.search.matches)}
        state = editor_reducer(search_state, a.UpdateProjectMatches(project_matches=grouped, total_count=3))
        assert isinstance(state.search.project_matches, MappingProxyType)
        grouped["Module2"] = ()
        assert set(state.search.project_matches) == {"Module1"}
        with pytest.raises(TypeError):
            state.search.project_matches["Module2"] = ()

        for cleared in (
            editor_reducer(state, a.SetSearchMode(mode="project-wide")),
            editor_reducer(state, a.LoadProgram(program=program)),
            editor_reducer(state, a.ClearProgram()),
        ):
            assert isinstance(cleared.search.project_matches, MappingProxyType)
            assert len(cleared.search.project_matches) == 0

    def test_replace_current(self, search_state):
        state = _reduce(search_state, a.SetReplaceText(replace_text="Let"), a.ReplaceCurrent())
        assert active_module_source(state) == "Let x\nDim y\nDim z"
        assert [m.start_offset for m in state.search.matches] == [6, 12]
        assert state.pending_cursor_offset == 3
        state = editor_reducer(state, a.Undo())
        assert active_module_source(state) == SEARCH_SOURCE

    def test_replace_all(self, search_state):
        state = _reduce(search_state, a.SetReplaceText(replace_text="Const"), a.ReplaceAll())
        assert active_module_source(state) == "Const x\nConst y\nConst z"
        assert state.search.matches == ()
        assert state.pending_cursor_offset == len("Const x\nConst y\nConst")

    def test_replace_is_blocked_in_readonly(self, search_state):
        state = _reduce(search_state, a.SetReplaceText(replace_text="Let"), a.SetMode(mode="readonly"))
        assert editor_reducer(state, a.ReplaceCurrent()) is state
        assert editor_reducer(state, a.ReplaceAll()) is state

    def test_replace_without_matches(self, state):
        assert editor_reducer(state, a.ReplaceAll()) is state
