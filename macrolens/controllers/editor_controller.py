"""Controller owning the editor state and the per-module debounce timers."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from PySide6.QtCore import QObject, QTimer, Signal

from macrolens.core.debounce import DebounceBatcher
from macrolens.editor import actions as a
from macrolens.editor.reducer import editor_reducer
from macrolens.editor.state import EditorState, active_module_source, create_initial_state
from macrolens.services.highlight_ranges import HighlightRange, highlight_for_selection
from macrolens.services.lexer import Token
from macrolens.services.line_index import LineIndex
from macrolens.services.project_model import ModuleType, VbaProgram
from macrolens.services.token_cache import LineTokenCache
from macrolens.settings_manager import EngineSettingsManager

logger = logging.getLogger(__name__)


class EditorController(QObject):
    stateChanged = Signal(object)
    cursorRestoreRequested = Signal(int)
    activeModuleChanged = Signal(object)

    def __init__(self, settings: EngineSettingsManager | None = None, parent=None):
        super().__init__(parent)
        self.settings = settings if settings is not None else EngineSettingsManager()
        self._state: EditorState = create_initial_state(
            search_options=self.settings.default_search_options()
        )
        self._batcher = DebounceBatcher()
        self._debounce_timers: dict[str, QTimer] = {}
        self._token_cache = LineTokenCache(self.settings.token_cache_capacity)

    # ---------- Public API ----------

    @property
    def state(self) -> EditorState:
        return self._state

    def dispatch(self, action: object) -> EditorState:
        previous = self._state
        current = editor_reducer(previous, action)
        if current is previous:
            return current
        self._state = current

        if current.active_module_name != previous.active_module_name:
            self._token_cache.clear()
            self.activeModuleChanged.emit(current.active_module_name)
        self.stateChanged.emit(current)
        if current.pending_cursor_offset is not None and current.source_history is not previous.source_history:
            self.cursorRestoreRequested.emit(int(current.pending_cursor_offset))
        return current

    def apply_settings(self, raw: Mapping[str, Any] | None) -> None:
        self.settings.load(raw)
        capacity = self.settings.token_cache_capacity
        if capacity != self._token_cache.capacity:
            self._token_cache = LineTokenCache(capacity)

    def load_program(self, program: VbaProgram) -> None:
        self.flush()
        self._token_cache.clear()
        self.dispatch(a.LoadProgram(program=program))

    def clear_program(self) -> None:
        self.flush()
        self.dispatch(a.ClearProgram())

    def select_module(self, module_name: str) -> None:
        self.flush()
        self.dispatch(a.SelectModule(module_name=module_name))

    def edit_source(self, source: str, cursor_offset: int, module_name: str | None = None) -> bool:
        """Record a keystroke. Returns False when the edit was rejected."""
        name = module_name or self._state.active_module_name
        if name is None:
            return False
        mode = self._batcher.begin_edit(name)
        if mode == "push":
            action: object = a.UpdateModuleSource(module_name=name, source=source, cursor_offset=cursor_offset)
        else:
            action = a.ReplaceModuleSource(module_name=name, source=source, cursor_offset=cursor_offset)
        previous = self._state
        if self.dispatch(action) is previous:
            if mode == "push":
                self._batcher.flush(name)
            return False
        self._restart_timer(name)
        return True

    def flush(self, module_name: str | None = None) -> None:
        """Close the open edit batch of one module, or of all modules."""
        if module_name is None:
            self._stop_all_timers()
        else:
            self._cancel_timer(module_name)
        self._batcher.flush(module_name)

    def undo(self) -> None:
        self.flush()
        self.dispatch(a.Undo())

    def redo(self) -> None:
        self.flush()
        self.dispatch(a.Redo())

    def create_module(self, module_type: ModuleType, module_name: str) -> None:
        self.flush()
        self.dispatch(a.CreateModule(module_type=module_type, module_name=module_name))

    def delete_module(self, module_name: str) -> None:
        self.flush()
        self.dispatch(a.DeleteModule(module_name=module_name))

    def rename_module(self, old_name: str, new_name: str) -> None:
        self.flush()
        self.dispatch(a.RenameModule(old_name=old_name, new_name=new_name))

    def reorder_modules(self, module_names) -> None:
        self.flush()
        self.dispatch(a.ReorderModules(module_names=tuple(module_names)))

    def set_cursor_offset(self, offset: int) -> None:
        source = active_module_source(self._state)
        if source is None:
            return
        pos = LineIndex.build(source).offset_to_line_column(offset)
        self.dispatch(a.SetCursor(line=pos.line, column=pos.column))

    def selection_highlight(self, anchor_offset: int, focus_offset: int) -> HighlightRange | None:
        source = active_module_source(self._state)
        if source is None:
            return None
        return highlight_for_selection(LineIndex.build(source), anchor_offset, focus_offset)

    def clear_pending_cursor(self) -> None:
        self.dispatch(a.ClearPendingCursor())

    def batch_state(self, module_name: str) -> str:
        return self._batcher.state_of(module_name)

    def tokens_for_line(self, line: str) -> tuple[Token, ...]:
        return self._token_cache.tokens_for(line)

    def active_tokens(self) -> list[tuple[Token, ...]]:
        source = active_module_source(self._state)
        if source is None:
            return []
        return [self._token_cache.tokens_for(line) for line in source.split("\n")]

    def shutdown(self) -> None:
        self._stop_all_timers()
        self._batcher.flush()

    # ---------- Timers ----------

    def _restart_timer(self, module_name: str) -> None:
        timer = self._debounce_timers.get(module_name)
        if timer is None:
            timer = QTimer(self)
            timer.setSingleShot(True)
            timer.timeout.connect(lambda name=module_name: self._on_debounce_timeout(name))
            self._debounce_timers[module_name] = timer
        timer.start(int(self.settings.debounce_ms))

    def _on_debounce_timeout(self, module_name: str) -> None:
        logger.debug("Edit batch for %r closed", module_name)
        self._cancel_timer(module_name)
        self._batcher.flush(module_name)

    def _cancel_timer(self, module_name: str) -> None:
        timer = self._debounce_timers.pop(module_name, None)
        if timer is None:
            return
        timer.stop()
        timer.deleteLater()

    def _stop_all_timers(self) -> None:
        for key in list(self._debounce_timers.keys()):
            self._cancel_timer(key)
