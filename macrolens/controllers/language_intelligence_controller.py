"""Controller for completion and signature-help requests against the active module."""

from __future__ import annotations

from typing import Sequence

from PySide6.QtCore import QObject, Signal

from macrolens.controllers.editor_controller import EditorController
from macrolens.editor.state import active_module_source, active_procedures, all_procedures
from macrolens.services.completion_context import detect_completion_context
from macrolens.services.completion_service import DEFAULT_PROVIDERS, apply_completion, collect_completions
from macrolens.services.language_provider import (
    CompletionContext,
    CompletionItem,
    CompletionProvider,
    CompletionTrigger,
)
from macrolens.services.signature_help import ParameterHint, detect_parameter_context


class LanguageIntelligenceController(QObject):
    completionReady = Signal(object)
    signatureReady = Signal(object)

    def __init__(
            self,
            editor: EditorController,
            providers: Sequence[CompletionProvider] = DEFAULT_PROVIDERS,
            parent=None,
    ):
        super().__init__(parent or editor)
        self.editor = editor
        self._providers = tuple(providers)

    # ---------- Public API ----------

    @property
    def completion_settings(self) -> dict:
        return self.editor.settings.completion_settings()

    def request_completion(
            self,
            cursor_offset: int,
            trigger: CompletionTrigger = "typing",
            *,
            source: str | None = None,
    ) -> dict | None:
        """Compute completions at ``cursor_offset`` and emit ``completionReady``.

        Typing requests honour the auto-trigger settings; manual requests
        only require completion to be enabled.
        """
        cfg = self.completion_settings
        if not cfg["enabled"]:
            return None
        if trigger == "typing" and not cfg["auto_trigger"]:
            return None

        text = source if source is not None else active_module_source(self.editor.state)
        if text is None:
            return None
        context = detect_completion_context(text, cursor_offset, trigger)
        if context is None:
            return None
        if trigger == "typing":
            if context.trigger == "dot" and not cfg["auto_trigger_after_dot"]:
                return None
            if context.trigger == "typing" and len(context.prefix) < cfg["auto_trigger_min_chars"]:
                return None

        state = self.editor.state
        procedures = active_procedures(state) if context.trigger == "dot" else all_procedures(state)
        items = collect_completions(
            context,
            text,
            procedures,
            self._providers,
            max_items=cfg["max_items"],
        )
        payload = {
            "module_name": state.active_module_name,
            "context": context,
            "items": items,
        }
        self.completionReady.emit(payload)
        return payload

    def request_signature(self, cursor_offset: int, *, source: str | None = None) -> ParameterHint | None:
        cfg = self.completion_settings
        if not cfg["enabled"] or not cfg["show_signatures"]:
            return None
        text = source if source is not None else active_module_source(self.editor.state)
        if text is None:
            return None
        hint = detect_parameter_context(text, cursor_offset, all_procedures(self.editor.state))
        self.signatureReady.emit({"module_name": self.editor.state.active_module_name, "hint": hint})
        return hint

    def accept_completion(self, context: CompletionContext, item: CompletionItem) -> bool:
        """Insert ``item`` into the active module as a regular edit."""
        source = active_module_source(self.editor.state)
        if source is None:
            return False
        new_source, cursor_offset = apply_completion(source, context, item)
        return self.editor.edit_source(new_source, cursor_offset)
