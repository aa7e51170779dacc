from __future__ import annotations

from macrolens.editor.handlers import HANDLERS
from macrolens.editor.search_handlers import SEARCH_HANDLERS
from macrolens.editor.state import EditorState

_ALL_HANDLERS = {**HANDLERS, **SEARCH_HANDLERS}


def editor_reducer(state: EditorState, action: object) -> EditorState:
    handler = _ALL_HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown editor action: {type(action).__name__}")
    return handler(state, action)
