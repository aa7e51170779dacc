from .reducer import editor_reducer
from .state import EditorState, SearchState, SourceSnapshot, create_initial_state

__all__ = [
    "EditorState",
    "SearchState",
    "SourceSnapshot",
    "create_initial_state",
    "editor_reducer",
]
