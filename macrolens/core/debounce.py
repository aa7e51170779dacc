from __future__ import annotations

from typing import Literal

BatchState = Literal["idle", "batching"]
EditMode = Literal["push", "replace"]


class DebounceBatcher:
    """Tracks, per module, whether keystrokes are inside an open edit batch.

    The first edit of a batch must push a new history entry; later edits in
    the same batch replace the present entry. ``flush`` closes a batch and is
    called when the debounce timer fires or before any history navigation.
    """

    def __init__(self) -> None:
        self._batching: set[str] = set()

    def state_of(self, module_name: str) -> BatchState:
        return "batching" if module_name in self._batching else "idle"

    def begin_edit(self, module_name: str) -> EditMode:
        if module_name in self._batching:
            return "replace"
        self._batching.add(module_name)
        return "push"

    def flush(self, module_name: str | None = None) -> None:
        if module_name is None:
            self._batching.clear()
        else:
            self._batching.discard(module_name)

