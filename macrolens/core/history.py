"""Immutable undo/redo history.

Every operation returns a new ``UndoRedoHistory`` (or the same object when
nothing changes), so snapshots can be shared freely between editor states.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class UndoRedoHistory(Generic[T]):
    past: tuple[T, ...]
    present: T
    future: tuple[T, ...]


def create_history(initial: T) -> UndoRedoHistory[T]:
    return UndoRedoHistory(past=(), present=initial, future=())


def push_history(history: UndoRedoHistory[T], value: T) -> UndoRedoHistory[T]:
    return UndoRedoHistory(past=history.past + (history.present,), present=value, future=())


def replace_present(history: UndoRedoHistory[T], value: T) -> UndoRedoHistory[T]:
    return replace(history, present=value)


def undo_history(history: UndoRedoHistory[T]) -> UndoRedoHistory[T]:
    if not history.past:
        return history
    return UndoRedoHistory(
        past=history.past[:-1],
        present=history.past[-1],
        future=(history.present,) + history.future,
    )


def redo_history(history: UndoRedoHistory[T]) -> UndoRedoHistory[T]:
    if not history.future:
        return history
    return UndoRedoHistory(
        past=history.past + (history.present,),
        present=history.future[0],
        future=history.future[1:],
    )


def can_undo(history: UndoRedoHistory[T]) -> bool:
    return bool(history.past)


def can_redo(history: UndoRedoHistory[T]) -> bool:
    return bool(history.future)
