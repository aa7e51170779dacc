from __future__ import annotations

from collections import OrderedDict

from macrolens.services.lexer import Token, tokenize_line


class LineTokenCache:
    """LRU cache of token tuples keyed by raw line text."""

    def __init__(self, capacity: int = 2000) -> None:
        capacity = int(capacity)
        if capacity < 0:
            raise ValueError(f"Token cache capacity must be non-negative, got {capacity}.")
        self.capacity = capacity
        self._entries: OrderedDict[str, tuple[Token, ...]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, line: object) -> bool:
        return line in self._entries

    def get(self, line: str) -> tuple[Token, ...] | None:
        tokens = self._entries.get(line)
        if tokens is not None:
            self._entries.move_to_end(line)
        return tokens

    def put(self, line: str, tokens: tuple[Token, ...]) -> None:
        if self.capacity == 0:
            return
        self._entries[line] = tokens
        self._entries.move_to_end(line)
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def tokens_for(self, line: str) -> tuple[Token, ...]:
        cached = self.get(line)
        if cached is not None:
            return cached
        tokens = tokenize_line(line)
        self.put(line, tokens)
        return tokens

    def clear(self) -> None:
        self._entries.clear()
