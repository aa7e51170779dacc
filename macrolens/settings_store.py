from __future__ import annotations

from copy import deepcopy
from typing import Any, Mapping


def deep_merge_defaults(data: Mapping[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Merge defaults into data without overwriting explicitly provided values."""
    merged: dict[str, Any] = {}
    for key, value in data.items():
        merged[key] = deep_merge_defaults(value, {}) if isinstance(value, Mapping) else deepcopy(value)
    for key, default_value in defaults.items():
        if key not in merged:
            merged[key] = deepcopy(default_value)
            continue
        current = merged[key]
        if isinstance(current, Mapping) and isinstance(default_value, Mapping):
            merged[key] = deep_merge_defaults(current, default_value)
    return merged


def dot_get(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    if not key:
        return data
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


class SettingsStore:
    """Holds the host's settings mapping merged over the engine defaults.

    The host owns persistence. A root that is not a mapping is ignored and
    reported through ``last_error``.
    """

    def __init__(self, defaults: Mapping[str, Any]) -> None:
        self.defaults: dict[str, Any] = deepcopy(dict(defaults))
        self.data: dict[str, Any] = deep_merge_defaults({}, self.defaults)
        self.last_error: str | None = None

    def load(self, raw: Any = None) -> dict[str, Any]:
        self.last_error = None
        if raw is None:
            loaded: dict[str, Any] = {}
        elif isinstance(raw, Mapping):
            loaded = dict(raw)
        else:
            loaded = {}
            self.last_error = f"Settings root must be a mapping, found {type(raw).__name__}."
        self.data = deep_merge_defaults(loaded, self.defaults)
        return self.data

    def get(self, key: str, default: Any = None) -> Any:
        return dot_get(self.data, key, default)
