from __future__ import annotations

from copy import deepcopy
from typing import TypedDict


class HistorySettings(TypedDict, total=False):
    debounce_ms: int


class CompletionSettings(TypedDict, total=False):
    enabled: bool
    auto_trigger: bool
    auto_trigger_after_dot: bool
    auto_trigger_min_chars: int
    max_items: int
    show_signatures: bool


class SearchOptionSettings(TypedDict, total=False):
    case_sensitive: bool
    use_regex: bool
    whole_word: bool


class SearchSettings(TypedDict, total=False):
    max_matches: int
    default_options: SearchOptionSettings


class HighlightSettings(TypedDict, total=False):
    token_cache_capacity: int


class EngineSettings(TypedDict, total=False):
    history: HistorySettings
    completion: CompletionSettings
    search: SearchSettings
    highlight: HighlightSettings


def default_engine_settings() -> EngineSettings:
    defaults: EngineSettings = {
        "history": {
            "debounce_ms": 300,
        },
        "completion": {
            "enabled": True,
            "auto_trigger": True,
            "auto_trigger_after_dot": True,
            "auto_trigger_min_chars": 1,
            "max_items": 200,
            "show_signatures": True,
        },
        "search": {
            "max_matches": 10000,
            "default_options": {
                "case_sensitive": False,
                "use_regex": False,
                "whole_word": False,
            },
        },
        "highlight": {
            "token_cache_capacity": 2000,
        },
    }
    return deepcopy(defaults)

