from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Mapping

from macrolens.services.text_search_service import SearchOptions
from macrolens.settings_models import default_engine_settings
from macrolens.settings_store import SettingsStore, deep_merge_defaults

logger = logging.getLogger(__name__)


def _clamp_int(value: Any, low: int, high: int, fallback: int) -> int:
    try:
        return max(low, min(high, int(value)))
    except Exception:
        return fallback


class EngineSettingsManager:
    """Loads the host's settings mapping and exposes normalized values."""

    def __init__(self, raw: Mapping[str, Any] | None = None) -> None:
        self.store = SettingsStore(default_engine_settings())
        self.load(raw)

    def load(self, raw: Mapping[str, Any] | None = None) -> None:
        self.store.load(raw)
        if self.store.last_error:
            logger.warning("Ignoring engine settings: %s", self.store.last_error)
        self._normalize()

    @property
    def debounce_ms(self) -> int:
        return int(self.store.get("history.debounce_ms"))

    @property
    def max_matches(self) -> int:
        return int(self.store.get("search.max_matches"))

    @property
    def token_cache_capacity(self) -> int:
        return int(self.store.get("highlight.token_cache_capacity"))

    def completion_settings(self) -> dict[str, Any]:
        return deepcopy(self.store.get("completion"))

    def default_search_options(self) -> SearchOptions:
        raw = self.store.get("search.default_options") or {}
        return SearchOptions(
            case_sensitive=bool(raw.get("case_sensitive")),
            use_regex=bool(raw.get("use_regex")),
            whole_word=bool(raw.get("whole_word")),
        )

    def _section(self, name: str) -> dict[str, Any]:
        data = self.store.data
        section = data.get(name)
        if not isinstance(section, dict):
            section = {}
        section = deep_merge_defaults(section, default_engine_settings()[name])
        data[name] = section
        return section

    def _normalize(self) -> None:
        history = self._section("history")
        history["debounce_ms"] = _clamp_int(history.get("debounce_ms"), 20, 3000, 300)

        completion = self._section("completion")
        for bool_key in ("enabled", "auto_trigger", "auto_trigger_after_dot", "show_signatures"):
            completion[bool_key] = bool(completion.get(bool_key, True))
        completion["auto_trigger_min_chars"] = _clamp_int(
            completion.get("auto_trigger_min_chars"), 1, 10, 1
        )
        completion["max_items"] = _clamp_int(completion.get("max_items"), 5, 1000, 200)

        search = self._section("search")
        search["max_matches"] = _clamp_int(search.get("max_matches"), 1, 100000, 10000)
        options = search.get("default_options")
        if not isinstance(options, dict):
            options = {}
        search["default_options"] = {
            "case_sensitive": bool(options.get("case_sensitive", False)),
            "use_regex": bool(options.get("use_regex", False)),
            "whole_word": bool(options.get("whole_word", False)),
        }

        highlight = self._section("highlight")
        highlight["token_cache_capacity"] = _clamp_int(
            highlight.get("token_cache_capacity"), 0, 100000, 2000
        )

