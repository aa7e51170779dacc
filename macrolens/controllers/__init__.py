"""Qt-aware controllers driving the editor engine."""

from .editor_controller import EditorController
from .language_intelligence_controller import LanguageIntelligenceController
from .search_controller import SearchController

__all__ = [
    "EditorController",
    "LanguageIntelligenceController",
    "SearchController",
]
