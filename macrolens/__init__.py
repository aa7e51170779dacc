"""Text intelligence engine for a VBA macro editor."""

__version__ = "0.1.0"
