"""Detect and auto-complete missing i18n translations."""

__version__ = "1.0.3"
