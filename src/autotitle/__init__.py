"""Automatic session titles for the opencode host runtime."""

__version__ = "0.1.0"
