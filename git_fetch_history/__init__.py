"""Continuously publishes per-commit change summaries of a git branch."""

__version__ = "0.1.0"
