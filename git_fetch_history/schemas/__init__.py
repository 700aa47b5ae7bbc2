"""Schemas for the application."""

from .commit import ChangeType, CommitRecord, FileChangeRecord

__all__ = ["ChangeType", "CommitRecord", "FileChangeRecord"]
