"""Models for the application."""

from .git_models import (
    ChunkType,
    CommitInfo,
    DiffChunk,
    FilePatch,
    PullResult,
    TreeFile,
)

__all__ = ["ChunkType", "CommitInfo", "DiffChunk", "FilePatch", "PullResult", "TreeFile"]
