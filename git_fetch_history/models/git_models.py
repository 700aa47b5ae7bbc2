"""Git-related model classes."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ChunkType(str, Enum):
    """Enum for diff chunk classifications."""

    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


class DiffChunk(BaseModel):
    """A contiguous span of a file patch."""

    type: ChunkType
    content: str


class FilePatch(BaseModel):
    """Changes to one file between a parent commit and a commit."""

    from_path: Optional[str] = None  # None for added files
    to_path: Optional[str] = None  # None for deleted files
    chunks: List[DiffChunk] = Field(default_factory=list)


class TreeFile(BaseModel):
    """A blob in a commit tree."""

    path: str
    data: bytes


class CommitInfo(BaseModel):
    """The parts of a commit the summarizer needs."""

    hexsha: str
    author_email: str
    authored_date: int  # seconds since epoch
    message: str
    parents: List[str] = Field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return not self.parents


class PullResult(BaseModel):
    """Outcome of pulling the tracked branch."""

    up_to_date: bool
    head: str
