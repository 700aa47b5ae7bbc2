"""Published commit record schemas.

Field aliases are the JSON keys downstream consumers read. Declaration
order is serialization order, which keeps a record's bytes stable.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ChangeType(str, Enum):
    """Enum for file change kinds."""

    INITIAL = "initial"
    MODIFY = "modify"
    DELETED = "deleted"


class FileChangeRecord(BaseModel):
    """Per-file change summary within a commit."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file: str
    change_type: ChangeType = Field(alias="changetype")
    chunks_added: int = Field(default=0, ge=0, alias="chunksadded")
    chunks_removed: int = Field(default=0, ge=0, alias="chunksremoved")
    lines_added: int = Field(default=0, ge=0, alias="linesadded")
    lines_removed: int = Field(default=0, ge=0, alias="linesremoved")


class CommitRecord(BaseModel):
    """One summarized commit, keyed by (repo, branch, hash)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    repo: str
    branch: str
    hash: str
    timestamp: int
    author: str
    message: str
    files: List[FileChangeRecord] = Field(default_factory=list)
