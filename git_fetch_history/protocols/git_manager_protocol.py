"""Git Manager protocol interface."""

from pathlib import Path
from typing import Iterator, List, Protocol, runtime_checkable

from ..models import CommitInfo, FilePatch, PullResult, TreeFile


@runtime_checkable
class GitManagerProtocol(Protocol):
    """Protocol for the version-control operations the sync relies on."""

    @property
    def repo_url(self) -> str:
        """Repository URL."""
        ...

    @property
    def local_path(self) -> Path:
        """Local working copy path."""
        ...

    @property
    def branch(self) -> str:
        """Tracked branch name."""
        ...

    def setup_repository(self) -> None:
        """Provision a fresh working copy of the tracked branch."""
        ...

    def pull(self) -> PullResult:
        """Pull the tracked branch and report whether HEAD moved."""
        ...

    def resolve_head(self) -> str:
        """Hash of the commit HEAD points at."""
        ...

    def iter_log(self, from_commit: str) -> Iterator[CommitInfo]:
        """Commits reachable from from_commit, newest first."""
        ...

    def is_ancestor(self, ancestor: str, commit: str) -> bool:
        """Whether ancestor is reachable from commit."""
        ...

    def diff(self, parent: str, commit: str) -> List[FilePatch]:
        """File patches from parent's tree to commit's tree."""
        ...

    def list_files(self, commit: str) -> Iterator[TreeFile]:
        """Every file in the commit's tree."""
        ...
