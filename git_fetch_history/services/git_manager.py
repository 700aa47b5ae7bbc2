import logging
import shutil
from pathlib import Path
from typing import Iterator, List, Optional

from git import Commit, Repo
from git.exc import GitError

from ..exceptions import TransportError
from ..models import CommitInfo, FilePatch, PullResult, TreeFile
from .credentials import GitCredentials
from .patch_parser import parse_patch_chunks

logger = logging.getLogger(__name__)


def to_commit_info(commit: Commit) -> CommitInfo:
    """Copy the fields the summarizer needs out of a GitPython commit."""
    message = commit.message
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")
    return CommitInfo(
        hexsha=commit.hexsha,
        author_email=commit.author.email or "",
        authored_date=int(commit.authored_date),
        message=message,
        parents=[parent.hexsha for parent in commit.parents],
    )


class GitManager:
    """Manages the working copy of the tracked repository."""

    def __init__(
        self,
        repo_url: str,
        local_path: str,
        branch: str = "main",
        credentials: Optional[GitCredentials] = None,
    ):
        self.repo_url = repo_url
        self.local_path = Path(local_path)
        self.branch = branch
        self.credentials = credentials or GitCredentials(clone_url=repo_url)
        self.repo: Optional[Repo] = None

    def setup_repository(self) -> None:
        """Clone a fresh working copy, removing any previous one."""
        if self.local_path.exists():
            logger.info("Deleting old %s", self.local_path)
            shutil.rmtree(self.local_path)
        self.local_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Cloning %s (branch %s) into %s", self.repo_url, self.branch, self.local_path)
        if self.credentials.key_path:
            logger.info("Authenticating with SSH key %s", self.credentials.key_path)
        try:
            self.repo = Repo.clone_from(
                self.credentials.clone_url,
                self.local_path,
                branch=self.branch,
                env=self.credentials.env or None,
            )
        except GitError as e:
            raise TransportError(f"Failed to clone {self.repo_url}: {e}") from e
        logger.info("Repository cloned to %s", self.local_path)

    def _require_repo(self) -> Repo:
        if not self.repo:
            raise RuntimeError("Repository not initialized")
        return self.repo

    def pull(self) -> PullResult:
        """Pull the tracked branch from origin."""
        repo = self._require_repo()
        try:
            old_head = repo.head.commit.hexsha
            with repo.git.custom_environment(**self.credentials.env):
                repo.remotes.origin.pull(self.branch)
            new_head = repo.head.commit.hexsha
        except (GitError, ValueError) as e:
            raise TransportError(f"Failed to pull {self.branch}: {e}") from e
        return PullResult(up_to_date=new_head == old_head, head=new_head)

    def resolve_head(self) -> str:
        repo = self._require_repo()
        try:
            return repo.head.commit.hexsha
        except (GitError, ValueError) as e:
            raise TransportError(f"Failed to resolve HEAD: {e}") from e

    def iter_log(self, from_commit: str) -> Iterator[CommitInfo]:
        """Walk the history reachable from from_commit, newest first."""
        repo = self._require_repo()
        try:
            for commit in repo.iter_commits(from_commit):
                yield to_commit_info(commit)
        except GitError as e:
            raise TransportError(f"Failed to read log from {from_commit}: {e}") from e

    def is_ancestor(self, ancestor: str, commit: str) -> bool:
        repo = self._require_repo()
        try:
            return repo.is_ancestor(ancestor, commit)
        except GitError as e:
            raise TransportError(
                f"Failed to check ancestry of {ancestor} and {commit}: {e}"
            ) from e

    def diff(self, parent: str, commit: str) -> List[FilePatch]:
        """Build file patches going from parent's tree to commit's tree."""
        repo = self._require_repo()
        try:
            diff_items = repo.commit(parent).diff(
                repo.commit(commit), create_patch=True, no_renames=True
            )
        except (GitError, ValueError) as e:
            raise TransportError(f"Failed to diff {parent}..{commit}: {e}") from e

        patches = []
        for item in diff_items:
            patch_text = item.diff
            if isinstance(patch_text, bytes):
                patch_text = patch_text.decode("utf-8", errors="replace")
            patches.append(
                FilePatch(
                    from_path=None if item.new_file else item.a_path,
                    to_path=None if item.deleted_file else item.b_path,
                    chunks=parse_patch_chunks(patch_text or ""),
                )
            )
        return patches

    def list_files(self, commit: str) -> Iterator[TreeFile]:
        """Yield every blob in the commit's tree, depth first."""
        repo = self._require_repo()
        try:
            tree = repo.commit(commit).tree
            for item in tree.traverse(branch_first=False):
                if item.type != "blob":
                    continue
                yield TreeFile(path=item.path, data=item.data_stream.read())
        except (GitError, ValueError) as e:
            raise TransportError(f"Failed to list files of {commit}: {e}") from e
