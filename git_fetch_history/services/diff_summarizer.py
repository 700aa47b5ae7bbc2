"""Summarizes commits into per-file change records.

The module-level functions are pure. DiffSummarizer only gathers their
inputs (tree files, ancestry, patches) from a git manager.
"""

import logging
from typing import Iterable, List, Optional

from ..exceptions import HistoryInconsistency
from ..models import ChunkType, CommitInfo, FilePatch, TreeFile
from ..protocols.git_manager_protocol import GitManagerProtocol
from ..schemas import ChangeType, CommitRecord, FileChangeRecord

logger = logging.getLogger(__name__)


def count_content_lines(content: str) -> int:
    """Count newline-delimited segments of a chunk.

    Content ending in a newline counts one extra, empty segment. Published
    numbers have always been computed this way.
    """
    return len(content.split("\n"))


def count_file_lines(data: bytes) -> int:
    """Count the lines of a whole file; a final newline does not add a line."""
    if not data:
        return 0
    lines = data.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    return len(lines)


def summarize_root_files(files: Iterable[TreeFile]) -> List[FileChangeRecord]:
    """Every file of a root commit is one added chunk holding the whole file."""
    records = []
    for tree_file in files:
        lines = count_file_lines(tree_file.data)
        logger.debug("File %s added %d lines (first commit)", tree_file.path, lines)
        records.append(
            FileChangeRecord(
                file=tree_file.path,
                change_type=ChangeType.INITIAL,
                chunks_added=1,
                chunks_removed=0,
                lines_added=lines,
                lines_removed=0,
            )
        )
    return records


def summarize_file_patch(patch: FilePatch) -> Optional[FileChangeRecord]:
    """Summarize one file patch, or None when it names no file at all."""
    if patch.to_path is None and patch.from_path is None:
        logger.warning("File patch has neither a source nor a destination, ignoring it")
        return None

    if patch.to_path is None:
        logger.debug("Deleted file %s", patch.from_path)
        return FileChangeRecord(file=patch.from_path, change_type=ChangeType.DELETED)

    lines_added, lines_removed = 0, 0
    chunks_added, chunks_removed = 0, 0
    for chunk in patch.chunks:
        if chunk.type == ChunkType.ADDED:
            lines_added += count_content_lines(chunk.content)
            chunks_added += 1
        elif chunk.type == ChunkType.REMOVED:
            lines_removed += count_content_lines(chunk.content)
            chunks_removed += 1

    logger.debug(
        "File %s lines added: %d lines removed: %d chunks added: %d chunks removed: %d",
        patch.to_path,
        lines_added,
        lines_removed,
        chunks_added,
        chunks_removed,
    )
    return FileChangeRecord(
        file=patch.to_path,
        change_type=ChangeType.MODIFY,
        chunks_added=chunks_added,
        chunks_removed=chunks_removed,
        lines_added=lines_added,
        lines_removed=lines_removed,
    )


def summarize_patches(patches: Iterable[FilePatch]) -> List[FileChangeRecord]:
    records = []
    for patch in patches:
        record = summarize_file_patch(patch)
        if record is not None:
            records.append(record)
    return records


def summarize_commit(
    commit: CommitInfo,
    tree_files: Optional[Iterable[TreeFile]] = None,
    patches: Optional[Iterable[FilePatch]] = None,
    parent_is_ancestor: Optional[bool] = None,
) -> List[FileChangeRecord]:
    """
    Summarize a commit from already gathered inputs.

    Args:
        commit: The commit being summarized
        tree_files: Files of the commit's tree, used for root commits
        patches: Patches from the first parent, used for other commits
        parent_is_ancestor: Result of the first-parent ancestry check

    Raises:
        HistoryInconsistency: the first parent is not an ancestor of the commit
    """
    if commit.is_root:
        return summarize_root_files(tree_files or [])
    if parent_is_ancestor is False:
        raise HistoryInconsistency(commit.hexsha, commit.parents[0])
    return summarize_patches(patches or [])


def build_commit_record(
    repo: str, branch: str, commit: CommitInfo, files: List[FileChangeRecord]
) -> CommitRecord:
    return CommitRecord(
        repo=repo,
        branch=branch,
        hash=commit.hexsha,
        timestamp=commit.authored_date,
        author=commit.author_email,
        message=commit.message.replace("\n", ""),
        files=files,
    )


class DiffSummarizer:
    """Gathers a commit's tree or first-parent patch and summarizes it."""

    def __init__(self, git_manager: GitManagerProtocol):
        self.git_manager = git_manager

    def summarize(self, commit: CommitInfo) -> List[FileChangeRecord]:
        """Summarize a commit, ignoring all but the first parent of merges."""
        if commit.is_root:
            return summarize_commit(
                commit, tree_files=self.git_manager.list_files(commit.hexsha)
            )

        parent = commit.parents[0]
        logger.debug("Commit %s has %d parents, using %s", commit.hexsha, len(commit.parents), parent)
        if not self.git_manager.is_ancestor(parent, commit.hexsha):
            return summarize_commit(commit, parent_is_ancestor=False)

        return summarize_commit(
            commit,
            patches=self.git_manager.diff(parent, commit.hexsha),
            parent_is_ancestor=True,
        )
