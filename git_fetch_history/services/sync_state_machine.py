"""Incremental sync of newly introduced commits."""

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict

from ..protocols.git_manager_protocol import GitManagerProtocol
from .commit_pipeline import CommitPipeline

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    IDLE = "idle"
    PULLING = "pulling"
    NO_CHANGE = "no_change"
    HEAD_ADVANCED = "head_advanced"


class SyncCursor(BaseModel):
    """Last observed head of the tracked branch. Lives only in memory."""

    model_config = ConfigDict(frozen=True)

    repo: str
    branch: str
    head: str


class SyncStepResult(BaseModel):
    """Outcome of one poll cycle."""

    state: SyncState
    cursor: SyncCursor
    processed: int = 0
    published: int = 0
    skipped: int = 0
    frontier_found: bool = True


class SyncStateMachine:
    """
    Moves the cursor forward one pull at a time.

    A step pulls the branch. When HEAD moved, the log is walked newest first
    from the new head and every commit before the cursor's head goes through
    the commit pipeline; the cursor's head itself is not processed again.
    If the cursor's head is not in the new history, at most max_walk commits
    are processed (0 means no limit). Either way the returned cursor points
    at the new head.
    """

    def __init__(
        self,
        git_manager: GitManagerProtocol,
        pipeline: CommitPipeline,
        max_walk: int = 1000,
    ):
        self.git_manager = git_manager
        self.pipeline = pipeline
        self.max_walk = max_walk
        self.state = SyncState.IDLE

    def step(self, cursor: SyncCursor) -> SyncStepResult:
        self.state = SyncState.PULLING
        try:
            pull = self.git_manager.pull()
            if pull.up_to_date or pull.head == cursor.head:
                self.state = SyncState.NO_CHANGE
                return SyncStepResult(state=SyncState.NO_CHANGE, cursor=cursor)

            self.state = SyncState.HEAD_ADVANCED
            logger.info("New head is %s old head is %s", pull.head, cursor.head)
            result = self._drain(cursor, pull.head)
        finally:
            self.state = SyncState.IDLE
        return result

    def _drain(self, cursor: SyncCursor, new_head: str) -> SyncStepResult:
        processed, published, skipped = 0, 0, 0
        frontier_found = False
        for commit in self.git_manager.iter_log(new_head):
            if commit.hexsha == cursor.head:
                frontier_found = True
                break
            if self.max_walk and processed >= self.max_walk:
                break
            processed += 1
            if self.pipeline.process(commit) is None:
                skipped += 1
            else:
                published += 1

        if not frontier_found:
            logger.warning(
                "Previous head %s not found in history of %s (history rewritten?), "
                "processed %d commits",
                cursor.head,
                new_head,
                processed,
            )

        return SyncStepResult(
            state=SyncState.HEAD_ADVANCED,
            cursor=cursor.model_copy(update={"head": new_head}),
            processed=processed,
            published=published,
            skipped=skipped,
            frontier_found=frontier_found,
        )
