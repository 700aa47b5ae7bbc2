import logging

from pydantic import BaseModel

from ..protocols.git_manager_protocol import GitManagerProtocol
from .commit_pipeline import CommitPipeline

logger = logging.getLogger(__name__)


class BackfillResult(BaseModel):
    head: str
    processed: int = 0
    published: int = 0
    skipped: int = 0


class BackfillWalker:
    """Publishes the whole history of the tracked branch, newest first."""

    def __init__(self, git_manager: GitManagerProtocol, pipeline: CommitPipeline):
        self.git_manager = git_manager
        self.pipeline = pipeline

    def run(self, branch_head: str) -> BackfillResult:
        logger.info("Backfilling %s from %s", self.git_manager.branch, branch_head)
        result = BackfillResult(head=branch_head)
        for commit in self.git_manager.iter_log(branch_head):
            result.processed += 1
            if self.pipeline.process(commit) is None:
                result.skipped += 1
            else:
                result.published += 1
        logger.info(
            "Backfill complete: %d commits, %d published, %d skipped",
            result.processed,
            result.published,
            result.skipped,
        )
        return result
