import logging
from typing import Optional

from ..exceptions import HistoryInconsistency
from ..models import CommitInfo
from .diff_summarizer import DiffSummarizer, build_commit_record
from .publisher import Publisher

logger = logging.getLogger(__name__)


class CommitPipeline:
    """Summarizes a commit and publishes its record."""

    def __init__(
        self,
        repo: str,
        branch: str,
        summarizer: DiffSummarizer,
        publisher: Publisher,
    ):
        self.repo = repo
        self.branch = branch
        self.summarizer = summarizer
        self.publisher = publisher

    def process(self, commit: CommitInfo) -> Optional[str]:
        """Publish one commit. Returns the record key, or None if it was skipped."""
        logger.info(
            "Commit %s author: %s date: %d message: %s",
            commit.hexsha,
            commit.author_email,
            commit.authored_date,
            commit.message.replace("\n", ""),
        )
        try:
            files = self.summarizer.summarize(commit)
        except HistoryInconsistency as e:
            logger.warning("Skipping commit %s: %s", commit.hexsha, e)
            return None

        record = build_commit_record(self.repo, self.branch, commit, files)
        return self.publisher.publish(record)
