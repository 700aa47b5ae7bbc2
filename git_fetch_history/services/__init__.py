"""Services for the application."""

from .backfill import BackfillResult, BackfillWalker
from .commit_pipeline import CommitPipeline
from .diff_summarizer import DiffSummarizer
from .git_manager import GitManager
from .git_manager_factory import create_git_manager, create_git_manager_from_settings
from .publisher import Publisher
from .sink_factory import create_sink, create_sink_from_settings
from .supervisor import PollScheduler, Supervisor
from .sync_state_machine import SyncCursor, SyncState, SyncStateMachine, SyncStepResult

__all__ = [
    "BackfillResult",
    "BackfillWalker",
    "CommitPipeline",
    "DiffSummarizer",
    "GitManager",
    "PollScheduler",
    "Publisher",
    "Supervisor",
    "SyncCursor",
    "SyncState",
    "SyncStateMachine",
    "SyncStepResult",
    "create_git_manager",
    "create_git_manager_from_settings",
    "create_sink",
    "create_sink_from_settings",
]
