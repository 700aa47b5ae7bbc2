"""Process-level control loop: backfill once, then poll forever."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..protocols.git_manager_protocol import GitManagerProtocol
from .backfill import BackfillWalker
from .commit_pipeline import CommitPipeline
from .credentials import GitCredentials
from .diff_summarizer import DiffSummarizer
from .publisher import Publisher
from .sync_state_machine import SyncCursor, SyncStateMachine

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class PollScheduler:
    """Waits out the fixed interval between two polls."""

    def __init__(self, interval: float, sleep: SleepFunc = asyncio.sleep):
        self.interval = interval
        self._sleep = sleep
        self.ticks = 0

    async def wait(self) -> None:
        await self._sleep(self.interval)
        self.ticks += 1


class Supervisor:
    """
    Ties backfill and incremental polling together.

    Every stage raises on failure. Whatever escapes a stage is fatal: it is
    logged, the supervisor waits out a grace period so operators can look at
    the process, and run() returns a non-zero exit code. The external process
    supervisor then restarts everything from a fresh backfill.
    """

    def __init__(
        self,
        repo: str,
        branch: str,
        credentials_provider: Callable[[], GitCredentials],
        git_manager_factory: Callable[[GitCredentials], GitManagerProtocol],
        publisher: Publisher,
        scheduler: PollScheduler,
        max_walk: int = 1000,
        startup_delay: float = 0,
        fatal_grace: float = 300,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.repo = repo
        self.branch = branch
        self.credentials_provider = credentials_provider
        self.git_manager_factory = git_manager_factory
        self.publisher = publisher
        self.scheduler = scheduler
        self.max_walk = max_walk
        self.startup_delay = startup_delay
        self.fatal_grace = fatal_grace
        self._sleep = sleep

        self.git_manager: Optional[GitManagerProtocol] = None
        self.state_machine: Optional[SyncStateMachine] = None
        self.cursor: Optional[SyncCursor] = None

    async def run(self, max_cycles: Optional[int] = None) -> int:
        """Run until a fatal error, or max_cycles polls when given. Returns an exit code."""
        try:
            if self.startup_delay > 0:
                logger.info("Sleeping %ss to let the network settle", self.startup_delay)
                await self._sleep(self.startup_delay)
            await self.start()
            await self.poll_forever(max_cycles)
            return 0
        except Exception as e:  # noqa: BLE001 - fail fast on any stage error
            logger.exception("Handling error: %s", e)
            logger.error("Sleeping %ss pre-death", self.fatal_grace)
            await self._sleep(self.fatal_grace)
            logger.error("And now dead...")
            return 1

    async def start(self) -> SyncCursor:
        """Provision the working copy, backfill, and set the initial cursor."""
        credentials = await asyncio.to_thread(self.credentials_provider)
        self.git_manager = self.git_manager_factory(credentials)
        await asyncio.to_thread(self.git_manager.setup_repository)

        pipeline = CommitPipeline(
            repo=self.repo,
            branch=self.branch,
            summarizer=DiffSummarizer(self.git_manager),
            publisher=self.publisher,
        )
        self.state_machine = SyncStateMachine(self.git_manager, pipeline, max_walk=self.max_walk)

        branch_head = await asyncio.to_thread(self.git_manager.resolve_head)
        await asyncio.to_thread(BackfillWalker(self.git_manager, pipeline).run, branch_head)

        head = await asyncio.to_thread(self.git_manager.resolve_head)
        self.cursor = SyncCursor(repo=self.repo, branch=self.branch, head=head)
        logger.info("New head is %s", head)
        return self.cursor

    async def poll_forever(self, max_cycles: Optional[int] = None) -> None:
        if self.state_machine is None or self.cursor is None:
            raise RuntimeError("Supervisor not started")
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            await self.scheduler.wait()
            result = await asyncio.to_thread(self.state_machine.step, self.cursor)
            self.cursor = result.cursor
            cycles += 1
            if result.processed:
                logger.info(
                    "Poll cycle %d published %d, skipped %d; head now %s",
                    self.scheduler.ticks,
                    result.published,
                    result.skipped,
                    self.cursor.head,
                )
