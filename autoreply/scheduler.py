"""
Poll scheduler: runs the scan-and-reply workflow on a jittered interval
"""
import asyncio
import logging
import random
from datetime import datetime
from typing import Callable, Optional

from .config import Settings
from .gmail_client import GmailClient, get_gmail_client
from .inbox_scanner import InboxScanner
from .keyword_matcher import KeywordMatcher
from .label_manager import LabelManager
from .models import TickSummary
from .reply_worker import ReplyWorker

logger = logging.getLogger(__name__)


def random_interval(min_seconds: int, max_seconds: int) -> int:
    """Uniformly pick a whole number of seconds in [min_seconds, max_seconds]"""
    return random.randint(min_seconds, max_seconds)


class PollScheduler:
    """
    Owns the repeating auto-reply task.

    The interval is chosen once when the scheduler is created. Ticks run one
    after another, never overlapping. Only one loop runs per scheduler;
    start() is a no-op while the scheduler is starting or running.
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: Optional[Callable[[], GmailClient]] = None
    ):
        self.settings = settings
        self.interval = random_interval(settings.min_interval, settings.max_interval)
        self._client_factory = client_factory or (lambda: get_gmail_client(settings))
        self._matcher = KeywordMatcher(settings.keywords)

        self.client: Optional[GmailClient] = None
        self.label_id: Optional[str] = None
        self.scanner: Optional[InboxScanner] = None
        self.worker: Optional[ReplyWorker] = None
        self.last_summary: Optional[TickSummary] = None

        self._starting = False
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def is_active(self) -> bool:
        return self._starting or self.is_running

    @property
    def replied_count(self) -> int:
        return len(self.worker.replied_ids) if self.worker else 0

    def reserve(self) -> bool:
        """
        Claim the right to start the loop

        Runs synchronously so that concurrent callers see the claim at once.

        Returns:
            True if the caller must now call launch(), False if already active
        """
        if self.is_active:
            logger.info("Auto-reply task already running")
            return False

        self._starting = True
        return True

    async def start(self) -> bool:
        """
        Authenticate, ensure the managed label and start the loop

        Returns:
            True if the loop was started, False if it was already active

        Raises:
            Any authentication or label error; the scheduler stays idle
        """
        if not self.reserve():
            return False
        return await self.launch()

    async def launch(self) -> bool:
        """Start the loop after a successful reserve()"""
        try:
            if self.client is None:
                self.client = await asyncio.to_thread(self._client_factory)
            if self.label_id is None:
                label_manager = LabelManager(self.client)
                self.label_id = await asyncio.to_thread(label_manager.ensure_label, self.settings.label_name)

            self.scanner = InboxScanner(self.client, self._matcher, self.settings.max_results)
            if self.worker is None:
                self.worker = ReplyWorker(self.client, self.label_id)

            self._task = asyncio.create_task(self._run())
        finally:
            self._starting = False

        logger.info(f"Auto-reply task started (interval: {self.interval}s)")
        return True

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish"""
        if not self._task:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Auto-reply task stopped")

    async def run_tick(self) -> TickSummary:
        """Scan the inbox once and reply to every match"""
        started_at = datetime.now()
        matches = await self.scanner.scan()

        outcomes = []
        for match in matches:
            outcomes.append(await self.worker.process(match.message_id))

        summary = TickSummary.from_outcomes(started_at, outcomes)
        self.last_summary = summary
        if summary.matched:
            logger.info(
                f"Tick complete: {summary.matched} matched, {summary.replied} replied, "
                f"{summary.skipped} skipped, {summary.relabel_failed} relabel failures"
            )
        return summary

    async def _run(self) -> None:
        logger.info(f"Starting auto-reply loop (interval: {self.interval}s)")

        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.run_tick()
            except Exception as e:
                logger.error(f"Error during auto-reply tick: {e}", exc_info=True)
