# ABOUTME: Interval polling of a Notion page using APScheduler.
# ABOUTME: Re-renders on every tick and writes Markdown only when the content hash changes.

import logging
import signal
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config import Config
from .content import PageContent, fetch_page_content
from .notion import NotionClient, NotionFetchError

logger = logging.getLogger(__name__)


class ContentWatcher:
    """Tracks the last seen content hash of a page."""

    def __init__(self, client: NotionClient, page_ref: str, output_path: Path | None = None):
        """Initialize the watcher.

        Args:
            client: The Notion API client.
            page_ref: Notion page URL or ID to poll.
            output_path: File to write Markdown to on change. Logged if None.
        """
        self.client = client
        self.page_ref = page_ref
        self.output_path = output_path
        self.last_hash: str | None = None

    def poll(self) -> bool:
        """Fetch the page once and publish it if it changed.

        Fetch errors are logged and leave the last hash untouched, so the
        next successful poll publishes.

        Returns:
            True if new content was published.
        """
        try:
            content = fetch_page_content(self.client, self.page_ref)
        except NotionFetchError as e:
            logger.error(f"Failed to fetch page content: {e}")
            return False

        if content.content_hash == self.last_hash:
            logger.debug(f"Page {content.page_id} unchanged")
            return False

        self._publish(content)
        self.last_hash = content.content_hash
        return True

    def _publish(self, content: PageContent) -> None:
        if self.output_path is None:
            logger.info(f"Page {content.page_id} changed:\n{content.markdown}")
            return

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.output_path, "w", encoding="utf-8") as f:
            f.write(content.markdown)
        logger.info(f"Page {content.page_id} changed, wrote {self.output_path}")


def run_scheduler(config: Config, poll_fn: Callable[[], object]) -> None:
    """Run the polling scheduler indefinitely.

    Args:
        config: Application configuration with poll interval.
        poll_fn: Function to call on every tick.
    """
    scheduler = BlockingScheduler()

    trigger = IntervalTrigger(seconds=config.poll_interval_seconds)
    scheduler.add_job(
        poll_fn,
        trigger,
        id="notion_typewriter_poll",
        next_run_time=datetime.now(),
        max_instances=1,
        coalesce=True,
    )

    def shutdown(signum, frame):
        logger.info("Received shutdown signal, stopping scheduler...")
        scheduler.shutdown(wait=False)
        sys.exit(0)

    signal.signal(signal.SIGTERM, shutdown)
    signal.signal(signal.SIGINT, shutdown)

    logger.info(f"Polling every {config.poll_interval_seconds}s")

    scheduler.start()
