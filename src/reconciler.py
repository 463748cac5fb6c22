"""Insertion and in-place reload of feed blocks in the host document."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from .config import Config
from .date_utils import current_timestamp
from .errors import HostOperationError, NotFoundError, RssFeedError, ValidationError
from .fetcher import FeedFetcher
from .host import DocumentHost, HostUI
from .logging_config import create_execution_logger
from .markers import (
    build_entry_line,
    build_root_line,
    entry_properties,
    find_feed_block,
    find_feed_urls,
)
from .models import Block, Feed, Page, ReloadSummary
from .validation import is_likely_feed_url, is_valid_url


class FeedReconciler:
    """Keeps feed blocks in the host document in line with their feeds.

    Every fetch and host call is made one at a time, and the page tree is
    read afresh at the start of each reload.
    """

    def __init__(
        self,
        host: DocumentHost,
        fetcher: FeedFetcher,
        config: Config | None = None,
        ui: HostUI | None = None,
        clock: Callable[[], datetime] = datetime.now,
        execution_id: str | None = None,
    ):
        """Initialize FeedReconciler.

        Args:
            host: Document store the feed blocks live in
            fetcher: Downloads and parses feeds
            config: Source of the user's date format preference
            ui: Where operation results are shown; messages are only logged without it
            clock: Returns the moment stamped on feed blocks
            execution_id: Execution ID for logging context
        """
        self.host = host
        self.fetcher = fetcher
        self.config = config or Config()
        self.ui = ui
        self.clock = clock
        self.logger = create_execution_logger("reconciler", execution_id)

    # Insertion

    def add_feed(self, url: str) -> Block | None:
        """Insert a feed at the editing position and tell the user how it went.

        Returns:
            The feed's root block, or None if the insertion failed
        """
        clean_url = (url or "").strip()
        if not is_valid_url(clean_url):
            self.logger.warning("Rejected invalid feed URL", feed_url=clean_url)
            self._notify("Invalid URL format", "error")
            return None

        self._notify("Fetching RSS feed...", "info")
        try:
            feed, root, inserted = self.insert_feed(clean_url)
        except RssFeedError as e:
            self.logger.error(
                f"Error adding RSS feed: {e}", feed_url=clean_url, error=str(e)
            )
            self._notify(f"Failed to add RSS feed: {e}", "error")
            return None

        self._notify(
            f'RSS feed "{feed.title}" added with {inserted} items!', "success"
        )
        return root

    def insert_feed(self, url: str) -> tuple[Feed, Block, int]:
        """Fetch ``url`` and insert it as a new feed block with its entries.

        Returns:
            The fetched feed, its root block and the number of entry blocks created

        Raises:
            ValidationError: If ``url`` is malformed
            RssFeedError: Fetch, parse and root-block insertion failures
        """
        self._validate(url)
        self.logger.log_execution_start(feed_url=url, operation="insert")

        feed = self.fetcher.fetch(url)
        root = self._insert_root(build_root_line(feed, url, self._timestamp()))
        inserted = self._insert_entries(root.uuid, feed)

        try:
            self._host_call(
                "insert trailing block",
                self.host.insert_block,
                root.uuid,
                "",
                sibling=True,
            )
        except HostOperationError as e:
            self.logger.warning(
                f"Failed to add empty line: {e}", feed_url=url, block_uuid=root.uuid
            )

        self.logger.log_execution_end(
            success=True, feed_url=url, block_uuid=root.uuid, items_count=inserted
        )
        return feed, root, inserted

    def _insert_root(self, content: str) -> Block:
        try:
            current_block = self._host_call(
                "get current block", self.host.get_current_block
            )
            if current_block:
                return self._host_call(
                    "insert feed block",
                    self.host.insert_block,
                    current_block.uuid,
                    content,
                    sibling=True,
                )

            current_page = self._host_call(
                "get current page", self.host.get_current_page
            )
            if current_page:
                return self._host_call(
                    "prepend feed block",
                    self.host.prepend_block_in_page,
                    current_page.uuid,
                    content,
                )

            return self._host_call(
                "insert at cursor", self.host.insert_at_cursor, content
            )
        except HostOperationError as e:
            self.logger.error(f"Error inserting RSS entry: {e}", error=str(e))
            raise HostOperationError("Failed to insert RSS entry into graph") from e

    def _insert_entries(self, root_uuid: str, feed: Feed) -> int:
        inserted = 0
        for entry in feed.entries:
            try:
                self._host_call(
                    "insert entry block",
                    self.host.insert_block,
                    root_uuid,
                    build_entry_line(entry),
                    sibling=False,
                    properties=entry_properties(entry),
                )
            except HostOperationError as e:
                self.logger.log_item_processing(
                    entry.title,
                    "insert",
                    success=False,
                    block_uuid=root_uuid,
                    error=str(e),
                )
                continue
            inserted += 1
        return inserted

    # Reload

    def reload_feed(self, url: str) -> Feed:
        """Refresh the first feed block on the current page that references ``url``.

        The root content is rewritten and all of its children are replaced
        by blocks for the freshly fetched entries.

        Raises:
            ValidationError: If ``url`` is malformed
            NotFoundError: No active page, or no feed block for ``url`` on it
            RssFeedError: Fetch, parse and root update failures
        """
        self._validate(url)
        self.logger.log_execution_start(feed_url=url, operation="reload")

        feed = self.fetcher.fetch(url)

        page = self._require_page()
        tree = self._host_call(
            "read page tree", self.host.get_page_blocks_tree, page.name
        )
        root = find_feed_block(tree or [], url)
        if root is None:
            raise NotFoundError(f"RSS feed not found on page: {url}")

        self._host_call(
            "update feed block",
            self.host.update_block,
            root.uuid,
            build_root_line(feed, url, self._timestamp()),
        )

        removed = 0
        for child in reversed(root.children):
            try:
                self._host_call(
                    "delete entry block", self.host.delete_block, child.uuid
                )
            except HostOperationError as e:
                self.logger.warning(
                    f"Failed to delete block: {e}",
                    feed_url=url,
                    block_uuid=child.uuid,
                    error=str(e),
                )
                continue
            removed += 1

        inserted = self._insert_entries(root.uuid, feed)
        self.logger.log_execution_end(
            success=True,
            feed_url=url,
            block_uuid=root.uuid,
            removed_count=removed,
            items_count=inserted,
        )
        return feed

    def reload_page_feeds(self) -> ReloadSummary:
        """Reload every feed block on the current page, one after another.

        Raises:
            NotFoundError: If there is no active page
        """
        page = self._require_page()
        tree = self._host_call(
            "read page tree", self.host.get_page_blocks_tree, page.name
        )
        urls = find_feed_urls(tree or [])
        self.logger.info(
            f"Found {len(urls)} feeds on page", page=page.name, feed_count=len(urls)
        )

        summary = ReloadSummary()
        for url in urls:
            try:
                self.reload_feed(url)
            except Exception as e:
                self.logger.error(
                    f"Failed to reload feed {url}: {e}", feed_url=url, error=str(e)
                )
                summary.failed[url] = str(e)
                continue
            summary.succeeded.append(url)

        self.logger.log_metrics(
            {
                "feeds_reloaded": summary.success_count,
                "feeds_failed": summary.failure_count,
            }
        )
        return summary

    def reload_all(self) -> ReloadSummary | None:
        """Reload the current page's feeds and report the counts to the user."""
        try:
            summary = self.reload_page_feeds()
        except RssFeedError as e:
            self.logger.error(f"Error reloading RSS feeds: {e}", error=str(e))
            self._notify(f"Failed to reload RSS feeds: {e}", "error")
            return None

        total = summary.success_count + summary.failure_count
        if total == 0:
            self._notify("No RSS feeds found on this page", "warning")
        elif summary.failure_count:
            self._notify(
                f"Reloaded {summary.success_count} RSS feeds, "
                f"{summary.failure_count} failed",
                "warning",
            )
        else:
            self._notify(f"Reloaded {summary.success_count} RSS feeds", "success")
        return summary

    # Helpers

    def _validate(self, url: str) -> None:
        if not is_valid_url(url):
            raise ValidationError(f"Invalid URL format: {url!r}")
        if not is_likely_feed_url(url):
            self.logger.debug("URL does not look like a feed URL", feed_url=url)

    def _require_page(self) -> Page:
        page = self._host_call("get current page", self.host.get_current_page)
        if page is None:
            raise NotFoundError("No active page")
        return page

    def _timestamp(self) -> str:
        settings = self.config.get_plugin_settings()
        return current_timestamp(settings.preferred_date_format, self.clock())

    def _host_call(self, action: str, func: Callable[..., Any], *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HostOperationError:
            raise
        except Exception as e:
            raise HostOperationError(f"Failed to {action}: {e}") from e

    def _notify(self, message: str, status: str) -> None:
        self.logger.info(message, status=status)
        if self.ui is None:
            return
        try:
            self.ui.show_msg(message, status)
        except Exception as e:
            self.logger.warning(f"Failed to show message: {e}", error=str(e))
