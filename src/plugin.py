"""Entry point wiring the feed commands into the host application."""

from datetime import UTC, datetime

from .config import Config
from .fetcher import FeedFetcher
from .host import DocumentHost, HostUI
from .logging_config import create_execution_logger, setup_structured_logging
from .reconciler import FeedReconciler
from .rss import FeedParser

INSERT_COMMAND = "rsslist"
RELOAD_COMMAND = "rssreload"
TOOLBAR_KEY = "rss-feed-list"


class RssFeedPlugin:
    """Registers the insert and reload commands and runs them on demand."""

    def __init__(
        self,
        host: DocumentHost,
        ui: HostUI,
        config: Config | None = None,
        fetcher: FeedFetcher | None = None,
    ):
        self.host = host
        self.ui = ui
        self.config = config or Config()
        self.execution_id = f"plugin_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
        self.logger = create_execution_logger("plugin", self.execution_id)

        if fetcher is None:
            settings = self.config.get_plugin_settings()
            fetch_config = self.config.get_fetch_config()
            fetcher = FeedFetcher(
                parser=FeedParser(
                    max_items=settings.max_items, execution_id=self.execution_id
                ),
                timeout=fetch_config.timeout,
                user_agent=fetch_config.user_agent,
                execution_id=self.execution_id,
            )

        self.reconciler = FeedReconciler(
            host,
            fetcher,
            config=self.config,
            ui=ui,
            execution_id=self.execution_id,
        )

    def register(self) -> None:
        """Make the commands available in the editor."""
        self.ui.register_slash_command(INSERT_COMMAND, self.on_insert_command)
        self.ui.register_slash_command(RELOAD_COMMAND, self.on_reload_command)
        self.ui.register_toolbar_button(
            TOOLBAR_KEY, "Add RSS feed", self.on_insert_command
        )
        self.logger.info(
            "RSS Feed List plugin loaded",
            commands=[INSERT_COMMAND, RELOAD_COMMAND],
        )

    def on_insert_command(self) -> None:
        """Ask for a feed URL and insert the feed."""
        url = self.ui.prompt_for_url(
            "Add RSS Feed",
            "Enter RSS feed URL (e.g., https://example.com/feed.xml)",
        )
        if not url or not url.strip():
            self.logger.info("Feed input cancelled")
            return
        self.reconciler.add_feed(url)

    def on_reload_command(self) -> None:
        """Reload every feed on the current page."""
        self.reconciler.reload_all()


def main(host: DocumentHost, ui: HostUI) -> RssFeedPlugin:
    """Set up logging, build the plugin and register its commands."""
    config = Config()
    setup_structured_logging(config.log_level)
    plugin = RssFeedPlugin(host, ui, config=config)
    plugin.register()
    return plugin
