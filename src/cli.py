"""Command line front-end working on a markdown page file."""

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

from .config import Config
from .errors import RssFeedError
from .host import HostUI
from .logging_config import create_execution_logger, setup_structured_logging
from .outline import OutlineHost
from .plugin import RssFeedPlugin

STATUS_PREFIXES = {
    "info": "",
    "success": "OK: ",
    "warning": "Warning: ",
    "error": "Error: ",
}


class ConsoleUI(HostUI):
    """HostUI printing messages to a stream."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.commands: dict[str, Callable[[], None]] = {}
        self.statuses: list[str] = []

    def show_msg(self, message: str, status: str = "info") -> None:
        self.statuses.append(status)
        print(f"{STATUS_PREFIXES.get(status, '')}{message}", file=self.stream)

    def register_slash_command(self, name: str, handler: Callable[[], None]) -> None:
        self.commands[name] = handler

    def register_toolbar_button(
        self, key: str, label: str, handler: Callable[[], None]
    ) -> None:
        self.commands[key] = handler

    def prompt_for_url(self, title: str, placeholder: str) -> str | None:
        try:
            return input(f"{title} ({placeholder}): ")
        except EOFError:
            return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rss-feed-list",
        description="Insert RSS/Atom feeds into a markdown outline page and reload them.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="insert a feed at the top of the page")
    add.add_argument("page_file", type=Path)
    add.add_argument("url")

    reload = subparsers.add_parser("reload", help="refresh feeds already on the page")
    reload.add_argument("page_file", type=Path)
    reload.add_argument("url", nargs="?", help="only reload this feed")

    return parser


def run(argv: list[str] | None = None, ui: ConsoleUI | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = Config()
    setup_structured_logging(config.log_level)
    logger = create_execution_logger("cli")

    host = OutlineHost()
    page_name = args.page_file.stem
    if args.page_file.exists():
        host.load_markdown(page_name, args.page_file.read_text(encoding="utf-8"))
    host.open_page(page_name)

    ui = ui or ConsoleUI()
    plugin = RssFeedPlugin(host, ui, config=config)

    if args.command == "add":
        ok = plugin.reconciler.add_feed(args.url) is not None
    elif args.url:
        try:
            feed = plugin.reconciler.reload_feed(args.url)
        except RssFeedError as e:
            ui.show_msg(f"Failed to reload RSS feed: {e}", "error")
            ok = False
        else:
            ui.show_msg(
                f'RSS feed "{feed.title}" reloaded with {len(feed.entries)} items',
                "success",
            )
            ok = True
    else:
        summary = plugin.reconciler.reload_all()
        ok = summary is not None and summary.failure_count == 0

    if ok or args.command == "reload":
        args.page_file.write_text(host.dump_markdown(page_name), encoding="utf-8")
        logger.info("Saved page", page=page_name, path=str(args.page_file))

    return 0 if ok else 1


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
