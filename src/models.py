"""Data models for RSS Feed List."""

from dataclasses import dataclass, field
from typing import Any

DEFAULT_FEED_TITLE = "RSS Feed"
MAX_ENTRIES = 20


@dataclass(frozen=True)
class FeedEntry:
    """Represents a single RSS item or Atom entry."""

    title: str
    link: str
    description: str | None = None
    publication_date: str | None = None  # kept in the feed's own format
    identifier: str | None = None


@dataclass(frozen=True)
class Feed:
    """Normalized channel metadata plus its retained entries."""

    title: str = DEFAULT_FEED_TITLE
    link: str = ""
    description: str | None = None
    entries: tuple[FeedEntry, ...] = ()


@dataclass
class Page:
    """Handle for a page in the host document."""

    uuid: str
    name: str


@dataclass
class Block:
    """Handle for a block (outline node) in the host document."""

    uuid: str
    content: str
    children: list["Block"] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)
    page: str | None = None


@dataclass
class ReloadSummary:
    """Aggregate outcome of reloading every feed on a page."""

    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)
