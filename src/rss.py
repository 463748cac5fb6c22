"""RSS/Atom markup parsing for RSS Feed List."""

import io
import xml.sax

import feedparser
from bs4 import BeautifulSoup

from .errors import MalformedFeedError, UnparseableFeedError
from .logging_config import create_execution_logger
from .models import DEFAULT_FEED_TITLE, MAX_ENTRIES, Feed, FeedEntry

# bozo exceptions that mean the document is not well-formed XML
MALFORMED_MARKUP_ERRORS = (
    xml.sax.SAXException,
    feedparser.CharacterEncodingUnknown,
    feedparser.UndeclaredNamespace,
)


class FeedParser:
    """Turns RSS 2.0 or Atom markup into a normalized Feed."""

    def __init__(self, max_items: int = MAX_ENTRIES, execution_id: str | None = None):
        """Initialize FeedParser.

        Args:
            max_items: Maximum number of entries kept per feed
            execution_id: Execution ID for logging context
        """
        self.max_items = max_items if max_items > 0 else MAX_ENTRIES
        self.logger = create_execution_logger("feed_parser", execution_id)

    def parse(self, raw_markup: str | bytes) -> Feed:
        """Parse raw feed markup.

        Args:
            raw_markup: Feed document as text or undecoded bytes

        Returns:
            Feed with at most ``max_items`` entries, in document order

        Raises:
            MalformedFeedError: If the markup is not well-formed
            UnparseableFeedError: If anything else fails during extraction
        """
        if isinstance(raw_markup, str):
            raw_markup = raw_markup.encode("utf-8")
        if not raw_markup.strip():
            raise MalformedFeedError("Invalid XML/RSS format: empty document")

        try:
            parsed = feedparser.parse(io.BytesIO(raw_markup))
        except Exception as e:
            raise UnparseableFeedError(f"Failed to parse RSS feed: {e}") from e

        bozo_exception = parsed.get("bozo_exception")
        if parsed.get("bozo") and isinstance(bozo_exception, MALFORMED_MARKUP_ERRORS):
            self.logger.warning(
                f"Rejecting malformed feed markup: {bozo_exception}",
                error=str(bozo_exception),
            )
            raise MalformedFeedError(f"Invalid XML/RSS format: {bozo_exception}")

        try:
            return self._build_feed(parsed)
        except Exception as e:
            self.logger.error(f"Failed to extract feed fields: {e}", error=str(e))
            raise UnparseableFeedError(f"Failed to parse RSS feed: {e}") from e

    def _build_feed(self, parsed) -> Feed:
        version = parsed.get("version", "")
        if version.startswith("rss"):
            title, link, description, entries = self._extract_rss(parsed)
        else:
            title, link, description, entries = self._extract_atom(parsed)

        retained = [entry for entry in entries if entry.title and entry.link]
        dropped = len(entries) - len(retained)
        if dropped:
            self.logger.info(
                f"Dropped {dropped} entries without title or link",
                dropped=dropped,
            )

        self.logger.info(
            "Parsed feed markup",
            version=version or "unknown",
            total_entries=len(entries),
            items_count=min(len(retained), self.max_items),
        )

        return Feed(
            title=title or DEFAULT_FEED_TITLE,
            link=link,
            description=description,
            entries=tuple(retained[: self.max_items]),
        )

    def _extract_rss(self, parsed):
        channel = parsed.feed
        entries = [
            FeedEntry(
                title=_text(item.get("title")),
                link=_rss_link(item),
                description=self.clean_html_content(item.get("summary")) or None,
                publication_date=_text(item.get("published")) or None,
                identifier=_text(item.get("id")) or None,
            )
            for item in parsed.entries
        ]
        return (
            _text(channel.get("title")),
            _text(channel.get("link")),
            self.clean_html_content(channel.get("subtitle")) or None,
            entries,
        )

    def _extract_atom(self, parsed):
        feed = parsed.feed
        entries = []
        for entry in parsed.entries:
            description = entry.get("summary")
            if not _text(description) and entry.get("content"):
                description = entry.content[0].get("value")
            entries.append(
                FeedEntry(
                    title=_text(entry.get("title")),
                    link=_href(entry),
                    description=self.clean_html_content(description) or None,
                    publication_date=(
                        _text(entry.get("published"))
                        or _text(entry.get("updated"))
                        or None
                    ),
                    identifier=_text(entry.get("id")) or None,
                )
            )
        return (
            _text(feed.get("title")),
            _href(feed),
            self.clean_html_content(feed.get("subtitle")) or None,
            entries,
        )

    def clean_html_content(self, content: str | None) -> str:
        """Remove HTML tags from content and normalize whitespace.

        Args:
            content: Raw content that may contain HTML

        Returns:
            Clean text content without HTML tags
        """
        if not content:
            return ""

        if "<" not in content and ">" not in content:
            return " ".join(content.split())

        soup = BeautifulSoup(content, "html.parser")

        for script in soup(["script", "style"]):
            script.decompose()

        text = soup.get_text(separator=" ")
        return " ".join(text.split())


def _text(value) -> str:
    if not value:
        return ""
    return str(value).strip()


def _href(node) -> str:
    """Link of a feed or entry, taken from a link element's href attribute."""
    link = _text(node.get("link"))
    if link:
        return link
    for candidate in node.get("links", []):
        href = _text(candidate.get("href"))
        if href:
            return href
    return ""


def _rss_link(item) -> str:
    """Link of an RSS item, taken only from its ``<link>`` element.

    feedparser copies a permalink ``<guid>`` into ``link`` when the item has
    no ``<link>``; such a link never shows up in ``links``.
    """
    link = _text(item.get("link"))
    if item.get("guidislink"):
        hrefs = {_text(candidate.get("href")) for candidate in item.get("links", [])}
        if link not in hrefs:
            return ""
    return link
