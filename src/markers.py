"""Text encoding of feed blocks inside the host document.

A feed root block carries its source URL twice::

    [Example Feed](https://example.com/feed.xml) <span data-rss-url="https://example.com/feed.xml">⏳ 2024-03-07</span>

The markdown link target and the ``data-rss-url`` attribute are written
together, and lookups accept either one since a user may edit one away.
Entry blocks are plain markdown links, ``[Entry title](https://example.com/a)``.
"""

import html
import re
from collections.abc import Iterable, Iterator

from .models import Block, Feed, FeedEntry

MARKER_ATTRIBUTE = "data-rss-url"
PUBDATE_PROPERTY = "pubDate"

_ATTRIBUTE_PATTERN = re.compile(rf'{MARKER_ATTRIBUTE}="([^"]*)"')
_ROOT_LINK_PATTERN = re.compile(r"\[.*?\]\((\S+)\)")
_ENTRY_LINE_PATTERN = re.compile(r"\[.*\]\(\S+\)$")


def _single_line(text: str) -> str:
    return " ".join(text.split())


def build_root_line(feed: Feed, url: str, timestamp: str) -> str:
    """Content for the block that represents a whole feed."""
    return (
        f"[{_single_line(feed.title)}]({url}) "
        f'<span {MARKER_ATTRIBUTE}="{html.escape(url, quote=True)}">⏳ {timestamp}</span>'
    )


def build_entry_line(entry: FeedEntry) -> str:
    """Content for the block of a single feed entry."""
    return f"[{_single_line(entry.title)}]({entry.link})"


def entry_properties(entry: FeedEntry) -> dict[str, str]:
    """Block properties attached to an entry block."""
    if entry.publication_date:
        return {PUBDATE_PROPERTY: entry.publication_date}
    return {}


def links_to(content: str, url: str) -> bool:
    """True if the content has a markdown link to ``url``."""
    return bool(content) and f"]({url})" in content


def marker_url(content: str) -> str | None:
    """URL stored in the ``data-rss-url`` attribute, if any."""
    match = _ATTRIBUTE_PATTERN.search(content or "")
    if not match:
        return None
    return html.unescape(match.group(1)) or None


def candidate_roots(blocks: Iterable[Block]) -> Iterator[Block]:
    """Depth-first traversal that skips the entries below marked feed roots."""
    for block in blocks:
        yield block
        if marker_url(block.content) is None:
            yield from candidate_roots(block.children)


def find_feed_block(blocks: Iterable[Block], url: str) -> Block | None:
    """First feed root in document order that references ``url``.

    Roots carrying the ``data-rss-url`` attribute for ``url`` win over
    blocks that only link to it.
    """
    candidates = list(candidate_roots(blocks))
    for block in candidates:
        if marker_url(block.content) == url:
            return block
    for block in candidates:
        if links_to(block.content, url):
            return block
    return None


def link_only_root_url(block: Block) -> str | None:
    """URL of a top-level feed root whose attribute marker was edited away.

    The block must open with ``[title](url)`` and every child must be an
    entry line.
    """
    if marker_url(block.content) is not None or not block.children:
        return None
    match = _ROOT_LINK_PATTERN.match(block.content or "")
    if not match:
        return None
    if not all(_ENTRY_LINE_PATTERN.match(child.content or "") for child in block.children):
        return None
    return match.group(1)


def find_feed_urls(blocks: Iterable[Block]) -> list[str]:
    """URLs of every feed root on a page, in document order, without repeats."""
    top_level = list(blocks)
    top_level_ids = {id(block) for block in top_level}
    urls: list[str] = []
    for block in candidate_roots(top_level):
        url = marker_url(block.content)
        if url is None and id(block) in top_level_ids:
            url = link_only_root_url(block)
        if url and url not in urls:
            urls.append(url)
    return urls
