"""Shared fixtures for RSS Feed List tests."""

from datetime import datetime
from unittest.mock import Mock
from xml.sax.saxutils import escape

import pytest

from src.config import Config
from src.fetcher import FeedFetcher
from src.outline import OutlineHost
from src.reconciler import FeedReconciler

FIXED_NOW = datetime(2024, 3, 7, 9, 30)

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <subtitle>All the news</subtitle>
  <id>urn:uuid:feed</id>
  <updated>2024-03-07T10:00:00Z</updated>
  <entry>
    <title>First</title>
    <link href="https://example.org/first"/>
    <id>urn:uuid:1</id>
    <published>2024-03-06T09:00:00Z</published>
    <updated>2024-03-07T09:00:00Z</updated>
    <summary>Short summary</summary>
    <content type="html">&lt;p&gt;Full content&lt;/p&gt;</content>
  </entry>
  <entry>
    <title>Second</title>
    <link href="https://example.org/second"/>
    <id>urn:uuid:2</id>
    <updated>2024-03-05T08:00:00Z</updated>
    <content type="html">&lt;p&gt;Only content&lt;/p&gt;</content>
  </entry>
  <link href="https://example.org/"/>
</feed>
"""


def rss_document(items, title="Example", link="https://example.com/"):
    """Build an RSS 2.0 document from (title, link) pairs or dicts.

    Dict items without a "link" key get no <link> element, and "permalink"
    leaves the guid's isPermaLink attribute at its default of true.
    """
    parts = []
    for item in items:
        if isinstance(item, tuple):
            item = {"title": item[0], "link": item[1]}
        fields = [f"<title>{escape(item.get('title', ''))}</title>"]
        if "link" in item:
            fields.append(f"<link>{escape(item['link'])}</link>")
        if item.get("description"):
            fields.append(f"<description>{escape(item['description'])}</description>")
        if item.get("pubDate"):
            fields.append(f"<pubDate>{escape(item['pubDate'])}</pubDate>")
        if item.get("guid") and item.get("permalink"):
            fields.append(f"<guid>{escape(item['guid'])}</guid>")
        elif item.get("guid"):
            fields.append(
                f'<guid isPermaLink="false">{escape(item["guid"])}</guid>'
            )
        parts.append(f"<item>{''.join(fields)}</item>")

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<rss version="2.0"><channel>'
        f"<title>{escape(title)}</title>"
        f"<link>{escape(link)}</link>"
        "<description>Example feed</description>"
        f"{''.join(parts)}"
        "</channel></rss>"
    )


def http_response(body, status_code=200):
    """Mock of a requests.Response."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    return Mock(status_code=status_code, content=body)


@pytest.fixture
def config(monkeypatch, tmp_path):
    monkeypatch.setenv("RSS_FEED_LIST_SETTINGS", str(tmp_path / "settings.json"))
    monkeypatch.delenv("RSS_PREFERRED_DATE_FORMAT", raising=False)
    monkeypatch.delenv("RSS_MAX_ITEMS", raising=False)
    return Config()


@pytest.fixture
def host():
    outline = OutlineHost()
    outline.open_page("Feeds")
    return outline


@pytest.fixture
def fetcher():
    feed_fetcher = FeedFetcher()
    feed_fetcher.session.get = Mock()
    return feed_fetcher


@pytest.fixture
def ui():
    return Mock()


@pytest.fixture
def reconciler(host, fetcher, config, ui):
    return FeedReconciler(host, fetcher, config=config, ui=ui, clock=lambda: FIXED_NOW)
