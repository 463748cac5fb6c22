"""URL checks for feed URLs."""

from urllib.parse import urlparse

FEED_EXTENSIONS = (".rss", ".xml", ".atom", ".feed")
FEED_PATH_MARKERS = ("/rss", "/feed", "/feeds", "/atom")


def is_valid_url(url: str) -> bool:
    """Return True if ``url`` is an absolute URL with a scheme and host."""
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        parsed = urlparse(url)
        # touching .port validates it
        parsed.port
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def is_likely_feed_url(url: str) -> bool:
    """Return True if the URL path looks like it points at a feed."""
    if not is_valid_url(url):
        return False
    path = urlparse(url).path.lower()
    return path.endswith(FEED_EXTENSIONS) or any(
        marker in path for marker in FEED_PATH_MARKERS
    )
