"""Feed download for RSS Feed List."""

import time
import uuid

import requests

from .errors import CorsError, NetworkError
from .logging_config import create_execution_logger
from .models import Feed
from .rss import FeedParser

CACHE_BUSTING_PARAM = "_rss_nocache"
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, max-age=0",
    "Pragma": "no-cache",
}


class FeedFetcher:
    """Downloads a feed, bypassing caches, and hands the body to the parser."""

    def __init__(
        self,
        parser: FeedParser | None = None,
        timeout: int = 30,
        user_agent: str = "RSS-Feed-List/1.0",
        execution_id: str | None = None,
    ):
        """Initialize FeedFetcher.

        Args:
            parser: Parser used for downloaded bodies
            timeout: HTTP request timeout in seconds
            user_agent: User-Agent header sent with every request
            execution_id: Execution ID for logging context
        """
        self.parser = parser or FeedParser(execution_id=execution_id)
        self.timeout = timeout
        self.logger = create_execution_logger("feed_fetcher", execution_id)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent, **NO_CACHE_HEADERS})

    def fetch(self, url: str) -> Feed:
        """Download and parse a feed.

        Args:
            url: Feed URL

        Returns:
            Parsed Feed

        Raises:
            CorsError: If the request failed without any response
            NetworkError: On a non-success status or any other transport failure
            MalformedFeedError: If the body is not well-formed markup
            UnparseableFeedError: If the body could not be turned into a Feed
        """
        self.logger.info("Downloading feed content", feed_url=url)

        try:
            response = self.session.get(
                url,
                params={CACHE_BUSTING_PARAM: self.cache_buster()},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            self.logger.error(
                f"Timed out downloading feed {url}: {e}", feed_url=url, error=str(e)
            )
            raise NetworkError(f"Failed to fetch RSS feed: {e}") from e
        except requests.ConnectionError as e:
            self.logger.error(
                f"Feed request failed without a response: {e}",
                feed_url=url,
                error=str(e),
            )
            raise CorsError(
                "CORS error: Unable to fetch RSS feed directly. Please try a "
                "different feed URL or check if the feed allows direct access."
            ) from e
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to download feed {url}: {e}", feed_url=url, error=str(e)
            )
            raise NetworkError(f"Failed to fetch RSS feed: {e}") from e

        if not 200 <= response.status_code < 300:
            self.logger.error(
                "Feed request returned an error status",
                feed_url=url,
                status_code=response.status_code,
            )
            raise NetworkError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        self.logger.info(
            "Feed downloaded successfully",
            feed_url=url,
            status_code=response.status_code,
            content_length=len(response.content),
        )

        feed = self.parser.parse(response.content)
        self.logger.log_feed_processing(url, len(feed.entries))
        return feed

    @staticmethod
    def cache_buster() -> str:
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"
