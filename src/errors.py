"""Exception types raised while inserting and reloading feeds."""


class RssFeedError(Exception):
    """Base class for every error this package raises on purpose."""


class ValidationError(RssFeedError):
    """Raised when a feed URL is not a well-formed URL."""


class NetworkError(RssFeedError):
    """Raised when the feed could not be downloaded."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CorsError(NetworkError):
    """Raised when the request failed before any response was received."""


class FeedParseError(RssFeedError):
    """Base class for failures turning feed markup into a Feed."""


class MalformedFeedError(FeedParseError):
    """Raised when the markup is not well-formed XML."""


class UnparseableFeedError(FeedParseError):
    """Raised when field extraction fails on otherwise well-formed markup."""


class HostOperationError(RssFeedError):
    """Raised when a call into the host document fails."""


class NotFoundError(RssFeedError):
    """Raised when there is no active page or no matching feed block."""
