from .followed_shows import FollowedShowsDataSource, LIST_NAME
from .retry import RetryPolicy, exponential_backoff, with_backoff
from .trakt_client import (
    TraktAPIError,
    TraktAuthError,
    TraktClient,
    TraktClientError,
    TraktNetworkError,
    TraktUnavailableError,
)

__all__ = [
    "FollowedShowsDataSource",
    "LIST_NAME",
    "RetryPolicy",
    "exponential_backoff",
    "with_backoff",
    "TraktAPIError",
    "TraktAuthError",
    "TraktClient",
    "TraktClientError",
    "TraktNetworkError",
    "TraktUnavailableError",
]
