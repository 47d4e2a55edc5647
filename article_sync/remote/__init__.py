"""Remote API access: HTTP client, retry policy and gateway."""

from .client import ForemClient
from .gateway import RemoteGateway, build_article_payload
from .retry import CancelToken, RetryPolicy

__all__ = [
    "CancelToken",
    "ForemClient",
    "RemoteGateway",
    "RetryPolicy",
    "build_article_payload",
]
