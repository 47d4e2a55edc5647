"""
Resilient gateway over the three article operations.

The gateway runs every request through a RetryPolicy, turns transport errors
and unexpected statuses into SyncError subclasses, and decodes successful
bodies into RemoteArticle snapshots exactly once.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx

from ..core.errors import MalformedResponse, RemoteCallFailed, UnexpectedStatus
from ..core.types import ArticleRecord, RemoteArticle
from .client import ForemClient
from .retry import RetryPolicy


class RemoteGateway:
    """Fetch, create and update articles with rate-limit handling."""

    def __init__(self, client: ForemClient, policy: RetryPolicy | None = None):
        self.client = client
        self.policy = policy or RetryPolicy()

    def fetch(self, article_id: int) -> RemoteArticle:
        """Get the current remote snapshot of an article (expects 200)."""
        name = f"get article {article_id}"
        response = self._call(name, lambda: self.client.get_article(article_id), expected=200)
        return RemoteArticle.from_payload(_json(response, name), name)

    def create(self, record: ArticleRecord, body: str, main_image: str | None = None) -> RemoteArticle:
        """Create and publish a new article (expects 201)."""
        name = "create article"
        payload = build_article_payload(record, body, main_image=main_image, include_image=True)
        response = self._call(name, lambda: self.client.create_article(payload), expected=201)
        return RemoteArticle.from_payload(_json(response, name), name)

    def update(self, record: ArticleRecord, body: str) -> RemoteArticle:
        """Replace the body and tags of an existing article (expects 200)."""
        name = f"update article {record.id}"
        payload = build_article_payload(record, body)
        response = self._call(name, lambda: self.client.update_article(record.id, payload), expected=200)
        return RemoteArticle.from_payload(_json(response, name), name)

    def list_published(self, per_page: int = 30) -> list[RemoteArticle]:
        """Page through the authenticated user's published articles."""
        articles: list[RemoteArticle] = []
        page = 1
        while True:
            name = f"list published articles page {page}"
            response = self._call(
                name,
                lambda: self.client.list_published(page=page, per_page=per_page),
                expected=200,
            )
            items = _json(response, name)
            if not isinstance(items, list):
                raise MalformedResponse(name, f"expected a JSON array, got {type(items).__name__}")
            if not items:
                return articles
            articles.extend(RemoteArticle.from_payload(item, name) for item in items)
            if len(items) < per_page:
                return articles
            page += 1

    def _call(self, name: str, operation: Callable[[], httpx.Response], expected: int) -> httpx.Response:
        try:
            response = self.policy.call(operation, name)
        except httpx.HTTPError as exc:
            raise RemoteCallFailed(name, exc) from exc

        if response.status_code != expected:
            raise UnexpectedStatus(name, response.status_code, response.text)
        return response


def build_article_payload(
    record: ArticleRecord,
    body: str,
    main_image: str | None = None,
    include_image: bool = False,
) -> dict[str, Any]:
    """Build the request body shared by create and update.

    The image field is only sent on create.
    """
    article: dict[str, Any] = {
        "title": record.title,
        "description": record.description,
        "body_markdown": body,
        "published": True,
        "tags": list(record.tags),
    }
    if include_image:
        article["main_image"] = main_image
    return {"article": article}


def _json(response: httpx.Response, name: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise MalformedResponse(name, f"invalid JSON: {exc}") from exc
