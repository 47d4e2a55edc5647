"""
HTTP client for the Forem (dev.to) articles API.

Each method performs exactly one request and returns the raw httpx.Response;
status interpretation and retries belong to the gateway.
"""

from __future__ import annotations

from typing import Any

import httpx


DEFAULT_BASE_URL = "https://dev.to"
FOREM_ACCEPT = "application/vnd.forem.api-v1+json"


class ForemClient:
    """Thin wrapper around httpx.Client carrying the API key header."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        trust_env: bool = True,
        user_agent: str = "article-sync/0.1",
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={
                "api-key": api_key,
                "Accept": FOREM_ACCEPT,
                "User-Agent": user_agent,
            },
            timeout=timeout,
            trust_env=trust_env,
            transport=transport,
        )

    def get_article(self, article_id: int) -> httpx.Response:
        return self._client.get(f"/api/articles/{article_id}")

    def create_article(self, payload: dict[str, Any]) -> httpx.Response:
        return self._client.post("/api/articles", json=payload)

    def update_article(self, article_id: int, payload: dict[str, Any]) -> httpx.Response:
        return self._client.put(f"/api/articles/{article_id}", json=payload)

    def list_published(self, page: int = 1, per_page: int = 30) -> httpx.Response:
        return self._client.get(
            "/api/articles/me/published",
            params={"page": page, "per_page": per_page},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ForemClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
