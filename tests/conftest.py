"""Shared fixtures for article-sync tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from article_sync.core.types import ArticleRecord, RemoteArticle
from article_sync.remote.retry import CancelToken


class FakeGateway:
    """In-memory stand-in for RemoteGateway that records every call."""

    def __init__(self) -> None:
        self.remotes: dict[int, RemoteArticle] = {}
        self.calls: list[tuple[str, Any]] = []
        self.next_id = 100

    def fetch(self, article_id: int) -> RemoteArticle:
        self.calls.append(("fetch", article_id))
        return self.remotes[article_id]

    def create(self, record: ArticleRecord, body: str, main_image: str | None = None) -> RemoteArticle:
        self.calls.append(("create", main_image))
        article_id = self.next_id
        self.next_id += 1
        return self._store(article_id, record, body)

    def update(self, record: ArticleRecord, body: str) -> RemoteArticle:
        self.calls.append(("update", record.id))
        return self._store(record.id, record, body)

    def mutations(self) -> list[tuple[str, Any]]:
        return [call for call in self.calls if call[0] in ("create", "update")]

    def _store(self, article_id: int, record: ArticleRecord, body: str) -> RemoteArticle:
        slug = record.title.lower().replace(" ", "-") + f"-{article_id}"
        remote = RemoteArticle(
            id=article_id,
            body_markdown=body,
            tags=list(record.tags),
            url=f"https://dev.to/writer/{slug}",
            slug=slug,
            title=record.title,
            description=record.description,
        )
        self.remotes[article_id] = remote
        return remote


class RecordingToken(CancelToken):
    """CancelToken whose waits return immediately and are recorded."""

    def __init__(self) -> None:
        super().__init__()
        self.waits: list[float] = []

    def wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        return False


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def recording_token() -> RecordingToken:
    return RecordingToken()


@pytest.fixture
def write_article() -> Callable[..., Path]:
    def _write(directory: Path, body: str = "Hello world\n", **fields: Any) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        data = {
            "id": 0,
            "slug": "",
            "title": "My Article",
            "description": "A short description",
            "url": "",
            "tags": ["python"],
        }
        data.update(fields)
        (directory / "article.md").write_text(body, encoding="utf-8")
        (directory / "article.json").write_text(json.dumps(data, indent=4), encoding="utf-8")
        return directory

    return _write
