"""
Core data types for article synchronization.

This module defines the data structures that flow through a sync run:
- ArticleRecord: The local metadata stored in article.json
- RemoteArticle: The server's view of an article, decoded once from JSON
- Decision: What the reconciler intends to do with one article
- SyncOutcome: The result of reconciling one article
- RunSummary: Created/updated articles accumulated across a full scan
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

from .errors import MalformedResponse


# Keys owned by ArticleRecord; anything else in article.json is kept in `extra`.
RECORD_KEYS = ("id", "slug", "title", "description", "url", "tags", "cover_image", "gopher")


@dataclass(frozen=True)
class ArticleRecord:
    """Local metadata for one article directory.

    Attributes:
        id: Remote article ID, 0 when the article has not been created yet
        slug: URL slug assigned by the platform
        title: Article headline
        description: Short description shown in listings
        url: Public URL of the published article
        tags: Tag names; order is not meaningful
        cover_image: Optional cover image URL or path relative to the scan root
        gopher: Optional source image consumed by cover image generation
        extra: Unknown keys from article.json, written back untouched
    """

    id: int = 0
    slug: str = ""
    title: str = ""
    description: str = ""
    url: str = ""
    tags: list[str] = field(default_factory=list)
    cover_image: str | None = None
    gopher: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_new(self) -> bool:
        return self.id == 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ArticleRecord:
        """Build a record from parsed article.json content.

        Raises:
            ValueError: If a known field has the wrong type
        """
        record_id = data.get("id", 0)
        if record_id is None:
            record_id = 0
        if isinstance(record_id, bool) or not isinstance(record_id, int):
            raise ValueError(f"id must be an integer, got {record_id!r}")

        strings: dict[str, str] = {}
        for key in ("slug", "title", "description", "url"):
            value = data.get(key) or ""
            if not isinstance(value, str):
                raise ValueError(f"{key} must be a string, got {value!r}")
            strings[key] = value

        tags = data.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
            raise ValueError(f"tags must be a list of strings, got {tags!r}")

        optional: dict[str, str | None] = {}
        for key in ("cover_image", "gopher"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{key} must be a string, got {value!r}")
            optional[key] = value

        extra = {key: value for key, value in data.items() if key not in RECORD_KEYS}
        return cls(id=record_id, tags=list(tags), extra=extra, **strings, **optional)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with a fixed key order so unchanged records write identically."""
        data: dict[str, Any] = {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "tags": list(self.tags),
        }
        if self.cover_image is not None:
            data["cover_image"] = self.cover_image
        if self.gopher is not None:
            data["gopher"] = self.gopher
        data.update(self.extra)
        return data

    def with_url(self, url: str) -> ArticleRecord:
        return replace(self, url=url)

    def merge_remote(self, remote: RemoteArticle, operation: str = "merge") -> ArticleRecord:
        """Return a copy with server-authoritative fields taken from `remote`.

        Once a record has a remote ID it never changes, so a response for a
        different article is rejected.
        """
        if self.id and remote.id != self.id:
            raise MalformedResponse(
                operation, f"response is for article {remote.id}, expected {self.id}"
            )
        return replace(
            self,
            id=remote.id,
            url=remote.url,
            tags=list(remote.tags),
            slug=remote.slug if remote.slug is not None else self.slug,
            title=remote.title if remote.title is not None else self.title,
            description=remote.description if remote.description is not None else self.description,
            cover_image=remote.cover_image if remote.cover_image is not None else self.cover_image,
        )


@dataclass(frozen=True)
class RemoteArticle:
    """The server's current view of an article.

    Only the fields needed for reconciliation are kept. Optional fields are
    None when the server did not send them.
    """

    id: int
    body_markdown: str
    tags: list[str]
    url: str
    slug: str | None = None
    title: str | None = None
    description: str | None = None
    cover_image: str | None = None
    published: bool | None = None

    @classmethod
    def from_payload(cls, payload: Any, operation: str = "fetch") -> RemoteArticle:
        """Decode a JSON response body.

        Raises:
            MalformedResponse: If a required field is missing or ill-typed
        """
        if not isinstance(payload, dict):
            raise MalformedResponse(operation, f"expected a JSON object, got {type(payload).__name__}")

        article_id = payload.get("id")
        if isinstance(article_id, bool) or not isinstance(article_id, int):
            raise MalformedResponse(operation, f"missing or invalid id: {article_id!r}")

        body = payload.get("body_markdown")
        if not isinstance(body, str):
            raise MalformedResponse(operation, "missing or invalid body_markdown")

        url = payload.get("url")
        if not isinstance(url, str):
            raise MalformedResponse(operation, "missing or invalid url")

        published = payload.get("published")
        return cls(
            id=article_id,
            body_markdown=body,
            tags=_decode_tags(payload, operation),
            url=url,
            slug=_optional_str(payload, "slug"),
            title=_optional_str(payload, "title"),
            description=_optional_str(payload, "description"),
            cover_image=_optional_str(payload, "cover_image"),
            published=published if isinstance(published, bool) else None,
        )


def _optional_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    return value if isinstance(value, str) else None


def _decode_tags(payload: dict[str, Any], operation: str) -> list[str]:
    # Forem sends tags as a list on single articles and as a comma separated
    # string on listings; tag_list swaps the two.
    for key in ("tags", "tag_list"):
        value = payload.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        if isinstance(value, list) and all(isinstance(tag, str) for tag in value):
            return list(value)
        raise MalformedResponse(operation, f"invalid {key}: {value!r}")
    return []


class SyncAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    NOOP = "noop"


class SyncStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


REASON_NEW = "new article"
REASON_BODY_CHANGED = "body changed"
REASON_TAGS_CHANGED = "different tags"
REASON_UP_TO_DATE = "up-to-date"


@dataclass(frozen=True)
class Decision:
    """The action the reconciler chose for one article and why.

    Attributes:
        action: CREATE, UPDATE or NOOP
        reason: Human-readable reason; body changes mask tag changes
        remote: The snapshot fetched to decide, None for CREATE
    """

    action: SyncAction
    reason: str
    remote: RemoteArticle | None = None


@dataclass(frozen=True)
class SyncOutcome:
    """Result of reconciling one article directory."""

    directory: Path
    status: SyncStatus
    record: ArticleRecord
    reason: str
    dry_run: bool = False


@dataclass(frozen=True)
class ArticleFailure:
    """An article that could not be synchronized when the run continued past it."""

    directory: Path
    error: Exception


@dataclass
class RunSummary:
    """Aggregated classification of one full directory scan.

    Attributes:
        created: Records for newly created articles, in processing order
        updated: Records for updated articles, in processing order
        unchanged: Number of articles that needed no change
        failures: Articles that failed when the run continued on error
    """

    created: list[ArticleRecord] = field(default_factory=list)
    updated: list[ArticleRecord] = field(default_factory=list)
    unchanged: int = 0
    failures: list[ArticleFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.created) + len(self.updated) + self.unchanged + len(self.failures)
