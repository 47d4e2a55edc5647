"""
Cover image lookup for newly created articles.

Only the reference is resolved here: a cover_image that is already a URL is
sent as-is, and a path relative to the scan root is joined onto a public
base URL (for example the raw file URL of the repository holding the
articles). Generating the image itself is left to other tooling.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote, urlparse

from .core.types import ArticleRecord


class CoverImageProvider(ABC):
    """Supplies the optional main image URL sent when creating an article."""

    @abstractmethod
    def main_image_url(self, directory: Path, record: ArticleRecord) -> str | None:
        raise NotImplementedError


class NoCoverImages(CoverImageProvider):
    def main_image_url(self, directory: Path, record: ArticleRecord) -> str | None:
        return None


class LinkedCoverImages(CoverImageProvider):
    """Resolves cover_image references against a base URL.

    Attributes:
        base_url: Public URL corresponding to `root`, or None
        root: Scan root that relative article paths are computed from
    """

    def __init__(self, base_url: str | None, root: Path):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.root = root

    def main_image_url(self, directory: Path, record: ArticleRecord) -> str | None:
        ref = (record.cover_image or "").strip()
        if not ref:
            return None
        if urlparse(ref).scheme in ("http", "https"):
            return ref
        if self.base_url is None:
            return None

        path = (directory / ref).resolve()
        try:
            relative = path.relative_to(self.root.resolve())
        except ValueError:
            return None
        return f"{self.base_url}/{quote(relative.as_posix())}"
