"""Local storage for one article directory (article.md + article.json)."""

from __future__ import annotations

import contextlib
import json
import os
from pathlib import Path

from .errors import MalformedRecord, MissingFile, WriteFailure
from .types import ArticleRecord


BODY_FILENAME = "article.md"
RECORD_FILENAME = "article.json"


class RecordStore:
    """Reads and writes the record/body pair of an article directory.

    The body is treated as opaque text: it is read as UTF-8 and never
    normalized, so comparisons against the remote body are exact.
    """

    def __init__(self, body_filename: str = BODY_FILENAME, record_filename: str = RECORD_FILENAME):
        self.body_filename = body_filename
        self.record_filename = record_filename

    def body_path(self, directory: Path) -> Path:
        return directory / self.body_filename

    def record_path(self, directory: Path) -> Path:
        return directory / self.record_filename

    def is_article_dir(self, directory: Path) -> bool:
        """Return True if the directory holds either article artifact."""
        return self.body_path(directory).is_file() or self.record_path(directory).is_file()

    def load(self, directory: Path) -> tuple[ArticleRecord, str]:
        """Load the record and body for an article directory.

        Raises:
            MissingFile: If article.md or article.json does not exist
            MalformedRecord: If article.json cannot be parsed into a record
        """
        body_path = self.body_path(directory)
        record_path = self.record_path(directory)

        try:
            body = body_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise MissingFile(body_path) from exc
        except UnicodeDecodeError as exc:
            raise MalformedRecord(body_path, f"body is not valid UTF-8: {exc}") from exc

        try:
            raw = record_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise MissingFile(record_path) from exc
        except UnicodeDecodeError as exc:
            raise MalformedRecord(record_path, f"not valid UTF-8: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedRecord(record_path, str(exc)) from exc

        if not isinstance(data, dict):
            raise MalformedRecord(record_path, f"expected a JSON object, got {type(data).__name__}")

        try:
            record = ArticleRecord.from_dict(data)
        except ValueError as exc:
            raise MalformedRecord(record_path, str(exc)) from exc

        return record, body

    def save(self, directory: Path, record: ArticleRecord) -> Path:
        """Atomically replace article.json with `record`.

        The record is written to a temporary file in the same directory and
        renamed into place, so a failed write leaves the previous record.

        Raises:
            WriteFailure: On any I/O error
        """
        path = self.record_path(directory)
        tmp = path.with_name(f".{path.name}.tmp")
        payload = json.dumps(record.to_dict(), indent=4, ensure_ascii=False) + "\n"
        try:
            with open(tmp, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp, path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise WriteFailure(path, exc) from exc
        return path
