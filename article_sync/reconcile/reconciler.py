"""
Per-article reconciliation between local records and the remote platform.

For one article directory the reconciler:
1. Loads the record and body from the local store
2. Decides CREATE (no remote ID), UPDATE (body or tags differ) or NOOP
3. Applies the create/update through the gateway, unless in dry-run mode
4. Merges the server response into the record and saves it

Running it twice with no remote-side change in between yields an unchanged
outcome on the second run and leaves article.json untouched.
"""

from __future__ import annotations

from pathlib import Path

from ..core.errors import SyncError
from ..core.store import RecordStore
from ..core.types import (
    REASON_BODY_CHANGED,
    REASON_NEW,
    REASON_TAGS_CHANGED,
    REASON_UP_TO_DATE,
    ArticleRecord,
    Decision,
    RemoteArticle,
    SyncAction,
    SyncOutcome,
    SyncStatus,
)
from ..cover import CoverImageProvider, NoCoverImages
from ..remote.gateway import RemoteGateway
from .observer import NullObserver, SyncObserver


def _snapshot(decision: Decision) -> RemoteArticle:
    """Return the remote snapshot an UPDATE or NOOP decision was made against."""
    if decision.remote is None:
        raise SyncError(f"{decision.action.value} decision has no remote snapshot")
    return decision.remote


def tags_differ(local: list[str], remote: list[str]) -> bool:
    """Compare tag lists ignoring order."""
    return sorted(local) != sorted(remote)


def compare(record: ArticleRecord, body: str, remote: RemoteArticle) -> Decision:
    """Decide between UPDATE and NOOP for an article that already exists.

    A body change is reported in preference to a tag change when both apply.
    """
    if body != remote.body_markdown:
        return Decision(SyncAction.UPDATE, REASON_BODY_CHANGED, remote)
    if tags_differ(record.tags, remote.tags):
        return Decision(SyncAction.UPDATE, REASON_TAGS_CHANGED, remote)
    return Decision(SyncAction.NOOP, REASON_UP_TO_DATE, remote)


class Reconciler:
    """Synchronizes one article directory at a time.

    Attributes:
        store: Local record store
        gateway: Remote gateway used for fetch, create and update
        observer: Receives progress events
        cover_images: Supplies the main image URL for new articles
        dry_run: Decide and report without creating, updating or writing
    """

    def __init__(
        self,
        store: RecordStore,
        gateway: RemoteGateway,
        observer: SyncObserver | None = None,
        cover_images: CoverImageProvider | None = None,
        dry_run: bool = False,
    ):
        self.store = store
        self.gateway = gateway
        self.observer = observer or NullObserver()
        self.cover_images = cover_images or NoCoverImages()
        self.dry_run = dry_run

    def decide(self, record: ArticleRecord, body: str) -> Decision:
        """Determine the remote action for a record.

        New records are created without reading the remote first; existing
        ones are fetched and compared.
        """
        if record.is_new:
            return Decision(SyncAction.CREATE, REASON_NEW)
        remote = self.gateway.fetch(record.id)
        return compare(record, body, remote)

    def sync(self, directory: Path) -> SyncOutcome:
        """Reconcile the article stored in `directory`.

        Raises:
            SyncError: Any local, remote or write failure for this article
        """
        self.observer.article_started(directory)
        record, body = self.store.load(directory)
        decision = self.decide(record, body)
        self.observer.decision_made(directory, record, decision)

        if decision.action is SyncAction.NOOP:
            outcome = self._unchanged(directory, record, decision)
        elif self.dry_run:
            outcome = self._preview(directory, record, decision)
        elif decision.action is SyncAction.CREATE:
            main_image = self.cover_images.main_image_url(directory, record)
            created = self.gateway.create(record, body, main_image=main_image)
            merged = record.merge_remote(created, "create article")
            outcome = self._persist(directory, merged, SyncStatus.CREATED, decision)
        else:
            updated = self.gateway.update(record, body)
            merged = record.merge_remote(updated, f"update article {record.id}")
            outcome = self._persist(directory, merged, SyncStatus.UPDATED, decision)

        self.observer.article_synced(outcome)
        return outcome

    def _unchanged(self, directory: Path, record: ArticleRecord, decision: Decision) -> SyncOutcome:
        # The remote owns the URL even when nothing else changed.
        current = record.with_url(_snapshot(decision).url)
        if current != record and not self.dry_run:
            self.store.save(directory, current)
        return SyncOutcome(directory, SyncStatus.UNCHANGED, current, decision.reason, self.dry_run)

    def _preview(self, directory: Path, record: ArticleRecord, decision: Decision) -> SyncOutcome:
        if decision.action is SyncAction.CREATE:
            return SyncOutcome(directory, SyncStatus.CREATED, record, decision.reason, dry_run=True)
        return SyncOutcome(
            directory, SyncStatus.UPDATED, record.with_url(_snapshot(decision).url), decision.reason, dry_run=True
        )

    def _persist(
        self, directory: Path, record: ArticleRecord, status: SyncStatus, decision: Decision
    ) -> SyncOutcome:
        self.store.save(directory, record)
        return SyncOutcome(directory, status, record, decision.reason)
