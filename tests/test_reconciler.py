"""Tests for per-article reconciliation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from article_sync.core.errors import MissingFile, SyncError
from article_sync.core.store import RecordStore
from article_sync.core.types import (
    ArticleRecord,
    Decision,
    RemoteArticle,
    SyncAction,
    SyncStatus,
)
from article_sync.cover import LinkedCoverImages
from article_sync.reconcile.observer import NullObserver
from article_sync.reconcile.reconciler import Reconciler, compare


class RecordingObserver(NullObserver):
    def __init__(self) -> None:
        self.events: list[tuple] = []

    def article_started(self, directory):
        self.events.append(("started", directory.name))

    def decision_made(self, directory, record, decision):
        self.events.append(("decision", decision.action, decision.reason))

    def article_synced(self, outcome):
        self.events.append(("synced", outcome.status))


def _remote(body: str = "A", tags: list[str] | None = None, url: str = "https://dev.to/w/a") -> RemoteArticle:
    return RemoteArticle(id=5, body_markdown=body, tags=tags if tags is not None else ["x"], url=url)


def test_body_change_takes_priority_over_tags():
    record = ArticleRecord(id=5, tags=["x", "y"])

    decision = compare(record, "B", _remote("A", ["x"]))

    assert decision.action is SyncAction.UPDATE
    assert decision.reason == "body changed"


def test_body_change_with_same_tags():
    decision = compare(ArticleRecord(id=5, tags=["x"]), "B", _remote("A", ["x"]))

    assert decision.action is SyncAction.UPDATE
    assert decision.reason == "body changed"


def test_tag_only_change():
    decision = compare(ArticleRecord(id=5, tags=["x", "y"]), "A", _remote("A", ["x"]))

    assert decision.action is SyncAction.UPDATE
    assert decision.reason == "different tags"


def test_no_change_ignores_tag_order():
    decision = compare(ArticleRecord(id=5, tags=["y", "x"]), "A", _remote("A", ["x", "y"]))

    assert decision.action is SyncAction.NOOP


def test_body_comparison_is_exact():
    decision = compare(ArticleRecord(id=5, tags=["x"]), "A\n", _remote("A", ["x"]))

    assert decision.action is SyncAction.UPDATE


def test_new_article_is_created_without_fetch(tmp_path: Path, write_article, fake_gateway):
    directory = write_article(tmp_path / "post", body="Fresh", tags=["x"])
    reconciler = Reconciler(RecordStore(), fake_gateway)

    outcome = reconciler.sync(directory)

    assert outcome.status is SyncStatus.CREATED
    assert outcome.record.id == 100
    assert fake_gateway.calls == [("create", None)]
    saved = json.loads((directory / "article.json").read_text(encoding="utf-8"))
    assert saved["id"] == 100
    assert saved["url"] == outcome.record.url


def test_second_run_is_unchanged_and_does_not_write(tmp_path: Path, write_article, fake_gateway):
    directory = write_article(tmp_path / "post", body="Fresh", tags=["x", "y"])
    reconciler = Reconciler(RecordStore(), fake_gateway)

    first = reconciler.sync(directory)
    persisted = (directory / "article.json").read_bytes()
    second = reconciler.sync(directory)

    assert first.status is SyncStatus.CREATED
    assert second.status is SyncStatus.UNCHANGED
    assert second.record.id == first.record.id
    assert (directory / "article.json").read_bytes() == persisted
    assert fake_gateway.mutations() == [("create", None)]
    assert fake_gateway.calls[-1] == ("fetch", first.record.id)


def test_created_id_is_stable_across_updates(tmp_path: Path, write_article, fake_gateway):
    directory = write_article(tmp_path / "post", body="v1")
    reconciler = Reconciler(RecordStore(), fake_gateway)
    created = reconciler.sync(directory)

    (directory / "article.md").write_text("v2", encoding="utf-8")
    updated = reconciler.sync(directory)

    assert updated.status is SyncStatus.UPDATED
    assert updated.reason == "body changed"
    assert updated.record.id == created.record.id
    assert fake_gateway.mutations() == [("create", None), ("update", created.record.id)]


def test_update_persists_server_response(tmp_path: Path, write_article, fake_gateway):
    directory = write_article(tmp_path / "post", body="A", id=5, tags=["x", "y"], url="")
    fake_gateway.remotes[5] = _remote("A", ["x"])
    reconciler = Reconciler(RecordStore(), fake_gateway)

    outcome = reconciler.sync(directory)

    assert outcome.status is SyncStatus.UPDATED
    assert outcome.reason == "different tags"
    saved = json.loads((directory / "article.json").read_text(encoding="utf-8"))
    assert saved["id"] == 5
    assert sorted(saved["tags"]) == ["x", "y"]
    assert saved["url"] == outcome.record.url != ""


def test_noop_copies_remote_url_without_write_when_unchanged(tmp_path: Path, write_article, fake_gateway):
    directory = write_article(tmp_path / "post", body="A", id=5, tags=["x"], url="https://dev.to/w/a")
    fake_gateway.remotes[5] = _remote("A", ["x"], url="https://dev.to/w/a")
    before = (directory / "article.json").read_bytes()

    outcome = Reconciler(RecordStore(), fake_gateway).sync(directory)

    assert outcome.status is SyncStatus.UNCHANGED
    assert outcome.record.url == "https://dev.to/w/a"
    assert (directory / "article.json").read_bytes() == before
    assert fake_gateway.mutations() == []


def test_noop_writes_when_remote_url_moved(tmp_path: Path, write_article, fake_gateway):
    directory = write_article(tmp_path / "post", body="A", id=5, tags=["x"], url="https://dev.to/w/old")
    fake_gateway.remotes[5] = _remote("A", ["x"], url="https://dev.to/w/new")

    outcome = Reconciler(RecordStore(), fake_gateway).sync(directory)

    assert outcome.status is SyncStatus.UNCHANGED
    saved = json.loads((directory / "article.json").read_text(encoding="utf-8"))
    assert saved["url"] == "https://dev.to/w/new"
    assert fake_gateway.mutations() == []


def test_dry_run_update_fetches_but_never_mutates(tmp_path: Path, write_article, fake_gateway):
    directory = write_article(tmp_path / "post", body="B", id=5, tags=["x"], url="https://dev.to/w/old")
    fake_gateway.remotes[5] = _remote("A", ["x"], url="https://dev.to/w/new")
    before = (directory / "article.json").read_bytes()

    outcome = Reconciler(RecordStore(), fake_gateway, dry_run=True).sync(directory)

    assert outcome.status is SyncStatus.UPDATED
    assert outcome.dry_run
    assert outcome.reason == "body changed"
    assert outcome.record.url == "https://dev.to/w/new"
    assert fake_gateway.calls == [("fetch", 5)]
    assert (directory / "article.json").read_bytes() == before


def test_dry_run_create_makes_no_calls(tmp_path: Path, write_article, fake_gateway):
    directory = write_article(tmp_path / "post")
    before = (directory / "article.json").read_bytes()

    outcome = Reconciler(RecordStore(), fake_gateway, dry_run=True).sync(directory)

    assert outcome.status is SyncStatus.CREATED
    assert outcome.record.is_new
    assert fake_gateway.calls == []
    assert (directory / "article.json").read_bytes() == before


def test_create_sends_cover_image_url(tmp_path: Path, write_article, fake_gateway):
    directory = write_article(tmp_path / "articles" / "post", cover_image="cover.png")
    cover_images = LinkedCoverImages("https://raw.example.com/repo/main/articles", tmp_path / "articles")

    Reconciler(RecordStore(), fake_gateway, cover_images=cover_images).sync(directory)

    assert fake_gateway.calls == [("create", "https://raw.example.com/repo/main/articles/post/cover.png")]


def test_observer_sees_each_step(tmp_path: Path, write_article, fake_gateway):
    directory = write_article(tmp_path / "post")
    observer = RecordingObserver()

    Reconciler(RecordStore(), fake_gateway, observer=observer).sync(directory)

    assert observer.events == [
        ("started", "post"),
        ("decision", SyncAction.CREATE, "new article"),
        ("synced", SyncStatus.CREATED),
    ]


def test_errors_propagate(tmp_path: Path, fake_gateway):
    directory = tmp_path / "empty"
    directory.mkdir()

    with pytest.raises(MissingFile):
        Reconciler(RecordStore(), fake_gateway).sync(directory)


def test_noop_without_remote_snapshot_is_an_error(tmp_path: Path, write_article, fake_gateway):
    directory = write_article(tmp_path / "post", id=5)

    class SnapshotlessReconciler(Reconciler):
        def decide(self, record, body):
            return Decision(SyncAction.NOOP, "up-to-date")

    with pytest.raises(SyncError, match="no remote snapshot"):
        SnapshotlessReconciler(RecordStore(), fake_gateway).sync(directory)
