"""Tests for run aggregation."""

from pathlib import Path

from article_sync.core.errors import MissingFile
from article_sync.core.types import ArticleRecord, SyncOutcome, SyncStatus
from article_sync.reconcile.aggregator import RunAggregator


def _outcome(name: str, status: SyncStatus) -> SyncOutcome:
    return SyncOutcome(Path(name), status, ArticleRecord(title=name), reason="test")


def test_outcomes_are_classified_in_order():
    aggregator = RunAggregator()
    for name, status in [
        ("b", SyncStatus.UPDATED),
        ("a", SyncStatus.CREATED),
        ("c", SyncStatus.UNCHANGED),
        ("d", SyncStatus.UPDATED),
        ("e", SyncStatus.CREATED),
    ]:
        aggregator.add(_outcome(name, status))

    summary = aggregator.summary
    assert [record.title for record in summary.created] == ["a", "e"]
    assert [record.title for record in summary.updated] == ["b", "d"]
    assert summary.unchanged == 1
    assert summary.total == 5


def test_unchanged_outcomes_are_not_listed():
    aggregator = RunAggregator()
    aggregator.add(_outcome("same", SyncStatus.UNCHANGED))

    assert aggregator.summary.created == []
    assert aggregator.summary.updated == []


def test_failures_are_recorded():
    aggregator = RunAggregator()
    error = MissingFile(Path("x/article.md"))
    aggregator.add_failure(Path("x"), error)

    assert aggregator.summary.failures[0].directory == Path("x")
    assert aggregator.summary.failures[0].error is error
