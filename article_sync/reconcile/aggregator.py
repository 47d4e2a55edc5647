"""Folds per-article outcomes into a RunSummary."""

from __future__ import annotations

from pathlib import Path

from ..core.types import ArticleFailure, RunSummary, SyncOutcome, SyncStatus


class RunAggregator:
    """Accumulates outcomes in processing order.

    Created and updated records go to their own sequences; unchanged
    outcomes are only counted.
    """

    def __init__(self) -> None:
        self._summary = RunSummary()

    def add(self, outcome: SyncOutcome) -> None:
        if outcome.status is SyncStatus.CREATED:
            self._summary.created.append(outcome.record)
        elif outcome.status is SyncStatus.UPDATED:
            self._summary.updated.append(outcome.record)
        else:
            self._summary.unchanged += 1

    def add_failure(self, directory: Path, error: Exception) -> None:
        self._summary.failures.append(ArticleFailure(directory, error))

    @property
    def summary(self) -> RunSummary:
        return self._summary
