"""Observer interface for reconciliation progress.

The reconciler reports what it does through an injected observer instead of
a process-wide logger, so tests can record events without capturing output.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from pathlib import Path

from ..core.types import ArticleRecord, Decision, SyncOutcome
from ..logging_utils import log_event


class SyncObserver(ABC):
    """Sink for reconciliation events."""

    @abstractmethod
    def article_started(self, directory: Path) -> None:
        raise NotImplementedError

    @abstractmethod
    def decision_made(self, directory: Path, record: ArticleRecord, decision: Decision) -> None:
        raise NotImplementedError

    @abstractmethod
    def article_synced(self, outcome: SyncOutcome) -> None:
        raise NotImplementedError

    @abstractmethod
    def article_failed(self, directory: Path, error: Exception) -> None:
        raise NotImplementedError

    @abstractmethod
    def retry_scheduled(self, operation: str, attempt: int, delay: float, status: int) -> None:
        raise NotImplementedError


class NullObserver(SyncObserver):
    def article_started(self, directory: Path) -> None:
        pass

    def decision_made(self, directory: Path, record: ArticleRecord, decision: Decision) -> None:
        pass

    def article_synced(self, outcome: SyncOutcome) -> None:
        pass

    def article_failed(self, directory: Path, error: Exception) -> None:
        pass

    def retry_scheduled(self, operation: str, attempt: int, delay: float, status: int) -> None:
        pass


class LoggingObserver(SyncObserver):
    """Emits each event as a structured log record."""

    def __init__(self, logger: logging.Logger | None):
        self.logger = logger

    def article_started(self, directory: Path) -> None:
        log_event(self.logger, "synchronizing article", event="article_start", directory=str(directory))

    def decision_made(self, directory: Path, record: ArticleRecord, decision: Decision) -> None:
        messages = {
            "create": "creating new article",
            "update": "updating article",
            "noop": "article is up-to-date",
        }
        log_event(
            self.logger,
            messages[decision.action.value],
            event="article_decision",
            directory=str(directory),
            title=record.title,
            article_id=record.id,
            action=decision.action.value,
            reason=decision.reason,
        )

    def article_synced(self, outcome: SyncOutcome) -> None:
        message = "dry-run: no changes made" if outcome.dry_run else "successfully synchronized article"
        log_event(
            self.logger,
            message,
            event="article_synced",
            directory=str(outcome.directory),
            title=outcome.record.title,
            article_id=outcome.record.id,
            status=outcome.status.value,
            url=outcome.record.url,
        )

    def article_failed(self, directory: Path, error: Exception) -> None:
        log_event(
            self.logger,
            "error synchronizing article",
            level=logging.ERROR,
            event="article_failed",
            directory=str(directory),
            error=str(error),
            error_type=type(error).__name__,
        )

    def retry_scheduled(self, operation: str, attempt: int, delay: float, status: int) -> None:
        log_event(
            self.logger,
            "rate limited, retrying",
            level=logging.WARNING,
            event="retry_scheduled",
            operation=operation,
            attempt=attempt,
            delay_seconds=delay,
            status_code=status,
        )
