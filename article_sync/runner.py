"""
Sync run orchestration.

This module coordinates a full run:
1. Find article directories below the scan root
2. Reconcile each one, in traversal order, one at a time
3. Fold outcomes into a RunSummary
4. Write the merge request comment and commit message

By default the run aborts on the first article error. With fail_fast
disabled, article errors are collected and the scan continues, except for
write failures and cancellation which always abort: after a write failure
the remote already holds a change the local record does not reflect.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .config import AppConfig
from .core.errors import ArticleSyncError, SyncCancelled, SyncError, WriteFailure
from .core.store import RecordStore
from .core.types import RunSummary
from .cover import LinkedCoverImages
from .logging_utils import log_event
from .output.renderer import render_comment, render_commit, write_report
from .reconcile.aggregator import RunAggregator
from .reconcile.observer import LoggingObserver, SyncObserver
from .reconcile.reconciler import Reconciler
from .remote.client import ForemClient
from .remote.gateway import RemoteGateway
from .remote.retry import CancelToken, RetryPolicy


def iter_article_dirs(root: Path, store: RecordStore) -> list[Path]:
    """Return article directories below `root` in sorted traversal order.

    A directory counts as an article when it holds article.md or
    article.json; other directories (image folders, etc.) are skipped.
    """
    if not root.is_dir():
        raise SyncError(f"error accessing path {root}: not a directory")

    found: list[Path] = []
    for current, dirnames, _ in os.walk(root):
        dirnames.sort()
        path = Path(current)
        if path == root:
            continue
        if store.is_article_dir(path):
            found.append(path)
    return found


def build_gateway(
    cfg: AppConfig,
    api_key: str,
    cancel_token: CancelToken,
    observer: SyncObserver,
) -> RemoteGateway:
    """Create the HTTP client and retry policy described by `cfg`."""
    client = ForemClient(
        api_key,
        base_url=cfg.api.base_url,
        timeout=cfg.api.timeout_seconds,
        trust_env=cfg.api.trust_env,
        user_agent=cfg.api.user_agent,
    )
    policy = RetryPolicy(
        max_attempts=cfg.retry.max_attempts,
        base_delay=cfg.retry.base_delay_seconds,
        cancel_token=cancel_token,
        on_retry=observer.retry_scheduled,
    )
    return RemoteGateway(client, policy)


def sync_directories(
    directories: list[Path],
    reconciler: Reconciler,
    fail_fast: bool = True,
) -> RunSummary:
    """Reconcile each directory in order and aggregate the outcomes.

    Raises:
        ArticleSyncError: On the first error when fail_fast is set, and on
            any write failure or cancellation regardless
    """
    aggregator = RunAggregator()
    for directory in directories:
        try:
            outcome = reconciler.sync(directory)
        except SyncError as exc:
            reconciler.observer.article_failed(directory, exc)
            if fail_fast or isinstance(exc, (WriteFailure, SyncCancelled)):
                raise ArticleSyncError(directory, exc) from exc
            aggregator.add_failure(directory, exc)
            continue
        aggregator.add(outcome)
    return aggregator.summary


def run_sync(
    cfg: AppConfig,
    api_key: str,
    logger: logging.Logger | None = None,
    console: Console | None = None,
    gateway: RemoteGateway | None = None,
    cancel_token: CancelToken | None = None,
) -> RunSummary:
    """Run a complete sync of `cfg.sync.root` and write the configured reports.

    Args:
        cfg: Application configuration
        api_key: API key for the remote platform
        logger: Logger receiving structured events
        console: Rich console for the final summary (creates default if None)
        gateway: Prebuilt gateway; built from cfg when None
        cancel_token: Cancellation signal for the run; built from
            cfg.sync.deadline_seconds when None

    Returns:
        The RunSummary of the scan
    """
    console = console or Console()
    root = Path(cfg.sync.root)
    store = RecordStore()
    observer = LoggingObserver(logger)
    cancel_token = cancel_token or CancelToken(cfg.sync.deadline_seconds)
    owns_gateway = gateway is None
    if gateway is None:
        gateway = build_gateway(cfg, api_key, cancel_token, observer)

    reconciler = Reconciler(
        store,
        gateway,
        observer=observer,
        cover_images=LinkedCoverImages(cfg.sync.cover_image_base_url, root),
        dry_run=cfg.sync.dry_run,
    )

    log_event(
        logger,
        "sync start",
        event="sync_start",
        root=str(root),
        dry_run=cfg.sync.dry_run,
        fail_fast=cfg.sync.fail_fast,
    )
    try:
        directories = iter_article_dirs(root, store)
        summary = sync_directories(directories, reconciler, fail_fast=cfg.sync.fail_fast)
    finally:
        if owns_gateway:
            gateway.client.close()

    log_event(
        logger,
        "sync complete",
        event="sync_complete",
        created_count=len(summary.created),
        updated_count=len(summary.updated),
        unchanged_count=summary.unchanged,
        failed_count=len(summary.failures),
    )

    if cfg.output.pr_comment:
        write_report(Path(cfg.output.pr_comment), render_comment(summary))
    if cfg.output.commit:
        write_report(Path(cfg.output.commit), render_commit(summary))

    _render_summary(summary, console, cfg.sync.dry_run)
    return summary


def _render_summary(summary: RunSummary, console: Console, dry_run: bool) -> None:
    """Display run statistics to the console."""
    prefix = "[yellow]dry-run[/yellow] " if dry_run else ""
    console.print(
        f"{prefix}[bold]Sync summary[/bold]: "
        f"total={summary.total}, created={len(summary.created)}, updated={len(summary.updated)}, "
        f"unchanged={summary.unchanged}, failed={len(summary.failures)}"
    )
    for failure in summary.failures:
        console.print(f"[red]failed[/red] {escape(str(failure.directory))}: {escape(str(failure.error))}")
