"""
Command-line interface for article-sync.

Uses Typer to provide a CLI with options for the main configuration
settings. Supports loading .env files for API key configuration.
"""

from __future__ import annotations

import signal
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import AppConfig, get_api_key, load_config
from .core.errors import SyncError
from .logging_utils import setup_logging
from .reconcile.observer import LoggingObserver
from .remote.retry import CancelToken
from .runner import build_gateway, run_sync


app = typer.Typer(add_completion=False, help="Synchronize local article directories with dev.to")
console = Console()


def _load(config: Path | None, api_key: str | None, log_level: str | None) -> tuple[AppConfig, str]:
    # Load environment variables from .env if available
    load_dotenv()

    cfg = load_config(str(config) if config else None)
    if api_key:
        cfg.api.api_key = api_key
    if log_level:
        cfg.logging.level = log_level

    resolved = get_api_key(cfg.api)
    if not resolved:
        console.print(
            f"[red]missing required argument --api-key or env var {cfg.api.api_key_env}[/red]"
        )
        raise typer.Exit(2)
    return cfg, resolved


def _interrupt_handler(cancel_token: CancelToken):
    """SIGINT handler that cancels the run; a second Ctrl-C aborts immediately."""

    def handler(signum, frame):
        console.print("[yellow]interrupt received, stopping after the current request[/yellow]")
        cancel_token.cancel()
        signal.signal(signal.SIGINT, signal.default_int_handler)

    return handler


@app.command()
def sync(

    path: Path | None = typer.Option(None, "--path", "-p", help="Root path to scan for articles."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        help="API key for accessing dev.to (or set API_KEY / .env).",
    ),
    pr_comment: Path | None = typer.Option(
        None, "--pr-comment", help="File to write the PR comment into."
    ),
    commit: Path | None = typer.Option(None, "--commit", help="File to write the commit message into."),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print which changes will be made without doing them.",
    ),
    continue_on_error: bool = typer.Option(
        False,
        "--continue-on-error",
        help="Keep going after an article fails and report all failures at the end.",
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Abort the run after this many seconds."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Synchronize every article directory below --path.

    Articles without an ID are created, articles whose body or tags differ
    from the published version are updated, and article.json is rewritten
    with the platform's response.
    """
    cfg, resolved_key = _load(config, api_key, log_level)
    if path is not None:
        cfg.sync.root = str(path)
    if pr_comment is not None:
        cfg.output.pr_comment = str(pr_comment)
    if commit is not None:
        cfg.output.commit = str(commit)
    if dry_run:
        cfg.sync.dry_run = True
    if continue_on_error:
        cfg.sync.fail_fast = False
    if timeout is not None:
        cfg.sync.deadline_seconds = timeout

    logger = setup_logging(cfg.logging)
    cancel_token = CancelToken(cfg.sync.deadline_seconds)
    previous_handler = signal.signal(signal.SIGINT, _interrupt_handler(cancel_token))
    try:
        summary = run_sync(cfg, resolved_key, logger=logger, console=console, cancel_token=cancel_token)
    except KeyboardInterrupt:
        console.print("[red]sync interrupted[/red]")
        raise typer.Exit(130)
    except SyncError as exc:
        if cancel_token.interrupted:
            console.print(f"[red]sync interrupted:[/red] {escape(str(exc))}")
            raise typer.Exit(130)
        console.print(f"[red]error synchronizing directory:[/red] {escape(str(exc))}")
        raise typer.Exit(1)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if summary.failures:
        raise typer.Exit(1)


@app.command()
def remote(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    api_key: str | None = typer.Option(None, "--api-key", help="API key for accessing dev.to."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """List the published articles of the authenticated account."""
    cfg, resolved_key = _load(config, api_key, log_level)
    logger = setup_logging(cfg.logging)
    gateway = build_gateway(cfg, resolved_key, CancelToken(), LoggingObserver(logger))
    try:
        articles = gateway.list_published()
    except SyncError as exc:
        console.print(f"[red]error listing articles:[/red] {escape(str(exc))}")
        raise typer.Exit(1)
    finally:
        gateway.client.close()

    table = Table(title="Published articles")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Tags")
    table.add_column("URL")
    for article in articles:
        table.add_row(str(article.id), article.title or "", ", ".join(article.tags), article.url)
    console.print(table)


if __name__ == "__main__":
    app()
