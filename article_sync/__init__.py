"""
article-sync - keep local article directories in sync with dev.to.

Each article lives in its own directory holding article.md (the body) and
article.json (the metadata, including the remote ID once published). A run
creates new articles, updates changed ones, and writes the platform's
response back so the next run is a no-op.

Main entry point is the CLI via `article-sync sync` command.

Example:
    $ article-sync sync --path articles/ --pr-comment comment.md --dry-run
"""

__all__ = ["__version__", "ArticleRecord", "RecordStore", "Reconciler", "RunSummary"]
__version__ = "0.1.0"

from .core.store import RecordStore
from .core.types import ArticleRecord, RunSummary
from .reconcile.reconciler import Reconciler
