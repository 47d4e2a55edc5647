"""
Core domain models and local storage.

This package contains the data types, errors and on-disk record store
that are independent of the remote API.
"""

from .errors import (
    ArticleSyncError,
    ExhaustedRetries,
    MalformedRecord,
    MalformedResponse,
    MissingFile,
    RemoteCallFailed,
    SyncCancelled,
    SyncError,
    UnexpectedStatus,
    WriteFailure,
)
from .store import RecordStore
from .types import (
    ArticleFailure,
    ArticleRecord,
    Decision,
    RemoteArticle,
    RunSummary,
    SyncAction,
    SyncOutcome,
    SyncStatus,
)

__all__ = [
    "ArticleFailure",
    "ArticleRecord",
    "ArticleSyncError",
    "Decision",
    "ExhaustedRetries",
    "MalformedRecord",
    "MalformedResponse",
    "MissingFile",
    "RecordStore",
    "RemoteArticle",
    "RemoteCallFailed",
    "RunSummary",
    "SyncAction",
    "SyncCancelled",
    "SyncError",
    "SyncOutcome",
    "SyncStatus",
    "UnexpectedStatus",
    "WriteFailure",
]
