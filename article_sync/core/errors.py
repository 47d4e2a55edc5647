"""
Exception hierarchy for article synchronization.

Every failure raised while reconciling an article derives from SyncError so
the driver can attach the article directory and decide whether to keep going.
"""

from __future__ import annotations

from pathlib import Path


class SyncError(Exception):
    """Base class for all synchronization errors."""


class MissingFile(SyncError):
    """An article artifact (article.md or article.json) does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"missing file: {path}")


class MalformedRecord(SyncError):
    """article.json exists but does not have the expected shape."""

    def __init__(self, path: Path, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"malformed record {path}: {detail}")


class RemoteCallFailed(SyncError):
    """Transport failure before any status code was received."""

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(f"error calling {operation}: {type(cause).__name__}: {cause}")


class UnexpectedStatus(SyncError):
    """A definitive non-success response that is not rate limiting."""

    def __init__(self, operation: str, status_code: int, body: str):
        self.operation = operation
        self.status_code = status_code
        self.body = body
        super().__init__(f"unexpected status from {operation}: {status_code} {body}")


class ExhaustedRetries(SyncError):
    """Every attempt was answered with a rate-limit response."""

    def __init__(self, operation: str, attempts: int):
        self.operation = operation
        self.attempts = attempts
        super().__init__(f"exhausted retry limit {attempts} for {operation}")


class MalformedResponse(SyncError):
    """A successful response whose body cannot be decoded into an article."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"malformed response from {operation}: {detail}")


class WriteFailure(SyncError):
    """Persisting a reconciled record failed after the remote call succeeded."""

    def __init__(self, path: Path, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"error writing {path}: {cause}")


class SyncCancelled(SyncError):
    """The run was cancelled or its deadline passed."""


class ArticleSyncError(SyncError):
    """Wraps any SyncError with the article directory it came from."""

    def __init__(self, directory: Path, cause: SyncError):
        self.directory = directory
        self.cause = cause
        super().__init__(f"error synchronizing article from path {directory}: {cause}")
