"""
Rate-limit retry policy for remote calls.

The policy is independent of any particular call shape: it is parameterized
by how to read a status code from a response and which statuses are worth
retrying. Backoff waits go through a CancelToken so a cancelled run stops
promptly instead of finishing every attempt.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import threading
import time
from typing import Any, Callable

from ..core.errors import ExhaustedRetries, SyncCancelled


TOO_MANY_REQUESTS = 429
DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BASE_DELAY = 1.0


class CancelToken:
    """Run-scoped cancellation signal with an optional deadline.

    Attributes:
        deadline: time.monotonic() value after which the token counts as cancelled
    """

    def __init__(self, timeout: float | None = None):
        self._event = threading.Event()
        self.deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def interrupted(self) -> bool:
        """True when cancel() was called, as opposed to the deadline passing."""
        return self._event.is_set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def wait(self, seconds: float) -> bool:
        """Sleep for `seconds` unless cancelled first.

        Returns:
            True if the wait ended because of cancellation or the deadline
        """
        if self.deadline is not None:
            remaining = self.deadline - time.monotonic()
            if remaining <= seconds:
                self._event.wait(max(remaining, 0.0))
                return True
        return self._event.wait(seconds) or self.cancelled

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise SyncCancelled("sync run cancelled")


def _status_code(response: Any) -> int:
    return response.status_code


def _is_rate_limited(status: int) -> bool:
    return status == TOO_MANY_REQUESTS


@dataclass
class RetryPolicy:
    """Bounded linear backoff on retryable statuses.

    Waits base_delay * attempt after each retryable response (attempt starts
    at 1), for at most max_attempts calls in total.

    Attributes:
        max_attempts: Total number of calls, including the first
        base_delay: Seconds multiplied by the attempt number for each wait
        is_retryable: Predicate on the status code
        status_of: Extracts the status code from a response
        cancel_token: Cancellation signal checked before each call and during waits
        on_retry: Called with (operation, attempt, delay, status) before each wait
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY
    is_retryable: Callable[[int], bool] = _is_rate_limited
    status_of: Callable[[Any], int] = _status_code
    cancel_token: CancelToken = field(default_factory=CancelToken)
    on_retry: Callable[[str, int, float, int], None] | None = None

    def call(self, operation: Callable[[], Any], name: str = "request") -> Any:
        """Run `operation` until it returns a non-retryable response.

        Exceptions raised by the operation propagate immediately without
        retrying. Non-retryable responses, successful or not, are returned
        as-is for the caller to interpret.

        Raises:
            ExhaustedRetries: If every attempt returned a retryable status
            SyncCancelled: If the cancel token fires before or between attempts
        """
        for attempt in range(1, self.max_attempts + 1):
            self.cancel_token.raise_if_cancelled()
            response = operation()
            status = self.status_of(response)
            if not self.is_retryable(status):
                return response

            if attempt == self.max_attempts:
                break

            delay = self.base_delay * attempt
            if self.on_retry is not None:
                self.on_retry(name, attempt, delay, status)
            if self.cancel_token.wait(delay):
                raise SyncCancelled(f"sync run cancelled while retrying {name}")

        raise ExhaustedRetries(name, self.max_attempts)
