"""Retrying operations with exponential backoff and cancellation."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """Retry settings; delays are in seconds."""

    max_attempts: int = 3
    initial_delay: float = 0.1
    max_delay: float = 5.0
    multiplier: float = 2.0


DEFAULT_CONFIG = RetryConfig()


class ContextCancelled(Exception):
    """The context was cancelled."""


class ContextDeadlineExceeded(Exception):
    """The context's deadline passed."""


class MaxRetriesExceeded(Exception):
    """Every attempt failed with a retryable error."""

    def __init__(self, last_error: BaseException):
        super().__init__(f"max retries exceeded: {last_error}")
        self.last_error = last_error


class RetryContext:
    """A cancellation signal with an optional timeout in seconds."""

    def __init__(self, timeout: float | None = None):
        self._event = threading.Event()
        self._deadline = None if timeout is None else time.monotonic() + timeout

    def cancel(self) -> None:
        """Cancel the context; has no effect once a deadline has passed."""
        if self.error is None:
            self._event.set()

    @property
    def error(self) -> Exception | None:
        """The reason the context is done, or ``None`` while it is live."""
        if self._event.is_set():
            return ContextCancelled("context canceled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return ContextDeadlineExceeded("context deadline exceeded")
        return None

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; return True if the context ended first."""
        if self._deadline is not None:
            remaining = self._deadline - time.monotonic()
            if remaining <= seconds:
                self._event.wait(max(remaining, 0.0))
                return True
        return self._event.wait(seconds)


def with_retry(
    ctx: RetryContext | None,
    config: RetryConfig,
    is_retryable: Callable[[Exception], bool],
    fn: Callable[[], T],
) -> T:
    """Call ``fn`` until it succeeds, backing off between retryable failures."""
    if config.max_attempts <= 0:
        raise ValueError(
            "invalid retry configuration: max_attempts must be at least 1, "
            f"got {config.max_attempts}"
        )
    ctx = ctx if ctx is not None else RetryContext()
    delay = config.initial_delay
    last_error: Exception | None = None

    for attempt in range(config.max_attempts):
        done = ctx.error
        if done is not None:
            raise done

        try:
            return fn()
        except Exception as exc:
            last_error = exc
            if not is_retryable(exc):
                raise

        if attempt < config.max_attempts - 1:
            if ctx.wait(delay):
                raise ctx.error or ContextCancelled("context canceled")
            delay = min(delay * config.multiplier, config.max_delay)

    assert last_error is not None
    raise MaxRetriesExceeded(last_error) from last_error


def with_simple_retry(
    ctx: RetryContext | None,
    fn: Callable[[], T],
    is_retryable: Callable[[Exception], bool],
) -> T:
    """Run :func:`with_retry` with the default configuration."""
    return with_retry(ctx, DEFAULT_CONFIG, is_retryable, fn)