"""Retry decorator with exponential backoff for idempotent calls.

Only read-only requests go through here. Creates, updates, deletes and
power actions are never retried automatically.

Example:
    from cirrus.infra.retry import retry, transient

    @retry(on=transient, max_attempts=3)
    async def fetch(path: str) -> dict:
        ...
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeAlias, TypeVar

from loguru import logger
from tenacity import (
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)
from tenacity import retry as _tenacity_retry

from cirrus.errors import APIError, TransportError

P = ParamSpec("P")
T = TypeVar("T")

RetryPredicate: TypeAlias = Callable[[BaseException], bool]


def retry(
    on: type[Exception] | tuple[type[Exception], ...] | RetryPredicate = Exception,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    exponential_base: float = 2.0,
    max_delay: float = 30.0,
    jitter: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Retry an async function with exponential backoff.

    Args:
        on: Exception class, tuple of classes, or predicate deciding
            whether a failure is worth another attempt.
        max_attempts: Attempts including the first one.
        base_delay: Delay before the first retry, in seconds.
        exponential_base: Backoff multiplier,
            ``min(base_delay * exponential_base ** attempt, max_delay)``.
        max_delay: Upper bound on a single delay.
        jitter: Add up to 10% of ``base_delay`` as random jitter.
    """
    if isinstance(on, type) and issubclass(on, Exception):
        should_retry: RetryPredicate = lambda e: isinstance(e, on)
    elif isinstance(on, tuple):
        should_retry = lambda e: isinstance(e, on)
    else:
        should_retry = on

    wait: Any = wait_exponential(multiplier=base_delay, exp_base=exponential_base, max=max_delay)
    if jitter:
        wait = wait + wait_random(0, base_delay * 0.1)

    return _tenacity_retry(
        retry=retry_if_exception(should_retry),
        stop=stop_after_attempt(max_attempts),
        wait=wait,
        before_sleep=_log_retry(max_attempts),
        reraise=True,
    )


def _log_retry(max_attempts: int) -> Callable[[RetryCallState], None]:
    def before_sleep(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        logger.bind(component="retry").warning(
            "Retry {n}/{total} after {error_type}: {error}. Waiting {delay:.1f}s",
            n=state.attempt_number,
            total=max_attempts,
            error_type=type(error).__name__,
            error=error,
            delay=state.next_action.sleep if state.next_action else 0.0,
        )

    return before_sleep


# =============================================================================
# Predicates
# =============================================================================


def on_status_code(*codes: int) -> RetryPredicate:
    """Retry when an ``APIError`` carries one of ``codes``."""

    def predicate(e: BaseException) -> bool:
        return isinstance(e, APIError) and e.status_code in codes

    return predicate


def on_transport_error(e: BaseException) -> bool:
    return isinstance(e, TransportError)


def any_of(*predicates: RetryPredicate) -> RetryPredicate:
    def combined(e: BaseException) -> bool:
        return any(p(e) for p in predicates)

    return combined


transient: RetryPredicate = any_of(on_transport_error, on_status_code(429, 502, 503, 504))
