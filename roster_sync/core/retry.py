"""Retry helpers shared by every backend call of the roster sync."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, TypeVar

if TYPE_CHECKING:
    from roster_sync.core.alerts import AlertSink

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY = 0.5


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = DEFAULT_ATTEMPTS
    initial_delay: float = DEFAULT_INITIAL_DELAY


def backoff_delay(attempt: int, initial_delay: float) -> float:
    """Delay to wait after the given (1-based) failed attempt."""
    return initial_delay * (2 ** (attempt - 1))


def retry_with_backoff(
    operation: Callable[[], T],
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    description: Optional[str] = None,
) -> T:
    """Call `operation` until it succeeds or `attempts` calls have failed.

    The delay doubles after every failure. Once the ceiling is reached the
    exception raised by the last attempt propagates unchanged.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    label = description or getattr(operation, "__name__", "operation")
    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except Exception as exc:
            if attempt >= attempts:
                logger.error("%s exhausted retries after %d attempts: %s", label, attempt, exc)
                raise
            sleep_for = backoff_delay(attempt, initial_delay)
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %.2fs: %s",
                label,
                attempt,
                attempts,
                sleep_for,
                exc,
            )
            time.sleep(sleep_for)


def retry_with_alert(
    operation: Callable[[], T],
    *,
    service: str,
    alert_sink: Optional["AlertSink"] = None,
    attempts: int = DEFAULT_ATTEMPTS,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
) -> T:
    """Like `retry_with_backoff`, recording one alert when the retries run out."""
    try:
        return retry_with_backoff(
            operation,
            attempts=attempts,
            initial_delay=initial_delay,
            description=service,
        )
    except Exception as exc:
        if alert_sink is not None:
            alert_sink.record_failure(service, exc, attempts)
        raise
