"""Bounded retry with linear backoff for external service calls."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Tuple, Type, TypeVar

from matcher_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)
T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget, backoff step and per-attempt timeout."""

    max_attempts: int = 3
    backoff_step_seconds: float = 1.0
    timeout_seconds: float = 20.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_step_seconds < 0 or self.timeout_seconds <= 0:
            raise ValueError("backoff and timeout must be positive")

    def delay_after(self, attempt: int) -> float:
        """Seconds to wait after the given failed attempt (1-based)."""

        return attempt * self.backoff_step_seconds


def call_with_retry(
    func: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    operation: str = "external_call",
) -> T:
    """Invoke ``func`` until it succeeds or the attempt budget is spent.

    Errors outside ``retry_on`` propagate immediately. When every attempt fails
    the last error is re-raised unchanged.
    """

    attempt = 1
    while True:
        log_event(LOGGER, logging.DEBUG, "retry_state", operation=operation, state="in_flight", attempt=attempt)
        try:
            result = func()
        except retry_on as exc:
            if attempt >= policy.max_attempts:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "retry_state",
                    operation=operation,
                    state="exhausted",
                    attempts=attempt,
                    error=str(exc),
                )
                raise
            delay = policy.delay_after(attempt)
            log_event(
                LOGGER,
                logging.WARNING,
                "retry_state",
                operation=operation,
                state="retry",
                attempt=attempt,
                delay_seconds=delay,
                error=str(exc),
            )
            sleep(delay)
            attempt += 1
            continue
        log_event(LOGGER, logging.DEBUG, "retry_state", operation=operation, state="success", attempt=attempt)
        return result


__all__ = ["RetryPolicy", "call_with_retry"]
