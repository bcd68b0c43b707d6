"""Synchronous command dispatch with optimistic-concurrency retries.

Aggregates are versioned. When two requests load the same Equipment, Order
or Installation and both try to persist, the second commit fails with
``ExpectedVersionError`` and its unit of work is rolled back. Re-running the
command on fresh state turns that into last-write-wins for plain fields,
keeps every status-history entry, and re-checks stock before reserving it.
"""

import os

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)

DEFAULT_ATTEMPTS = 3


def _max_attempts() -> int:
    return max(1, int(os.environ.get("ORDER_WRITE_RETRIES", DEFAULT_ATTEMPTS)))


def dispatch(command):
    """Process ``command`` and return the handler's result."""
    attempts = _max_attempts()
    for attempt in range(1, attempts + 1):
        try:
            return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError:
            if attempt == attempts:
                logger.warning(
                    "Concurrent update conflict, giving up",
                    command=command.__class__.__name__,
                    attempts=attempts,
                )
                raise
            logger.info(
                "Concurrent update conflict, retrying",
                command=command.__class__.__name__,
                attempt=attempt,
            )
