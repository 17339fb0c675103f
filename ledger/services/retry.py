# ledger/services/retry.py
import logging
import random
import time
from typing import Callable, TypeVar

from ledger.errors import ConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_conflict(operation: Callable[[], T], retries: int = 3, delay: float = 0.05,
                      sleep: Callable[[float], None] = time.sleep) -> T:
    """
    Run a ledger operation, re-attempting it when it loses a race.

    Only retryable conflicts (serialization aborts, lock contention) are
    re-attempted, using exponential backoff with jitter. Business errors
    such as "already checked out" are raised straight away, since a retry
    would fail the same way.

    Args:
        operation: Zero-argument callable performing one guarded transaction
        retries: Maximum number of attempts
        delay: Initial delay in seconds between attempts
        sleep: Sleep function, replaceable in tests

    Returns:
        Whatever the operation returns
    """
    if retries < 1:
        raise ValueError("retries must be at least 1")

    attempt = 0
    while True:
        try:
            return operation()
        except ConflictError as e:
            attempt += 1
            if not e.retryable or attempt >= retries:
                raise
            wait = delay * random.uniform(1.0, 1.5)
            logger.warning("Attempt %d lost a race: %s. Retrying in %.3f seconds.", attempt, e, wait)
            sleep(wait)
            delay *= 2  # exponential backoff
