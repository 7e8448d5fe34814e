"""Reusable decorators for tokenizer utilities."""

import time
import functools
import logging
from typing import Callable

log = logging.getLogger(__name__)


def measure_time(func: Callable) -> Callable:
    """Log execution time for the wrapped callable."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        """Call ``func`` and log elapsed time, at debug level if it raised."""
        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception:
            elapsed = time.perf_counter() - start
            log.debug(f"{func.__qualname__} failed after {elapsed * 1000:.1f} ms")
            raise
        elapsed = time.perf_counter() - start
        log.info(f"{func.__qualname__} completed in {elapsed * 1000:.1f} ms")
        return result

    return wrapper
