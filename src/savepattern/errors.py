"""
Errors - typed outcomes for the pattern core.

Provides:
- Specific exception types for each failure mode (all rooted at SavePatternError)
- Retry with exponential backoff for transient storage failures
"""

import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar


class SavePatternError(Exception):
    """Base class for all savepattern errors."""
    pass


class InvalidPatternKind(SavePatternError, ValueError):
    """Pattern kind is not one of the built-in tiling rules."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown pattern kind: {value!r}")


class DecodeError(SavePatternError, ValueError):
    """Bytes do not decode to a valid fixed-size raster image."""
    pass


class IndexOutOfRange(SavePatternError, IndexError):
    """Gallery position outside the current collection bounds."""

    def __init__(self, index, length: int):
        self.index = index
        self.length = length
        super().__init__(f"Gallery index {index} out of range for {length} entries")


class StorageError(SavePatternError):
    """Persisted blob could not be written. The previous blob is left in place."""
    pass


@dataclass
class RetryConfig:
    """Configuration for retry logic."""
    max_attempts: int = 3
    initial_delay: float = 0.05  # seconds
    max_delay: float = 1.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = True


T = TypeVar('T')


def retry_with_backoff(
    func: Callable[[], T],
    config: Optional[RetryConfig] = None,
    error_filter: Optional[Callable[[Exception], bool]] = None
) -> T:
    """
    Retry a function with exponential backoff.

    Args:
        func: Function to retry (no arguments)
        config: Retry configuration
        error_filter: Only errors for which this returns True are retried;
            anything else propagates immediately

    Returns:
        Function result

    Raises:
        Last exception if all retries fail
    """
    if config is None:
        config = RetryConfig()

    last_error = None

    for attempt in range(config.max_attempts):
        try:
            return func()
        except Exception as e:
            last_error = e

            if error_filter and not error_filter(e):
                raise

            if attempt == config.max_attempts - 1:
                break

            delay = min(
                config.initial_delay * (config.exponential_base ** attempt),
                config.max_delay
            )
            if config.jitter:
                delay = delay * (0.5 + random.random() * 0.5)

            time.sleep(delay)

    raise last_error
