#!/usr/bin/env python3
"""
Utility functions for ignr.

Path expansion, date stamps and the retry decorator used for remote
template requests.
"""

import os
import time
import random
import logging
import functools
from datetime import datetime, timezone
from pathlib import Path
from typing import Tuple, Type, Union, Callable

import requests


logger = logging.getLogger(__name__)

# Below DEBUG; enabled with --trace or -vvv.
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def expand_path(path: Union[str, Path]) -> Path:
    """
    Expand ``~`` and environment variables in a path.

    Args:
        path: Path or string such as ``~/templates`` or ``$HOME/templates``

    Returns:
        Path: Expanded path (not resolved)

    Examples:
        >>> expand_path("~/x") == Path.home() / "x"
        True
    """
    return Path(os.path.expandvars(os.path.expanduser(str(path))))


def get_current_date() -> str:
    """
    Get the current UTC date as ``YYYY-MM-DD``.

    Returns:
        str: Today's date in UTC
    """
    return datetime.now(timezone.utc).strftime('%Y-%m-%d')


def is_valid_name(name: str) -> bool:
    """A template identifier must be a plain file stem."""
    return bool(name) and name not in ('.', '..') and not any(c in name for c in ('/', '\\', '\0'))


def normalize_names(names) -> list:
    """Lowercase and strip template identifiers, dropping empty and invalid ones."""
    result = []
    for name in names:
        if not name or not name.strip():
            continue
        name = name.strip().lower()
        if not is_valid_name(name):
            logger.warning("Ignoring invalid template name: %r", name)
            continue
        result.append(name)
    return result


def exponential_backoff_retry(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    jitter: bool = True
) -> Callable:
    """
    Decorator that implements exponential backoff retry logic.

    The ``max_retries`` keyword may also be passed to the decorated function
    call to override the decorator default for that call.

    Args:
        max_retries: Maximum number of retry attempts (default: 3)
        initial_delay: Initial delay in seconds before first retry (default: 1.0)
        backoff_factor: Multiplier for exponential backoff (default: 2.0)
        exceptions: Tuple of exception types to retry on (default: (Exception,))
        jitter: Whether to add random jitter to delays (default: True)

    Returns:
        Decorated function with retry logic

    Examples:
        @exponential_backoff_retry(max_retries=3, initial_delay=0.5)
        def fetch():
            pass
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            retries = kwargs.pop('max_retries', max_retries)

            for attempt in range(retries + 1):  # +1 for initial attempt
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == retries:
                        logger.debug("%s failed after %d attempts: %s", func.__name__, retries + 1, e)
                        raise

                    delay = initial_delay * (backoff_factor ** attempt)
                    if jitter:
                        delay += random.uniform(0, min(1.0, delay * 0.1))

                    logger.debug(
                        "%s attempt %d failed (%s), retrying in %.1fs...",
                        func.__name__, attempt + 1, e, delay
                    )
                    time.sleep(delay)

        return wrapper
    return decorator


def api_retry(max_retries: int = 2, initial_delay: float = 0.5) -> Callable:
    """
    Retry decorator for template API calls.

    Only transient transport failures (connection errors and timeouts) are
    retried; HTTP error statuses are returned to the caller unchanged.
    """
    return exponential_backoff_retry(
        max_retries=max_retries,
        initial_delay=initial_delay,
        backoff_factor=2.0,
        exceptions=(requests.exceptions.ConnectionError, requests.exceptions.Timeout),
    )
