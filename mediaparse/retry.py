import functools
import logging
import time
from typing import Callable, Optional, Sequence

from mediaparse.errors import FetchError, is_retryable


logger = logging.getLogger(__name__)

LISTING_RETRY_DELAYS = (20, 5, 60)


def with_retries(
    func: Callable,
    delays: Sequence[float] = LISTING_RETRY_DELAYS,
    sleep: Optional[Callable[[float], None]] = None,
    should_retry: Callable[[BaseException], bool] = is_retryable,
) -> Callable:
    """
    Wrap a fetch-like callable so that a FetchError is retried after each
    delay in ``delays``; the error of the final attempt is re-raised.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        target = args[0] if args else kwargs.get("url")
        for attempt, delay in enumerate(delays, start=1):
            try:
                return func(*args, **kwargs)
            except FetchError as e:
                if not should_retry(e):
                    raise
                logger.warning(
                    f"Attempt {attempt} for {target} failed: {e}. "
                    f"Retrying in {delay}s"
                )
                (sleep or time.sleep)(delay)
        return func(*args, **kwargs)

    return wrapper
