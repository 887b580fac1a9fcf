import functools
import logging
import time
import warnings
from typing import Callable

from cachetools.func import ttl_cache

logger = logging.getLogger("acadnet.performance")

# calls slower than this are logged at INFO, the rest at DEBUG
SLOW_CALL_MS = 500
RATELIMIT_SECONDS = 60


def setup_logs(level=logging.DEBUG):
    warnings.simplefilter("default")
    logging.getLogger("acadnet").setLevel(level)
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def time_it(func):
    """Log how long an async endpoint took"""

    @functools.wraps(func)
    async def timed(*args, **kwargs):
        started = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            log = logger.info if elapsed_ms >= SLOW_CALL_MS else logger.debug
            log(f"{func.__name__} completed in {humanize_milliseconds(elapsed_ms)}")

    return timed


def humanize_milliseconds(elapsed) -> str:
    """Millisecond amounts for the logs: `1,500 ms.`, `30"`, `30.0"` or `1'5"`"""
    elapsed = int(elapsed)
    if elapsed <= 5000:
        return f"{elapsed:,} ms."
    seconds = elapsed / 1000
    if seconds >= 60:
        minutes, rest = divmod(int(seconds), 60)
        return f"{minutes}'{rest}\""
    if seconds.is_integer():
        return f'{int(seconds)}"'
    return f'{seconds:.1f}"'


@functools.cache
def _limiter(delay: int) -> Callable:
    @ttl_cache(maxsize=1024, ttl=delay)
    def call(logger_method, message):
        logger_method(message)

    return call


def ratelimited_log(delay_or_fn: int | Callable, msg=None):
    """Emit the same message at most once every `delay` seconds.

    ratelimited_log(logger.warning, "text") logs now, with the default delay;
    ratelimited_log(300) returns the limited caller: call(logger.warning, "text")
    """
    if callable(delay_or_fn):
        return _limiter(RATELIMIT_SECONDS)(delay_or_fn, msg)
    return _limiter(delay_or_fn)
