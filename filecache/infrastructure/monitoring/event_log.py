"""Listener writing cache events to the log.

Pass ``log_cache_event`` as the ``listener`` of a FileCacheService to get a
log line per hit, miss, expiry and repair.
"""

import logging
from dataclasses import asdict

from filecache.domain.events.cache_events import CacheItemRepaired

logger = logging.getLogger(__name__)


def log_cache_event(event: object) -> None:
    """Logs a cache event; repairs at WARNING, everything else at DEBUG."""
    fields = asdict(event)
    fields.pop("timestamp", None)
    details = ", ".join(f"{k}={v}" for k, v in fields.items())
    level = logging.WARNING if isinstance(event, CacheItemRepaired) else logging.DEBUG
    logger.log(level, f"{type(event).__name__}: {details}")
