"""
Cleanup task for the URI shortener.

Schedule this periodically to prune records older than
settings.prune_max_age_days.

Usage:
    python -m uri_shortener.cleanup
"""

import logging
import sys
import time
from typing import Optional

from uri_shortener.config import Settings, settings
from uri_shortener.logging_config import configure_logging
from uri_shortener.storage import StoreRegistry

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


def run_cleanup(
    app_settings: Settings = settings,
    registry: Optional[StoreRegistry] = None,
    now: Optional[float] = None
) -> int:
    """
    Prune old records from the configured store.

    Only the store location is needed: pruning works without the secret.

    Returns:
        Number of records removed
    """
    owns_registry = registry is None
    if owns_registry:
        registry = StoreRegistry()
    now = time.time() if now is None else now
    cutoff = int(now) - app_settings.prune_max_age_days * SECONDS_PER_DAY

    try:
        removed = registry.get(app_settings.store_location).delete_older_than(cutoff)
        logger.info(
            "Cleaned up %d URI records (older than %d days)",
            removed, app_settings.prune_max_age_days
        )
        return removed
    finally:
        if owns_registry:
            registry.dispose()


if __name__ == "__main__":
    configure_logging(settings.log_level)
    run_cleanup()
    sys.exit(0)
