"""
FastAPI dependencies for dependency injection.

The registry and shortener are process-wide singletons built from
settings; tests replace them through app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends

from uri_shortener.config import settings
from uri_shortener.services.shortener import URIShortener
from uri_shortener.storage import StoreRegistry


@lru_cache()
def get_registry() -> StoreRegistry:
    """
    Get the store registry (singleton).

    @lru_cache ensures every request shares the same engines.
    """
    return StoreRegistry()


def get_shortener(registry: StoreRegistry = Depends(get_registry)) -> URIShortener:
    """
    Get a URIShortener configured from settings.

    Construction is cheap (no I/O), so a fresh instance per request is fine;
    the store behind it comes from the shared registry.
    """
    return URIShortener.from_settings(settings, registry=registry)
