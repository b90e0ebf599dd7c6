"""
Persistence for prefixes and URI records.
"""

from .store import URIStore
from .registry import StoreRegistry, database_url, MEMORY

__all__ = [
    "URIStore",
    "StoreRegistry",
    "database_url",
    "MEMORY",
]
