"""
Database models for the URI shortener.

The secret alphabet is deliberately absent: it is never persisted.
"""

from .base import Base
from .uri import Prefix, URIRecord

__all__ = ["Base", "Prefix", "URIRecord"]
