"""
Registry of open stores, keyed by store location.

One engine per location, created lazily on first use and shared by every
shortener that names the same location. The registry is an ordinary
object: whoever builds shorteners owns it and passes it in, so tests can
use as many isolated registries as they like.
"""

import logging
import threading
from typing import Dict

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from uri_shortener.exceptions import StorageUnavailable
from uri_shortener.models import Base
from uri_shortener.storage.store import URIStore

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


def database_url(location: str) -> str:
    """
    Turn a store location into a SQLAlchemy URL.

    Accepts a full URL ("postgresql://..."), ":memory:" or a file path.
    """
    if "://" in location:
        return location
    if location == MEMORY:
        return "sqlite://"
    return f"sqlite:///{location}"


def create_store_engine(url: str) -> Engine:
    """
    Create an engine for a store URL.

    SQLite connections get foreign keys enabled (needed for the prefix
    cascade) and file databases run in WAL mode. In-memory databases share
    a single connection, otherwise each connection would see an empty db.
    """
    sa_url = make_url(url)
    if sa_url.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    in_memory = sa_url.database in (None, "", MEMORY)
    if in_memory:
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )
    else:
        engine = create_engine(url, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        if not in_memory:
            cursor.execute("PRAGMA journal_mode = WAL")
        cursor.close()

    return engine


class StoreRegistry:
    """
    Lazily opened stores, one per location.

    Stores stay open until dispose() is called.
    """

    def __init__(self):
        self._stores: Dict[str, URIStore] = {}
        self._lock = threading.Lock()

    def get(self, location: str) -> URIStore:
        """
        Return the store for a location, opening it on first use.

        Raises:
            StorageUnavailable: If the store cannot be created or opened
        """
        with self._lock:
            store = self._stores.get(location)
            if store is None:
                store = self._open(location)
                self._stores[location] = store
            return store

    def _open(self, location: str) -> URIStore:
        try:
            engine = create_store_engine(database_url(location))
        except SQLAlchemyError as e:
            raise StorageUnavailable(f"Invalid store location '{location}': {e}") from e

        try:
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as e:
            engine.dispose()
            raise StorageUnavailable(f"Could not open store '{location}': {e}") from e

        logger.info("Opened URI store at %s", location)
        return URIStore(engine, location)

    def dispose(self) -> None:
        """Close every engine and forget all stores"""
        with self._lock:
            for store in self._stores.values():
                store.engine.dispose()
            self._stores.clear()

    def __contains__(self, location: str) -> bool:
        return location in self._stores

    def __len__(self) -> int:
        return len(self._stores)
