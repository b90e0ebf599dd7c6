import logging
import time
from typing import Callable, Optional

from uri_shortener.config import Settings
from uri_shortener.exceptions import ConfigurationError, DuplicateURI, TooManyAttempts
from uri_shortener.services.ciphers import CipherStrategy, RotatingAlphabetCipher
from uri_shortener.storage import StoreRegistry, URIStore

logger = logging.getLogger(__name__)


class URIShortener:
    """
    Shortens URIs under a prefix and resolves them back.

    Shortening is persistently memoized: the first call for a URI stores a
    row, derives the cipher token from the row id and caches it; every later
    call is a single read.

    Dependencies are injected:
    - registry: shared StoreRegistry (a private one is created if omitted)
    - clock: source of unix timestamps for the created column

    Construction validates its parameters and touches no storage; the
    store is opened on first use. secret, prefix and store_location are
    required; leaving one out (or passing an empty value) raises
    ConfigurationError naming it.

    offset is added to every row id before ciphering. Token length is
    (row_id + offset) // len(secret) + 2, so a large offset makes every
    token long: with a 52-letter secret, offset=90210 gives tokens of
    roughly 1,736 characters. Keep it below a few multiples of
    len(secret) if short aliases matter.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        prefix: Optional[str] = None,
        store_location: Optional[str] = None,
        offset: int = 0,
        registry: Optional[StoreRegistry] = None,
        max_attempts: int = 5,
        clock: Callable[[], float] = time.time
    ):
        for name, value in (
            ("secret", secret),
            ("prefix", prefix),
            ("store_location", store_location),
        ):
            if not value:
                raise ConfigurationError(f"{name} required")

        if len(set(secret)) != len(secret):
            raise ConfigurationError(
                "secret must not repeat characters (see ciphers.dedupe_alphabet)"
            )

        prefix = prefix.rstrip("/")
        if not prefix:
            raise ConfigurationError("prefix must not consist of slashes only")

        offset = offset or 0
        if offset < 0:
            raise ConfigurationError("offset must be non-negative")
        if max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")

        self.prefix = prefix
        self.store_location = store_location
        self.offset = offset
        self.max_attempts = max_attempts
        self.strategy: CipherStrategy = RotatingAlphabetCipher(secret, offset)
        self.registry = registry if registry is not None else StoreRegistry()
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        registry: Optional[StoreRegistry] = None
    ) -> "URIShortener":
        """Build a shortener from application settings"""
        return cls(
            secret=settings.secret,
            prefix=settings.prefix,
            store_location=settings.store_location,
            offset=settings.offset,
            registry=registry,
            max_attempts=settings.max_attempts,
        )

    @property
    def store(self) -> URIStore:
        return self.registry.get(self.store_location)

    def shorten(self, uri: str) -> str:
        """
        Return the short URL for a URI, creating it if needed.

        Process (bounded loop):
        1. Look the URI up; if its cipher is cached, return it (no writes)
        2. If the row exists without a cipher, derive it from the row id and cache it
        3. Otherwise register the prefix, insert the row, and go back to 1

        The returned URL is built from the prefix the row is stored under.
        URIs are unique across prefixes, so a URI first shortened under
        another prefix keeps that prefix's alias.

        Raises:
            DuplicateCipher: If the token is already owned by another row
            TooManyAttempts: If the store keeps returning conflicting state
        """
        store = self.store
        conflicts = 0

        while conflicts < self.max_attempts:
            row = store.find_by_uri(uri)

            if row is None:
                prefix_id = store.ensure_prefix(self.prefix)
                try:
                    row_id = store.insert(uri, prefix_id, int(self.clock()))
                    logger.debug("Stored new URI as row %s under prefix id %s", row_id, prefix_id)
                except DuplicateURI:
                    logger.info("URI inserted concurrently, re-reading")

                row = store.find_by_uri(uri)
                if row is None:
                    conflicts += 1
                    logger.info(
                        "URI missing right after insert (conflict %d/%d)",
                        conflicts, self.max_attempts
                    )
                    continue

            if row.cipher:
                return self._join(row.prefix, row.cipher)

            token = self.strategy.generate(row.id)
            if store.set_cipher(row.id, token):
                logger.debug("Assigned cipher to row %s", row.id)
                return self._join(row.prefix, token)

            # Row vanished between read and update (pruned concurrently)
            conflicts += 1
            logger.info(
                "Row %s disappeared before its cipher was stored (conflict %d/%d)",
                row.id, conflicts, self.max_attempts
            )

        raise TooManyAttempts(
            f"Could not shorten URI after {self.max_attempts} conflicting store results"
        )

    def lengthen(self, short_url: str) -> Optional[str]:
        """
        Resolve a short URL back to its original URI.

        Returns None for URLs outside this shortener's prefix, unknown
        tokens, and aliases removed by pruning.
        """
        base = self.prefix + "/"
        if not short_url.startswith(base):
            return None

        token = short_url[len(base):]
        if not token:
            return None

        return self.store.find_by_cipher(token, self.prefix)

    def prune_before(self, when: int) -> bool:
        """
        Remove every URI record created before the unix timestamp `when`.

        Aliases of pruned records stop resolving. Re-shortening a pruned URI
        creates a new row and therefore a new alias.
        """
        self.store.delete_older_than(int(when))
        return True

    def _join(self, prefix: str, token: str) -> str:
        return f"{prefix}/{token}"

    def __repr__(self) -> str:
        return (
            f"URIShortener(prefix={self.prefix!r}, "
            f"store_location={self.store_location!r}, offset={self.offset})"
        )
