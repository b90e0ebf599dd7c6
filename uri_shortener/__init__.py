"""
Persistent, reversible URI shortening.

    secret = new_letter_ordering()  # store it somewhere safe
    shortener = URIShortener(
        secret=secret,
        prefix="https://go.mydomain.test/short",
        store_location="/opt/myApp/uris.db",
    )
    short = shortener.shorten("https://mydomain.test/somePath")
    long = shortener.lengthen(short)
"""

from uri_shortener.exceptions import (
    ConfigurationError,
    ConstraintViolation,
    DuplicateCipher,
    DuplicateURI,
    MigrationConflict,
    ShortenerError,
    StorageUnavailable,
    TooManyAttempts,
)
from uri_shortener.services import (
    URIShortener,
    cipher,
    decipher,
    dedupe_alphabet,
    migrate,
    new_letter_ordering,
)
from uri_shortener.storage import StoreRegistry, URIStore

__all__ = [
    "URIShortener",
    "StoreRegistry",
    "URIStore",
    "cipher",
    "decipher",
    "dedupe_alphabet",
    "migrate",
    "new_letter_ordering",
    "ShortenerError",
    "ConfigurationError",
    "StorageUnavailable",
    "ConstraintViolation",
    "DuplicateURI",
    "DuplicateCipher",
    "TooManyAttempts",
    "MigrationConflict",
]
