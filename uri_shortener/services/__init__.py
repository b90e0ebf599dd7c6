from .ciphers import (
    CipherStrategy,
    RotatingAlphabetCipher,
    cipher,
    decipher,
    dedupe_alphabet,
    new_letter_ordering,
)
from .migration import migrate
from .shortener import URIShortener

__all__ = [
    "CipherStrategy",
    "RotatingAlphabetCipher",
    "cipher",
    "decipher",
    "dedupe_alphabet",
    "new_letter_ordering",
    "migrate",
    "URIShortener",
]
