"""
Cipher token generation for URI shortening.
Uses Strategy Pattern so the service layer only sees generate()/reverse().

The algorithm is a crude substitution cipher over a secret alphabet:
for a row id, the token starts at secret[id % len(secret)] and takes
consecutive characters (wrapping around) until it is
id // len(secret) + 2 characters long.

Every len(secret) consecutive ids share a token length, and within that
run the first character differs, so ids never collide as long as the
secret has no repeated characters.
"""

import random
import string
from abc import ABC, abstractmethod

_sysrand = random.SystemRandom()


def cipher(secret: str, id: int) -> str:
    """Return the cipher token for a non-negative row id."""
    length = len(secret)
    div, rem = divmod(id, length)
    return "".join(secret[(rem + k) % length] for k in range(div + 2))


def decipher(secret: str, token: str) -> int:
    """
    Recover the row id a token was generated from.

    Raises:
        ValueError: If the token could not have come from cipher() under this secret
    """
    length = len(secret)
    if len(token) < 2:
        raise ValueError(f"Token too short: '{token}'")

    rem = secret.find(token[0])
    if rem < 0:
        raise ValueError(f"Token '{token}' contains characters outside the secret")

    row_id = (len(token) - 2) * length + rem
    if cipher(secret, row_id) != token:
        raise ValueError(f"Token '{token}' is not a valid cipher for this secret")
    return row_id


def new_letter_ordering() -> str:
    """
    Random ordering of a-zA-Z, suitable as a secret.

    Tokens from such a secret can be read out in the NATO phonetic alphabet.
    Store the result somewhere safe: a store is useless without its secret.
    """
    letters = list(string.ascii_lowercase + string.ascii_uppercase)
    _sysrand.shuffle(letters)
    return "".join(letters)


def dedupe_alphabet(secret: str) -> str:
    """Drop repeated characters, keeping the first occurrence of each."""
    return "".join(dict.fromkeys(secret))


class CipherStrategy(ABC):
    """Abstract base class for cipher token strategies"""

    @abstractmethod
    def generate(self, row_id: int) -> str:
        """
        Generate the token for a row.

        Args:
            row_id: The database ID of the URI record

        Returns:
            Cipher token, unique per row id
        """
        pass

    @abstractmethod
    def reverse(self, token: str) -> int:
        """Return the row id a token was generated from"""
        pass


class RotatingAlphabetCipher(CipherStrategy):
    """
    Rotation of a secret alphabet, salted by a fixed offset.

    The offset shifts every id before ciphering, so it also lengthens
    every token by offset // len(secret) characters.

    Pros: No collisions, no DB queries, reversible with the secret
    Cons: Token length grows linearly with the row id
    """

    def __init__(self, secret: str, offset: int = 0):
        self.secret = secret
        self.offset = offset

    def generate(self, row_id: int) -> str:
        return cipher(self.secret, row_id + self.offset)

    def reverse(self, token: str) -> int:
        row_id = decipher(self.secret, token) - self.offset
        if row_id < 0:
            raise ValueError(f"Token '{token}' is below the configured offset")
        return row_id

    def __repr__(self) -> str:
        # The secret is a credential; keep it out of reprs and logs
        return f"{type(self).__name__}(alphabet_size={len(self.secret)}, offset={self.offset})"
