"""
Error taxonomy for the URI shortener.

Not-found is never an exception: lookups return None.
"""


class ShortenerError(Exception):
    """Base class for every error raised by this package"""
    pass


class ConfigurationError(ShortenerError):
    """A construction parameter is missing or invalid"""
    pass


class StorageUnavailable(ShortenerError):
    """The backing store could not be created or opened"""
    pass


class ConstraintViolation(ShortenerError):
    """A uniqueness constraint in the store rejected a write"""
    pass


class DuplicateURI(ConstraintViolation):
    """
    The URI is already stored.

    Expected when two writers shorten the same new URI at once;
    the loser re-reads the winner's row.
    """

    def __init__(self, uri: str):
        super().__init__(f"URI already stored: {uri}")
        self.uri = uri


class DuplicateCipher(ConstraintViolation, ConfigurationError):
    """
    Another row already owns this cipher text.

    Only possible with a secret containing repeated characters or with a
    store that was filled under a different secret/offset. Never retried.
    """

    def __init__(self, cipher: str, row_id: int):
        super().__init__(
            f"Cipher '{cipher}' for row {row_id} is already assigned to another row. "
            f"Check that the secret has no repeated characters and matches the store."
        )
        self.cipher = cipher
        self.row_id = row_id


class TooManyAttempts(ShortenerError):
    """shorten() kept seeing conflicting state from the store"""
    pass


class MigrationConflict(ShortenerError):
    """A row id in the target store belongs to a different URI"""
    pass
