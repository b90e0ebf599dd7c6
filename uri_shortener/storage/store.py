"""
Persistent URI store.

Maps long URIs to row ids, row ids to cached cipher tokens, and keeps the
creation timestamp used for pruning. The prefix registry lives here too:
prefixes are rows in their own table, referenced by every URI record.

Every public method is one session and at most one commit. Uniqueness is
enforced by the database; IntegrityError is translated into the
package's ConstraintViolation types where the cause is known.
"""

import logging
from typing import Iterator, Optional

from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from uri_shortener.exceptions import ConstraintViolation, DuplicateCipher, DuplicateURI
from uri_shortener.models import Prefix, URIRecord

logger = logging.getLogger(__name__)


class URIStore:
    """
    SQLAlchemy-backed store for prefixes and URI records.

    Obtain instances from StoreRegistry rather than constructing them
    directly, so all users of a location share one engine.
    """

    def __init__(self, engine: Engine, location: str):
        self.engine = engine
        self.location = location
        self.session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False
        )

    def session(self) -> Session:
        return self.session_factory()

    # Prefix registry

    def find_prefix_id(self, prefix: str) -> Optional[int]:
        with self.session() as db:
            row = db.query(Prefix.id).filter(Prefix.prefix == prefix).first()
            return row.id if row else None

    def ensure_prefix(self, prefix: str) -> int:
        """
        Return the id of a prefix, inserting it on first use.

        A losing insert race shows up as an IntegrityError; the winner's
        row is then re-read.
        """
        prefix_id = self.find_prefix_id(prefix)
        if prefix_id is not None:
            return prefix_id

        with self.session() as db:
            row = Prefix(prefix=prefix)
            db.add(row)
            try:
                db.commit()
                logger.info("Registered prefix '%s' with id %s", prefix, row.id)
                return row.id
            except IntegrityError:
                db.rollback()
                logger.info("Prefix '%s' registered concurrently, re-reading", prefix)

        prefix_id = self.find_prefix_id(prefix)
        if prefix_id is None:
            raise ConstraintViolation(f"Could not register prefix '{prefix}'")
        return prefix_id

    def delete_prefix(self, prefix: str) -> bool:
        """
        Delete a prefix and, through ON DELETE CASCADE, all of its URI records.
        Administrative cleanup only.
        """
        with self.session() as db:
            deleted = db.query(Prefix).filter(Prefix.prefix == prefix).delete(
                synchronize_session=False
            )
            db.commit()
        if deleted:
            logger.info("Deleted prefix '%s' and its URI records", prefix)
        return bool(deleted)

    # URI records

    def find_by_uri(self, uri: str) -> Optional[Row]:
        """
        Exact-match lookup.

        Returns:
            Row with id, cipher (possibly None) and prefix, or None
        """
        with self.session() as db:
            return (
                db.query(URIRecord.id, URIRecord.cipher, Prefix.prefix)
                .join(Prefix, URIRecord.prefix_id == Prefix.id)
                .filter(URIRecord.uri == uri)
                .first()
            )

    def find_uri_by_id(self, row_id: int) -> Optional[str]:
        with self.session() as db:
            row = db.query(URIRecord.uri).filter(URIRecord.id == row_id).first()
            return row.uri if row else None

    def insert(self, uri: str, prefix_id: int, created: Optional[int]) -> int:
        """
        Insert a new URI record with no cipher yet.

        Raises:
            DuplicateURI: If another writer stored the same URI first
        """
        with self.session() as db:
            record = URIRecord(uri=uri, prefix_id=prefix_id, created=created)
            db.add(record)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                if db.query(URIRecord.id).filter(URIRecord.uri == uri).first():
                    raise DuplicateURI(uri) from e
                raise
            return record.id

    def set_cipher(self, row_id: int, cipher: str) -> bool:
        """
        Cache the cipher token of a row.

        Returns:
            False if the row no longer exists

        Raises:
            DuplicateCipher: If a different row already owns the token
        """
        with self.session() as db:
            try:
                updated = db.query(URIRecord).filter(URIRecord.id == row_id).update(
                    {URIRecord.cipher: cipher},
                    synchronize_session=False
                )
                db.commit()
            except IntegrityError as e:
                db.rollback()
                owner = db.query(URIRecord.id).filter(URIRecord.cipher == cipher).first()
                if owner is not None and owner.id != row_id:
                    raise DuplicateCipher(cipher, row_id) from e
                raise
            return bool(updated)

    def find_by_cipher(self, cipher: str, prefix: str) -> Optional[str]:
        """Return the URI behind a token, only if it lives under this prefix."""
        with self.session() as db:
            row = (
                db.query(URIRecord.uri)
                .join(Prefix, URIRecord.prefix_id == Prefix.id)
                .filter(URIRecord.cipher == cipher, Prefix.prefix == prefix)
                .first()
            )
            return row.uri if row else None

    def delete_older_than(self, cutoff: int) -> int:
        """Delete records created strictly before the cutoff. Returns the count."""
        with self.session() as db:
            deleted = db.query(URIRecord).filter(URIRecord.created < cutoff).delete(
                synchronize_session=False
            )
            db.commit()
        logger.info("Pruned %d URI records created before %d from %s", deleted, cutoff, self.location)
        return deleted

    def count(self) -> int:
        with self.session() as db:
            return db.query(URIRecord).count()

    # Bulk transfer support

    def iter_records(self, batch_size: int = 500) -> Iterator[Row]:
        """
        Yield every record ordered by id, with its prefix string.
        Pages by id so each batch is a separate short read.
        """
        last_id = 0
        while True:
            with self.session() as db:
                batch = (
                    db.query(
                        URIRecord.id,
                        URIRecord.uri,
                        URIRecord.cipher,
                        URIRecord.created,
                        Prefix.prefix
                    )
                    .join(Prefix, URIRecord.prefix_id == Prefix.id)
                    .filter(URIRecord.id > last_id)
                    .order_by(URIRecord.id)
                    .limit(batch_size)
                    .all()
                )
            if not batch:
                return
            yield from batch
            last_id = batch[-1].id

    def copy_record(
        self,
        row_id: int,
        uri: str,
        prefix_id: int,
        cipher: Optional[str],
        created: Optional[int]
    ) -> None:
        """Insert a record with an explicit id, cipher and timestamp."""
        with self.session() as db:
            db.add(URIRecord(
                id=row_id,
                uri=uri,
                prefix_id=prefix_id,
                cipher=cipher,
                created=created
            ))
            db.commit()

    def __repr__(self) -> str:
        return f"URIStore(location={self.location!r})"
