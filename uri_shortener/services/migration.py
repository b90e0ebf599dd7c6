"""
Bulk transfer of URI records between stores.

Records keep their row id, cipher and creation time, so a short URL issued
from the source resolves to the same URI from the target, and tokens
computed later from the same ids under the same secret stay consistent.
"""

import logging
from typing import Dict

from sqlalchemy.exc import IntegrityError

from uri_shortener.exceptions import MigrationConflict
from uri_shortener.storage import URIStore

logger = logging.getLogger(__name__)


def migrate(source: URIStore, target: URIStore, batch_size: int = 500) -> int:
    """
    Copy every URI record from source into target.

    Records whose URI is already in the target are skipped.

    Returns:
        Number of records copied

    Raises:
        MigrationConflict: If a row id or cipher is already used by a different URI in the target
    """
    prefix_ids: Dict[str, int] = {}
    copied = 0
    skipped = 0

    for record in source.iter_records(batch_size=batch_size):
        if target.find_by_uri(record.uri) is not None:
            skipped += 1
            continue

        existing = target.find_uri_by_id(record.id)
        if existing is not None:
            raise MigrationConflict(
                f"Row {record.id} holds '{existing}' in {target.location}, "
                f"cannot copy '{record.uri}'"
            )

        if record.prefix not in prefix_ids:
            prefix_ids[record.prefix] = target.ensure_prefix(record.prefix)

        try:
            target.copy_record(
                row_id=record.id,
                uri=record.uri,
                prefix_id=prefix_ids[record.prefix],
                cipher=record.cipher,
                created=record.created,
            )
        except IntegrityError as e:
            raise MigrationConflict(
                f"Could not copy row {record.id} ('{record.uri}') into {target.location}"
            ) from e
        copied += 1

    logger.info(
        "Migrated %d URI records from %s to %s (%d already present)",
        copied, source.location, target.location, skipped
    )
    return copied
