"""Removal of a file record across the bucket and the metadata index."""

import logging
from dataclasses import dataclass
from typing import Optional

from file_host.adapters.bucket import BucketStore
from file_host.adapters.metadata import MetadataStore
from file_host.identifiers import BucketObject, parse_file_identifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurgeResult:
    success: bool
    file_id: str
    error: Optional[str] = None


def purge_file_record(
    file_id: str,
    metadata_store: MetadataStore,
    bucket_store: Optional[BucketStore] = None,
) -> PurgeResult:
    """
    Delete a file by id.

    Bucket-backed ids (``r2:<key>``) first lose their bucket object; a failure
    there is logged and the metadata record is deleted anyway, so the file
    stops being reachable through this service even if the bytes remain.
    Discord-backed ids only lose their metadata record: the message itself is
    left in the channel.
    """
    logger.info(f"Deleting file: {file_id}")
    try:
        identifier = parse_file_identifier(file_id)

        if isinstance(identifier, BucketObject):
            if not identifier.key:
                logger.warning(f"Bucket id {file_id!r} has no key, skipping object delete")
            elif bucket_store is None:
                logger.warning(f"No bucket configured, skipping object delete for {identifier.key}")
            else:
                try:
                    bucket_store.delete(identifier.key)
                except Exception as e:
                    logger.error(f"Bucket delete error for {identifier.key}: {e}")

        metadata_store.delete(str(identifier))
    except Exception as e:
        logger.error(f"Delete error for {file_id}: {e}")
        return PurgeResult(success=False, file_id=file_id, error=str(e))

    return PurgeResult(success=True, file_id=file_id)
