"""
File service: the glue between the HTTP layer, the Discord coordinators,
the bucket and the metadata index.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

import requests

from file_host.adapters.bucket import BucketStore
from file_host.adapters.metadata import MetadataStore
from file_host.config.settings import DiscordConfig, Settings
from file_host.discord import (
    check_discord_connection,
    delete_discord_message,
    get_discord_file,
    upload_to_discord,
)
from file_host.discord.models import ConnectionStatus, LookupStatus
from file_host.discord.transport import DEFAULT_TIMEOUT
from file_host.errors import FileNotFoundInStoreError, FileStorageError
from file_host.identifiers import (
    BucketObject,
    new_bucket_identifier,
    new_discord_identifier,
    parse_file_identifier,
)
from file_host.services.purger import PurgeResult, purge_file_record

logger = logging.getLogger(__name__)

BUCKET_NOT_CONFIGURED_MESSAGE = "R2 bucket is not configured"


class StorageTarget(str, Enum):
    DISCORD = "discord"
    R2 = "r2"


@dataclass(frozen=True)
class StoredFile:
    file_id: str
    record: Dict[str, Any]


@dataclass
class ResolvedFile:
    """Either a redirect target (``url``) or a bucket body to stream."""
    file_id: str
    filename: Optional[str] = None
    content_type: Optional[str] = None
    url: Optional[str] = None
    body: Any = None


class FileService:
    def __init__(
        self,
        discord_config: DiscordConfig,
        metadata_store: MetadataStore,
        bucket_store: Optional[BucketStore] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.discord_config = discord_config
        self.metadata_store = metadata_store
        self.bucket_store = bucket_store
        self.session = session
        self.timeout = timeout

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        metadata_store: Optional[MetadataStore] = None,
        bucket_store: Optional[BucketStore] = None,
        session: Optional[requests.Session] = None,
    ) -> "FileService":
        if metadata_store is None:
            metadata_store = MetadataStore(settings.metadata_db_path)
            metadata_store.init_store()
        return cls(
            discord_config=settings.discord_config,
            metadata_store=metadata_store,
            bucket_store=bucket_store if bucket_store is not None else BucketStore.from_settings(settings),
            session=session,
            timeout=settings.discord_timeout_seconds,
        )

    def store_file(
        self,
        file_bytes: bytes,
        filename: str,
        content_type: Optional[str],
        target: StorageTarget = StorageTarget.DISCORD,
    ) -> StoredFile:
        """Upload the bytes to the chosen backend and persist the metadata record."""
        record: Dict[str, Any] = {
            "fileName": filename,
            "fileSize": len(file_bytes),
            "contentType": content_type,
            "storage": target.value,
            "uploadedAt": datetime.now(timezone.utc),
        }

        if target is StorageTarget.R2:
            if self.bucket_store is None:
                raise FileStorageError(BUCKET_NOT_CONFIGURED_MESSAGE, configured=False)
            identifier = new_bucket_identifier(filename)
            self.bucket_store.put(identifier.key, file_bytes, content_type)
        else:
            result = upload_to_discord(
                file_bytes, filename, content_type, self.discord_config,
                session=self.session, timeout=self.timeout,
            )
            if not result.success:
                raise FileStorageError(
                    result.error,
                    errors=[str(error) for error in result.errors],
                    configured=result.configured,
                )
            descriptor = result.descriptor
            identifier = new_discord_identifier(descriptor.message_id)
            record.update({
                "channelId": descriptor.channel_id,
                "messageId": descriptor.message_id,
                "attachmentId": descriptor.attachment_id,
                "fileSize": descriptor.size if descriptor.size is not None else len(file_bytes),
                "mode": result.mode.value,
            })

        file_id = str(identifier)
        self.metadata_store.put(file_id, record)
        logger.info(f"Stored {filename!r} as {file_id}")
        return StoredFile(file_id=file_id, record=self.metadata_store.get(file_id) or record)

    def resolve_file(self, file_id: str) -> ResolvedFile:
        """
        Find where the bytes of ``file_id`` can be read from right now.

        Raises FileNotFoundInStoreError for unknown ids and confirmed absences,
        FileStorageError when no backend is configured or all of them failed.
        """
        try:
            identifier = parse_file_identifier(file_id)
        except ValueError:
            raise FileNotFoundInStoreError(file_id)

        record = self.metadata_store.get(str(identifier))

        if isinstance(identifier, BucketObject):
            if self.bucket_store is None:
                raise FileStorageError(BUCKET_NOT_CONFIGURED_MESSAGE, configured=False)
            obj = self.bucket_store.fetch(identifier.key) if identifier.key else None
            if obj is None:
                raise FileNotFoundInStoreError(file_id)
            return ResolvedFile(
                file_id=file_id,
                filename=(record or {}).get("fileName") or identifier.key,
                content_type=obj.get("ContentType"),
                body=obj["Body"],
            )

        if record is None or not record.get("messageId"):
            raise FileNotFoundInStoreError(file_id)

        result = get_discord_file(
            record.get("channelId"), record["messageId"], self.discord_config,
            session=self.session, timeout=self.timeout,
        )
        if result.status is LookupStatus.FOUND:
            return ResolvedFile(
                file_id=file_id,
                filename=result.descriptor.filename,
                content_type=result.descriptor.content_type,
                url=result.descriptor.url,
            )
        if result.status is LookupStatus.ABSENT:
            raise FileNotFoundInStoreError(file_id)
        raise FileStorageError(
            result.error,
            errors=[str(error) for error in result.errors],
            configured=result.status is not LookupStatus.NOT_CONFIGURED,
        )

    def delete_file(self, file_id: str) -> PurgeResult:
        return purge_file_record(file_id, self.metadata_store, self.bucket_store)

    def delete_message(self, channel_id: Optional[str], message_id: str) -> bool:
        return delete_discord_message(
            channel_id, message_id, self.discord_config,
            session=self.session, timeout=self.timeout,
        )

    def connection_status(self) -> ConnectionStatus:
        return check_discord_connection(self.discord_config, session=self.session, timeout=self.timeout)
