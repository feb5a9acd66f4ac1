"""
File identifiers.

A file id is a plain string with two disjoint namespaces: ids starting with
``r2:`` name an object in the bucket (the rest of the string is the bucket key),
every other id names a record that lives only in the metadata index. The
prefix is the only thing that decides where a file lives, so a bare ``r2:``
is a bucket id with an empty key.
"""

import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Union

BUCKET_PREFIX = "r2:"
DISCORD_PREFIX = "dc-"


@dataclass(frozen=True)
class BucketObject:
    key: str

    def __str__(self) -> str:
        return f"{BUCKET_PREFIX}{self.key}"


@dataclass(frozen=True)
class IndexOnly:
    file_id: str

    def __str__(self) -> str:
        return self.file_id


FileIdentifier = Union[BucketObject, IndexOnly]


def parse_file_identifier(raw: str) -> FileIdentifier:
    if not raw:
        raise ValueError("File id must not be empty")
    if raw.startswith(BUCKET_PREFIX):
        return BucketObject(key=raw[len(BUCKET_PREFIX):])
    return IndexOnly(file_id=raw)


def new_bucket_identifier(filename: str) -> BucketObject:
    """Random bucket key that keeps the upload's extension."""
    suffix = PurePosixPath(filename or "").suffix.lower()
    return BucketObject(key=f"{uuid.uuid4().hex}{suffix}")


def new_discord_identifier(message_id: str) -> IndexOnly:
    return IndexOnly(file_id=f"{DISCORD_PREFIX}{message_id}")
