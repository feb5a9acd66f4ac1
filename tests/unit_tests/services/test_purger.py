from unittest.mock import MagicMock

from file_host.adapters.bucket import BucketStore
from file_host.adapters.metadata import MetadataStore
from file_host.services.purger import purge_file_record
from tests.consts import TEST_BUCKET_NAME


def test__bucket_id_deletes_object_and_metadata():
    metadata_store = MagicMock(spec=MetadataStore)
    bucket_store = MagicMock(spec=BucketStore)

    result = purge_file_record("r2:abc123", metadata_store, bucket_store)

    assert result.success is True
    assert result.file_id == "r2:abc123"
    bucket_store.delete.assert_called_once_with("abc123")
    metadata_store.delete.assert_called_once_with("r2:abc123")


def test__index_only_id_deletes_metadata_only():
    metadata_store = MagicMock(spec=MetadataStore)
    bucket_store = MagicMock(spec=BucketStore)

    result = purge_file_record("tg-987", metadata_store, bucket_store)

    assert result.success is True
    metadata_store.delete.assert_called_once_with("tg-987")
    bucket_store.delete.assert_not_called()


def test__bucket_failure_still_deletes_metadata():
    metadata_store = MagicMock(spec=MetadataStore)
    bucket_store = MagicMock(spec=BucketStore)
    bucket_store.delete.side_effect = RuntimeError("R2 unavailable")

    result = purge_file_record("r2:abc123", metadata_store, bucket_store)

    assert result.success is True
    metadata_store.delete.assert_called_once_with("r2:abc123")


def test__no_bucket_configured_still_deletes_metadata():
    metadata_store = MagicMock(spec=MetadataStore)

    result = purge_file_record("r2:abc123", metadata_store, None)

    assert result.success is True
    metadata_store.delete.assert_called_once_with("r2:abc123")


def test__metadata_failure_is_reported():
    metadata_store = MagicMock(spec=MetadataStore)
    metadata_store.delete.side_effect = RuntimeError("database is locked")

    result = purge_file_record("dc-1", metadata_store)

    assert result.success is False
    assert result.file_id == "dc-1"
    assert result.error == "database is locked"


def test__absent_metadata_is_not_an_error(metadata_store):
    assert purge_file_record("tg-987", metadata_store).success is True


def test__purge_against_real_stores(metadata_store, bucket_store, mocked_aws):
    bucket_store.put("abc123", b"payload")
    metadata_store.put("r2:abc123", {"fileName": "payload.bin"})

    result = purge_file_record("r2:abc123", metadata_store, bucket_store)

    assert result.success is True
    assert metadata_store.get("r2:abc123") is None
    assert mocked_aws.list_objects_v2(Bucket=TEST_BUCKET_NAME).get("KeyCount", 0) == 0


def test__bare_bucket_prefix_deletes_metadata_only():
    metadata_store = MagicMock(spec=MetadataStore)
    bucket_store = MagicMock(spec=BucketStore)

    result = purge_file_record("r2:", metadata_store, bucket_store)

    assert result.success is True
    assert result.file_id == "r2:"
    bucket_store.delete.assert_not_called()
    metadata_store.delete.assert_called_once_with("r2:")
