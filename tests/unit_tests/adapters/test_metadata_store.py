import sqlite3
from datetime import datetime

from file_host.adapters.metadata import MetadataStore


class TestMetadataStore:
    """get / put / delete against a temporary SQLite file"""

    def test_init_store(self, metadata_store):
        conn = sqlite3.connect(metadata_store.db_path)
        cursor = conn.cursor()
        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='file_records'")
        assert cursor.fetchone() is not None
        conn.close()

    def test_put_and_get(self, metadata_store):
        metadata_store.put("dc-42", {"fileName": "cat.png", "uploadedAt": datetime(2024, 1, 1, 12, 0)})

        record = metadata_store.get("dc-42")

        assert record == {"fileName": "cat.png", "uploadedAt": "2024-01-01T12:00:00"}

    def test_get_missing(self, metadata_store):
        assert metadata_store.get("nope") is None

    def test_put_replaces(self, metadata_store):
        metadata_store.put("r2:abc", {"fileSize": 1})
        metadata_store.put("r2:abc", {"fileSize": 2})

        assert metadata_store.get("r2:abc") == {"fileSize": 2}

    def test_delete_is_idempotent(self, metadata_store):
        metadata_store.put("dc-1", {"fileName": "a"})

        assert metadata_store.delete("dc-1") is True
        assert metadata_store.delete("dc-1") is False
        assert metadata_store.get("dc-1") is None

    def test_list_keys_by_prefix(self, metadata_store):
        metadata_store.put("r2:a_b", {})
        metadata_store.put("r2:c", {})
        metadata_store.put("dc-9", {})
        metadata_store.put("r2xa", {})

        assert sorted(metadata_store.list_keys("r2:")) == ["r2:a_b", "r2:c"]
        assert metadata_store.list_keys("r2:a_") == ["r2:a_b"]
        assert len(metadata_store.list_keys()) == 4

    def test_separate_files_do_not_share_records(self, tmp_path):
        first = MetadataStore(str(tmp_path / "one.db"))
        second = MetadataStore(str(tmp_path / "two.db"))
        first.init_store()
        second.init_store()

        first.put("dc-1", {"x": 1})

        assert second.get("dc-1") is None
