"""
Key-value metadata index.

Stores one JSON document per file id in SQLite. Deleting an absent key is not
an error.
"""

import json
import logging
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class MetadataStore:
    """get / put / delete of JSON metadata records keyed by file id"""

    def __init__(self, db_path: str = "file_host.db"):
        self.db_path = db_path

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _serialize(self, value: Dict[str, Any]) -> str:
        def json_serializer(obj):
            if isinstance(obj, datetime):
                return obj.isoformat()
            raise TypeError(f"Object of type {type(obj)} is not JSON serializable")

        return json.dumps(value, default=json_serializer)

    def init_store(self) -> None:
        """Create the records table if needed."""
        conn = self._get_connection()
        try:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS file_records (
                    file_id TEXT PRIMARY KEY,
                    document TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            conn.commit()
            logger.info(f"Metadata store initialized at {self.db_path}")
        except Exception as e:
            logger.error(f"Error initializing metadata store: {e}")
            raise
        finally:
            conn.close()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                'SELECT document FROM file_records WHERE file_id = ?', (key,)
            ).fetchone()
            return json.loads(row['document']) if row else None
        except Exception as e:
            logger.error(f"Error reading metadata for {key}: {e}")
            raise
        finally:
            conn.close()

    def put(self, key: str, value: Dict[str, Any]) -> None:
        """Insert or replace the record stored under key."""
        conn = self._get_connection()
        try:
            conn.execute('''
                INSERT INTO file_records (file_id, document) VALUES (?, ?)
                ON CONFLICT(file_id) DO UPDATE SET
                    document = excluded.document,
                    updated_at = CURRENT_TIMESTAMP
            ''', (key, self._serialize(value)))
            conn.commit()
            logger.info(f"Stored metadata for {key}")
        except Exception as e:
            logger.error(f"Error storing metadata for {key}: {e}")
            raise
        finally:
            conn.close()

    def delete(self, key: str) -> bool:
        """Delete the record; returns whether one existed."""
        conn = self._get_connection()
        try:
            cursor = conn.execute('DELETE FROM file_records WHERE file_id = ?', (key,))
            conn.commit()
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info(f"Deleted metadata for {key}")
            else:
                logger.warning(f"No metadata found to delete for {key}")
            return deleted
        except Exception as e:
            logger.error(f"Error deleting metadata for {key}: {e}")
            raise
        finally:
            conn.close()

    def list_keys(self, prefix: str = "", limit: int = 100) -> List[str]:
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        conn = self._get_connection()
        try:
            rows = conn.execute(
                "SELECT file_id FROM file_records WHERE file_id LIKE ? ESCAPE '\\' "
                "ORDER BY created_at DESC, file_id LIMIT ?",
                (f"{escaped}%", limit),
            ).fetchall()
            return [row['file_id'] for row in rows]
        finally:
            conn.close()
