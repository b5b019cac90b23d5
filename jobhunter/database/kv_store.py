"""Key-value persistence adapters.

The tracker only needs ``get``/``set``/``delete`` on string values. Values are
written wholesale; nothing here parses them.
"""

import logging
from datetime import datetime
from typing import Dict, Optional, Protocol

from sqlalchemy.orm import Session

from jobhunter.database.models import KeyValueDB

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class SqlKeyValueStore:
    """Key-value store backed by the ``kv_entries`` table."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.query(KeyValueDB).filter(KeyValueDB.key == key).first()
        return row.value if row else None

    def set(self, key: str, value: str) -> None:
        row = self.db.query(KeyValueDB).filter(KeyValueDB.key == key).first()
        try:
            if row is None:
                self.db.add(KeyValueDB(key=key, value=value, updated_at=datetime.utcnow()))
            else:
                row.value = value
                row.updated_at = datetime.utcnow()
            self.db.commit()
            logger.debug(f"Stored {key} ({len(value)} bytes)")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to store {key}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, key: str) -> None:
        try:
            self.db.query(KeyValueDB).filter(KeyValueDB.key == key).delete(synchronize_session=False)
            self.db.commit()
            logger.debug(f"Deleted {key}")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete {key}: {type(e).__name__}: {str(e)}")
            raise


class InMemoryKeyValueStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
