"""
Durable key-value storage.

Each collection (recipes, orders, replies) is persisted as one JSON text
under its own namespaced key. Backends implement:

    get(key) -> Optional[str]     # None when the key was never written
    set(key, text) -> bool        # False on failure; callers ignore it
"""

import logging
import threading
from datetime import datetime
from typing import Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from . import models

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, text: str) -> bool: ...


class MemoryKeyValueStore:
    """Dict-backed store. Thread-safe; used by tests and embedded callers."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._lock = threading.Lock()
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, text: str) -> bool:
        with self._lock:
            self._data[key] = text
        return True


class SqlKeyValueStore:
    """kv_records table via SQLAlchemy. One short session per call."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        db = self.session_factory()
        try:
            record = db.query(models.StoredRecord).filter(models.StoredRecord.key == key).first()
            return record.value if record else None
        finally:
            db.close()

    def set(self, key: str, text: str) -> bool:
        db = self.session_factory()
        try:
            record = db.query(models.StoredRecord).filter(models.StoredRecord.key == key).first()
            if record:
                record.value = text
                record.updated_at = datetime.utcnow()
            else:
                db.add(models.StoredRecord(key=key, value=text))
            db.commit()
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("Could not write %s: %s", key, e)
            return False
        finally:
            db.close()
