from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy.orm import Session, sessionmaker

from .db import SessionLocal
from .models import StorageItemModel, utcnow

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class LocalStorage:
    """String slots keyed by name, one row per key in ``storage_items``.

    Database errors are not caught here; callers decide how much a failed
    read or write matters to them.
    """

    def __init__(self, session_factory: sessionmaker[Session] = SessionLocal) -> None:
        self._session_factory = session_factory

    def get_item(self, key: str) -> str | None:
        with self._session_factory() as session:
            item = session.get(StorageItemModel, key)
            return item.value if item else None

    def set_item(self, key: str, value: str) -> None:
        with self._session_factory() as session:
            item = session.get(StorageItemModel, key)
            if item is None:
                session.add(StorageItemModel(key=key, value=value))
            else:
                item.value = value
                item.updated_at = utcnow()
            session.commit()
        logger.debug("Stored %s (%d chars)", key, len(value))

    def remove_item(self, key: str) -> None:
        with self._session_factory() as session:
            item = session.get(StorageItemModel, key)
            if not item:
                return
            session.delete(item)
            session.commit()
