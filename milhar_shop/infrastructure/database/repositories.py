"""Data access layer for the key/value session storage"""

from typing import Optional

from sqlalchemy.orm import sessionmaker

from milhar_shop.infrastructure.database.models import StorageEntry


class LocalStorage:
    """
    Durable string key/value store.

    Every call runs in its own short transaction so a value written here is
    visible to the next process that opens the same database.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            entry = db.query(StorageEntry).filter(StorageEntry.key == key).first()
            return entry.value if entry else None

    def set_item(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            entry = db.query(StorageEntry).filter(StorageEntry.key == key).first()
            if entry is None:
                db.add(StorageEntry(key=key, value=value))
            else:
                entry.value = value
            db.commit()

    def remove_item(self, key: str) -> None:
        with self.session_factory() as db:
            db.query(StorageEntry).filter(StorageEntry.key == key).delete()
            db.commit()

    def clear(self) -> None:
        with self.session_factory() as db:
            db.query(StorageEntry).delete()
            db.commit()
