import threading

from tinydb import Query, TinyDB
from tinydb.storages import MemoryStorage
from tinydb.table import Table

MEMORY = ":memory:"


class DocumentStore:
    """Path-addressed document store.

    Every collection path (``users/42/transactions``) maps to one TinyDB table.
    Keyed documents store their key under ``id`` so a path such as
    ``users/42/accounts/{name}`` becomes ``set("users/42/accounts", name, ...)``.

    TinyDB is not thread-safe and FastAPI runs sync routes in a thread pool,
    so every operation holds one store-wide lock.
    """

    def __init__(self, db_path: str = "hesabdar.json"):
        self._lock = threading.RLock()
        if db_path == MEMORY:
            self.db = TinyDB(storage=MemoryStorage)
        else:
            self.db = TinyDB(db_path, encoding="utf-8", ensure_ascii=False)

    def collection(self, path: str) -> Table:
        return self.db.table(path)

    def add(self, path: str, data: dict) -> int:
        with self._lock:
            return self.collection(path).insert(data)

    def set(self, path: str, key: str, data: dict) -> None:
        """Create the keyed document or merge ``data`` into the existing one."""
        Doc = Query()
        with self._lock:
            self.collection(path).upsert({**data, "id": key}, Doc.id == key)

    def get(self, path: str, key: str) -> dict | None:
        Doc = Query()
        with self._lock:
            return self.collection(path).get(Doc.id == key)

    def all(self, path: str) -> list[dict]:
        with self._lock:
            return self.collection(path).all()

    def where(self, path: str, predicate) -> list[dict]:
        with self._lock:
            docs = self.collection(path).all()
        return [doc for doc in docs if predicate(doc)]

    def delete(self, path: str, doc_id: int) -> bool:
        with self._lock:
            table = self.collection(path)
            if table.get(doc_id=doc_id) is None:
                return False
            table.remove(doc_ids=[doc_id])
            return True
