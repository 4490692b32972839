from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from ..core.exceptions import RecordNotFoundError, StoreError
from .connection import DatabaseConnection
from .store import Document, RecordStore

logger = logging.getLogger(__name__)


@contextmanager
def store_call(action: str) -> Iterator[None]:
    """Translate driver errors into StoreError, keeping the driver's message."""
    try:
        yield
    except PyMongoError as e:
        logger.error("MongoDB %s failed: %s", action, e)
        raise StoreError(str(e)) from e


def _strip_key(raw: Mapping[str, Any]) -> Document:
    doc = dict(raw)
    doc.pop("_id", None)
    return doc


class MongoRecordStore(RecordStore):
    """RecordStore backed by MongoDB; the record id is stored as `_id`."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _collection(self, name: str):
        return self._conn_factory.connect()[name]

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with store_call(f"get {collection}/{doc_id}"):
            raw = self._collection(collection).find_one({"_id": doc_id})
        return _strip_key(raw) if raw else None

    def get_all(self, collection: str) -> List[Document]:
        with store_call(f"get_all {collection}"):
            rows = list(self._collection(collection).find({}).sort("_id", ASCENDING))
        return [_strip_key(r) for r in rows]

    def query_by_field(self, collection: str, field: str, value: Any) -> List[Document]:
        with store_call(f"query {collection}.{field}"):
            rows = list(self._collection(collection).find({field: value}).sort("_id", ASCENDING))
        return [_strip_key(r) for r in rows]

    def set(self, collection: str, doc_id: str, document: Mapping[str, Any]) -> None:
        body = dict(document)
        body["_id"] = doc_id
        with store_call(f"set {collection}/{doc_id}"):
            self._collection(collection).replace_one({"_id": doc_id}, body, upsert=True)

    def update_fields(self, collection: str, doc_id: str, partial: Mapping[str, Any]) -> None:
        with store_call(f"update {collection}/{doc_id}"):
            result = self._collection(collection).update_one({"_id": doc_id}, {"$set": dict(partial)})
        if result.matched_count == 0:
            raise RecordNotFoundError(f"{collection}/{doc_id} does not exist")

    def remove(self, collection: str, doc_id: str) -> None:
        with store_call(f"remove {collection}/{doc_id}"):
            self._collection(collection).delete_one({"_id": doc_id})
