from __future__ import annotations

import threading
from typing import Any, Dict, List, Mapping, Optional

from ..core.exceptions import RecordNotFoundError
from .store import Document, RecordStore


class InMemoryRecordStore(RecordStore):
    """Process-local record store used by tests and the memory backend.

    Documents are copied on the way in and out so callers never share state
    with the store.
    """

    def __init__(self, seed: Optional[Mapping[str, Mapping[str, Mapping[str, Any]]]] = None):
        self._lock = threading.Lock()
        self._collections: Dict[str, Dict[str, Document]] = {}
        for collection, docs in (seed or {}).items():
            for doc_id, doc in docs.items():
                self.set(collection, doc_id, doc)

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            doc = self._collections.get(collection, {}).get(doc_id)
            return dict(doc) if doc is not None else None

    def get_all(self, collection: str) -> List[Document]:
        with self._lock:
            docs = self._collections.get(collection, {})
            return [dict(docs[k]) for k in sorted(docs)]

    def query_by_field(self, collection: str, field: str, value: Any) -> List[Document]:
        return [d for d in self.get_all(collection) if field in d and d[field] == value]

    def set(self, collection: str, doc_id: str, document: Mapping[str, Any]) -> None:
        with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = dict(document)

    def update_fields(self, collection: str, doc_id: str, partial: Mapping[str, Any]) -> None:
        with self._lock:
            docs = self._collections.get(collection, {})
            if doc_id not in docs:
                raise RecordNotFoundError(f"{collection}/{doc_id} does not exist")
            docs[doc_id].update(partial)

    def remove(self, collection: str, doc_id: str) -> None:
        with self._lock:
            self._collections.get(collection, {}).pop(doc_id, None)
