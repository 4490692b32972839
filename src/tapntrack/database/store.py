from __future__ import annotations

import uuid
from typing import Any, Dict, List, Mapping, Optional, Protocol

Document = Dict[str, Any]


class RecordStore(Protocol):
    """Keyed document store holding the `users` and `tracks` collections.

    Services and repositories depend on this interface, not on a concrete
    database. Failures surface as `StoreError` with the provider's message.
    """

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    def get_all(self, collection: str) -> List[Document]:
        """One-shot snapshot of a collection, ordered by key."""
        raise NotImplementedError

    def query_by_field(self, collection: str, field: str, value: Any) -> List[Document]:
        """Equality query on a single field, ordered by key."""
        raise NotImplementedError

    def set(self, collection: str, doc_id: str, document: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def update_fields(self, collection: str, doc_id: str, partial: Mapping[str, Any]) -> None:
        """Merge `partial` into an existing record; raises RecordNotFoundError if missing."""
        raise NotImplementedError

    def remove(self, collection: str, doc_id: str) -> None:
        """Delete a record. Removing a missing record is a no-op."""
        raise NotImplementedError


def new_key(timestamp_ms: int) -> str:
    """Record key that sorts by creation time, like the store's push keys."""
    return f"{timestamp_ms:013d}-{uuid.uuid4().hex[:8]}"
