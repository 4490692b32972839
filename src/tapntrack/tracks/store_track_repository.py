from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..core.constants import TRACKS
from ..database.store import RecordStore
from .model import Track
from .repository import TrackRepository


class StoreTrackRepository(TrackRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, track_id: str) -> Optional[Track]:
        doc = self._store.get(TRACKS, track_id)
        if doc is None:
            return None
        # Older documents do not repeat their key inside the body.
        return Track.from_map({**doc, "id": doc.get("id") or track_id})

    def list_all(self) -> List[Track]:
        return [Track.from_map(d) for d in self._store.get_all(TRACKS)]

    def list_by_user(self, user_id: str) -> List[Track]:
        return [Track.from_map(d) for d in self._store.query_by_field(TRACKS, "userId", user_id)]

    def save(self, track: Track) -> None:
        self._store.set(TRACKS, track.id, track.to_map())

    def update_fields(self, track_id: str, partial: Mapping[str, Any]) -> None:
        self._store.update_fields(TRACKS, track_id, partial)

    def delete(self, track_id: str) -> None:
        self._store.remove(TRACKS, track_id)
