from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Track


class TrackRepository(Protocol):
    def get(self, track_id: str) -> Optional[Track]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Track]:
        raise NotImplementedError

    def list_by_user(self, user_id: str) -> Sequence[Track]:
        raise NotImplementedError

    def save(self, track: Track) -> None:
        raise NotImplementedError

    def update_fields(self, track_id: str, partial: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, track_id: str) -> None:
        raise NotImplementedError
