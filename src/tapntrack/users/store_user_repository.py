from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..core.constants import USERS
from ..core.enums import Role
from ..database.store import RecordStore
from .model import User
from .repository import UserRepository


class StoreUserRepository(UserRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, uid: str) -> Optional[User]:
        doc = self._store.get(USERS, uid)
        if doc is None:
            return None
        # Older documents do not repeat their key inside the body.
        return User.from_map({**doc, "uid": doc.get("uid") or uid})

    def list_all(self) -> List[User]:
        return [User.from_map(d) for d in self._store.get_all(USERS)]

    def list_by_role(self, role: Role) -> List[User]:
        return [User.from_map(d) for d in self._store.query_by_field(USERS, "role", role.value)]

    def save(self, user: User) -> None:
        self._store.set(USERS, user.uid, user.to_map())

    def update_fields(self, uid: str, partial: Mapping[str, Any]) -> None:
        self._store.update_fields(USERS, uid, partial)

    def delete(self, uid: str) -> None:
        self._store.remove(USERS, uid)
