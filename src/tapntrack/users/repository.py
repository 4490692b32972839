from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get(self, uid: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError

    def save(self, user: User) -> None:
        raise NotImplementedError

    def update_fields(self, uid: str, partial: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, uid: str) -> None:
        raise NotImplementedError
