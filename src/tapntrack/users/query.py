"""Users view: role-scoped roster with search, status filter and sort."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

from ..auth.policy import Caller, can_view_user
from ..common.coercion import as_enum
from ..core.enums import UserSort
from .model import User


@dataclass(frozen=True)
class UserQuery:
    search: str = ""
    is_active: Optional[bool] = None
    sort_by: UserSort = UserSort.NAME_ASC

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "UserQuery":
        active_s = (args.get("active") or "").strip().lower()
        is_active = {"true": True, "1": True, "false": False, "0": False}.get(active_s)
        return cls(
            search=args.get("search") or args.get("q") or "",
            is_active=is_active,
            sort_by=as_enum(args.get("sortBy"), UserSort, UserSort.NAME_ASC),
        )


def sort_users(users: Iterable[User], sort_by: UserSort) -> List[User]:
    if sort_by == UserSort.CREATED_AT_DESC:
        return sorted(users, key=lambda u: u.created_at, reverse=True)
    if sort_by == UserSort.LAST_LOGIN_DESC:
        return sorted(users, key=lambda u: u.last_login_time, reverse=True)
    return sorted(users, key=lambda u: u.name.lower())


def filter_users(all_users: Iterable[User], query: UserQuery, caller: Caller) -> List[User]:
    filtered = [u for u in all_users if can_view_user(caller, u)]

    needle = query.search.strip().lower()
    if needle:
        filtered = [u for u in filtered if needle in u.name.lower() or needle in u.email.lower()]

    if query.is_active is not None:
        filtered = [u for u in filtered if u.is_active == query.is_active]

    return sort_users(filtered, query.sort_by)
