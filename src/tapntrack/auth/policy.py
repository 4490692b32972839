"""Role-scoped visibility rules.

ADMIN sees every track and every account except their own. TEACHER sees only
what is linked to them through `teacher_id`. Any other role sees nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..tracks.model import Track
from ..users.model import User


@dataclass(frozen=True)
class Caller:
    """Who is performing an operation (taken from the login session)."""

    uid: str
    role: Role


def can_view_user(caller: Caller, target: User) -> bool:
    if caller.role == Role.ADMIN:
        return target.uid != caller.uid
    if caller.role == Role.TEACHER:
        return target.teacher_id == caller.uid
    return False


def can_view_track(caller: Caller, track: Track) -> bool:
    if caller.role == Role.ADMIN:
        return True
    if caller.role == Role.TEACHER:
        return track.teacher_id == caller.uid
    return False


def visible_user_scope(caller: Caller) -> Callable[[User], bool]:
    return lambda user: can_view_user(caller, user)


def visible_track_scope(caller: Caller) -> Callable[[Track], bool]:
    return lambda track: can_view_track(caller, track)


def require_admin(caller: Caller) -> None:
    if caller.role != Role.ADMIN:
        raise AuthorizationError("Only administrators can perform this action")


def can_modify_track(caller: Caller, track: Track) -> bool:
    return caller.role in {Role.ADMIN, Role.TEACHER} and can_view_track(caller, track)
