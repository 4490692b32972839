from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Optional

from ..attendance.statistics import AttendanceStatistics, StatisticsService
from ..auth.policy import Caller, can_view_user, require_admin
from ..bulk.coordinator import BulkMutationCoordinator, BulkResult, ItemErrorHandler
from ..common.validators import is_valid_name
from ..core.enums import BulkAction, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..tracks.model import Track
from ..tracks.repository import TrackRepository
from .model import User
from .query import UserQuery, filter_users
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserDetails:
    user: User
    attendance: List[Track]
    statistics: AttendanceStatistics


class UserService:
    """Use case: roster browsing and account administration."""

    def __init__(
        self,
        users: UserRepository,
        tracks: TrackRepository,
        statistics: StatisticsService,
        coordinator: BulkMutationCoordinator,
    ):
        self._users = users
        self._tracks = tracks
        self._statistics = statistics
        self._coordinator = coordinator

    def list_users(self, caller: Caller, query: UserQuery) -> List[User]:
        return filter_users(self._users.list_all(), query, caller)

    def list_teachers(self) -> List[User]:
        teachers = [u for u in self._users.list_by_role(Role.TEACHER) if u.is_active]
        return sorted(teachers, key=lambda u: u.name.lower())

    def get_user(self, caller: Caller, uid: str) -> User:
        user = self._users.get(uid)
        if not user:
            raise NotFoundError("User not found")
        if uid != caller.uid and not can_view_user(caller, user):
            raise AuthorizationError("You do not have access to this user")
        return user

    def get_user_details(self, caller: Caller, uid: str) -> UserDetails:
        user = self.get_user(caller, uid)
        records = sorted(self._tracks.list_by_user(uid), key=lambda t: t.time_in, reverse=True)
        stats = self._statistics.calculate_statistics(uid)
        return UserDetails(user=user, attendance=records, statistics=stats)

    def update_name(self, caller: Caller, uid: str, name: str) -> User:
        if uid != caller.uid:
            require_admin(caller)
        if not is_valid_name(name):
            raise ValidationError("Name must be between 2 and 50 characters")
        user = self._users.get(uid)
        if not user:
            raise NotFoundError("User not found")
        name = name.strip()
        self._users.update_fields(uid, {"name": name})
        return replace(user, name=name)

    def _require_manageable(self, caller: Caller, uid: str) -> User:
        require_admin(caller)
        if uid == caller.uid:
            raise ValidationError("You cannot change your own account here")
        user = self._users.get(uid)
        if not user:
            raise NotFoundError("User not found")
        return user

    def activate_user(self, caller: Caller, uid: str) -> None:
        self._require_manageable(caller, uid)
        self._users.update_fields(uid, {"isActive": True})
        logger.info("User %s activated by %s", uid, caller.uid)

    def deactivate_user(self, caller: Caller, uid: str) -> None:
        self._require_manageable(caller, uid)
        self._users.update_fields(uid, {"isActive": False})
        logger.info("User %s deactivated by %s", uid, caller.uid)

    def delete_user(self, caller: Caller, uid: str) -> None:
        self._require_manageable(caller, uid)
        self._users.delete(uid)
        logger.info("User %s deleted by %s", uid, caller.uid)

    def bulk(
        self,
        caller: Caller,
        action: BulkAction,
        uids: Iterable[str],
        *,
        on_item_error: Optional[ItemErrorHandler] = None,
        refresh: Optional[Callable[[], None]] = None,
    ) -> BulkResult:
        require_admin(caller)
        ids = list(uids)
        if caller.uid in ids:
            raise ValidationError("You cannot include your own account in a bulk action")

        if action == BulkAction.DELETE:
            mutation = self._users.delete
        elif action == BulkAction.ACTIVATE:
            mutation = lambda uid: self._users.update_fields(uid, {"isActive": True})  # noqa: E731
        else:
            mutation = lambda uid: self._users.update_fields(uid, {"isActive": False})  # noqa: E731

        logger.info("Bulk %s of %d users by %s", action.value, len(ids), caller.uid)
        return self._coordinator.apply(ids, mutation, on_item_error=on_item_error, refresh=refresh)

    def bulk_delete(self, caller: Caller, uids: Iterable[str], **kwargs) -> BulkResult:
        return self.bulk(caller, BulkAction.DELETE, uids, **kwargs)

    def bulk_activate(self, caller: Caller, uids: Iterable[str], **kwargs) -> BulkResult:
        return self.bulk(caller, BulkAction.ACTIVATE, uids, **kwargs)

    def bulk_deactivate(self, caller: Caller, uids: Iterable[str], **kwargs) -> BulkResult:
        return self.bulk(caller, BulkAction.DEACTIVATE, uids, **kwargs)
