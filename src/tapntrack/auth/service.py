from __future__ import annotations

import logging
import secrets
import string
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Optional

from ..common.datetime_utils import now_local, to_epoch_ms
from ..common.validators import (
    is_valid_email,
    is_valid_name,
    is_valid_password,
    require_min_length,
    require_non_empty,
)
from ..core.constants import GENERATED_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AccountExistsError,
    AuthenticationError,
    DomainError,
    SessionLostError,
    StoreError,
    ValidationError,
)
from ..users.model import User
from ..users.repository import UserRepository
from .provider import AuthProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    uid: str
    email: str
    name: str
    role: Role
    teacher_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "uid": self.uid,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "teacherId": self.teacher_id,
        }


@dataclass(frozen=True)
class AdminCredentials:
    email: str
    password: str = field(repr=False)


class AuthService:
    """Use case: login, logout and password management."""

    def __init__(self, auth: AuthProvider, users: UserRepository):
        self._auth = auth
        self._users = users

    def login(self, email: str, password: str, *, now: Optional[datetime] = None) -> SessionUser:
        email = require_non_empty(email, "Email is required")
        if not is_valid_email(email):
            raise ValidationError("Please enter a valid email address")
        require_min_length(password, "Password must be at least 6 characters", MIN_PASSWORD_LENGTH)

        uid = self._auth.sign_in(email, password)
        user = self._users.get(uid)
        if not user:
            self._auth.sign_out()
            raise AuthenticationError("User profile not found")
        if not user.is_active:
            self._auth.sign_out()
            raise AuthenticationError("Your account has been deactivated. Please contact the administrator.")

        self._stamp_login(user, now or now_local())
        logger.info("User %s logged in", uid)
        return SessionUser(uid=uid, email=user.email, name=user.name, role=user.role, teacher_id=user.teacher_id)

    def _stamp_login(self, user: User, now: datetime) -> None:
        try:
            self._users.update_fields(
                user.uid,
                {"lastLoginTime": to_epoch_ms(now), "loginCount": user.login_count + 1},
            )
        except StoreError as e:
            logger.warning("Could not record login for %s: %s", user.uid, e)

    def logout(self) -> None:
        self._auth.sign_out()

    def send_password_reset(self, email: str) -> None:
        email = require_non_empty(email, "Email is required")
        if not is_valid_email(email):
            raise ValidationError("Please enter a valid email address")
        self._auth.send_password_reset(email)

    def confirm_password_reset(self, token: str, new_password: str) -> None:
        token = require_non_empty(token, "Reset token is required")
        if not is_valid_password(new_password):
            raise ValidationError("New password must be at least 6 characters")
        self._auth.confirm_password_reset(token, new_password)

    def change_password(self, *, email: str, current_password: str, new_password: str, confirm_password: str) -> None:
        if not email or not current_password or not new_password or not confirm_password:
            raise ValidationError("All fields are required")
        if not is_valid_password(new_password):
            raise ValidationError("New password must be at least 6 characters")
        if new_password != confirm_password:
            raise ValidationError("New passwords do not match")
        if new_password == current_password:
            raise ValidationError("New password must be different from the current password")

        try:
            uid = self._auth.reauthenticate(email, current_password)
        except AuthenticationError:
            raise AuthenticationError("Current password is incorrect")
        self._auth.update_password(uid, new_password)


def generate_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    return "".join(secrets.choice(alphabet) for _ in range(length))


class AccountService:
    """Use case: an admin creates a teacher or student account.

    The auth provider signs the new account in, so the admin's session is
    restored afterwards whether or not creation succeeded.
    """

    def __init__(self, auth: AuthProvider, users: UserRepository):
        self._auth = auth
        self._users = users

    def create_account(
        self,
        *,
        admin: AdminCredentials,
        email: str,
        password: str,
        name: str,
        role: Role,
        teacher_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> User:
        email = require_non_empty(email, "Email is required")
        password = password or generate_password()
        name = require_non_empty(name, "Name is required")
        if role not in {Role.TEACHER, Role.STUDENT}:
            raise ValidationError("Role must be TEACHER or STUDENT")
        if role == Role.STUDENT:
            teacher = self._users.get(teacher_id) if teacher_id else None
            if not teacher or teacher.role != Role.TEACHER:
                raise ValidationError("Please assign a valid teacher to the student")
        else:
            teacher_id = None
        if not is_valid_email(email):
            raise ValidationError("Please enter a valid email address")
        if not is_valid_password(password):
            raise ValidationError("Password must be at least 6 characters")
        if not is_valid_name(name):
            raise ValidationError("Name must be between 2 and 50 characters")

        with self._admin_session_restored(admin):
            try:
                uid = self._auth.create_account(email, password)
            except AccountExistsError:
                raise ValidationError("This email address is already in use.")
            user = User(
                uid=uid,
                email=email.lower(),
                name=name,
                role=role,
                teacher_id=teacher_id,
                created_at=to_epoch_ms(now or now_local()),
            )
            self._users.save(user)

        logger.info("Account %s (%s) created by %s", uid, role.value, admin.email)
        return user

    @contextmanager
    def _admin_session_restored(self, admin: AdminCredentials) -> Iterator[None]:
        created = False
        try:
            yield
            created = True
        finally:
            try:
                self._auth.sign_in(admin.email, admin.password)
            except DomainError as e:
                logger.error("Admin session not restored: %s", e)
                if created:
                    raise SessionLostError(
                        "The account was created, but your session was lost. Please sign in again."
                    )
