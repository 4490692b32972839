from datetime import datetime

import pytest

from tapntrack.auth.local_provider import StoreAuthProvider
from tapntrack.auth.service import AccountService, AdminCredentials, AuthService, generate_password
from tapntrack.common.datetime_utils import to_epoch_ms
from tapntrack.core.enums import Role
from tapntrack.core.exceptions import AuthenticationError, SessionLostError, StoreError, ValidationError
from tapntrack.users.model import User

ADMIN_EMAIL = "admin@school.test"
ADMIN_PASSWORD = "admin123"


@pytest.fixture
def provider(store):
    return StoreAuthProvider(store)


@pytest.fixture
def accounts(provider, users_repo):
    """Admin and one teacher with real credentials."""
    admin_uid = provider.create_account(ADMIN_EMAIL, ADMIN_PASSWORD)
    users_repo.save(User(uid=admin_uid, email=ADMIN_EMAIL, name="Ada Admin", role=Role.ADMIN))
    teacher_uid = provider.create_account("maria@school.test", "teacher1")
    users_repo.save(User(uid=teacher_uid, email="maria@school.test", name="Maria Santos", role=Role.TEACHER))
    provider.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
    return {"admin": admin_uid, "teacher": teacher_uid}


@pytest.fixture
def auth_service(provider, users_repo):
    return AuthService(provider, users_repo)


@pytest.fixture
def account_service(provider, users_repo):
    return AccountService(provider, users_repo)


def test_login_returns_session_user_and_stamps_login(auth_service, users_repo, accounts, fixed_now):
    user = auth_service.login("maria@school.test", "teacher1", now=fixed_now)

    assert user.uid == accounts["teacher"]
    assert user.role == Role.TEACHER
    stored = users_repo.get(accounts["teacher"])
    assert stored.login_count == 1
    assert stored.last_login_time == to_epoch_ms(fixed_now)


@pytest.mark.parametrize(
    "email,password,message",
    [
        ("", "secret1", "Email is required"),
        ("not-an-email", "secret1", "valid email"),
        ("maria@school.test", "123", "at least 6"),
    ],
)
def test_login_validates_before_calling_provider(auth_service, email, password, message):
    with pytest.raises(ValidationError, match=message):
        auth_service.login(email, password)


def test_login_rejects_wrong_password(auth_service, accounts):
    with pytest.raises(AuthenticationError):
        auth_service.login("maria@school.test", "wrong-one")


def test_login_rejects_inactive_and_missing_profiles(auth_service, provider, users_repo, accounts):
    users_repo.update_fields(accounts["teacher"], {"isActive": False})
    with pytest.raises(AuthenticationError, match="deactivated"):
        auth_service.login("maria@school.test", "teacher1")

    provider.create_account("orphan@school.test", "orphan1")
    with pytest.raises(AuthenticationError, match="profile"):
        auth_service.login("orphan@school.test", "orphan1")
    assert provider.current_uid() is None


def test_login_survives_failed_stamp(provider, accounts, users_repo):
    class ReadOnlyUsers:
        def get(self, uid):
            return users_repo.get(uid)

        def update_fields(self, uid, partial):
            raise StoreError("read-only")

    user = AuthService(provider, ReadOnlyUsers()).login("maria@school.test", "teacher1")

    assert user.uid == accounts["teacher"]


@pytest.mark.parametrize(
    "current,new,confirm,message",
    [
        ("", "secret2", "secret2", "All fields"),
        ("teacher1", "123", "123", "at least 6"),
        ("teacher1", "secret2", "secret3", "do not match"),
        ("teacher1", "teacher1", "teacher1", "different"),
    ],
)
def test_change_password_validation(auth_service, current, new, confirm, message):
    with pytest.raises(ValidationError, match=message):
        auth_service.change_password(
            email="maria@school.test", current_password=current, new_password=new, confirm_password=confirm
        )


def test_change_password(auth_service, provider, accounts):
    with pytest.raises(AuthenticationError, match="incorrect"):
        auth_service.change_password(
            email="maria@school.test", current_password="nope12", new_password="secret2", confirm_password="secret2"
        )

    auth_service.change_password(
        email="maria@school.test", current_password="teacher1", new_password="secret2", confirm_password="secret2"
    )

    assert provider.sign_in("maria@school.test", "secret2") == accounts["teacher"]


def test_create_student_account_restores_admin_session(account_service, provider, users_repo, accounts, fixed_now):
    user = account_service.create_account(
        admin=AdminCredentials(ADMIN_EMAIL, ADMIN_PASSWORD),
        email="Juan@School.test",
        password="student1",
        name="Juan Dela Cruz",
        role=Role.STUDENT,
        teacher_id=accounts["teacher"],
        now=fixed_now,
    )

    assert users_repo.get(user.uid) == user
    assert user.email == "juan@school.test"
    assert user.teacher_id == accounts["teacher"]
    assert provider.current_uid() == accounts["admin"]


def test_create_account_generates_password_when_empty(account_service, provider, accounts):
    user = account_service.create_account(
        admin=AdminCredentials(ADMIN_EMAIL, ADMIN_PASSWORD),
        email="paolo@school.test",
        password="",
        name="Paolo Garcia",
        role=Role.STUDENT,
        teacher_id=accounts["teacher"],
    )

    assert user.uid
    assert len(generate_password()) == 16


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"email": ""}, "Email is required"),
        ({"name": " "}, "Name is required"),
        ({"role": Role.ADMIN}, "TEACHER or STUDENT"),
        ({"teacher_id": None}, "valid teacher"),
        ({"teacher_id": "ghost"}, "valid teacher"),
        ({"email": "bad-email"}, "valid email"),
        ({"password": "12345"}, "at least 6"),
        ({"name": "J"}, "between 2 and 50"),
    ],
)
def test_create_account_validation(account_service, accounts, overrides, message):
    kwargs = dict(
        admin=AdminCredentials(ADMIN_EMAIL, ADMIN_PASSWORD),
        email="juan@school.test",
        password="student1",
        name="Juan",
        role=Role.STUDENT,
        teacher_id=accounts["teacher"],
    )
    kwargs.update(overrides)

    with pytest.raises(ValidationError, match=message):
        account_service.create_account(**kwargs)


def test_student_teacher_must_have_teacher_role(account_service, accounts):
    with pytest.raises(ValidationError, match="valid teacher"):
        account_service.create_account(
            admin=AdminCredentials(ADMIN_EMAIL, ADMIN_PASSWORD),
            email="juan@school.test",
            password="student1",
            name="Juan",
            role=Role.STUDENT,
            teacher_id=accounts["admin"],
        )


def test_duplicate_email_maps_to_validation_error(account_service, provider, accounts):
    with pytest.raises(ValidationError, match="already in use"):
        account_service.create_account(
            admin=AdminCredentials(ADMIN_EMAIL, ADMIN_PASSWORD),
            email="maria@school.test",
            password="teacher2",
            name="Maria Again",
            role=Role.TEACHER,
        )
    assert provider.current_uid() == accounts["admin"]


def test_wrong_admin_password_loses_session_after_creation(account_service, users_repo, accounts):
    with pytest.raises(SessionLostError):
        account_service.create_account(
            admin=AdminCredentials(ADMIN_EMAIL, "not-the-password"),
            email="jose@school.test",
            password="teacher2",
            name="Jose Rizal",
            role=Role.TEACHER,
        )

    assert [u.email for u in users_repo.list_by_role(Role.TEACHER)].count("jose@school.test") == 1


def test_admin_credentials_hide_password():
    assert "admin123" not in repr(AdminCredentials(ADMIN_EMAIL, ADMIN_PASSWORD))
