from tapntrack.core.constants import USERS
from tapntrack.core.enums import Role


def test_get_fills_uid_from_key(store, users_repo):
    store.set(USERS, "abc", {"email": "x@school.test", "name": "Xavier", "role": "TEACHER"})

    user = users_repo.get("abc")

    assert user.uid == "abc"
    assert user.role == Role.TEACHER


def test_get_missing_returns_none(users_repo):
    assert users_repo.get("nobody") is None


def test_list_by_role(school, users_repo):
    teachers = users_repo.list_by_role(Role.TEACHER)

    assert [t.uid for t in teachers] == ["teacher-1", "teacher-2"]
