from datetime import datetime

import pytest

from tapntrack.auth.policy import Caller, can_modify_track, can_view_track, can_view_user, require_admin
from tapntrack.core.enums import Role
from tapntrack.core.exceptions import AuthorizationError


def test_user_visibility(school, admin, teacher):
    student = Caller(uid="student-1", role=Role.STUDENT)

    assert not can_view_user(admin, school["admin-1"])
    assert can_view_user(admin, school["teacher-2"])
    assert can_view_user(teacher, school["student-1"])
    assert not can_view_user(teacher, school["student-3"])
    assert not can_view_user(teacher, school["teacher-1"])
    assert not can_view_user(student, school["student-1"])


def test_track_visibility_and_modification(make_track, admin, teacher):
    own = make_track("a", at=datetime(2025, 3, 10, 8, 0))
    other = make_track("b", at=datetime(2025, 3, 10, 8, 0), teacher_id="teacher-2")
    student = Caller(uid="student-1", role=Role.STUDENT)

    assert can_view_track(admin, other)
    assert can_view_track(teacher, own)
    assert not can_view_track(teacher, other)
    assert not can_view_track(student, own)
    assert can_modify_track(teacher, own)
    assert not can_modify_track(teacher, other)
    assert not can_modify_track(student, own)


def test_require_admin(admin, teacher):
    require_admin(admin)
    with pytest.raises(AuthorizationError):
        require_admin(teacher)
