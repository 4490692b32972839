from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles used for role-scoped visibility."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class TrackStatus(str, Enum):
    """Attendance status stored on each track."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    HALF_DAY = "HALF_DAY"


class LogSort(str, Enum):
    TIME_IN_DESC = "timeIn_desc"
    TIME_IN_ASC = "timeIn_asc"
    STUDENT_NAME_ASC = "studentName_asc"
    STUDENT_NAME_DESC = "studentName_desc"
    STATUS = "status"
    TIME_OUT_DESC = "timeOut_desc"


class UserSort(str, Enum):
    NAME_ASC = "name_asc"
    CREATED_AT_DESC = "createdAt_desc"
    LAST_LOGIN_DESC = "lastLogin_desc"


class BulkAction(str, Enum):
    DELETE = "delete"
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
