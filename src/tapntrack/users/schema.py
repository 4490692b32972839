from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..common.coercion import as_bool, as_enum, as_float, as_int, as_optional_str, as_str
from ..core.enums import Role


class UserDocument(BaseModel):
    """Wire schema of a `users` document.

    Every field has a "before" validator that substitutes the default for a
    missing or wrongly typed value, so validation of a store document does not
    fail on bad field values.
    """

    model_config = ConfigDict(extra="ignore")

    uid: str = ""
    email: str = ""
    name: str = ""
    role: Role = Role.STUDENT
    teacher_id: Optional[str] = Field(default=None, alias="teacherId")
    is_active: bool = Field(default=True, alias="isActive")
    created_at: int = Field(default=0, alias="createdAt")
    last_login_time: int = Field(default=0, alias="lastLoginTime")
    login_count: int = Field(default=0, alias="loginCount")
    attendance_rate: float = Field(default=0.0, alias="attendanceRate")

    @field_validator("uid", "email", "name", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return as_str(value)

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, value: Any) -> Role:
        return as_enum(value, Role, Role.STUDENT)

    @field_validator("teacher_id", mode="before")
    @classmethod
    def _teacher_id(cls, value: Any) -> Optional[str]:
        return as_optional_str(value)

    @field_validator("is_active", mode="before")
    @classmethod
    def _is_active(cls, value: Any) -> bool:
        return as_bool(value, True)

    @field_validator("created_at", "last_login_time", "login_count", mode="before")
    @classmethod
    def _whole_number(cls, value: Any) -> int:
        return as_int(value)

    @field_validator("attendance_rate", mode="before")
    @classmethod
    def _rate(cls, value: Any) -> float:
        return as_float(value)

    @model_validator(mode="after")
    def _only_students_have_teachers(self) -> "UserDocument":
        if self.role != Role.STUDENT:
            self.teacher_id = None
        return self
