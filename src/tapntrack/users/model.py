from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import ValidationError as SchemaError

from ..core.enums import Role
from .schema import UserDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    """Domain entity: an account (admin, teacher or student).

    Note: Plain data only, no store access here.
    """

    uid: str
    email: str
    name: str
    role: Role = Role.STUDENT
    teacher_id: Optional[str] = None
    is_active: bool = True
    created_at: int = 0
    last_login_time: int = 0
    login_count: int = 0
    attendance_rate: float = 0.0

    def __post_init__(self):
        if self.teacher_id is not None and self.role != Role.STUDENT:
            raise ValueError("teacher_id is only allowed on STUDENT accounts")

    @classmethod
    def from_map(cls, data: Any) -> "User":
        """Decode a store document; never raises, falls back to defaults field by field."""
        raw = dict(data) if isinstance(data, Mapping) else {}
        try:
            doc = UserDocument.model_validate(raw)
        except SchemaError as e:
            logger.warning("Unreadable user document, using defaults: %s", e)
            doc = UserDocument()
        return cls(
            uid=doc.uid,
            email=doc.email,
            name=doc.name,
            role=doc.role,
            teacher_id=doc.teacher_id,
            is_active=doc.is_active,
            created_at=doc.created_at,
            last_login_time=doc.last_login_time,
            login_count=doc.login_count,
            attendance_rate=doc.attendance_rate,
        )

    def to_map(self) -> dict:
        return {
            "uid": self.uid,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "teacherId": self.teacher_id,
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "lastLoginTime": self.last_login_time,
            "loginCount": self.login_count,
            "attendanceRate": self.attendance_rate,
        }
