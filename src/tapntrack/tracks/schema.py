from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..common.coercion import as_enum, as_int, as_optional_str, as_str
from ..common.datetime_utils import today_iso
from ..core.enums import TrackStatus


class TrackDocument(BaseModel):
    """Wire schema of a `tracks` document.

    Accepts the legacy check-in shape (`studentId` + `timestamp` + `eventType`)
    by falling back to those keys when the current ones are absent.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    user_id: str = Field(default="", alias="userId")
    student_name: str = Field(default="", alias="studentName")
    rfid_tag: str = Field(default="", alias="rfidTag")
    time_in: int = Field(default=0, alias="timeIn")
    time_out: Optional[int] = Field(default=None, alias="timeOut")
    date: str = Field(default_factory=today_iso)
    status: TrackStatus = TrackStatus.PRESENT
    teacher_id: Optional[str] = Field(default=None, alias="teacherId")
    location: str = ""
    remarks: str = ""
    created_at: int = Field(default=0, alias="createdAt")
    updated_at: int = Field(default=0, alias="updatedAt")

    @model_validator(mode="before")
    @classmethod
    def _legacy_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return {}
        data = dict(data)
        if data.get("userId") is None and "studentId" in data:
            data["userId"] = data["studentId"]
        if data.get("timeIn") is None and "timestamp" in data:
            data["timeIn"] = data["timestamp"]
        return data

    @field_validator("id", "user_id", "student_name", "rfid_tag", "location", "remarks", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return as_str(value)

    @field_validator("time_in", "created_at", "updated_at", mode="before")
    @classmethod
    def _timestamp(cls, value: Any) -> int:
        return as_int(value)

    @field_validator("time_out", mode="before")
    @classmethod
    def _time_out(cls, value: Any) -> Optional[int]:
        ms = as_int(value)
        return ms if ms > 0 else None

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, value: Any) -> str:
        return as_str(value) or today_iso()

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> TrackStatus:
        return as_enum(value, TrackStatus, TrackStatus.PRESENT)

    @field_validator("teacher_id", mode="before")
    @classmethod
    def _teacher_id(cls, value: Any) -> Optional[str]:
        return as_optional_str(value)
