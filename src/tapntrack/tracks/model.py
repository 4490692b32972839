from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import ValidationError as SchemaError

from ..common.datetime_utils import format_duration
from ..core.enums import TrackStatus
from .schema import TrackDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Track:
    """Domain entity: one attendance record (tap-in, optionally closed by a tap-out).

    `student_name` and `teacher_id` are copies taken from the student at tap-in
    time. `date` is the local calendar date of `time_in`; write paths derive it,
    decoding keeps whatever the document says.
    """

    id: str
    user_id: str
    time_in: int
    date: str
    student_name: str = ""
    rfid_tag: str = ""
    time_out: Optional[int] = None
    status: TrackStatus = TrackStatus.PRESENT
    teacher_id: Optional[str] = None
    location: str = ""
    remarks: str = ""
    created_at: int = 0
    updated_at: int = 0

    @property
    def is_in_progress(self) -> bool:
        return self.time_out is None

    @property
    def duration_ms(self) -> Optional[int]:
        if self.time_out is None:
            return None
        return self.time_out - self.time_in

    @property
    def formatted_duration(self) -> str:
        return format_duration(self.duration_ms)

    @classmethod
    def from_map(cls, data: Any) -> "Track":
        """Decode a store document; never raises, falls back to defaults field by field."""
        raw = dict(data) if isinstance(data, Mapping) else {}
        try:
            doc = TrackDocument.model_validate(raw)
        except SchemaError as e:
            logger.warning("Unreadable track document, using defaults: %s", e)
            doc = TrackDocument()
        return cls(
            id=doc.id,
            user_id=doc.user_id,
            student_name=doc.student_name,
            rfid_tag=doc.rfid_tag,
            time_in=doc.time_in,
            time_out=doc.time_out,
            date=doc.date,
            status=doc.status,
            teacher_id=doc.teacher_id,
            location=doc.location,
            remarks=doc.remarks,
            created_at=doc.created_at,
            updated_at=doc.updated_at,
        )

    def to_map(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "studentName": self.student_name,
            "rfidTag": self.rfid_tag,
            "timeIn": self.time_in,
            "timeOut": self.time_out,
            "date": self.date,
            "status": self.status.value,
            "teacherId": self.teacher_id,
            "location": self.location,
            "remarks": self.remarks,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
