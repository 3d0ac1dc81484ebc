# /app/models/attendance_model.py

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .common import IdRef
from .student_model import Student


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"


class AttendanceRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    Id: int
    studentId: Optional[IdRef] = None
    classId: Optional[IdRef] = None
    date: Optional[str] = None
    status: str
    notes: Optional[str] = ""

class AttendanceMark(BaseModel):
    """Sets one student's status for a class on a given day."""
    studentId: int
    date: date
    status: AttendanceStatus
    notes: str = Field(default="")

class AttendanceBreakdown(BaseModel):
    total: int
    present: int
    absent: int
    late: int

class AttendanceRegister(BaseModel):
    classId: int
    date: str
    students: List[Student]
    records: List[AttendanceRecord]
    breakdown: AttendanceBreakdown
    attendanceRate: float
