# /app/models/detail_model.py

from typing import List, Optional, Union

from pydantic import BaseModel

from .attendance_model import AttendanceRecord
from .grade_model import Grade
from .student_model import Student


class GradeWithAssignment(Grade):
    assignmentName: Optional[str] = None

class StudentDetail(BaseModel):
    student: Student
    gpa: Union[float, str]
    gpaDisplay: str
    attendanceRate: Union[float, str]
    attendanceDisplay: str
    recentGrades: List[GradeWithAssignment]
    recentAttendance: List[AttendanceRecord]

class PerformancePoint(BaseModel):
    date: str
    label: str
    percentage: float
    assignmentName: str
    score: float
    maxScore: float
